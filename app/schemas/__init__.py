from .user import UserCreate, AdminUserCreate, UserLogin, UserBasic, UserOut, UserUpdate
from .tokens import Token
from .project import ProjectCreate, ProjectUpdate, ProjectOut, ProjectTaskOut, ProjectPage
from .task import TaskCreate, TaskUpdate, TaskOut, TaskPage, CommentOut, ProjectBasic
