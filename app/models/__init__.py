from .user import User, UserRole
from .project import Project, ProjectStatus, project_members
from .task import Task, TaskStatus, TaskPriority
from .comment import Comment
