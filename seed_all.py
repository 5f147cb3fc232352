"""
Master Database Seeding Script
Creates database tables and populates with demo data
"""

from datetime import date, timedelta

from app.database import SessionLocal
from app.models import Comment, Project, ProjectStatus, Task, TaskPriority, TaskStatus, User, UserRole
from app.utils.security import hash_password
from create_tables import create_tables

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {"email": "manager@example.com", "first_name": "Maya", "last_name": "Patel", "role": UserRole.MANAGER},
    {"email": "alice@example.com", "first_name": "Alice", "last_name": "Nguyen", "role": UserRole.USER},
    {"email": "bob@example.com", "first_name": "Bob", "last_name": "Okafor", "role": UserRole.USER},
    {"email": "carol@example.com", "first_name": "Carol", "last_name": "Silva", "role": UserRole.USER},
]

DEMO_PROJECTS = [
    {
        "name": "Website Redesign",
        "description": "New marketing site and design system",
        "status": ProjectStatus.ACTIVE,
        "members": ["manager@example.com", "alice@example.com", "bob@example.com"],
    },
    {
        "name": "Mobile App",
        "description": "First release of the iOS and Android apps",
        "status": ProjectStatus.ACTIVE,
        "members": ["alice@example.com", "carol@example.com"],
    },
    {
        "name": "Legacy Migration",
        "description": "Move reporting off the old warehouse",
        "status": ProjectStatus.COMPLETED,
        "members": ["manager@example.com"],
    },
]

DEMO_TASKS = [
    {"project": "Website Redesign", "title": "Audit current pages", "creator": "manager@example.com",
     "assignee": "alice@example.com", "status": TaskStatus.DONE, "priority": TaskPriority.MEDIUM, "due_in": -7},
    {"project": "Website Redesign", "title": "Build component library", "creator": "alice@example.com",
     "assignee": "bob@example.com", "status": TaskStatus.IN_PROGRESS, "priority": TaskPriority.HIGH, "due_in": 10},
    {"project": "Website Redesign", "title": "Write launch checklist", "creator": "bob@example.com",
     "assignee": None, "status": TaskStatus.TODO, "priority": TaskPriority.LOW, "due_in": None},
    {"project": "Mobile App", "title": "Set up CI for app builds", "creator": "carol@example.com",
     "assignee": "carol@example.com", "status": TaskStatus.IN_REVIEW, "priority": TaskPriority.URGENT, "due_in": 2},
    {"project": "Mobile App", "title": "Push notification spike", "creator": "alice@example.com",
     "assignee": "carol@example.com", "status": TaskStatus.TODO, "priority": TaskPriority.MEDIUM, "due_in": 21},
    {"project": "Legacy Migration", "title": "Decommission old cron jobs", "creator": "manager@example.com",
     "assignee": "manager@example.com", "status": TaskStatus.DONE, "priority": TaskPriority.HIGH, "due_in": -30},
]

DEMO_COMMENTS = [
    {"task": "Build component library", "author": "alice@example.com", "content": "Start with buttons and forms."},
    {"task": "Build component library", "author": "bob@example.com", "content": "Storybook is up, reviewing tokens next."},
    {"task": "Set up CI for app builds", "author": "alice@example.com", "content": "Signing keys are in the vault."},
]


def seed_demo_data():
    db = SessionLocal()
    try:
        users = {}
        for data in DEMO_USERS:
            user = User(hashed_password=hash_password(DEMO_PASSWORD), **data)
            db.add(user)
            users[data["email"]] = user
        db.flush()
        print(f"[SUCCESS] Created {len(users)} users")

        projects = {}
        for data in DEMO_PROJECTS:
            project = Project(name=data["name"], description=data["description"], status=data["status"])
            project.members = [users[email] for email in data["members"]]
            db.add(project)
            projects[data["name"]] = project
        db.flush()
        print(f"[SUCCESS] Created {len(projects)} projects")

        tasks = {}
        today = date.today()
        for data in DEMO_TASKS:
            project = projects[data["project"]]
            assignee = users[data["assignee"]] if data["assignee"] else None
            if assignee is not None and assignee not in project.members:
                raise ValueError(f"{data['assignee']} is not a member of {project.name}")
            task = Task(
                title=data["title"],
                status=data["status"],
                priority=data["priority"],
                due_date=today + timedelta(days=data["due_in"]) if data["due_in"] is not None else None,
                project=project,
                creator=users[data["creator"]],
                assignee=assignee,
            )
            db.add(task)
            tasks[data["title"]] = task
        db.flush()
        print(f"[SUCCESS] Created {len(tasks)} tasks")

        for data in DEMO_COMMENTS:
            db.add(Comment(task=tasks[data["task"]], user=users[data["author"]], content=data["content"]))
        db.commit()
        print(f"[SUCCESS] Created {len(DEMO_COMMENTS)} comments")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def main():
    print(f"\n{'='*60}")
    print("🚀 Creating Database Tables")
    print(f"{'='*60}")
    create_tables()

    print(f"\n{'='*60}")
    print("🌱 Seeding Demo Data")
    print(f"{'='*60}")
    seed_demo_data()

    print(f"\nAll demo users share the password '{DEMO_PASSWORD}'")


if __name__ == "__main__":
    main()
