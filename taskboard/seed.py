"""
Load demo data: an admin, four users, three projects and their tasks.

Usage: ``python -m taskboard.seed`` (or the ``taskboard-seed`` script).
Existing tables are dropped first.
"""
import logging
import os

from .core.auth import CurrentUser
from .core.database import Base, SessionLocal, engine, init_db
from .services import accounts, projects, tasks

logger = logging.getLogger(__name__)

DEMO_PASSWORD = os.getenv("SEED_PASSWORD", "changeme")

USERS = [
    ("admin", "admin"),
    ("ivan", "user"),
    ("maria", "user"),
    ("petr", "user"),
    ("anna", "user"),
]

PROJECTS = [
    {
        "name": "Corporate web portal",
        "description": "Internal portal with HR, document workflow and messaging modules",
        "users": ["ivan", "maria", "petr"],
        "tasks": [
            ("Design the landing page", "ivan", "done"),
            ("Implement the REST API", "petr", "in_progress"),
            ("Write unit tests", "maria", "todo"),
        ],
    },
    {
        "name": "Delivery mobile app",
        "description": "iOS and Android app for ordering and tracking food delivery",
        "users": ["maria", "anna"],
        "tasks": [
            ("Set up CI/CD", "anna", "todo"),
            ("Order tracking screen", "maria", "in_progress"),
        ],
    },
    {
        "name": "Analytics dashboard",
        "description": "Real-time business metrics and reporting",
        "users": ["ivan", "petr", "anna"],
        "tasks": [
            ("Collect metric requirements", "ivan", "done"),
            ("Build the chart widgets", "anna", "todo"),
        ],
    },
]


def seed_database(password: str = DEMO_PASSWORD) -> None:
    Base.metadata.drop_all(bind=engine)
    if not init_db(bind=engine):
        raise RuntimeError("Database initialization failed")

    db = SessionLocal()
    try:
        created = {}
        for login, role in USERS:
            created[login] = accounts.register(db, login, password, role)
        admin = CurrentUser.from_user(created["admin"])

        for project_data in PROJECTS:
            project = projects.create_project(
                db,
                admin,
                name=project_data["name"],
                description=project_data["description"],
                users=project_data["users"],
            )
            for title, owner, status in project_data["tasks"]:
                tasks.create_task(db, admin, title=title, user=owner, project_id=project.id, status=status)

        logger.info(f"Seeded {len(USERS)} users and {len(PROJECTS)} projects")
    finally:
        db.close()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    seed_database()


if __name__ == "__main__":
    main()
