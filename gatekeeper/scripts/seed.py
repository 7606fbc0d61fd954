"""
Seed the default roles and users. Idempotent; existing rows are left as they are.

  python -m gatekeeper.scripts.seed
"""
import logging
import sys

from sqlalchemy.orm import Session

from gatekeeper.core.database import SessionLocal
from gatekeeper.core.logging import setup_logging
from gatekeeper.schemas.users import UserCreate
from gatekeeper.services.roles import ensure_role
from gatekeeper.services.users import create_user, get_user_by_email

logger = logging.getLogger(__name__)

DEFAULT_ROLES = (
    ("admin", "Administrator with full access"),
    ("client", "Regular client with limited access"),
    ("guest", "Guest user with read-only access"),
)

DEFAULT_USERS = (
    {
        "email": "admin@example.com",
        "password": "Password1!",
        "first_name": "Admin",
        "last_name": "Gatekeeper",
        "role": "admin",
    },
    {
        "email": "client@example.com",
        "password": "Password1!",
        "first_name": "Client",
        "last_name": "Gatekeeper",
        "role": "client",
    },
)


def seed(db: Session) -> tuple[int, int]:
    """Create missing default roles and users. Returns (roles_created, users_created)."""
    roles_created = 0
    for name, description in DEFAULT_ROLES:
        role, created = ensure_role(db, name, description)
        if created:
            roles_created += 1
            logger.info("Role created: %s", role.name)
        else:
            logger.info("Role already exists: %s", role.name)

    users_created = 0
    for data in DEFAULT_USERS:
        body = UserCreate.model_validate(data)
        if get_user_by_email(db, body.email) is not None:
            logger.info("User already exists: %s", body.email)
            continue
        user = create_user(db, body)
        users_created += 1
        logger.info("User created: %s", user.email)
    return roles_created, users_created


def main() -> int:
    setup_logging()
    db = SessionLocal()
    try:
        roles_created, users_created = seed(db)
        logger.info("Seed completed: roles_created=%s users_created=%s", roles_created, users_created)
        return 0
    except Exception as e:
        logger.exception("Seed failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
