"""Shared builders for API tests: in-memory SQLite store, TestClient and token helpers."""

import unittest
from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gatekeeper.core.database import get_db
from gatekeeper.core.security import create_access_token
from gatekeeper.main import app
from gatekeeper.models import Base, Role, User
from gatekeeper.schemas.roles import RoleCreate
from gatekeeper.schemas.users import UserCreate
from gatekeeper.services.roles import create_role
from gatekeeper.services.users import create_user

DEFAULT_PASSWORD = "Passw0rd!"


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database shared by every session the factory opens."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


class ApiTestCase(unittest.TestCase):
    """Runs the real app against a private in-memory database."""

    def setUp(self) -> None:
        self.session_factory = make_session_factory()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.session_factory.kw["bind"].dispose()

    def make_role(self, name: str) -> int:
        with self.session_factory() as db:
            return create_role(db, RoleCreate(name=name)).id

    def make_user(
        self,
        email: str,
        role: str = "client",
        password: str = DEFAULT_PASSWORD,
        **fields: object,
    ) -> int:
        data = {
            "email": email,
            "password": password,
            "role": role,
            "first_name": "Test",
            "last_name": "User",
        }
        data.update(fields)
        with self.session_factory() as db:
            return create_user(db, UserCreate.model_validate(data)).id

    def load_user(self, user_id: int) -> User | None:
        with self.session_factory() as db:
            return db.query(User).filter(User.id == user_id).first()

    def load_user_by_email(self, email: str) -> User | None:
        with self.session_factory() as db:
            return db.query(User).filter(User.email == email).first()

    def load_role(self, name: str) -> Role | None:
        with self.session_factory() as db:
            return db.query(Role).filter(Role.name == name).first()

    def auth_headers(self, user_id: int, role: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(sub=user_id, role=role)}"}
