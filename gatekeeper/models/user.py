"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from gatekeeper.models.base import Base

GOVERNMENT_ID_TYPES = ("cuil", "cuit", "dni", "lc", "le", "pas")


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    Belongs to exactly one Role. password_hash is a bcrypt hash and is never
    serialized. is_active=False locks the account without deleting it.
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint(
            "government_id_type",
            "government_id_number",
            name="uq_users_government_id",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=True, unique=True)
    password_hash = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=True)
    government_id_type = Column(String(8), nullable=True)
    government_id_number = Column(String(64), nullable=True)
    born_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    role = relationship("Role", lazy="joined")
