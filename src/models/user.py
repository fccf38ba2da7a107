"""User model."""

from sqlalchemy import Column, Integer, String

from src.database import Base
from src.models.mixins import CreatedAtMixin


class User(Base, CreatedAtMixin):
    """A registered account in the credential store."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
