"""Local user database model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from intellichat.core.database import Base


class User(Base):
    """Minimal local identity record keyed by the provider uid."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False, default="")
