"""SQLAlchemy model for community metadata."""
from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from threadline.db.session import Base


class Community(Base):
    """Community used for grouping posts."""

    __tablename__ = "community"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Internal identifier akin to a handle.
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(Text, nullable=False)
    description_md: Mapped[str | None] = mapped_column(Text, nullable=True)
