"""SQLAlchemy models for the persistent store."""

from typing import Optional
from sqlalchemy import String, Integer, Text, Index
from sqlalchemy.orm import Mapped, mapped_column

from annotator.db.base import Base


# Each table carries an autoincrement ``seq`` so reads come back in
# insertion order; ``id`` is the public identifier.

class UserRecord(Base):
    """Registered account."""
    __tablename__ = "users"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, nullable=False, index=True)  # user, admin


class ImageRecord(Base):
    """Uploaded image metadata; the binary lives in file storage."""
    __tablename__ = "images"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    url: Mapped[str] = mapped_column(String, nullable=False)
    uploaded_by: Mapped[str] = mapped_column(String, nullable=False, default="")
    upload_time: Mapped[str] = mapped_column(String, nullable=False)


class CommentRecord(Base):
    """Comment left by a user on an image.

    ``image_id`` is not a foreign key; it may name an unknown image.
    """
    __tablename__ = "comments"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    image_id: Mapped[str] = mapped_column(String, nullable=False)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    user_name: Mapped[str] = mapped_column(String, nullable=False)
    user_role: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[str] = mapped_column(String, nullable=False)


Index("ix_comments_image_user", CommentRecord.image_id, CommentRecord.user_id)
