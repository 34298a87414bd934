"""SQLAlchemy-backed store (SQLite via aiosqlite)."""

import asyncio
from typing import List, Optional, Sequence

from sqlalchemy import select, exists
from sqlalchemy.ext.asyncio import AsyncSession

from annotator.core.logging_config import get_logger
from annotator.db.base import Base
from annotator.db.models import CommentRecord, ImageRecord, UserRecord
from annotator.db.session import create_session_factory
from annotator.repositories.base import BaseRepository
from annotator.schemas import Comment, Image, Role, User


logger = get_logger(__name__)


class UserRepository(BaseRepository[UserRecord]):
    """Repository for accessing user accounts."""

    def __init__(self, session: AsyncSession):
        super().__init__(UserRecord, session)

    async def admin_exists(self) -> bool:
        stmt = select(exists().where(self.model.role == Role.admin.value))
        result = await self.session.execute(stmt)
        return bool(result.scalar())


class ImageRepository(BaseRepository[ImageRecord]):
    """Repository for accessing image metadata."""

    def __init__(self, session: AsyncSession):
        super().__init__(ImageRecord, session)


class CommentRepository(BaseRepository[CommentRecord]):
    """Repository for accessing comments."""

    def __init__(self, session: AsyncSession):
        super().__init__(CommentRecord, session)

    async def get_by_image_and_user(self, image_id: str, user_id: str) -> Optional[CommentRecord]:
        stmt = select(self.model).where(
            self.model.image_id == image_id,
            self.model.user_id == user_id,
        ).order_by(self.model.seq).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


def _to_user(record: UserRecord) -> User:
    return User(id=record.id, name=record.name, password_hash=record.password_hash, role=Role(record.role))


def _to_image(record: ImageRecord) -> Image:
    return Image(
        id=record.id,
        file_name=record.file_name,
        url=record.url,
        uploaded_by=record.uploaded_by,
        upload_time=record.upload_time,
    )


def _to_comment(record: CommentRecord) -> Comment:
    return Comment(
        id=record.id,
        image_id=record.image_id,
        user_id=record.user_id,
        user_name=record.user_name,
        user_role=record.user_role,
        text=record.text,
        timestamp=record.timestamp,
    )


class SqlStore:
    """Persistent store; survives restarts.

    One session per operation, committed before returning.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.lock = asyncio.Lock()
        self.database_url = database_url
        self.engine, self.session_factory = create_session_factory(database_url, echo=echo)

    async def init(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("sql_store_initialized", database_url=self.database_url)

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("sql_store_closed", database_url=self.database_url)

    # ----- users -----

    async def add_user(self, user: User) -> User:
        async with self.session_factory() as session, session.begin():
            await UserRepository(session).create(
                id=user.id,
                name=user.name,
                password_hash=user.password_hash,
                role=user.role.value,
            )
        return user

    async def get_user(self, user_id: str) -> Optional[User]:
        async with self.session_factory() as session:
            record = await UserRepository(session).get(user_id)
            return _to_user(record) if record else None

    async def list_users(self) -> List[User]:
        async with self.session_factory() as session:
            return [_to_user(r) for r in await UserRepository(session).get_all()]

    async def admin_exists(self) -> bool:
        async with self.session_factory() as session:
            return await UserRepository(session).admin_exists()

    # ----- images -----

    async def add_images(self, images: Sequence[Image]) -> List[Image]:
        async with self.session_factory() as session, session.begin():
            repo = ImageRepository(session)
            for image in images:
                await repo.create(
                    id=image.id,
                    file_name=image.file_name,
                    url=image.url,
                    uploaded_by=image.uploaded_by,
                    upload_time=image.upload_time,
                )
        return list(images)

    async def get_image(self, image_id: str) -> Optional[Image]:
        async with self.session_factory() as session:
            record = await ImageRepository(session).get(image_id)
            return _to_image(record) if record else None

    async def list_images(self) -> List[Image]:
        async with self.session_factory() as session:
            return [_to_image(r) for r in await ImageRepository(session).get_all()]

    # ----- comments -----

    async def add_comment(self, comment: Comment) -> Comment:
        async with self.session_factory() as session, session.begin():
            await CommentRepository(session).create(
                id=comment.id,
                image_id=comment.image_id,
                user_id=comment.user_id,
                user_name=comment.user_name,
                user_role=comment.user_role,
                text=comment.text,
                timestamp=comment.timestamp,
            )
        return comment

    async def find_comment(self, image_id: str, user_id: str) -> Optional[Comment]:
        async with self.session_factory() as session:
            record = await CommentRepository(session).get_by_image_and_user(image_id, user_id)
            return _to_comment(record) if record else None

    async def list_comments(self) -> List[Comment]:
        async with self.session_factory() as session:
            return [_to_comment(r) for r in await CommentRepository(session).get_all()]
