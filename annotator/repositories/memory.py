"""In-memory store. Everything is lost when the process exits."""

import asyncio
from typing import List, Optional, Sequence

from annotator.schemas import Comment, Image, Role, User


class InMemoryStore:
    """Three append-only lists.

    List methods return copies so callers cannot mutate stored state.
    """

    def __init__(self):
        self.lock = asyncio.Lock()
        self._users: List[User] = []
        self._images: List[Image] = []
        self._comments: List[Comment] = []

    async def init(self) -> None:
        return None

    async def close(self) -> None:
        return None

    async def add_user(self, user: User) -> User:
        self._users.append(user)
        return user

    async def get_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self._users if u.id == user_id), None)

    async def list_users(self) -> List[User]:
        return list(self._users)

    async def admin_exists(self) -> bool:
        return any(u.role == Role.admin for u in self._users)

    async def add_images(self, images: Sequence[Image]) -> List[Image]:
        self._images.extend(images)
        return list(images)

    async def get_image(self, image_id: str) -> Optional[Image]:
        return next((i for i in self._images if i.id == image_id), None)

    async def list_images(self) -> List[Image]:
        return list(self._images)

    async def add_comment(self, comment: Comment) -> Comment:
        self._comments.append(comment)
        return comment

    async def find_comment(self, image_id: str, user_id: str) -> Optional[Comment]:
        return next(
            (c for c in self._comments if c.image_id == image_id and c.user_id == user_id),
            None,
        )

    async def list_comments(self) -> List[Comment]:
        return list(self._comments)
