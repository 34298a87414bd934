"""Store protocol: the repository interface every backend implements."""

import asyncio
from typing import List, Optional, Protocol, Sequence

from annotator.schemas import Comment, Image, User


class Store(Protocol):
    """Users, images and comments, in insertion order.

    ``lock`` serialises check-then-append sequences (unique user id, single
    admin) so that each accepted write is atomic with respect to the others.
    Stores never validate business rules themselves.
    """

    lock: asyncio.Lock

    async def init(self) -> None:
        """Prepare the backend (create tables, directories...)."""
        ...

    async def close(self) -> None:
        """Release connections held by the backend."""
        ...

    async def add_user(self, user: User) -> User:
        ...

    async def get_user(self, user_id: str) -> Optional[User]:
        ...

    async def list_users(self) -> List[User]:
        ...

    async def admin_exists(self) -> bool:
        ...

    async def add_images(self, images: Sequence[Image]) -> List[Image]:
        """Append several images as one write."""
        ...

    async def get_image(self, image_id: str) -> Optional[Image]:
        ...

    async def list_images(self) -> List[Image]:
        ...

    async def add_comment(self, comment: Comment) -> Comment:
        ...

    async def find_comment(self, image_id: str, user_id: str) -> Optional[Comment]:
        """First comment by ``user_id`` on ``image_id``, if any."""
        ...

    async def list_comments(self) -> List[Comment]:
        ...
