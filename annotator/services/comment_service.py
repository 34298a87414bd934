"""Comment Service - one text comment per user per image, from the client's view."""
from typing import List, Optional
from uuid import uuid4

from annotator.repositories.protocol import Store
from annotator.core.clock import local_timestamp
from annotator.core.config import settings
from annotator.core.errors import ConflictError, ErrorCode, ValidationError
from annotator.core.logging_config import get_logger
from annotator.schemas import Comment

logger = get_logger(__name__)


class CommentService:
    """
    Records comments.

    ``image_id`` is accepted as given; it is not checked against the stored
    images. Uniqueness per (user, image) is only enforced when
    ``enforce_single_comment`` is on.
    """

    def __init__(self, store: Store, enforce_single_comment: Optional[bool] = None):
        self.store = store
        if enforce_single_comment is None:
            enforce_single_comment = settings.ENFORCE_SINGLE_COMMENT
        self.enforce_single_comment = enforce_single_comment

    async def submit(
        self,
        image_id: Optional[str],
        user_id: Optional[str],
        user_name: Optional[str],
        user_role: Optional[str],
        text: Optional[str],
    ) -> Comment:
        """
        Store a comment with the current timestamp.

        Raises:
            ValidationError: image_id, user_id, user_name or trimmed text is empty
            ConflictError: The user already commented on the image (only when
                single comments are enforced)
        """
        text = (text or "").strip()
        if not image_id or not user_id or not user_name or not text:
            raise ValidationError(code=ErrorCode.VAL_MISSING_FIELD, message="缺少必要字段")

        comment = Comment(
            id=str(uuid4()),
            image_id=image_id,
            user_id=user_id,
            user_name=user_name,
            user_role=user_role,
            text=text,
            timestamp=local_timestamp(),
        )

        async with self.store.lock:
            if self.enforce_single_comment and await self.store.find_comment(image_id, user_id):
                logger.warning("comment_rejected", image_id=image_id, user_id=user_id, reason="duplicate")
                raise ConflictError(
                    code=ErrorCode.CONFLICT_COMMENT_EXISTS,
                    message="您已经回复过这张图片",
                    details={"image_id": image_id, "user_id": user_id},
                )
            await self.store.add_comment(comment)

        logger.info("comment_submitted", comment_id=comment.id, image_id=image_id, user_id=user_id)
        return comment

    async def list_comments(self) -> List[Comment]:
        return await self.store.list_comments()
