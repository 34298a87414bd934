"""Comment endpoints."""

from fastapi import APIRouter, Depends

from annotator.api.dependencies import get_comment_service
from annotator.api.routes.metrics import comments_submitted_total
from annotator.core.config import settings
from annotator.schemas import CommentRequest
from annotator.services import CommentService


router = APIRouter(prefix="/api", tags=["comments"])


@router.post("/comments")
async def submit_comment(body: CommentRequest, service: CommentService = Depends(get_comment_service)):
    """Store a comment on an image.

    Raises:
        ValidationError: 400 if imageId, userId, userName or text is empty
        ConflictError: 400 on a repeated comment when single comments are enforced
    """
    comment = await service.submit(
        image_id=body.image_id,
        user_id=body.user_id,
        user_name=body.user_name,
        user_role=body.user_role,
        text=body.text,
    )
    comments_submitted_total.labels(service=settings.SERVICE_NAME).inc()
    return {"message": "评论提交成功", "comment": comment.to_wire()}


@router.get("/comments")
async def list_comments(service: CommentService = Depends(get_comment_service)):
    return [comment.to_wire() for comment in await service.list_comments()]
