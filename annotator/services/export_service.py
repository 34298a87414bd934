"""Export Service - comments joined with image metadata, as CSV."""
import csv
import io
from dataclasses import dataclass
from typing import Dict, Optional

from annotator.repositories.protocol import Store
from annotator.core.config import settings
from annotator.core.logging_config import get_logger
from annotator.schemas import Role

logger = get_logger(__name__)


EXPORT_LABELS: Dict[str, Dict] = {
    "zh": {
        "headers": ["图片文件名", "用户ID", "用户姓名", "用户角色", "回复内容", "时间"],
        "roles": {Role.admin.value: "管理者"},
        "default_role": "志愿者",
        "unknown_image": "未知",
    },
    "en": {
        "headers": ["Image file name", "User ID", "User name", "User role", "Comment", "Time"],
        "roles": {Role.admin.value: "admin"},
        "default_role": "volunteer",
        "unknown_image": "unknown",
    },
}


@dataclass
class CsvExport:
    content: bytes
    filename: str = "comments.csv"
    media_type: str = "text/csv; charset=utf-8"


class ExportService:
    """Renders every comment as one CSV row.

    Output is UTF-8 with a byte-order mark so spreadsheet tools pick the
    right encoding. Every data field is quoted; embedded quotes are doubled.
    """

    def __init__(self, store: Store, locale: Optional[str] = None):
        self.store = store
        self.labels = EXPORT_LABELS[locale or settings.EXPORT_LOCALE]

    def role_label(self, role: Optional[str]) -> str:
        return self.labels["roles"].get(role, self.labels["default_role"])

    async def export_csv(self) -> CsvExport:
        images = {image.id: image for image in await self.store.list_images()}
        comments = await self.store.list_comments()

        buffer = io.StringIO()
        # Header labels are written bare; only data rows are quoted
        buffer.write(",".join(self.labels["headers"]) + "\n")
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        for comment in comments:
            image = images.get(comment.image_id)
            writer.writerow([
                image.file_name if image else self.labels["unknown_image"],
                comment.user_id,
                comment.user_name,
                self.role_label(comment.user_role),
                comment.text,
                comment.timestamp,
            ])

        logger.info("comments_exported", rows=len(comments))
        return CsvExport(content=buffer.getvalue().encode("utf-8-sig"))
