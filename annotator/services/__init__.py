"""
Services package - Business Logic Layer

Contains all business logic separated from HTTP/API concerns.
"""
from annotator.services.identity_service import IdentityService
from annotator.services.media_service import MediaService
from annotator.services.comment_service import CommentService
from annotator.services.export_service import ExportService, CsvExport

__all__ = ["IdentityService", "MediaService", "CommentService", "ExportService", "CsvExport"]
