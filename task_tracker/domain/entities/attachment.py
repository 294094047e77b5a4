"""Task attachments - metadata only; file bytes live in external storage"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ..result import Result
from .base import AuditableEntity


@dataclass(kw_only=True, eq=False)
class TaskAttachment(AuditableEntity):
    task_id: UUID
    uploaded_by_id: UUID
    file_name: str
    storage_path: str
    content_type: str
    file_size: int

    @classmethod
    def create(
        cls,
        task_id: UUID,
        uploaded_by_id: UUID,
        file_name: str,
        storage_path: str,
        content_type: str,
        file_size: int,
        created_by: UUID,
    ) -> Result[TaskAttachment]:
        if not file_name or not file_name.strip():
            return Result.failure("File name cannot be empty")

        if not storage_path or not storage_path.strip():
            return Result.failure("Storage path cannot be empty")

        if file_size <= 0:
            return Result.failure("File size must be positive")

        attachment = cls(
            task_id=task_id,
            uploaded_by_id=uploaded_by_id,
            file_name=file_name.strip(),
            storage_path=storage_path.strip(),
            content_type=content_type,
            file_size=file_size,
        )
        attachment.set_created(created_by)
        return Result.success(attachment)
