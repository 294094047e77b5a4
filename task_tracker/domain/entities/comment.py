"""Task comments"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ..result import Result
from .base import AuditableEntity

MAX_COMMENT_LENGTH = 10000


def _validate_content(content: str | None) -> str | None:
    if content is None or not content.strip():
        return "Comment content cannot be empty"
    if len(content) > MAX_COMMENT_LENGTH:
        return f"Comment content cannot exceed {MAX_COMMENT_LENGTH} characters"
    return None


@dataclass(kw_only=True, eq=False)
class TaskComment(AuditableEntity):
    task_id: UUID
    author_id: UUID
    content: str
    is_edited: bool = False

    @classmethod
    def create(
        cls, task_id: UUID, author_id: UUID, content: str, created_by: UUID
    ) -> Result[TaskComment]:
        error = _validate_content(content)
        if error:
            return Result.failure(error)

        comment = cls(task_id=task_id, author_id=author_id, content=content.strip())
        comment.set_created(created_by)
        return Result.success(comment)

    def update(self, content: str, updated_by: UUID) -> Result[None]:
        error = _validate_content(content)
        if error:
            return Result.failure(error)

        self.content = content.strip()
        self.is_edited = True
        self.set_updated(updated_by)
        return Result.success()
