"""Custom field definitions - per-project schema for task custom fields"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from ..enums import CustomFieldType
from ..result import Result
from .base import AuditableEntity

if TYPE_CHECKING:
    from .project import Project

MAX_FIELD_NAME_LENGTH = 100

_SELECT_TYPES = (CustomFieldType.SINGLE_SELECT, CustomFieldType.MULTI_SELECT)


def _validate_field_name(name: str | None) -> str | None:
    if name is None or not name.strip():
        return "Field name cannot be empty"
    if len(name) > MAX_FIELD_NAME_LENGTH:
        return f"Field name cannot exceed {MAX_FIELD_NAME_LENGTH} characters"
    return None


@dataclass(kw_only=True, eq=False)
class CustomFieldDefinition(AuditableEntity):
    """Custom field definition for a project"""

    project_id: UUID
    name: str
    field_type: CustomFieldType
    description: str | None = None
    is_required: bool = False
    order: int = 0
    options: list[str] = field(default_factory=list)
    default_value: Any = None

    @classmethod
    def create(
        cls,
        project: Project,
        name: str,
        field_type: CustomFieldType,
        created_by: UUID,
        description: str | None = None,
        is_required: bool = False,
        order: int = 0,
        options: list[str] | None = None,
        default_value: Any = None,
    ) -> Result[CustomFieldDefinition]:
        error = _validate_field_name(name)
        if error:
            return Result.failure(error)

        if field_type in _SELECT_TYPES and not options:
            return Result.failure("Select fields require options")

        definition = cls(
            project_id=project.id,
            name=name.strip(),
            field_type=field_type,
            description=description.strip() if description else None,
            is_required=is_required,
            order=order,
            options=list(options or []),
            default_value=default_value,
        )
        definition.set_created(created_by)
        return Result.success(definition)

    def update(
        self,
        name: str,
        description: str | None,
        is_required: bool,
        order: int,
        options: list[str] | None,
        default_value: Any,
        updated_by: UUID,
    ) -> Result[None]:
        error = _validate_field_name(name)
        if error:
            return Result.failure(error)

        if self.field_type in _SELECT_TYPES and not options:
            return Result.failure("Select fields require options")

        self.name = name.strip()
        self.description = description.strip() if description else None
        self.is_required = is_required
        self.order = order
        self.options = list(options or [])
        self.default_value = default_value
        self.set_updated(updated_by)
        return Result.success()

    def validate_value(self, value: Any) -> str | None:
        """Return an error message if ``value`` does not fit this field's type.

        ``None`` is accepted here; required-ness is checked by the caller.
        Dates travel as ISO-8601 strings as well as date objects.
        """
        if value is None:
            return None

        checks = {
            CustomFieldType.TEXT: lambda v: isinstance(v, str),
            CustomFieldType.URL: lambda v: isinstance(v, str)
            and v.startswith(("http://", "https://")),
            CustomFieldType.NUMBER: lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
            CustomFieldType.BOOLEAN: lambda v: isinstance(v, bool),
            CustomFieldType.DATE: lambda v: isinstance(v, date) or _is_iso(v, date.fromisoformat),
            CustomFieldType.DATETIME: lambda v: isinstance(v, datetime)
            or _is_iso(v, datetime.fromisoformat),
            CustomFieldType.USER: lambda v: isinstance(v, UUID) or _is_iso(v, UUID),
            CustomFieldType.SINGLE_SELECT: lambda v: v in self.options,
            CustomFieldType.MULTI_SELECT: lambda v: isinstance(v, (list, tuple))
            and all(item in self.options for item in v),
        }
        if not checks[self.field_type](value):
            return f"Invalid value for {self.field_type.value} field '{self.name}'"
        return None


def _is_iso(value: Any, parser: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parser(value)
    except ValueError:
        return False
    return True
