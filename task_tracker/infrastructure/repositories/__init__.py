"""In-memory repositories and unit of work."""

from .change_tracker import ChangeTracker
from .project_repository import InMemoryProjectRepository
from .task_repository import InMemoryTaskRepository
from .unit_of_work import (
    InMemoryTransactionManager,
    InMemoryUnitOfWork,
    InMemoryUnitOfWorkFactory,
)
from .user_repository import InMemoryUserRepository
from .workspace_repository import InMemoryWorkspaceRepository

__all__ = [
    "ChangeTracker",
    "InMemoryUserRepository",
    "InMemoryWorkspaceRepository",
    "InMemoryProjectRepository",
    "InMemoryTaskRepository",
    "InMemoryUnitOfWork",
    "InMemoryUnitOfWorkFactory",
    "InMemoryTransactionManager",
]
