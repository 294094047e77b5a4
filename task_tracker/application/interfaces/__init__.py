"""
Application Interfaces

Contracts implemented by the infrastructure layer.
"""

from .events import EventHandler, IEventDispatcher, INotificationService
from .exceptions import (
    ConcurrencyError,
    ConfigurationError,
    DuplicateEntityError,
    EntityNotFoundError,
    RepositoryError,
    TransactionAlreadyActiveError,
    TransactionCommitError,
    TransactionError,
    TransactionNotActiveError,
    is_retryable,
)
from .repositories import IProjectRepository, ITaskRepository, IUserRepository, IWorkspaceRepository
from .unit_of_work import ITransactionManager, IUnitOfWork, IUnitOfWorkFactory

__all__ = [
    "EventHandler",
    "IEventDispatcher",
    "INotificationService",
    "IUserRepository",
    "IWorkspaceRepository",
    "IProjectRepository",
    "ITaskRepository",
    "IUnitOfWork",
    "IUnitOfWorkFactory",
    "ITransactionManager",
    "RepositoryError",
    "EntityNotFoundError",
    "DuplicateEntityError",
    "ConcurrencyError",
    "TransactionError",
    "TransactionNotActiveError",
    "TransactionAlreadyActiveError",
    "TransactionCommitError",
    "ConfigurationError",
    "is_retryable",
]
