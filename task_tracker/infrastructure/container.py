"""
Dependency Injection Container - Central container for application dependencies.

Wires configuration, the storage engine, the unit-of-work factory, the
transaction manager, event dispatch and the use cases. Infrastructure
components are singletons; every use case instance gets a fresh unit of work.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar, cast

from opentelemetry import trace

from task_tracker.application.config import ApplicationConfig, get_config
from task_tracker.application.interfaces.events import IEventDispatcher, INotificationService
from task_tracker.application.interfaces.exceptions import ConfigurationError
from task_tracker.application.interfaces.unit_of_work import (
    ITransactionManager,
    IUnitOfWork,
    IUnitOfWorkFactory,
)
from task_tracker.application.use_cases import (
    AddStatusTransitionUseCase,
    AddTaskCommentUseCase,
    AddWorkflowStatusUseCase,
    AddWorkspaceMemberUseCase,
    ChangeMemberRoleUseCase,
    ChangeTaskStatusUseCase,
    CompleteSprintUseCase,
    CreateProjectUseCase,
    CreateSprintUseCase,
    CreateTaskUseCase,
    CreateWorkspaceUseCase,
    GetTaskHistoryUseCase,
    GetTaskUseCase,
    ListTasksUseCase,
    RegisterUserUseCase,
    RemoveWorkspaceMemberUseCase,
    StartSprintUseCase,
    UpdateTaskUseCase,
)
from task_tracker.domain.services import ConcurrencyService
from task_tracker.infrastructure.database import InMemoryDatabase
from task_tracker.infrastructure.events import (
    InMemoryEventDispatcher,
    LoggingNotificationService,
    ProjectNotificationHandler,
)
from task_tracker.infrastructure.repositories import (
    InMemoryTransactionManager,
    InMemoryUnitOfWorkFactory,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Use cases constructed with only a unit of work
_SIMPLE_USE_CASES: tuple[type[Any], ...] = (
    RegisterUserUseCase,
    CreateWorkspaceUseCase,
    AddWorkspaceMemberUseCase,
    RemoveWorkspaceMemberUseCase,
    ChangeMemberRoleUseCase,
    CreateProjectUseCase,
    AddWorkflowStatusUseCase,
    AddStatusTransitionUseCase,
    StartSprintUseCase,
    CompleteSprintUseCase,
    ChangeTaskStatusUseCase,
    UpdateTaskUseCase,
    AddTaskCommentUseCase,
    GetTaskUseCase,
    GetTaskHistoryUseCase,
)


class DIContainer:
    """
    Dependency Injection Container for the task tracker.

    This container manages the creation and wiring of all application components,
    ensuring proper dependency injection and lifecycle management.
    """

    def __init__(self, config: ApplicationConfig | None = None) -> None:
        """Initialize the container with configuration."""
        self.config = config or get_config()
        try:
            self.config.validate()
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}", e) from e

        self._singletons: dict[type[Any], Any] = {}
        self._singleton_types: set[type[Any]] = set()
        self._factories: dict[type[Any], Callable[[], Any]] = {}

        self._register_infrastructure()
        self._register_event_handlers()
        self._register_use_cases()

        logger.info(
            "Dependency injection container initialized",
            extra={"environment": self.config.environment.value, "backend": self.config.storage.backend},
        )

    def _register_infrastructure(self) -> None:
        """Register infrastructure components."""
        self._register_singleton(InMemoryDatabase, InMemoryDatabase)
        self._register_singleton(
            IEventDispatcher,  # type: ignore[type-abstract]
            lambda: InMemoryEventDispatcher(
                self.config.events.dedupe_window, self.config.events.history_limit
            ),
        )
        self._register_singleton(
            INotificationService,  # type: ignore[type-abstract]
            lambda: LoggingNotificationService(self.config.events.history_limit),
        )
        self._register_singleton(
            IUnitOfWorkFactory,  # type: ignore[type-abstract]
            lambda: InMemoryUnitOfWorkFactory(
                self.get(InMemoryDatabase),
                self.get(IEventDispatcher),  # type: ignore[type-abstract]
                tracer=trace.get_tracer("task_tracker") if self.config.features.enable_tracing else None,
            ),
        )
        self._register_singleton(
            ConcurrencyService,
            lambda: ConcurrencyService(
                max_retries=self.config.concurrency.max_retries,
                base_delay=self.config.concurrency.base_delay,
                max_delay=self.config.concurrency.max_delay,
                jitter=self.config.concurrency.jitter,
            ),
        )
        self._register_singleton(
            ITransactionManager,  # type: ignore[type-abstract]
            lambda: InMemoryTransactionManager(
                self.get(IUnitOfWorkFactory),  # type: ignore[type-abstract]
                self.config.concurrency,
                self.get(ConcurrencyService),
            ),
        )

        # Not a singleton: one unit of work per resolution
        self._register_factory(
            IUnitOfWork,  # type: ignore[type-abstract]
            lambda: self.get(IUnitOfWorkFactory).create_unit_of_work(),  # type: ignore[type-abstract]
        )

    def _register_event_handlers(self) -> None:
        if not self.config.events.enable_notifications:
            logger.info("Real-time notifications disabled")
            return

        dispatcher = self.get(IEventDispatcher)  # type: ignore[type-abstract]
        notifications = self.get(INotificationService)  # type: ignore[type-abstract]
        dispatcher.subscribe(None, ProjectNotificationHandler(notifications))

    def _register_use_cases(self) -> None:
        """Register all use cases."""
        for use_case in _SIMPLE_USE_CASES:
            self._register_factory(use_case, self._unit_of_work_factory_for(use_case))

        features = self.config.features
        self._register_factory(
            CreateTaskUseCase,
            lambda: CreateTaskUseCase(
                self.get(ITransactionManager),  # type: ignore[type-abstract]
                custom_fields_enabled=features.enable_custom_fields,
                sprints_enabled=features.enable_sprints,
            ),
        )
        self._register_factory(
            CreateSprintUseCase,
            lambda: CreateSprintUseCase(
                self.get(IUnitOfWork),  # type: ignore[type-abstract]
                sprints_enabled=features.enable_sprints,
            ),
        )
        self._register_factory(
            ListTasksUseCase,
            lambda: ListTasksUseCase(
                self.get(IUnitOfWork),  # type: ignore[type-abstract]
                max_page_size=self.config.storage.max_page_size,
            ),
        )

    def _unit_of_work_factory_for(self, use_case: type[T]) -> Callable[[], T]:
        def build() -> T:
            return use_case(self.get(IUnitOfWork))  # type: ignore[call-arg,type-abstract]

        return build

    def _register_singleton(self, cls: type[T], factory: Callable[[], Any]) -> None:
        """Register a singleton component."""
        self._factories[cls] = factory
        self._singleton_types.add(cls)

    def _register_factory(self, cls: type[T], factory: Callable[[], Any]) -> None:
        """Register a factory for creating instances."""
        self._factories[cls] = factory

    def get(self, cls: type[T]) -> T:
        """
        Get an instance of a registered component.

        Args:
            cls: The class type to retrieve

        Returns:
            Instance of the requested class

        Raises:
            KeyError: If the class is not registered
        """
        if cls in self._singletons:
            return cast(T, self._singletons[cls])

        if cls not in self._factories:
            raise KeyError(f"No registration found for {cls.__name__}")

        instance = self._factories[cls]()

        if cls in self._singleton_types:
            self._singletons[cls] = instance

        return cast(T, instance)

    def has(self, cls: type[T]) -> bool:
        return cls in self._factories

    def register(self, cls: type[T], instance: T) -> None:
        """
        Register a pre-created instance.

        Args:
            cls: The class type
            instance: The instance to register
        """
        self._singletons[cls] = instance
        self._singleton_types.add(cls)
        self._factories[cls] = lambda: instance

    def cleanup(self) -> None:
        """Drop all stored data. Wiring and subscriptions stay in place."""
        database = self._singletons.get(InMemoryDatabase)
        if database is not None:
            database.clear()
        logger.info("Container cleaned up")
