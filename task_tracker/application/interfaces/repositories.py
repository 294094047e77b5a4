"""
Repository Interface Definitions

Defines the contracts that infrastructure repositories must implement.
Following the Repository pattern and clean architecture principles.

Repositories hand out aggregates bound to the unit of work that created
them. Aggregates returned by a repository are tracked: changes made to them
are written by ``IUnitOfWork.save_changes`` without a separate update call.
"""

# Standard library imports
from abc import abstractmethod
from typing import Protocol
from uuid import UUID

# Local imports
from task_tracker.domain.entities import Project, TaskItem, User, Workspace
from task_tracker.domain.value_objects import Email, FriendlyId, Slug


class IUserRepository(Protocol):
    """User repository interface."""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> User | None:
        """
        Retrieve a user by ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The user if found, None otherwise

        Raises:
            RepositoryError: If retrieval operation fails
        """
        ...

    @abstractmethod
    async def get_by_email(self, email: Email) -> User | None:
        """Retrieve a user by normalized e-mail address."""
        ...

    @abstractmethod
    async def exists(self, email: Email) -> bool:
        """Check whether a user with this e-mail address exists."""
        ...

    @abstractmethod
    async def add(self, user: User) -> None:
        """
        Register a new user for insertion on the next save.

        Raises:
            DuplicateEntityError: If the user id is already tracked
        """
        ...


class IWorkspaceRepository(Protocol):
    """Workspace repository interface. Workspaces load with their members."""

    @abstractmethod
    async def get_by_id(self, workspace_id: UUID) -> Workspace | None: ...

    @abstractmethod
    async def get_by_slug(self, slug: Slug) -> Workspace | None: ...

    @abstractmethod
    async def exists(self, slug: Slug) -> bool:
        """Check whether the slug is taken."""
        ...

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> list[Workspace]:
        """Workspaces in which the user holds an active membership."""
        ...

    @abstractmethod
    async def add(self, workspace: Workspace) -> None: ...


class IProjectRepository(Protocol):
    """
    Project repository interface.

    Projects always load as whole aggregates, so ``get_by_id`` and
    ``get_with_statuses`` return the same shape; the latter names the
    requirement that the full workflow graph is present.
    """

    @abstractmethod
    async def get_by_id(self, project_id: UUID) -> Project | None: ...

    @abstractmethod
    async def get_with_statuses(self, project_id: UUID) -> Project | None:
        """
        Retrieve a project with its statuses and their transitions.

        Args:
            project_id: The unique identifier of the project

        Returns:
            The project with its full workflow graph, None if not found
        """
        ...

    @abstractmethod
    async def get_by_slug(self, workspace_id: UUID, slug: Slug) -> Project | None: ...

    @abstractmethod
    async def get_by_workspace_id(self, workspace_id: UUID) -> list[Project]: ...

    @abstractmethod
    async def exists(self, workspace_id: UUID, slug: Slug) -> bool:
        """Check whether the slug is taken within the workspace."""
        ...

    @abstractmethod
    async def prefix_exists(self, workspace_id: UUID, prefix: str) -> bool:
        """Check whether the task prefix is taken within the workspace."""
        ...

    @abstractmethod
    async def add(self, project: Project) -> None: ...


class ITaskRepository(Protocol):
    """Task repository interface."""

    @abstractmethod
    async def get_by_id(self, task_id: UUID) -> TaskItem | None: ...

    @abstractmethod
    async def get_by_friendly_id(
        self, friendly_id: FriendlyId, project_id: UUID | None = None
    ) -> TaskItem | None:
        """Task carrying ``friendly_id``, optionally restricted to one project."""
        ...

    @abstractmethod
    async def get_by_project_id(self, project_id: UUID) -> list[TaskItem]:
        """Tasks of a project, newest first."""
        ...

    @abstractmethod
    async def get_by_sprint_id(self, sprint_id: UUID) -> list[TaskItem]: ...

    @abstractmethod
    async def get_by_assignee_id(self, assignee_id: UUID) -> list[TaskItem]: ...

    @abstractmethod
    async def get_subtasks(self, parent_task_id: UUID) -> list[TaskItem]: ...

    @abstractmethod
    async def get_paged(
        self,
        project_id: UUID,
        page: int,
        page_size: int,
        status_id: UUID | None = None,
        assignee_id: UUID | None = None,
        sprint_id: UUID | None = None,
        search_term: str | None = None,
    ) -> tuple[list[TaskItem], int]:
        """
        Retrieve one page of a project's tasks.

        Args:
            project_id: Project to list
            page: 1-based page number
            page_size: Number of tasks per page
            status_id: Only tasks in this status
            assignee_id: Only tasks assigned to this user
            sprint_id: Only tasks in this sprint
            search_term: Case-insensitive substring of the title or description

        Returns:
            The page of tasks (newest first) and the total match count
        """
        ...

    @abstractmethod
    async def add(self, task: TaskItem) -> None: ...
