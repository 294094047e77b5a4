"""Global pytest configuration and fixtures."""

# Standard library imports
from collections.abc import Callable, Iterator
from pathlib import Path
from types import SimpleNamespace
from uuid import UUID, uuid4

# Load test environment variables
from dotenv import load_dotenv

test_env_path = Path(__file__).parent.parent / ".env.test"
if test_env_path.exists():
    load_dotenv(test_env_path, override=True)

# Third-party imports
import pytest

# Local imports
from task_tracker.application.config import (
    ApplicationConfig,
    ConcurrencyConfig,
    Environment,
    reset_config,
)
from task_tracker.application.use_cases import (
    AddStatusTransitionRequest,
    AddStatusTransitionUseCase,
    AddWorkflowStatusRequest,
    AddWorkflowStatusUseCase,
    CreateProjectRequest,
    CreateProjectUseCase,
    CreateTaskRequest,
    CreateTaskUseCase,
    CreateWorkspaceRequest,
    CreateWorkspaceUseCase,
    RegisterUserRequest,
    RegisterUserUseCase,
)
from task_tracker.domain.entities import Project, TaskItem, User, WorkflowStatus, Workspace
from task_tracker.domain.enums import StatusCategory, TaskType
from task_tracker.domain.value_objects import Email, Slug
from task_tracker.infrastructure.container import DIContainer


@pytest.fixture(autouse=True)
def _reset_config_singleton() -> Iterator[None]:
    """Every test starts without a cached global configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def actor_id() -> UUID:
    return uuid4()


@pytest.fixture
def user() -> User:
    return User.create(Email.create("alice@example.com").value, "Alice").value


@pytest.fixture
def other_user() -> User:
    return User.create(Email.create("bob@example.com").value, "Bob").value


@pytest.fixture
def workspace(user: User) -> Workspace:
    return Workspace.create("Acme", Slug.create("acme").value, user.id).value


@pytest.fixture
def project(workspace: Workspace, user: User) -> Project:
    """Bare project without any workflow statuses."""
    return Project.create(workspace, "Engine", Slug.create("engine").value, "eng", user.id).value


@pytest.fixture
def workflow_project(project: Project, user: User) -> Project:
    """
    Project with a three-step workflow.

    To Do (default) -> In Progress -> Done, plus Done -> To Do for reopening.
    """
    todo = WorkflowStatus.create(project, "To Do", StatusCategory.TODO, 0, user.id, is_default=True).value
    doing = WorkflowStatus.create(project, "In Progress", StatusCategory.IN_PROGRESS, 1, user.id).value
    done = WorkflowStatus.create(project, "Done", StatusCategory.DONE, 2, user.id).value
    for status in (todo, doing, done):
        project.add_status(status)

    project.add_transition(todo.id, doing.id, user.id, name="Start")
    project.add_transition(doing.id, done.id, user.id, name="Finish")
    project.add_transition(done.id, todo.id, user.id, name="Reopen")
    return project


@pytest.fixture
def status(workflow_project: Project) -> Callable[[str], WorkflowStatus]:
    """Look a status of ``workflow_project`` up by name."""

    def _by_name(name: str) -> WorkflowStatus:
        return next(s for s in workflow_project.statuses if s.name == name)

    return _by_name


@pytest.fixture
def make_task(workflow_project: Project, user: User) -> Callable[..., TaskItem]:
    """Factory creating tasks in ``workflow_project`` in its initial status."""

    def _make(title: str = "Write docs", **kwargs) -> TaskItem:
        result = TaskItem.create(
            workflow_project,
            title,
            workflow_project.initial_status().value,
            user,
            kwargs.pop("task_type", TaskType.TASK),
            user.id,
            **kwargs,
        )
        assert result.is_success, result.error_message
        return result.value

    return _make


@pytest.fixture
def test_config() -> ApplicationConfig:
    """Configuration with instant, deterministic retries."""
    return ApplicationConfig(
        environment=Environment.TESTING,
        concurrency=ConcurrencyConfig(max_retries=20, base_delay=0.0, max_delay=0.0, jitter=False),
    )


@pytest.fixture
def container(test_config: ApplicationConfig) -> Iterator[DIContainer]:
    container = DIContainer(test_config)
    yield container
    container.cleanup()


class TrackerApi:
    """Drives use cases through a container the way a client would."""

    def __init__(self, container: DIContainer) -> None:
        self.container = container

    async def run(self, use_case_type: type, request):
        return await self.container.get(use_case_type).execute(request)

    async def ok(self, use_case_type: type, request):
        response = await self.run(use_case_type, request)
        assert response.success, response.error
        return response.data

    async def register(self, email: str = "alice@example.com", name: str = "Alice"):
        return await self.ok(RegisterUserUseCase, RegisterUserRequest(email=email, display_name=name))

    async def workspace(self, owner_id: UUID, name: str = "Acme"):
        return await self.ok(
            CreateWorkspaceUseCase, CreateWorkspaceRequest(name=name, acting_user_id=owner_id)
        )

    async def project(self, workspace_id: UUID, actor: UUID, name: str = "Engine", prefix: str = "ENG"):
        return await self.ok(
            CreateProjectUseCase,
            CreateProjectRequest(workspace_id=workspace_id, name=name, prefix=prefix, acting_user_id=actor),
        )

    async def workflow(self, project_id: UUID, actor: UUID) -> dict[str, UUID]:
        """Add To Do (default) -> In Progress -> Done -> To Do and return status ids by name."""
        ids = {}
        for name, category in (("To Do", "todo"), ("In Progress", "in_progress"), ("Done", "done")):
            status = await self.ok(
                AddWorkflowStatusUseCase,
                AddWorkflowStatusRequest(
                    project_id=project_id,
                    name=name,
                    category=category,
                    is_default=name == "To Do",
                    acting_user_id=actor,
                ),
            )
            ids[name] = status.id
        for source, target in (("To Do", "In Progress"), ("In Progress", "Done"), ("Done", "To Do")):
            await self.ok(
                AddStatusTransitionUseCase,
                AddStatusTransitionRequest(
                    project_id=project_id,
                    from_status_id=ids[source],
                    to_status_id=ids[target],
                    acting_user_id=actor,
                ),
            )
        return ids

    async def task(self, project_id: UUID, actor: UUID, title: str = "Write docs", **kwargs):
        return await self.ok(
            CreateTaskUseCase,
            CreateTaskRequest(project_id=project_id, title=title, acting_user_id=actor, **kwargs),
        )

    async def seeded(self) -> SimpleNamespace:
        """An owner with a workspace and a project carrying the three-step workflow."""
        owner = await self.register()
        workspace = await self.workspace(owner.id)
        project = await self.project(workspace.id, owner.id)
        statuses = await self.workflow(project.id, owner.id)
        return SimpleNamespace(owner=owner, workspace=workspace, project=project, statuses=statuses)


@pytest.fixture
def api(container: DIContainer) -> TrackerApi:
    return TrackerApi(container)
