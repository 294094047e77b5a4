"""Unit tests for project, workflow and sprint use cases."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from task_tracker.application.use_cases import (
    AddStatusTransitionRequest,
    AddStatusTransitionUseCase,
    AddWorkflowStatusRequest,
    AddWorkflowStatusUseCase,
    CompleteSprintUseCase,
    CreateProjectRequest,
    CreateProjectUseCase,
    CreateSprintRequest,
    CreateSprintUseCase,
    SprintLifecycleRequest,
    StartSprintUseCase,
)
from task_tracker.application.use_cases.base import BUSINESS_RULE, CONFLICT, NOT_FOUND, VALIDATION
from task_tracker.application.use_cases.projects import _SprintLifecycleUseCase
from task_tracker.infrastructure.container import DIContainer


@pytest.mark.unit
class TestCreateProject:
    @pytest.mark.asyncio
    async def test_creates_project(self, api):
        owner = await api.register()
        workspace = await api.workspace(owner.id)

        project = await api.ok(
            CreateProjectUseCase,
            CreateProjectRequest(
                workspace_id=workspace.id,
                name="Mobile App",
                prefix="app",
                description="iOS and Android",
                acting_user_id=owner.id,
            ),
        )

        assert project.slug == "mobile-app"
        assert project.prefix == "APP"
        assert project.workspace_id == workspace.id
        assert project.statuses == ()
        assert project.default_status_id is None

    @pytest.mark.asyncio
    async def test_unknown_workspace(self, api):
        owner = await api.register()
        workspace_id = uuid4()

        response = await api.run(
            CreateProjectUseCase,
            CreateProjectRequest(workspace_id=workspace_id, name="X", prefix="X", acting_user_id=owner.id),
        )

        assert response.error == f"Workspace '{workspace_id}' not found"
        assert response.error_kind == NOT_FOUND

    @pytest.mark.asyncio
    async def test_invalid_prefix(self, api):
        owner = await api.register()
        workspace = await api.workspace(owner.id)

        response = await api.run(
            CreateProjectUseCase,
            CreateProjectRequest(
                workspace_id=workspace.id, name="Engine", prefix="EN-G", acting_user_id=owner.id
            ),
        )

        assert response.error == "Project prefix can only contain letters and digits"
        assert response.error_kind == VALIDATION

    @pytest.mark.asyncio
    async def test_duplicate_slug_in_workspace(self, api):
        owner = await api.register()
        workspace = await api.workspace(owner.id)
        await api.project(workspace.id, owner.id, "Engine", "ENG")

        response = await api.run(
            CreateProjectUseCase,
            CreateProjectRequest(
                workspace_id=workspace.id, name="Engine", prefix="ENG2", acting_user_id=owner.id
            ),
        )

        assert response.error == "Project slug 'engine' is already taken in this workspace"
        assert response.error_kind == CONFLICT

    @pytest.mark.asyncio
    async def test_duplicate_prefix_in_workspace(self, api):
        owner = await api.register()
        workspace = await api.workspace(owner.id)
        await api.project(workspace.id, owner.id, "Engine", "ENG")

        response = await api.run(
            CreateProjectUseCase,
            CreateProjectRequest(
                workspace_id=workspace.id, name="Engineering", prefix="eng", acting_user_id=owner.id
            ),
        )

        assert response.error == "Project prefix 'ENG' is already taken in this workspace"
        assert response.error_kind == CONFLICT

    @pytest.mark.asyncio
    async def test_same_slug_in_other_workspace(self, api):
        owner = await api.register()
        first = await api.workspace(owner.id, "Acme")
        second = await api.workspace(owner.id, "Globex")
        await api.project(first.id, owner.id, "Engine", "ENG")

        project = await api.project(second.id, owner.id, "Engine", "ENG")

        assert project.slug == "engine"


@pytest.mark.unit
class TestWorkflowConfiguration:
    @pytest.mark.asyncio
    async def test_statuses_get_sequential_order(self, api):
        owner = await api.register()
        workspace = await api.workspace(owner.id)
        project = await api.project(workspace.id, owner.id)

        statuses = [
            await api.ok(
                AddWorkflowStatusUseCase,
                AddWorkflowStatusRequest(
                    project_id=project.id, name=name, category="todo", acting_user_id=owner.id
                ),
            )
            for name in ("Backlog", "Ready")
        ]

        assert [s.order for s in statuses] == [0, 1]
        assert statuses[0].color == "#808080"

    @pytest.mark.asyncio
    async def test_second_default_status_is_stored_without_flag(self, api):
        seeded = await api.seeded()

        backlog = await api.ok(
            AddWorkflowStatusUseCase,
            AddWorkflowStatusRequest(
                project_id=seeded.project.id,
                name="Backlog",
                category="todo",
                is_default=True,
                acting_user_id=seeded.owner.id,
            ),
        )

        assert backlog.is_default is False
        task = await api.task(seeded.project.id, seeded.owner.id)
        assert task.status_id == seeded.statuses["To Do"]

    @pytest.mark.asyncio
    async def test_invalid_category(self, api):
        response = await api.run(
            AddWorkflowStatusUseCase,
            AddWorkflowStatusRequest(
                project_id=uuid4(), name="Limbo", category="purgatory", acting_user_id=uuid4()
            ),
        )

        assert response.error == "Invalid status category: purgatory"
        assert response.error_kind == VALIDATION

    @pytest.mark.asyncio
    async def test_unknown_project(self, api):
        project_id = uuid4()

        response = await api.run(
            AddWorkflowStatusUseCase,
            AddWorkflowStatusRequest(project_id=project_id, name="To Do", category="todo", acting_user_id=uuid4()),
        )

        assert response.error == f"Project '{project_id}' not found"

    @pytest.mark.asyncio
    async def test_transition_dto(self, api):
        seeded = await api.seeded()
        review = await api.ok(
            AddWorkflowStatusUseCase,
            AddWorkflowStatusRequest(
                project_id=seeded.project.id, name="Review", category="in_progress", acting_user_id=seeded.owner.id
            ),
        )

        transition = await api.ok(
            AddStatusTransitionUseCase,
            AddStatusTransitionRequest(
                project_id=seeded.project.id,
                from_status_id=seeded.statuses["In Progress"],
                to_status_id=review.id,
                name="Request review",
                requires_comment=True,
                auto_assign_user_id=seeded.owner.id,
                acting_user_id=seeded.owner.id,
            ),
        )

        assert transition.to_status_name == "Review"
        assert transition.name == "Request review"
        assert transition.requires_comment is True
        assert transition.auto_assign_user_id == seeded.owner.id

    @pytest.mark.asyncio
    async def test_duplicate_transition(self, api):
        seeded = await api.seeded()

        response = await api.run(
            AddStatusTransitionUseCase,
            AddStatusTransitionRequest(
                project_id=seeded.project.id,
                from_status_id=seeded.statuses["To Do"],
                to_status_id=seeded.statuses["In Progress"],
                acting_user_id=seeded.owner.id,
            ),
        )

        assert response.error == "Transition from 'To Do' to 'In Progress' already exists"
        assert response.error_kind == BUSINESS_RULE

    @pytest.mark.asyncio
    async def test_self_transition(self, api):
        seeded = await api.seeded()
        todo = seeded.statuses["To Do"]

        response = await api.run(
            AddStatusTransitionUseCase,
            AddStatusTransitionRequest(
                project_id=seeded.project.id,
                from_status_id=todo,
                to_status_id=todo,
                acting_user_id=seeded.owner.id,
            ),
        )

        assert response.error == "Cannot create transition to the same status"

    @pytest.mark.asyncio
    async def test_auto_assign_user_must_exist(self, api):
        seeded = await api.seeded()
        ghost = uuid4()

        response = await api.run(
            AddStatusTransitionUseCase,
            AddStatusTransitionRequest(
                project_id=seeded.project.id,
                from_status_id=seeded.statuses["To Do"],
                to_status_id=seeded.statuses["Done"],
                auto_assign_user_id=ghost,
                acting_user_id=seeded.owner.id,
            ),
        )

        assert response.error == f"User '{ghost}' not found"
        assert response.error_kind == NOT_FOUND


@pytest.mark.unit
class TestSprints:
    @staticmethod
    def _window():
        start = datetime.now(UTC)
        return start, start + timedelta(days=14)

    @pytest.mark.asyncio
    async def test_sprint_lifecycle(self, api):
        seeded = await api.seeded()
        start, end = self._window()
        sprint = await api.ok(
            CreateSprintUseCase,
            CreateSprintRequest(
                project_id=seeded.project.id,
                name="Sprint 1",
                start_date=start,
                end_date=end,
                goal="Ship it",
                acting_user_id=seeded.owner.id,
            ),
        )
        lifecycle = SprintLifecycleRequest(
            project_id=seeded.project.id, sprint_id=sprint.id, acting_user_id=seeded.owner.id
        )

        started = await api.ok(StartSprintUseCase, lifecycle)
        completed = await api.ok(CompleteSprintUseCase, lifecycle)

        assert sprint.state == "planned"
        assert started.is_active is True
        assert completed.is_completed is True

    @pytest.mark.asyncio
    async def test_cannot_complete_planned_sprint(self, api):
        seeded = await api.seeded()
        start, end = self._window()
        sprint = await api.ok(
            CreateSprintUseCase,
            CreateSprintRequest(
                project_id=seeded.project.id,
                name="Sprint 1",
                start_date=start,
                end_date=end,
                acting_user_id=seeded.owner.id,
            ),
        )

        response = await api.run(
            CompleteSprintUseCase,
            SprintLifecycleRequest(
                project_id=seeded.project.id, sprint_id=sprint.id, acting_user_id=seeded.owner.id
            ),
        )

        assert response.error == "Cannot complete an inactive sprint"
        assert response.error_kind == BUSINESS_RULE

    @pytest.mark.asyncio
    async def test_end_before_start(self, api):
        seeded = await api.seeded()
        start, _ = self._window()

        response = await api.run(
            CreateSprintUseCase,
            CreateSprintRequest(
                project_id=seeded.project.id,
                name="Backwards",
                start_date=start,
                end_date=start - timedelta(days=1),
                acting_user_id=seeded.owner.id,
            ),
        )

        assert response.error == "End date must be after start date"

    @pytest.mark.asyncio
    async def test_naive_start_with_aware_end(self, api):
        seeded = await api.seeded()

        sprint = await api.ok(
            CreateSprintUseCase,
            CreateSprintRequest(
                project_id=seeded.project.id,
                name="Sprint 1",
                start_date=datetime(2030, 1, 1),
                end_date=datetime(2030, 1, 10, tzinfo=UTC),
                acting_user_id=seeded.owner.id,
            ),
        )
        backwards = await api.run(
            CreateSprintUseCase,
            CreateSprintRequest(
                project_id=seeded.project.id,
                name="Sprint 2",
                start_date=datetime(2030, 1, 10, tzinfo=UTC),
                end_date=datetime(2030, 1, 1),
                acting_user_id=seeded.owner.id,
            ),
        )

        assert sprint.start_date == datetime(2030, 1, 1, tzinfo=UTC)
        assert backwards.error == "End date must be after start date"
        assert backwards.error_kind == VALIDATION

    @pytest.mark.asyncio
    async def test_unknown_sprint(self, api):
        seeded = await api.seeded()
        sprint_id = uuid4()

        response = await api.run(
            StartSprintUseCase,
            SprintLifecycleRequest(
                project_id=seeded.project.id, sprint_id=sprint_id, acting_user_id=seeded.owner.id
            ),
        )

        assert response.error == f"Sprint '{sprint_id}' not found"

    @pytest.mark.asyncio
    async def test_disabled_by_feature_flag(self, test_config):
        test_config.features.enable_sprints = False
        container = DIContainer(test_config)
        start, end = self._window()

        response = await container.get(CreateSprintUseCase).execute(
            CreateSprintRequest(
                project_id=uuid4(), name="Sprint 1", start_date=start, end_date=end, acting_user_id=uuid4()
            )
        )

        assert response.error == "Sprints are disabled"
        assert response.error_kind == VALIDATION

    def test_lifecycle_step_must_be_defined(self):
        class PauseSprintUseCase(_SprintLifecycleUseCase):
            pass

        with pytest.raises(TypeError, match="_transition"):
            PauseSprintUseCase(None, "PauseSprintUseCase")
