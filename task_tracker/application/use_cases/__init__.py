"""
Application Use Cases

Async request/response use cases orchestrating the domain layer.
"""

from .base import TransactionalUseCase, UseCase, UseCaseRequest, UseCaseResponse
from .base_request import BaseRequestDTO
from .projects import (
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
from .tasks import (
    AddTaskCommentRequest,
    AddTaskCommentUseCase,
    ChangeTaskStatusRequest,
    ChangeTaskStatusUseCase,
    CreateTaskRequest,
    CreateTaskUseCase,
    GetTaskHistoryRequest,
    GetTaskHistoryUseCase,
    GetTaskRequest,
    GetTaskUseCase,
    ListTasksRequest,
    ListTasksUseCase,
    UpdateTaskRequest,
    UpdateTaskUseCase,
)
from .users import RegisterUserRequest, RegisterUserUseCase
from .workspaces import (
    AddWorkspaceMemberRequest,
    AddWorkspaceMemberUseCase,
    ChangeMemberRoleRequest,
    ChangeMemberRoleUseCase,
    CreateWorkspaceRequest,
    CreateWorkspaceUseCase,
    RemoveWorkspaceMemberRequest,
    RemoveWorkspaceMemberUseCase,
)

__all__ = [
    "UseCase",
    "TransactionalUseCase",
    "UseCaseRequest",
    "UseCaseResponse",
    "BaseRequestDTO",
    "RegisterUserRequest",
    "RegisterUserUseCase",
    "CreateWorkspaceRequest",
    "CreateWorkspaceUseCase",
    "AddWorkspaceMemberRequest",
    "AddWorkspaceMemberUseCase",
    "RemoveWorkspaceMemberRequest",
    "RemoveWorkspaceMemberUseCase",
    "ChangeMemberRoleRequest",
    "ChangeMemberRoleUseCase",
    "CreateProjectRequest",
    "CreateProjectUseCase",
    "AddWorkflowStatusRequest",
    "AddWorkflowStatusUseCase",
    "AddStatusTransitionRequest",
    "AddStatusTransitionUseCase",
    "CreateSprintRequest",
    "CreateSprintUseCase",
    "SprintLifecycleRequest",
    "StartSprintUseCase",
    "CompleteSprintUseCase",
    "CreateTaskRequest",
    "CreateTaskUseCase",
    "ChangeTaskStatusRequest",
    "ChangeTaskStatusUseCase",
    "UpdateTaskRequest",
    "UpdateTaskUseCase",
    "AddTaskCommentRequest",
    "AddTaskCommentUseCase",
    "GetTaskRequest",
    "GetTaskUseCase",
    "GetTaskHistoryRequest",
    "GetTaskHistoryUseCase",
    "ListTasksRequest",
    "ListTasksUseCase",
]
