"""
User Use Cases

Registration of users whose credentials live with the external identity
provider.
"""

from dataclasses import dataclass

from task_tracker.application.dtos import UserDto
from task_tracker.application.interfaces.unit_of_work import IUnitOfWork
from task_tracker.domain.entities import User
from task_tracker.domain.value_objects import Email

from .base import CONFLICT, TransactionalUseCase, UseCaseResponse
from .base_request import BaseRequestDTO


@dataclass(kw_only=True)
class RegisterUserRequest(BaseRequestDTO):
    """Request to register a user."""

    email: str
    display_name: str
    avatar_url: str | None = None


class RegisterUserUseCase(TransactionalUseCase[RegisterUserRequest, UseCaseResponse]):
    """Creates a user account with a unique e-mail address."""

    def __init__(self, unit_of_work: IUnitOfWork) -> None:
        super().__init__(unit_of_work, "RegisterUserUseCase")

    async def validate(self, request: RegisterUserRequest) -> str | None:
        if not request.email or not request.email.strip():
            return "Email is required"
        if not request.display_name or not request.display_name.strip():
            return "Display name is required"
        return None

    async def process(self, request: RegisterUserRequest) -> UseCaseResponse:
        email_result = Email.create(request.email)
        if email_result.is_failure:
            return UseCaseResponse.from_domain_error(email_result.error, request.request_id)
        email = email_result.value

        if await self.unit_of_work.users.exists(email):
            return UseCaseResponse.error_response(
                "A user with this email already exists", request.request_id, CONFLICT
            )

        user_result = User.create(email, request.display_name, created_by=request.acting_user_id)
        if user_result.is_failure:
            return UseCaseResponse.from_domain_error(user_result.error, request.request_id)
        user = user_result.value

        if request.avatar_url:
            user.avatar_url = request.avatar_url.strip()

        await self.unit_of_work.users.add(user)
        self.unit_of_work.register_events(user_result.events)

        return UseCaseResponse.success_response(UserDto.from_entity(user), request.request_id)
