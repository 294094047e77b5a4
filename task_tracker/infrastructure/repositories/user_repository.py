"""In-memory user repository."""

from task_tracker.application.interfaces.repositories import IUserRepository
from task_tracker.domain.entities import User
from task_tracker.domain.value_objects import Email
from task_tracker.infrastructure.database import USERS

from .base import InMemoryRepository


class InMemoryUserRepository(InMemoryRepository[User], IUserRepository):
    table = USERS

    async def get_by_email(self, email: Email) -> User | None:
        return self._first(lambda u: u.email == email)

    async def exists(self, email: Email) -> bool:
        return await self.get_by_email(email) is not None
