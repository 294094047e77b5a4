"""Unit tests for user registration."""

import pytest

from task_tracker.application.interfaces.events import IEventDispatcher
from task_tracker.application.use_cases import RegisterUserRequest, RegisterUserUseCase
from task_tracker.application.use_cases.base import CONFLICT, VALIDATION
from task_tracker.domain.events import UserCreated


@pytest.mark.unit
class TestRegisterUser:
    @pytest.mark.asyncio
    async def test_registers_user(self, api):
        user = await api.ok(
            RegisterUserUseCase,
            RegisterUserRequest(
                email="  Alice@Example.com ",
                display_name="Alice",
                avatar_url=" https://cdn.example.com/a.png ",
            ),
        )

        assert user.email == "alice@example.com"
        assert user.display_name == "Alice"
        assert user.avatar_url == "https://cdn.example.com/a.png"
        assert user.is_active is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("email", "display_name", "message"),
        [
            ("", "Alice", "Email is required"),
            ("   ", "Alice", "Email is required"),
            ("alice@example.com", "", "Display name is required"),
        ],
    )
    async def test_required_fields(self, api, email, display_name, message):
        response = await api.run(
            RegisterUserUseCase, RegisterUserRequest(email=email, display_name=display_name)
        )

        assert response.success is False
        assert response.error == message
        assert response.error_kind == VALIDATION

    @pytest.mark.asyncio
    async def test_malformed_email(self, api):
        response = await api.run(
            RegisterUserUseCase, RegisterUserRequest(email="not-an-email", display_name="Alice")
        )

        assert response.success is False
        assert response.error_kind == VALIDATION

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, api):
        await api.register("alice@example.com")

        response = await api.run(
            RegisterUserUseCase,
            RegisterUserRequest(email="ALICE@example.com", display_name="Other Alice"),
        )

        assert response.success is False
        assert response.error == "A user with this email already exists"
        assert response.error_kind == CONFLICT

    @pytest.mark.asyncio
    async def test_publishes_user_created(self, api, container):
        user = await api.register()

        history = container.get(IEventDispatcher).get_history()
        created = [e for e in history if isinstance(e, UserCreated)]
        assert [e.user_id for e in created] == [user.id]
