"""Unit tests for the in-memory event dispatcher."""

from uuid import uuid4

import pytest

from task_tracker.domain.enums import TaskType
from task_tracker.domain.events import TaskCreated, TaskUpdated, UserCreated
from task_tracker.infrastructure.events import InMemoryEventDispatcher


def user_created():
    return UserCreated(user_id=uuid4(), email="alice@example.com", display_name="Alice")


def task_created():
    return TaskCreated(
        task_id=uuid4(),
        friendly_id="ENG-1",
        project_id=uuid4(),
        title="Write docs",
        task_type=TaskType.TASK,
        status_id=uuid4(),
    )


class Recorder:
    def __init__(self, name: str, log: list):
        self.name = name
        self.log = log

    async def __call__(self, event):
        self.log.append((self.name, event.event_type))


@pytest.mark.unit
class TestSubscriptions:
    @pytest.mark.asyncio
    async def test_typed_handlers_before_wildcards(self):
        dispatcher = InMemoryEventDispatcher()
        log = []
        dispatcher.subscribe(None, Recorder("any", log))
        dispatcher.subscribe(UserCreated, Recorder("users", log))
        dispatcher.subscribe(TaskUpdated, Recorder("updates", log))

        delivered = await dispatcher.dispatch([user_created(), task_created()])

        assert delivered == 2
        assert log == [
            ("users", "UserCreated"),
            ("any", "UserCreated"),
            ("any", "TaskCreated"),
        ]

    @pytest.mark.asyncio
    async def test_no_handlers(self):
        dispatcher = InMemoryEventDispatcher()

        assert await dispatcher.dispatch([user_created()]) == 1
        assert len(dispatcher.get_history()) == 1


@pytest.mark.unit
class TestDeduplication:
    @pytest.mark.asyncio
    async def test_event_delivered_once(self):
        dispatcher = InMemoryEventDispatcher()
        log = []
        dispatcher.subscribe(None, Recorder("any", log))
        event = user_created()

        first = await dispatcher.dispatch([event, event])
        second = await dispatcher.dispatch([event])

        assert (first, second) == (1, 0)
        assert len(log) == 1

    @pytest.mark.asyncio
    async def test_window_forgets_oldest(self):
        dispatcher = InMemoryEventDispatcher(dedupe_window=2)
        oldest, middle, newest = user_created(), user_created(), user_created()
        await dispatcher.dispatch([oldest, middle, newest])

        assert await dispatcher.dispatch([oldest]) == 1
        assert await dispatcher.dispatch([newest]) == 0

    def test_window_must_be_positive(self):
        with pytest.raises(ValueError, match="dedupe_window"):
            InMemoryEventDispatcher(dedupe_window=0)


@pytest.mark.unit
class TestHandlerFailures:
    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self, caplog):
        dispatcher = InMemoryEventDispatcher()
        log = []

        async def broken(event):
            raise RuntimeError("handler down")

        dispatcher.subscribe(UserCreated, broken)
        dispatcher.subscribe(None, Recorder("any", log))

        delivered = await dispatcher.dispatch([user_created(), task_created()])

        assert delivered == 2
        assert log == [("any", "UserCreated"), ("any", "TaskCreated")]
        assert "Event handler failed" in caplog.text


@pytest.mark.unit
class TestHistory:
    @pytest.mark.asyncio
    async def test_history_in_order_and_clearable(self):
        dispatcher = InMemoryEventDispatcher()
        first, second = user_created(), task_created()
        await dispatcher.dispatch([first, second])

        history = dispatcher.get_history()
        dispatcher.clear_history()

        assert history == [first, second]
        assert dispatcher.get_history() == []

    @pytest.mark.asyncio
    async def test_history_keeps_only_latest_events(self):
        dispatcher = InMemoryEventDispatcher(history_limit=3)
        events = [user_created() for _ in range(1000)]

        for event in events:
            await dispatcher.dispatch([event])

        assert dispatcher.get_history() == events[-3:]

    @pytest.mark.asyncio
    async def test_history_can_be_disabled(self):
        dispatcher = InMemoryEventDispatcher(history_limit=0)

        assert await dispatcher.dispatch([user_created()]) == 1
        assert dispatcher.get_history() == []

    def test_history_limit_cannot_be_negative(self):
        with pytest.raises(ValueError, match="history_limit"):
            InMemoryEventDispatcher(history_limit=-1)
