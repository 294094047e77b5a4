"""Unit tests for the TaskItem aggregate."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from task_tracker.domain.entities import (
    CustomFieldDefinition,
    Label,
    Project,
    Sprint,
    TaskHistory,
    TaskItem,
    WorkflowStatus,
)
from task_tracker.domain.enums import CustomFieldType, StatusCategory, TaskPriority, TaskType
from task_tracker.domain.events import TaskAssigned, TaskCreated, TaskStatusChanged, TaskUpdated
from task_tracker.domain.result import ErrorKind
from task_tracker.domain.value_objects import Slug


@pytest.fixture
def other_project(workspace, user) -> Project:
    return Project.create(workspace, "Other", Slug.create("other").value, "OTH", user.id).value


@pytest.mark.unit
class TestTaskCreate:
    def test_create_consumes_sequence(self, workflow_project, user, make_task):
        first = make_task("First")
        second = make_task("Second")

        assert first.friendly_id.value == "ENG-1"
        assert second.friendly_id.value == "ENG-2"
        assert second.sequence_number == 2
        assert workflow_project.next_task_number == 3

    def test_create_fields(self, workflow_project, user, other_user, status):
        result = TaskItem.create(
            workflow_project,
            "  Fix login  ",
            status("To Do"),
            user,
            TaskType.BUG,
            user.id,
            description="  Broken on Safari ",
            priority=TaskPriority.HIGH,
            assignee=other_user,
        )

        task = result.value
        assert task.title == "Fix login"
        assert task.description == "Broken on Safari"
        assert task.status_name == "To Do"
        assert task.reporter_name == "Alice"
        assert task.assignee_id == other_user.id
        assert task.assignee_name == "Bob"
        assert task.priority == TaskPriority.HIGH
        assert task.started_at is None
        assert task.completed_at is None
        assert task.history == []

    def test_emits_task_created(self, workflow_project, user):
        result = TaskItem.create(
            workflow_project, "Write docs", workflow_project.initial_status().value, user, TaskType.TASK, user.id
        )

        (event,) = result.events
        assert isinstance(event, TaskCreated)
        assert event.task_id == result.value.id
        assert event.friendly_id == "ENG-1"
        assert event.project_id == workflow_project.id
        assert event.task_type == TaskType.TASK

    @pytest.mark.parametrize("title", ["", "   "])
    def test_rejects_empty_title(self, workflow_project, user, title):
        result = TaskItem.create(
            workflow_project, title, workflow_project.initial_status().value, user, TaskType.TASK, user.id
        )

        assert result.error_message == "Task title cannot be empty"
        assert workflow_project.next_task_number == 1

    def test_rejects_long_title(self, workflow_project, user):
        result = TaskItem.create(
            workflow_project, "x" * 501, workflow_project.initial_status().value, user, TaskType.TASK, user.id
        )

        assert result.error_message == "Task title cannot exceed 500 characters"

    def test_rejects_status_of_other_project(self, workflow_project, other_project, user):
        foreign = WorkflowStatus.create(other_project, "X", StatusCategory.TODO, 0, user.id).value

        result = TaskItem.create(workflow_project, "T", foreign, user, TaskType.TASK, user.id)

        assert result.error.kind == ErrorKind.BUSINESS_RULE
        assert workflow_project.next_task_number == 1

    def test_rejects_parent_of_other_project(self, workflow_project, other_project, user, make_task):
        parent = make_task("Parent")
        parent.project_id = other_project.id

        result = TaskItem.create(
            workflow_project, "Child", workflow_project.initial_status().value, user,
            TaskType.SUBTASK, user.id, parent_task=parent,
        )

        assert result.error_message == "Parent task must belong to the same project"


@pytest.mark.unit
class TestChangeStatus:
    def test_allowed_transition(self, workflow_project, status, user, make_task):
        task = make_task()
        todo, doing = status("To Do"), status("In Progress")

        result = task.change_status(workflow_project, doing, user.id)

        assert result.is_success
        assert task.status_id == doing.id
        assert task.status_name == "In Progress"
        (event,) = result.events
        assert isinstance(event, TaskStatusChanged)
        assert (event.old_status_id, event.new_status_id) == (todo.id, doing.id)
        assert (event.old_status_name, event.new_status_name) == ("To Do", "In Progress")

    def test_records_history(self, workflow_project, status, user, make_task):
        task = make_task()
        todo, doing = status("To Do"), status("In Progress")

        task.change_status(workflow_project, doing, user.id)

        (entry,) = task.history
        assert entry.field_name == "status_id"
        assert entry.old_value == str(todo.id)
        assert entry.new_value == str(doing.id)
        assert entry.changed_by == user.id

    def test_disallowed_transition(self, workflow_project, status, user, make_task):
        task = make_task()

        result = task.change_status(workflow_project, status("Done"), user.id)

        assert result.error_message == "Transition from 'To Do' to 'Done' is not allowed"
        assert result.error.kind == ErrorKind.BUSINESS_RULE
        assert task.status_name == "To Do"
        assert task.history == []

    def test_started_and_completed_stamped_once(self, workflow_project, status, user, make_task):
        task = make_task()
        todo, doing, done = status("To Do"), status("In Progress"), status("Done")

        task.change_status(workflow_project, doing, user.id)
        started_at = task.started_at
        task.change_status(workflow_project, done, user.id)
        completed_at = task.completed_at
        task.change_status(workflow_project, todo, user.id)
        task.change_status(workflow_project, doing, user.id)
        task.change_status(workflow_project, done, user.id)

        assert started_at is not None and completed_at is not None
        assert task.started_at == started_at
        assert task.completed_at == completed_at
        assert task.is_started and task.is_completed

    def test_required_comment(self, workflow_project, status, user, make_task):
        task = make_task()
        todo, done = status("To Do"), status("Done")
        workflow_project.add_transition(todo.id, done.id, user.id, requires_comment=True)

        missing = task.change_status(workflow_project, done, user.id, comment="  ")
        given = task.change_status(workflow_project, done, user.id, comment="Done already")

        assert missing.error_message == "This transition requires a comment"
        assert given.is_success

    def test_auto_assign(self, workflow_project, status, user, other_user, make_task):
        task = make_task()
        doing, done = status("In Progress"), status("Done")
        doing.transition_to(done.id).auto_assign_user_id = other_user.id
        task.change_status(workflow_project, doing, user.id)

        task.change_status(workflow_project, done, user.id)

        assert task.assignee_id == other_user.id
        assert task.assignee_name is None
        task.refresh_assignee_name(other_user)
        assert task.assignee_name == "Bob"

    def test_wrong_project_raises(self, workflow_project, other_project, status, user, make_task):
        task = make_task()

        with pytest.raises(ValueError):
            task.change_status(other_project, status("In Progress"), user.id)


@pytest.mark.unit
class TestFieldMutators:
    def test_update_title_emits_task_updated(self, user, make_task):
        task = make_task("Old")

        result = task.update_title("New", user.id)

        (event,) = result.events
        assert isinstance(event, TaskUpdated)
        assert (event.field_name, event.old_value, event.new_value) == ("title", "Old", "New")
        assert task.history[-1].field_name == "title"

    def test_update_title_validates(self, user, make_task):
        task = make_task("Old")

        assert task.update_title("", user.id).is_failure
        assert task.title == "Old"

    def test_change_priority_history_uses_enum_value(self, user, make_task):
        task = make_task()

        task.change_priority(TaskPriority.URGENT, user.id)

        entry = task.history[-1]
        assert (entry.old_value, entry.new_value) == ("none", "urgent")

    def test_clear_description_records_empty_string(self, user, make_task):
        task = make_task(description="Something")

        task.update_description(None, user.id)

        assert task.description is None
        assert task.history[-1].new_value == ""

    def test_assign_and_unassign_emit_events(self, user, other_user, make_task):
        task = make_task()

        assigned = task.assign(other_user, user.id)
        unassigned = task.assign(None, user.id)

        assert isinstance(assigned.events[0], TaskAssigned)
        assert assigned.events[0].assignee_id == other_user.id
        assert unassigned.events[0].assignee_id is None
        assert task.assignee_id is None

    def test_silent_mutators_emit_no_events(self, workflow_project, user, make_task):
        task = make_task()
        due = datetime(2030, 1, 1, tzinfo=UTC)

        results = [task.set_due_date(due, user.id), task.set_story_points(5, user.id)]

        assert all(r.is_success and not r.events for r in results)
        assert [h.field_name for h in task.history] == ["due_date", "story_points"]
        assert task.history[0].new_value == due.isoformat()

    def test_negative_story_points(self, user, make_task):
        assert make_task().set_story_points(-1, user.id).error_message == "Story points cannot be negative"

    def test_set_sprint(self, workflow_project, other_project, user, make_task):
        task = make_task()
        start = datetime(2026, 1, 5, tzinfo=UTC)
        sprint = Sprint.create(workflow_project, "S1", start, start.replace(day=19), user.id).value
        foreign = Sprint.create(other_project, "S1", start, start.replace(day=19), user.id).value

        assert task.set_sprint(sprint, user.id).is_success
        assert task.sprint_name == "S1"
        assert task.set_sprint(foreign, user.id).error_message == "Sprint does not belong to the same project"


@pytest.mark.unit
class TestCustomFields:
    def test_free_form_without_definitions(self, user, make_task):
        task = make_task()

        result = task.set_custom_fields({"anything": [1, 2]}, user.id)

        assert result.is_success
        assert task.custom_fields == {"anything": [1, 2]}
        assert task.history[-1].new_value == '{"anything": [1, 2]}'

    def test_keys_must_be_strings(self, user, make_task):
        assert make_task().set_custom_fields({1: "x"}, user.id).is_failure

    def test_schema_validation(self, workflow_project, user, make_task):
        task = make_task()
        severity = CustomFieldDefinition.create(
            workflow_project, "Severity", CustomFieldType.SINGLE_SELECT, user.id,
            is_required=True, options=["low", "high"],
        ).value
        estimate = CustomFieldDefinition.create(workflow_project, "Estimate", CustomFieldType.NUMBER, user.id).value
        definitions = [severity, estimate]

        assert task.set_custom_fields({"Severity": "low"}, user.id, definitions).is_success
        assert (
            task.set_custom_fields({"Estimate": 3}, user.id, definitions).error_message
            == "Custom field 'Severity' is required"
        )
        assert (
            task.set_custom_fields({"Severity": "low", "Color": "red"}, user.id, definitions).error_message
            == "Unknown custom field 'Color'"
        )
        assert task.set_custom_fields({"Severity": "mid"}, user.id, definitions).is_failure
        assert task.custom_fields == {"Severity": "low"}


@pytest.mark.unit
class TestChildCollections:
    def test_add_comment(self, user, make_task):
        task = make_task()

        result = task.add_comment(user.id, "Looks good", user.id)

        assert result.is_success
        assert task.comments == [result.value]
        assert result.value.task_id == task.id

    def test_add_empty_comment(self, user, make_task):
        task = make_task()

        assert task.add_comment(user.id, " ", user.id).error_message == "Comment content cannot be empty"
        assert task.comments == []

    def test_add_attachment(self, user, make_task):
        task = make_task()

        result = task.add_attachment(user.id, "log.txt", "bucket/log.txt", "text/plain", 120, user.id)

        assert task.attachments == [result.value]

    def test_add_and_remove_label(self, workflow_project, user, make_task):
        task = make_task()
        label = Label.create(workflow_project, "Backend", "#123456", user.id).value

        added = task.add_label(label)
        duplicate = task.add_label(label)
        removed = task.remove_label(label.id)

        assert added.value.label_name == "Backend"
        assert duplicate.error_message == "Label 'Backend' is already applied to this task"
        assert removed.is_success
        assert task.labels == []
        assert task.remove_label(label.id).error_message == "Label is not applied to this task"

    def test_label_from_other_project(self, other_project, user, make_task):
        label = Label.create(other_project, "Backend", "#123456", user.id).value

        result = make_task().add_label(label)

        assert result.error_message == "Task and label must belong to the same project"

    def test_add_subtask(self, workflow_project, user, make_task):
        parent = make_task("Parent")
        child = make_task("Child", parent_task=parent)

        assert parent.add_subtask(child).is_success
        assert parent.add_subtask(child).is_success
        assert parent.subtask_ids == [child.id]

    def test_subtask_rules(self, user, make_task):
        parent = make_task("Parent")
        stranger = make_task("Stranger")

        assert parent.add_subtask(parent).error_message == "A task cannot be its own subtask"
        assert (
            parent.add_subtask(stranger).error_message
            == "Subtask does not reference this task as its parent"
        )

    def test_str(self, make_task):
        assert str(make_task("Title")) == "TaskItem(ENG-1: Title)"


@pytest.mark.unit
class TestTaskChildren:
    def test_comment_update_marks_edited(self, user, make_task):
        comment = make_task().add_comment(user.id, "First", user.id).value

        result = comment.update("Second", uuid4())

        assert result.is_success
        assert comment.content == "Second"
        assert comment.is_edited

    def test_comment_too_long(self, user, make_task):
        result = make_task().add_comment(user.id, "x" * 10001, user.id)

        assert result.is_failure

    @pytest.mark.parametrize(
        ("file_name", "path", "size", "message"),
        [
            ("", "p", 1, "File name cannot be empty"),
            ("f", " ", 1, "Storage path cannot be empty"),
            ("f", "p", 0, "File size must be positive"),
        ],
    )
    def test_attachment_validation(self, user, make_task, file_name, path, size, message):
        result = make_task().add_attachment(user.id, file_name, path, "text/plain", size, user.id)

        assert result.error_message == message

    def test_history_requires_field_name(self, make_task, user):
        with pytest.raises(ValueError, match="Field name cannot be empty"):
            TaskHistory.record(make_task().id, " ", "a", "b", user.id)
