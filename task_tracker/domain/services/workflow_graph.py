"""
Workflow Graph - Read-only view over a project's status graph.

This module provides the WorkflowGraph service, which answers questions about
a project's workflow without mutating it: which moves are available from a
status, whether a move is legal, and which statuses can be reached at all.

Key Responsibilities:
    - Listing the outgoing transitions of a status in display order
    - Checking whether a direct transition exists between two statuses
    - Computing reachability from a status (breadth-first over the edges)
    - Finding statuses a new task can never reach from the initial status

Design Patterns:
    - Domain Service: graph queries live outside the Project aggregate
    - Projection: built from a loaded Project, discarded after use

Example:
    >>> graph = WorkflowGraph(project)
    >>> [s.name for s in graph.available_transitions(todo.id)]
    ['In Progress']
    >>> graph.can_transition(todo.id, done.id)
    False

Note:
    The graph is captured at construction time; build a new WorkflowGraph
    after adding statuses or transitions.
"""

from __future__ import annotations

from collections import deque
from uuid import UUID

from ..entities.project import Project
from ..entities.workflow import WorkflowStatus


class WorkflowGraph:
    """Adjacency view of one project's statuses and transitions."""

    def __init__(self, project: Project) -> None:
        self._statuses = {s.id: s for s in project.statuses}
        self._edges: dict[UUID, list[UUID]] = {
            s.id: [t.to_status_id for t in s.outgoing_transitions] for s in project.statuses
        }
        self._initial_status_id = (
            project.initial_status().value.id if project.statuses else None
        )

    def available_transitions(self, status_id: UUID) -> list[WorkflowStatus]:
        """Statuses directly reachable from ``status_id``, ordered by ``order``."""
        targets = [self._statuses[i] for i in self._edges.get(status_id, []) if i in self._statuses]
        return sorted(targets, key=lambda s: s.order)

    def can_transition(self, from_status_id: UUID, to_status_id: UUID) -> bool:
        return to_status_id in self._edges.get(from_status_id, [])

    def reachable_from(self, status_id: UUID) -> set[UUID]:
        """All status ids reachable in one or more steps, excluding the start
        unless a cycle leads back to it."""
        seen: set[UUID] = set()
        queue = deque(self._edges.get(status_id, []))
        while queue:
            current = queue.popleft()
            if current in seen:
                continue
            seen.add(current)
            queue.extend(self._edges.get(current, []))
        return seen

    def unreachable_statuses(self) -> list[WorkflowStatus]:
        """Statuses a task starting in the initial status can never enter."""
        if self._initial_status_id is None:
            return []

        reachable = self.reachable_from(self._initial_status_id) | {self._initial_status_id}
        return sorted(
            (s for sid, s in self._statuses.items() if sid not in reachable),
            key=lambda s: s.order,
        )
