"""Storage engine for the task tracker."""

from .in_memory import PROJECTS, TASKS, USERS, WORKSPACES, InMemoryDatabase, Write

__all__ = ["InMemoryDatabase", "Write", "USERS", "WORKSPACES", "PROJECTS", "TASKS"]
