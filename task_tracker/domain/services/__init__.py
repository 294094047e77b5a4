"""Domain services for business logic that spans entities."""

from .concurrency_service import ConcurrencyService
from .workflow_graph import WorkflowGraph

__all__ = ["ConcurrencyService", "WorkflowGraph"]
