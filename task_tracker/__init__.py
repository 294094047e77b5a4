"""Multi-tenant task tracker: workflow and identity engine."""

__version__ = "0.1.0"
