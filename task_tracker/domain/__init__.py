"""
Domain Layer - Pure Business Logic

This layer contains:
- Entities: Task, project, workspace and workflow aggregates with identity
- Value Objects: Immutable identifiers (Email, Slug, FriendlyId)
- Events: Immutable records returned by mutating operations
- Services: Read-only projections that span entities

No external dependencies allowed in this layer.
"""
