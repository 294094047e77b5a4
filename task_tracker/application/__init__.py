"""
Application Layer - Use Cases and Orchestration

Coordinates the domain layer through repository and unit-of-work interfaces
implemented by the infrastructure layer.
"""
