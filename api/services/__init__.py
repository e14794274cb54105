"""Service layer for business logic.

Services encapsulate all business logic, keeping routes and the CLI thin.

Layer hierarchy:
    Routes (HTTP) / CLI -> Services (Business Logic) -> Repositories (JSON file)

Services should:
- Contain all business rules and validation
- Orchestrate calls to repositories and the rendering module
- Raise domain errors from core.errors

Services should NOT:
- Read or write the participant file directly (use repositories)
- Know about HTTP request/response details
"""
