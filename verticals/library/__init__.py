"""Library vertical: book records over a small CRUD API.

- SQLAlchemy model with a store-assigned integer id
- Async repository reporting affected-row counts
- Idempotent schema bootstrap with seed rows
- Request handler with pure-function validation rules
- FastAPI router translating handler failures to responses
- Client sync controller with refetch-after-mutation
"""
