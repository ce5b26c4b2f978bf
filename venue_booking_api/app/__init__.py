"""
Application package initializer.

The project is split into layers: ``core`` (configuration, database,
security, errors), ``repositories`` (SQL access), ``schemas``
(Pydantic request and response models), ``services`` (business rules)
and ``api`` (versioned FastAPI routers).
"""

from .main import app  # noqa: F401
