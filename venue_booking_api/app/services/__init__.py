"""
Service layer.

Each service encapsulates the business rules for one domain and talks
to the database only through the repositories.  Services raise
``core.exceptions.ServiceError`` subclasses, which the application
renders as JSON error responses.
"""
