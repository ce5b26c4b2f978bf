"""
Endpoint subpackage for API v1.

Each module defines an ``APIRouter`` for one domain; modules with
organizer-only routes also define an ``admin_router``.  They are
aggregated in ``router.py``.
"""
