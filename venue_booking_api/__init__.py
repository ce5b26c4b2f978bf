"""
Top-level package for the Venue Booking API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``venue_booking_api.app.main:app``.
"""

__all__ = []
