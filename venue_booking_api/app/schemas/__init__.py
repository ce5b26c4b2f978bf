"""
Pydantic schema definitions for API payloads.

Each domain (accounts, venues, meals, events, payments, analytics)
defines its own request and response models.  Schemas are separated
from the repositories' row dictionaries to decouple the API
representation from persistence.
"""
