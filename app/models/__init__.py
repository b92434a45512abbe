# models/__init__.py
"""
ORM models of the occupancy backend.

Import concrete models from their packages; ``app.db.base`` registers all of
them on the shared metadata.
"""
