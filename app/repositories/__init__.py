"""
Data access layer.

Repositories wrap a SQLAlchemy session and never commit on their own unless
asked to; services own transaction boundaries.
"""
