# app/services/__init__.py
"""
Service layer root package.

Each subpackage implements application use-cases on top of:

- SQLAlchemy models (app.models.*)
- Repositories (app.repositories.*)
- Common service infrastructure (app.services.base.*)

Every change to room occupancy goes through
``app.services.room.occupancy_service.OccupancyService``.
"""
