"""SQLAlchemy Base class for all models."""
from app.models.base.base_model import Base


def import_models():
    """Import all models so they are registered with Base.metadata."""
    from app.models.user.user import User  # noqa: F401
    from app.models.student.student import Student  # noqa: F401
    from app.models.warden.warden import Warden  # noqa: F401
    from app.models.room.room import Room  # noqa: F401
    from app.models.room.allocation import Allocation  # noqa: F401


import_models()

__all__ = ["Base", "import_models"]
