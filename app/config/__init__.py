"""
Configuration package for the hostel occupancy service.

Holds environment settings loaded through pydantic-settings.
"""

from app.config.settings import settings, get_settings, Settings

__all__ = ['settings', 'get_settings', 'Settings']
