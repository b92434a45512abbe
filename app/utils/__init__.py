"""
Utility package initialization and exports
"""

from .string_utils import NameFormatter

__all__ = ["NameFormatter"]
