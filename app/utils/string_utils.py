"""
String helpers shared by the registries.
"""

from typing import Optional, Tuple


class NameFormatter:
    """Name formatting utilities"""

    @staticmethod
    def split_name(full_name: str) -> Tuple[str, Optional[str]]:
        """
        Split a display name into first name and the remainder.

        >>> NameFormatter.split_name("Asha Rani Verma")
        ('Asha', 'Rani Verma')
        """
        first, _, rest = " ".join(full_name.split()).partition(" ")
        return first, (rest or None)


__all__ = ["NameFormatter"]
