"""Database model exports."""

from .name_record import NameRecord

__all__ = ["NameRecord"]
