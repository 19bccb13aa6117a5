"""Database base class and async engine wrapper."""

from .base import Base
from .session import Database

__all__ = ["Base", "Database"]
