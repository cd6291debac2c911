"""
Store errors.

Every repository collapses engine failures into one of these three
categories. Lookups signal "not found" by returning None; NotFoundError is
raised only by writes that must hit an existing row.
"""

from typing import Optional


class StoreError(Exception):
    """Base class for credential store failures"""


class NotFoundError(StoreError):
    """The targeted row does not exist"""


class ConflictError(StoreError):
    """A unique constraint was violated"""

    def __init__(self, field: Optional[str] = None, message: str = "Unique constraint violated"):
        self.field = field
        super().__init__(f"{message}: {field}" if field else message)


class BackendError(StoreError):
    """Any other I/O or engine failure"""
