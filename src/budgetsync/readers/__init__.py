"""Transaction sources."""

from budgetsync.readers.base import Reader
from budgetsync.readers.nordigen import NordigenReader

__all__ = ["NordigenReader", "Reader"]
