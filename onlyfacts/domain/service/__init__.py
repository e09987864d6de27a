"""Domain services."""

from .base import Service
from .fact_service import FactService

__all__ = [
    "FactService",
    "Service",
]
