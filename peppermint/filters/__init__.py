"""Duplicate suppression for Peppermint."""

from .suppression import ClaimCoordinator, SuppressionCoordinator, SuppressionRecord
from .registry import RegistryCoordinator

__all__ = [
    "ClaimCoordinator",
    "SuppressionCoordinator",
    "SuppressionRecord",
    "RegistryCoordinator",
]
