"""Delivery surfaces for Peppermint."""

from .base import BaseSurface
from .background import BackgroundSurface
from .page import PageSurface, Visibility

__all__ = ["BaseSurface", "BackgroundSurface", "PageSurface", "Visibility"]
