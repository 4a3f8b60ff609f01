"""Key dispatch from normalized key events to editing actions."""

from .dispatcher import KeyDispatcher, KeyInput

__all__ = ["KeyDispatcher", "KeyInput"]
