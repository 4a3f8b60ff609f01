"""Textual host adapter."""

from .controller import TextualPromptAdapter, TextualUIHooks

__all__ = ["TextualPromptAdapter", "TextualUIHooks"]
