"""Host adapters for embedding the prompt editor."""

__all__ = ["textual"]
