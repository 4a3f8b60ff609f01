"""Multi-line prompt editing engine for fixed-width terminal displays."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "config",
    "dispatch",
    "keymaps",
    "layout",
    "runtime",
]

__version__ = "0.1.0"
