"""Display layout: wrapping logical lines into visual rows."""

from .wrapping import (
    VisualRow,
    WrapResult,
    clamp_width,
    get_visual_rows,
    visual_position,
    visual_row_count,
    visual_row_length,
    visual_to_buffer_column,
    wrap_lines,
)

__all__ = [
    "VisualRow",
    "WrapResult",
    "clamp_width",
    "get_visual_rows",
    "visual_position",
    "visual_row_count",
    "visual_row_length",
    "visual_to_buffer_column",
    "wrap_lines",
]
