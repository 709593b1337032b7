"""Terminal display layer."""

from .render import EXAMPLE_CITATION, format_result, render_history, render_view

__all__ = ["EXAMPLE_CITATION", "format_result", "render_history", "render_view"]
