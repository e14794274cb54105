"""Rendering module for presentation concerns.

This module handles all presentation/rendering logic:
- Certificate PNG compositing
- Date formatting for pages and images

This separates presentation concerns from business logic in services.
"""

from rendering.certificates import (
    format_certificate_date,
    name_font_size,
    render_certificate_png,
)

__all__ = [
    "format_certificate_date",
    "name_font_size",
    "render_certificate_png",
]
