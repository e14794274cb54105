"""Certificate rendering - PNG compositing and date formatting.

This module handles the visual/presentation aspects of certificates:
- Drawing the participant name and date onto the template graphic
- Choosing the name font size by length
- Formatting stored dates for display

Looking up participants and caching rendered images is business logic and
lives in services/certificates_service.py.
"""

import re
from datetime import date
from functools import lru_cache
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

# Template graphics are 1200x630 (Open Graph image size); text positions
# are baselines in template pixels.
TEMPLATE_SIZE = (1200, 630)
NAME_BASELINE_Y = 340
DATE_BASELINE_Y = 420
DATE_FONT_SIZE = 20

NAME_COLOR = (255, 255, 255, 255)
DATE_COLOR = (255, 255, 255, 204)  # 80% opacity

# (max name length, font size), checked in order
NAME_FONT_TIERS: tuple[tuple[int, int], ...] = ((20, 48), (30, 40))
NAME_FONT_MIN_SIZE = 32

# Exactly YYYY-MM-DD; ISO basic (20260213) and week dates do not count
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont


def name_font_size(name: str) -> int:
    """Pick the name font size so long names stay inside the template.

    >>> name_font_size("Jane Doe")
    48
    """
    for max_length, size in NAME_FONT_TIERS:
        if len(name) <= max_length:
            return size
    return NAME_FONT_MIN_SIZE


def parse_certificate_date(value: str) -> date | None:
    """Parse a stored ``YYYY-MM-DD`` date; None when it is not one."""
    value = value.strip()
    if not _DATE_RE.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def format_certificate_date(value: str) -> str:
    """Long US-style date, e.g. "2026-02-13" -> "February 13, 2026".

    The stored value is a calendar date (local midnight), so no timezone
    conversion applies. Unparsable values are shown as stored.
    """
    parsed = parse_certificate_date(value)
    if parsed is None:
        return value
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


@lru_cache(maxsize=16)
def load_font(path: str, size: int) -> FontType:
    """Load a TrueType font, falling back to Pillow's bundled font.

    The fallback keeps rendering working on hosts without DejaVu installed;
    it has no bold face.
    """
    try:
        return ImageFont.truetype(path, size)
    except OSError:
        return ImageFont.load_default(size=size)


def render_certificate_png(
    *,
    name: str,
    date_text: str,
    template_path: Path,
    font_path: str,
    font_bold_path: str,
) -> bytes:
    """Composite name and date onto the template and encode as PNG.

    Args:
        name: Participant display name
        date_text: Already formatted date line
        template_path: Background graphic
        font_path: Regular face for the date
        font_bold_path: Bold face for the name

    Returns:
        PNG content as bytes

    Raises:
        OSError: If the template cannot be read or the PNG cannot be encoded
    """
    with Image.open(template_path) as template:
        canvas = template.convert("RGBA")

    center_x = canvas.width / 2

    draw = ImageDraw.Draw(canvas)
    draw.text(
        (center_x, NAME_BASELINE_Y),
        name,
        font=load_font(font_bold_path, name_font_size(name)),
        fill=NAME_COLOR,
        anchor="ms",
    )

    # Translucent text has to be blended, drawing RGBA straight onto the
    # canvas would replace the pixels instead.
    overlay = Image.new("RGBA", canvas.size, (255, 255, 255, 0))
    ImageDraw.Draw(overlay).text(
        (center_x, DATE_BASELINE_Y),
        date_text,
        font=load_font(font_path, DATE_FONT_SIZE),
        fill=DATE_COLOR,
        anchor="ms",
    )
    canvas = Image.alpha_composite(canvas, overlay)

    buffer = BytesIO()
    canvas.save(buffer, format="PNG")
    return buffer.getvalue()
