"""SVG badge generation for download counts."""

from xml.sax.saxutils import escape

# Badge geometry is fixed regardless of text length
BADGE_WIDTH = 96
BADGE_HEIGHT = 20
LABEL_WIDTH = 61
MESSAGE_WIDTH = BADGE_WIDTH - LABEL_WIDTH
LABEL_COLOR = "#555"

DEFAULT_LABEL = "downloads"
DEFAULT_COLOR = "#007ec6"
NOT_AVAILABLE_MESSAGE = "N/A"
NOT_AVAILABLE_COLOR = "#9f9f9f"

# Predefined color schemes
BADGE_COLORS = {
    "green": "#4c1",
    "brightgreen": "#44cc11",
    "blue": "#007ec6",
    "lightblue": "#5bc0de",
    "orange": "#fe7d37",
    "red": "#e05d44",
    "yellow": "#dfb317",
    "gray": "#9f9f9f",
}

_ATTR_ENTITIES = {'"': "&quot;", "'": "&apos;"}

# Abbreviation units, smallest first
_COUNT_UNITS = [(1_000, "K"), (1_000_000, "M"), (1_000_000_000, "B")]


def format_count(count: int) -> str:
    """Format a download count for display in badge.

    Examples: 1234 -> "1.2K", 1234567 -> "1.2M", 123 -> "123",
    999_999 -> "1.0M" (a value that rounds to 1000 moves up a unit)
    """
    if count < 1_000:
        return str(count)

    for scale, suffix in _COUNT_UNITS[:-1]:
        rounded = round(count / scale, 1)
        if rounded < 1_000:
            return f"{rounded:.1f}{suffix}"
    scale, suffix = _COUNT_UNITS[-1]
    return f"{count / scale:.1f}{suffix}"


def resolve_color(color: str) -> str:
    """Map a palette name to its hex value; anything else passes through."""
    return BADGE_COLORS.get(color, color)


def render_badge(label: str, message: str, color: str) -> str:
    """Render a fixed-size, two-segment shields.io-style badge.

    Args:
        label: Left side text (e.g., "downloads")
        message: Right side text (e.g., "5000")
        color: Background color for the message side, as a hex string.

    Returns:
        SVG string for the badge. Identical inputs give identical output.
    """
    label = escape(label, _ATTR_ENTITIES)
    message = escape(message, _ATTR_ENTITIES)
    color = escape(color, _ATTR_ENTITIES)

    return f'''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" width="{BADGE_WIDTH}" height="{BADGE_HEIGHT}" role="img" aria-label="{label}: {message}">
  <title>{label}: {message}</title>
  <linearGradient id="s" x2="0" y2="100%">
    <stop offset="0" stop-color="#bbb" stop-opacity=".1"/>
    <stop offset="1" stop-opacity=".1"/>
  </linearGradient>
  <clipPath id="r">
    <rect width="{BADGE_WIDTH}" height="{BADGE_HEIGHT}" rx="3" fill="#fff"/>
  </clipPath>
  <g clip-path="url(#r)">
    <rect width="{LABEL_WIDTH}" height="{BADGE_HEIGHT}" fill="{LABEL_COLOR}"/>
    <rect x="{LABEL_WIDTH}" width="{MESSAGE_WIDTH}" height="{BADGE_HEIGHT}" fill="{color}"/>
    <rect width="{BADGE_WIDTH}" height="{BADGE_HEIGHT}" fill="url(#s)"/>
  </g>
  <g fill="#fff" text-anchor="middle" font-family="Verdana,Geneva,DejaVu Sans,sans-serif" text-rendering="geometricPrecision" font-size="110">
    <text aria-hidden="true" x="315" y="150" fill="#010101" fill-opacity=".3" transform="scale(.1)" textLength="510">{label}</text>
    <text x="315" y="140" transform="scale(.1)" fill="#fff" textLength="510">{label}</text>
    <text aria-hidden="true" x="775" y="150" fill="#010101" fill-opacity=".3" transform="scale(.1)" textLength="250">{message}</text>
    <text x="775" y="140" transform="scale(.1)" fill="#fff" textLength="250">{message}</text>
  </g>
</svg>'''


def downloads_message(count: int, compact: bool = False) -> str:
    """Text shown on the message side for a count."""
    if compact:
        return format_count(count)
    return str(count)
