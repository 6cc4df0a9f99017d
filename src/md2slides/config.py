"""Configuration constants for md2slides."""

import os

SLIDES_API_BASE = os.getenv("MD2SLIDES_SLIDES_API", "https://slides.googleapis.com/v1")
DRIVE_API_BASE = os.getenv("MD2SLIDES_DRIVE_API", "https://www.googleapis.com/drive/v3")

REQUEST_TIMEOUT = int(os.getenv("MD2SLIDES_REQUEST_TIMEOUT", "30"))

ACCESS_TOKEN_ENV = "GOOGLE_SLIDES_ACCESS_TOKEN"
DEFAULT_PRESENTATION_TITLE = "Untitled presentation"

MONOSPACE_FONT = "Courier New"

# Non-placeholder elements (tables) don't inherit the theme's text color.
TABLE_TEXT_THEME_COLOR = "TEXT1"

ORDERED_BULLET_PRESET = "NUMBERED_DIGIT_ALPHA_ROMAN"
UNORDERED_BULLET_PRESET = "BULLET_DISC_CIRCLE_SQUARE"
