"""md2slides — compile Markdown into Google Slides batch requests."""

__version__ = "0.1.0"
