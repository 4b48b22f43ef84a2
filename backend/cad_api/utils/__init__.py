"""Utility modules for the application."""
from cad_api.utils.security import (
    clean_description,
    sanitize_string,
    strip_dangerous_html_tags,
)

__all__ = [
    "clean_description",
    "sanitize_string",
    "strip_dangerous_html_tags",
]
