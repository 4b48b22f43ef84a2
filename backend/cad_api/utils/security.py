"""Input cleaning utilities for free-text fields."""
import re

# Control characters except tab, newline and carriage return
CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')


def sanitize_string(text: str, max_length: int = 10000) -> str:
    """
    Clean user supplied text before it is stored.

    - Removes null bytes and control characters (newlines and tabs are kept)
    - Truncates to max_length

    Output escaping is left to the client; stored text is not HTML-escaped.

    Args:
        text: The text to clean
        max_length: Maximum allowed length

    Returns:
        Cleaned text
    """
    if not text:
        return text

    text = CONTROL_CHARS.sub('', text)

    if len(text) > max_length:
        text = text[:max_length]

    return text


def strip_dangerous_html_tags(text: str) -> str:
    """
    Remove script and style blocks and inline event handlers.

    Warrant descriptions may carry basic rich-text markup; this keeps
    formatting while dropping executable content.
    """
    if not text:
        return text

    text = re.sub(r'<script[^>]*>.*?</script>', '', text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r'<style[^>]*>.*?</style>', '', text, flags=re.DOTALL | re.IGNORECASE)

    # onclick, onerror, ...
    text = re.sub(r'\s+on\w+\s*=\s*["\'][^"\']*["\']', '', text, flags=re.IGNORECASE)
    text = re.sub(r'\s+on\w+\s*=\s*[^\s>]+', '', text, flags=re.IGNORECASE)

    text = re.sub(
        r'(href|src|action)\s*=\s*["\']?\s*javascript:[^"\'>\s]*',
        r'\1=""',
        text,
        flags=re.IGNORECASE,
    )

    return text


def clean_description(text: str, max_length: int = 10000) -> str:
    """Sanitize a rich-text description such as a warrant body."""
    return strip_dangerous_html_tags(sanitize_string(text, max_length))
