"""Application exceptions."""
from typing import Dict

from fastapi import HTTPException, status


class ExtendedBadRequest(HTTPException):
    """
    400 error carrying per-field messages.

    Rendered as ``{"detail": "badRequest", "errors": {field: message}}`` so the
    front-end can attach each message to its form field.
    """

    def __init__(self, errors: Dict[str, str]):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="badRequest")
        self.errors = errors
