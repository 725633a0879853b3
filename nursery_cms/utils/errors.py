from typing import Dict, Optional


class ValidationError(Exception):
    """Request payload failed validation; rendered as a 400 with field errors."""

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        super().__init__(message or 'Validation error')
        self.errors = errors
        self.message = message or 'Validation error'
