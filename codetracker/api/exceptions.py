"""API-related exception classes.

Contains all exception classes for server calls:
- APIError: Raised when a request fails or returns a non-2xx status
"""

from typing import Optional


class APIError(Exception):
    """Raised when an API call fails.

    Attributes:
        status_code: HTTP status, or None for transport errors and bad responses.
        body: Response body text, if any.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
