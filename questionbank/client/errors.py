"""Errors raised by the question bank client."""
from typing import Any, Optional


class RequestError(Exception):
    """Thrown if the server sends an error as response to a request."""

    def __init__(
        self,
        path: str,
        method: str,
        status: int,
        name: str,
        message: str,
        details: Optional[Any] = None
    ):
        super().__init__(message)
        self.path = path
        self.method = method
        self.status = status
        self.name = name
        self.message = message
        self.details = details

    def __str__(self) -> str:
        message = (
            f"A {self.method} request to URL path '{self.path}' returned "
            f"an error '{self.name}' with HTTP status {self.status}: {self.message}"
        )
        if self.details:
            return f"{message} (details: {self.details})"
        return message


class SelectionError(Exception):
    """Raised when a tree selection targets a disabled or non-selectable node."""
