"""Error types shared by the retrieval core and its boundaries."""

from __future__ import annotations

from typing import Optional


class CopilotoError(Exception):
    """Base class for every error raised by this package."""


class InputError(CopilotoError, ValueError):
    """Raised when a question is empty or missing."""


class DataIntegrityError(CopilotoError, ValueError):
    """Raised when a static dataset is malformed at load time."""


class CollaboratorError(CopilotoError):
    """Raised when the chat completion endpoint fails or answers garbage."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
        self.message = message

    def to_dict(self) -> dict[str, object]:
        return {"status": self.status, "message": self.message}
