from __future__ import annotations
from typing import Any


class TextEngineError(Exception):
    """Base class for every fatal condition raised through the console."""


class ScriptLoadError(TextEngineError):
    """A plot script could not be opened or read."""


class DuplicateIdError(TextEngineError):
    """An id already exists in the tree or dialog it was inserted into."""


class NotFoundError(TextEngineError):
    """A requested dialog, decision or tree id does not exist."""


class MarkerError(TextEngineError):
    """
    Malformed script: a second id/link marker inside one token, an entity
    without id, or a line that has nothing to attach to.
    """

    def __init__(self, message: str, token: Any = None):
        super().__init__(message)
        self.token = token  # the token as it was when scanning stopped


class ChoiceError(TextEngineError):
    """A decision was chosen that cannot be taken (disabled, or the story ended)."""
