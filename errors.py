# errors.py
from typing import Optional

SNIPPET_LENGTH = 200


class WordImportError(Exception):
    """Base class for every failure that aborts an import run."""


class NotFoundError(WordImportError):
    pass


class DecodeError(WordImportError):
    """
    The located block is not a valid data literal.
    Keeps the start of the raw text so the operator can see what was picked up.
    """

    def __init__(self, message: str, raw: str = "", position: Optional[int] = None):
        self.message = message
        self.snippet = raw[:SNIPPET_LENGTH]
        self.position = position
        detail = message if position is None else f"{message} (offset {position})"
        super().__init__(f"{detail}. Raw snippet: {self.snippet}")


class FieldMappingError(WordImportError):
    def __init__(self, index: int, field: str, reason: str):
        self.index = index
        self.field = field
        self.reason = reason
        super().__init__(f"Record {index}: field '{field}' {reason}")


class EmptyDatasetError(WordImportError):
    pass
