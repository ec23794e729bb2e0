"""
Exceptions for virus-genealogy package.

Every error carries an ErrorKind so callers can branch on the failure type
without matching exception classes (see models.attempt).
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Kinds of failure a genealogy operation can signal."""

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    FORBIDDEN_REMOVAL = "forbidden_removal"


class GenealogyError(Exception):
    """Base exception for VirusGenealogy errors."""

    kind: ErrorKind
    template = "Genealogy error for virus {virus_id!r}"

    def __init__(self, virus_id: Any = None, message: str | None = None):
        self.virus_id = virus_id
        super().__init__(message or self.template.format(virus_id=virus_id))


class VirusNotFound(GenealogyError):
    """Raised when an identifier expected to exist is not in the genealogy."""

    kind = ErrorKind.NOT_FOUND
    template = "Virus {virus_id!r} not found"


class VirusAlreadyCreated(GenealogyError):
    """Raised when creating a virus whose identifier is already taken."""

    kind = ErrorKind.ALREADY_EXISTS
    template = "Virus {virus_id!r} already exists"


class TriedToRemoveStemVirus(GenealogyError):
    """Raised when attempting to remove the stem virus."""

    kind = ErrorKind.FORBIDDEN_REMOVAL
    template = "Virus {virus_id!r} is the stem and cannot be removed"
