"""
virus-genealogy: an in-memory genealogy of virus strains.

Viruses descend from a permanent stem virus and may have several parents and
several children. Every structural change is all-or-nothing, and payload
objects returned by lookups and iteration are identity-stable.
"""

from virus_genealogy.cache import InstanceCache
from virus_genealogy.exceptions import (
    ErrorKind,
    GenealogyError,
    TriedToRemoveStemVirus,
    VirusAlreadyCreated,
    VirusNotFound,
)
from virus_genealogy.genealogy import VirusGenealogy
from virus_genealogy.iterators import ChildrenIterator
from virus_genealogy.journal import Operation, OperationJournal
from virus_genealogy.models import Outcome, Virus, VirusLike, attempt
from virus_genealogy.topology import LineageShape, StructureReport, detect_shape

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core classes
    "VirusGenealogy",
    "ChildrenIterator",
    "InstanceCache",
    # Payloads and results
    "Virus",
    "VirusLike",
    "Outcome",
    "attempt",
    # Journal
    "Operation",
    "OperationJournal",
    # Diagnostics
    "LineageShape",
    "StructureReport",
    "detect_shape",
    # Exceptions
    "ErrorKind",
    "GenealogyError",
    "VirusNotFound",
    "VirusAlreadyCreated",
    "TriedToRemoveStemVirus",
]
