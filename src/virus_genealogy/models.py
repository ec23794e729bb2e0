"""
Data models for virus-genealogy package.

This module defines:
- VirusLike: the capability contract a payload type must satisfy
- Virus: the reference payload shipped with the package
- Outcome: a success/failure value for callers that prefer results to exceptions
"""

from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from .exceptions import ErrorKind, GenealogyError


@runtime_checkable
class VirusLike(Protocol):
    """
    Payload capability contract.

    A payload type must be constructible from an identifier alone and expose
    that identifier through get_id(). Identifiers must be hashable and
    totally ordered.
    """

    def __init__(self, virus_id: Any, /) -> None: ...

    def get_id(self) -> Hashable: ...


class Virus(BaseModel):
    """
    Reference virus payload.

    Holds only its identifier and free-form metadata. Instances compare and
    order by identifier.
    """

    virus_id: Any = Field(
        ...,
        description="Identifier of the virus strain",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional data attached by the caller",
    )

    def __init__(self, virus_id: Any, /, **data: Any):
        super().__init__(virus_id=virus_id, **data)

    def get_id(self) -> Any:
        """Return the virus identifier."""
        return self.virus_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Virus):
            return NotImplemented
        return self.virus_id == other.virus_id

    def __lt__(self, other: "Virus") -> bool:
        return self.virus_id < other.virus_id

    def __hash__(self) -> int:
        return hash(self.virus_id)


@dataclass(frozen=True)
class Outcome:
    """Result of an operation run through attempt()."""

    ok: bool
    value: Any = None
    error: Optional[ErrorKind] = None
    message: str | None = None

    def unwrap(self) -> Any:
        """
        Return the value of a successful outcome.

        Raises:
            ValueError: If the outcome is a failure
        """
        if not self.ok:
            raise ValueError(f"Outcome failed with {self.error.value}: {self.message}")
        return self.value


def attempt(operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Outcome:
    """
    Run a genealogy operation and report its result as an Outcome.

    Only GenealogyError is converted into a failed Outcome; any other
    exception propagates unchanged.

    Example:
        >>> outcome = attempt(genealogy.create, "B", "A")
        >>> if outcome.error is ErrorKind.NOT_FOUND:
        ...     print("missing parent")
    """
    try:
        value = operation(*args, **kwargs)
    except GenealogyError as e:
        return Outcome(ok=False, error=e.kind, message=str(e))
    return Outcome(ok=True, value=value)
