"""
Operation journal for genealogy mutations.

Records every create, connect and remove call with its outcome so callers can
audit how a genealogy was built. The journal lives in memory only and is not
covered by the all-or-nothing guarantee of the mutations it records.
"""

import logging
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class Operation:
    """Records a single genealogy operation."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation_type: str = ""  # "create", "connect", "remove"
    virus_id: Any = None
    parent_ids: list[Any] = field(default_factory=list)
    success: bool = False
    error: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary with an ISO timestamp."""
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Operation":
        """Create Operation from dictionary (reverse of to_dict)."""
        data = data.copy()
        if isinstance(data["timestamp"], str):
            data["timestamp"] = datetime.fromisoformat(data["timestamp"])
        return cls(**data)


class OperationJournal:
    """
    Bounded, append-only record of genealogy operations.

    Oldest entries are dropped once max_entries is reached. Indices passed to
    get_operation refer to the entries currently held.
    """

    def __init__(self, max_entries: int = 1000):
        """
        Initialize the journal.

        Args:
            max_entries: Maximum entries to keep in memory (default: 1000).
                Zero keeps nothing.
        """
        if max_entries < 0:
            raise ValueError(f"max_entries must be >= 0, got {max_entries}")
        self.max_entries = max_entries
        self._operations: deque[Operation] = deque(maxlen=max_entries)

    @property
    def enabled(self) -> bool:
        return self.max_entries > 0

    def append(self, operation: Operation) -> None:
        """
        Append an operation to the journal.

        Example:
            >>> journal.append(Operation(operation_type="create", virus_id="B"))
        """
        if not self.enabled:
            return
        self._operations.append(operation)
        logger.debug(
            f"Journaled operation: {operation.operation_type} {operation.virus_id!r} "
            f"(success={operation.success})"
        )

    def read_all(self) -> list[Operation]:
        """Return all held operations in chronological order."""
        return list(self._operations)

    def read_since(self, timestamp: datetime) -> list[Operation]:
        """Return operations recorded at or after a timestamp."""
        return [op for op in self._operations if op.timestamp >= timestamp]

    def get_operation(self, index: int) -> Operation | None:
        """Get an operation by index, or None if out of range."""
        if 0 <= index < len(self._operations):
            return self._operations[index]
        return None

    def count(self) -> int:
        """Get number of held operations."""
        return len(self._operations)

    def clear(self) -> None:
        """Drop all held operations."""
        self._operations.clear()
        logger.info("Cleared operation journal")

    def get_failed_operations(self) -> list[tuple[int, Operation]]:
        """
        Get all failed operations with their indices.

        Returns:
            List of (index, operation) tuples for operations with success=False
        """
        return [(i, op) for i, op in enumerate(self._operations) if not op.success]

    def get_recent_operations(self, limit: int = 10) -> list[Operation]:
        """Get the most recent operations (up to limit)."""
        if limit <= 0:
            return []
        return list(self._operations)[-limit:]
