"""
Canonical instance cache.

Keeps exactly one materialized payload object per identifier so that repeated
lookups hand back the same object. Materialization happens lazily, which means
nominally read-only genealogy queries still write to this cache.
"""

import logging
from typing import Any, Callable, Hashable

from .models import VirusLike

logger = logging.getLogger(__name__)


class InstanceCache:
    """
    Lazily materializes and retains one payload instance per identifier.

    Entries are never evicted, including for identifiers whose node has since
    been removed from the genealogy. References handed out earlier therefore
    stay valid, but may describe a virus that no longer exists.
    """

    def __init__(self, factory: Callable[[Any], VirusLike]):
        """
        Initialize the cache.

        Args:
            factory: Callable building a payload from an identifier
                (normally the payload class itself)
        """
        self.factory = factory
        self._instances: dict[Hashable, VirusLike] = {}

    def __contains__(self, virus_id: Hashable) -> bool:
        return virus_id in self._instances

    def __len__(self) -> int:
        return len(self._instances)

    def materialize(self, virus_id: Hashable) -> VirusLike:
        """
        Return the canonical instance for an identifier, building it if needed.

        The instance is stored only after the factory returns, so a failing
        factory leaves the cache untouched.

        Args:
            virus_id: Identifier to materialize

        Returns:
            The cached payload instance
        """
        if virus_id in self._instances:
            return self._instances[virus_id]

        instance = self.factory(virus_id)
        self._instances[virus_id] = instance
        logger.debug(f"Materialized {type(instance).__name__} for {virus_id!r}")
        return instance

    def cached_ids(self) -> list[Hashable]:
        """Get identifiers with a materialized instance, ascending."""
        return sorted(self._instances)
