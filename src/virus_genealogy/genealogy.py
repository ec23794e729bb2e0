"""
Main VirusGenealogy container.

VirusGenealogy stores viruses connected by descent: every virus except the stem
has one or more parents, and a virus may have any number of children. All
mutations give the strong guarantee: replacement node records are built into a
working copy of the node table, which replaces the live table in one rebinding,
so a failure at any step leaves the genealogy exactly as it was.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Hashable, Iterable, Iterator

import networkx as nx

from . import topology
from .cache import InstanceCache
from .exceptions import TriedToRemoveStemVirus, VirusAlreadyCreated, VirusNotFound
from .iterators import ChildrenIterator
from .journal import Operation, OperationJournal
from .models import Virus, VirusLike

logger = logging.getLogger(__name__)

_PARENT_COLLECTIONS = (list, set)


@dataclass(frozen=True)
class _Node:
    """
    Immutable node record.

    Edits return a new record, which lets mutations prepare every change
    without touching the live node table.
    """

    virus_id: Hashable
    parents: frozenset = field(default_factory=frozenset)
    children: frozenset = field(default_factory=frozenset)

    def with_child(self, child_id: Hashable) -> "_Node":
        return replace(self, children=self.children | {child_id})

    def without_child(self, child_id: Hashable) -> "_Node":
        return replace(self, children=self.children - {child_id})

    def with_parent(self, parent_id: Hashable) -> "_Node":
        return replace(self, parents=self.parents | {parent_id})

    def without_parent(self, parent_id: Hashable) -> "_Node":
        return replace(self, parents=self.parents - {parent_id})


class VirusGenealogy:
    """
    Genealogy of virus strains rooted at a permanent stem virus.

    This class handles:
    - Creating viruses with one or more parents
    - Connecting existing viruses
    - Cascading removal of viruses that lose their last parent
    - Identity-stable payload lookup and iteration over children

    Lookups and iteration materialize payloads lazily into an instance cache,
    so they are not side-effect free. The container is not safe for concurrent
    use and cannot be copied.
    """

    def __init__(
        self,
        stem_id: Hashable,
        virus_type: Callable[[Any], VirusLike] = Virus,
        *,
        name: str = "genealogy",
        journal_size: int = 1000,
    ):
        """
        Initialize a genealogy containing only the stem virus.

        Args:
            stem_id: Identifier of the stem virus, fixed for the container lifetime
            virus_type: Payload type (or factory) constructible from an identifier
            name: Name used in log messages and repr
            journal_size: Number of operations kept in the journal (0 disables it)
        """
        self.name = name
        self._stem_id = stem_id
        self._nodes: dict[Hashable, _Node] = {stem_id: _Node(stem_id)}
        self._cache = InstanceCache(virus_type)
        self.journal = OperationJournal(max_entries=journal_size)

        logger.debug(f"Created VirusGenealogy '{name}' with stem {stem_id!r}")

    def __repr__(self) -> str:
        return (
            f"VirusGenealogy(name='{self.name}', "
            f"stem={self._stem_id!r}, "
            f"viruses={len(self._nodes)})"
        )

    def __copy__(self):
        raise TypeError("VirusGenealogy cannot be copied; build a new genealogy instead")

    def __deepcopy__(self, memo):
        raise TypeError("VirusGenealogy cannot be copied; build a new genealogy instead")

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, virus_id: Hashable) -> bool:
        return self.exists(virus_id)

    def __getitem__(self, virus_id: Hashable) -> Any:
        return self.lookup(virus_id)

    # ==================== Queries ====================

    @property
    def stem_id(self) -> Hashable:
        """Identifier of the stem virus."""
        return self._stem_id

    def get_stem_id(self) -> Hashable:
        return self._stem_id

    def exists(self, virus_id: Hashable) -> bool:
        """Check if a virus is in the genealogy."""
        return virus_id in self._nodes

    def lookup(self, virus_id: Hashable) -> Any:
        """
        Get the canonical payload for a virus.

        Repeated lookups of the same identifier return the same object.

        Args:
            virus_id: Virus identifier

        Returns:
            The cached payload instance

        Raises:
            VirusNotFound: If the virus doesn't exist
        """
        self._get_node(virus_id)
        return self._cache.materialize(virus_id)

    def get_parents(self, virus_id: Hashable) -> list:
        """
        Get the parents of a virus in ascending identifier order.

        Raises:
            VirusNotFound: If the virus doesn't exist
        """
        return sorted(self._get_node(virus_id).parents)

    def get_children(self, virus_id: Hashable) -> list:
        """
        Get the child identifiers of a virus in ascending order.

        Raises:
            VirusNotFound: If the virus doesn't exist
        """
        return sorted(self._get_node(virus_id).children)

    def ids(self) -> list:
        """Get all virus identifiers in ascending order."""
        return sorted(self._nodes)

    def children_begin(self, virus_id: Hashable) -> ChildrenIterator:
        """
        Get an iterator positioned at the first child of a virus.

        Raises:
            VirusNotFound: If the virus doesn't exist
        """
        return ChildrenIterator(self.get_children(virus_id), 0, self._cache)

    def children_end(self, virus_id: Hashable) -> ChildrenIterator:
        """
        Get an iterator positioned one past the last child of a virus.

        Raises:
            VirusNotFound: If the virus doesn't exist
        """
        child_ids = self.get_children(virus_id)
        return ChildrenIterator(child_ids, len(child_ids), self._cache)

    def children(self, virus_id: Hashable) -> Iterator[Any]:
        """
        Iterate over the canonical payloads of a virus's children.

        Example:
            >>> for child in genealogy.children("A"):
            ...     print(child.get_id())
        """
        return self.children_begin(virus_id)

    # ==================== Mutations ====================

    def create(self, virus_id: Hashable, parent_ids: Any) -> None:
        """
        Create a virus descending from one or more existing viruses.

        A list or set of identifiers selects the multi-parent form; anything
        else, tuples and frozensets included, is a single parent identifier.
        An empty parent list creates nothing.

        Args:
            virus_id: Identifier of the new virus
            parent_ids: Parent identifier, or list/set of parent identifiers

        Raises:
            VirusAlreadyCreated: If virus_id already exists
            VirusNotFound: If any parent doesn't exist

        Example:
            >>> genealogy.create("B", "A")
            >>> genealogy.create("C", ["A", "B"])
        """
        if isinstance(parent_ids, _PARENT_COLLECTIONS):
            self.create_from_parents(virus_id, parent_ids)
        else:
            with self._journaled("create", virus_id, [parent_ids]):
                self._create_from_one(virus_id, parent_ids)

    def create_from_parents(self, virus_id: Hashable, parent_ids: Iterable[Hashable]) -> None:
        """
        Create a virus descending from every virus in parent_ids.

        Unlike create(), the argument is always read as a collection, which
        makes it the unambiguous form when identifiers are themselves tuples.

        Raises:
            VirusAlreadyCreated: If virus_id already exists
            VirusNotFound: If any parent doesn't exist
        """
        parent_ids = list(parent_ids)
        with self._journaled("create", virus_id, parent_ids):
            self._create_from_many(virus_id, parent_ids)

    def _create_from_one(self, virus_id: Hashable, parent_id: Hashable) -> None:
        if self.exists(virus_id):
            raise VirusAlreadyCreated(virus_id)

        parent = self._get_node(parent_id)

        working = dict(self._nodes)
        working[virus_id] = _Node(virus_id, parents=frozenset({parent_id}))
        working[parent_id] = parent.with_child(virus_id)
        self._nodes = working

        logger.debug(f"Created virus {virus_id!r} from {parent_id!r} in '{self.name}'")

    def _create_from_many(self, virus_id: Hashable, parent_ids: list) -> None:
        if self.exists(virus_id):
            raise VirusAlreadyCreated(virus_id)

        for parent_id in parent_ids:
            if not self.exists(parent_id):
                raise VirusNotFound(parent_id)

        parents = frozenset(parent_ids)
        if not parents:
            logger.debug(f"Empty parent list for {virus_id!r}; nothing created")
            return

        working = dict(self._nodes)
        working[virus_id] = _Node(virus_id, parents=parents)
        for parent_id in parents:
            working[parent_id] = working[parent_id].with_child(virus_id)
        self._nodes = working

        logger.debug(
            f"Created virus {virus_id!r} from {len(parents)} parent(s) in '{self.name}'"
        )

    def connect(self, child_id: Hashable, parent_id: Hashable) -> None:
        """
        Add a descent edge from parent_id to child_id.

        Connecting an existing edge does nothing. The edge is not checked for
        cycles or reachability from the stem; use check_structure() for that.

        Raises:
            VirusNotFound: If either virus doesn't exist
        """
        with self._journaled("connect", child_id, [parent_id]) as operation:
            child = self._get_node(child_id)
            self._get_node(parent_id)

            if parent_id in child.parents:
                operation.data["existing"] = True
                return

            # Read the parent back from working so a self edge keeps both sides.
            working = dict(self._nodes)
            working[child_id] = child.with_parent(parent_id)
            working[parent_id] = working[parent_id].with_child(child_id)
            self._nodes = working

            logger.debug(f"Connected {parent_id!r} -> {child_id!r} in '{self.name}'")

    def remove(self, virus_id: Hashable) -> None:
        """
        Remove a virus and every descendant left without parents.

        The whole cascade runs on a working copy of the node table, which
        replaces the live table only once it is complete. Cached payloads of
        removed viruses are kept.

        Raises:
            VirusNotFound: If the virus doesn't exist
            TriedToRemoveStemVirus: If virus_id is the stem
        """
        with self._journaled("remove", virus_id) as operation:
            if not self.exists(virus_id):
                raise VirusNotFound(virus_id)
            if virus_id == self._stem_id:
                raise TriedToRemoveStemVirus(virus_id)

            working = dict(self._nodes)
            removed = self._cascade(working, virus_id)
            self._nodes = working

            operation.data["removed"] = removed
            logger.info(
                f"Removed virus {virus_id!r} from '{self.name}' "
                f"({len(removed) - 1} descendant(s) cascaded)"
            )

    def _cascade(self, working: dict[Hashable, _Node], virus_id: Hashable) -> list:
        """
        Remove virus_id from working, then every child whose last parent went.

        Returns:
            Removed identifiers in removal order
        """
        pending = [virus_id]
        scheduled = {virus_id}
        removed = []

        while pending:
            current = pending.pop()
            node = working.pop(current)
            removed.append(current)

            for parent_id in node.parents:
                if parent_id in working:
                    working[parent_id] = working[parent_id].without_child(current)

            for child_id in node.children:
                if child_id not in working:
                    continue
                child = working[child_id].without_parent(current)
                working[child_id] = child
                # The stem never needs a parent.
                if not child.parents and child_id != self._stem_id and child_id not in scheduled:
                    scheduled.add(child_id)
                    pending.append(child_id)

        return removed

    # ==================== Diagnostics ====================

    def to_digraph(self) -> nx.DiGraph:
        """Build an independent parent -> child NetworkX view of the genealogy."""
        return topology.to_digraph(self)

    def check_structure(self) -> topology.StructureReport:
        """
        Check that the genealogy is acyclic and every virus descends from the stem.

        Nothing is enforced; violations are reported and logged.
        """
        report = topology.check_structure(self.to_digraph(), self._stem_id)
        if not report.acyclic:
            logger.warning(f"Genealogy '{self.name}' contains a cycle: {report.cycle}")
        if report.unreachable:
            logger.warning(
                f"Genealogy '{self.name}' has viruses not descending from the stem: "
                f"{report.unreachable}"
            )
        return report

    # ==================== Internals ====================

    def _get_node(self, virus_id: Hashable) -> _Node:
        try:
            return self._nodes[virus_id]
        except KeyError:
            raise VirusNotFound(virus_id) from None

    @contextmanager
    def _journaled(self, operation_type: str, virus_id: Hashable, parent_ids: Iterable = ()):
        operation = Operation(
            operation_type=operation_type,
            virus_id=virus_id,
            parent_ids=list(parent_ids),
        )
        try:
            yield operation
        except Exception as e:
            operation.error = f"{type(e).__name__}: {e}"
            self.journal.append(operation)
            raise
        operation.success = True
        self.journal.append(operation)
