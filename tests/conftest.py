"""
Pytest configuration and fixtures for virus-genealogy tests.

This module provides:
- Prebuilt genealogies (empty, diamond, chain)
- A state capture helper for all-or-nothing checks
- Fault injection into node record edits
- Identifiers whose hashing and comparisons raise, swept across call counts
"""

from typing import Any, Callable

import pytest

from virus_genealogy import VirusGenealogy
from virus_genealogy.genealogy import _Node


# ============================================================================
# Genealogy Fixtures
# ============================================================================


@pytest.fixture
def genealogy() -> VirusGenealogy:
    """Genealogy holding only the stem "S"."""
    return VirusGenealogy("S")


@pytest.fixture
def diamond(genealogy: VirusGenealogy) -> VirusGenealogy:
    """
    S -> A, S -> B, A -> C, B -> C.
    """
    genealogy.create("A", "S")
    genealogy.create("B", "S")
    genealogy.create("C", ["A", "B"])
    return genealogy


@pytest.fixture
def chain(genealogy: VirusGenealogy) -> VirusGenealogy:
    """
    S -> A -> B -> C.
    """
    genealogy.create("A", "S")
    genealogy.create("B", "A")
    genealogy.create("C", "B")
    return genealogy


# ============================================================================
# Helpers
# ============================================================================


@pytest.fixture
def graph_state() -> Callable[[VirusGenealogy], dict[Any, tuple[list, list]]]:
    """
    Return a function capturing ids and edges of a genealogy.
    """

    def capture(target: VirusGenealogy) -> dict[Any, tuple[list, list]]:
        return {
            virus_id: (target.get_parents(virus_id), target.get_children(virus_id))
            for virus_id in target.ids()
        }

    return capture


@pytest.fixture
def inject_failure(monkeypatch):
    """
    Return a function making a _Node edit method raise on its n-th call.

    Example:
        >>> inject_failure("with_child", 2)
    """

    def arm(method_name: str, call_number: int = 1) -> None:
        original = getattr(_Node, method_name)
        calls = {"count": 0}

        def failing(self, *args):
            calls["count"] += 1
            if calls["count"] == call_number:
                raise RuntimeError(f"injected failure in {method_name}")
            return original(self, *args)

        monkeypatch.setattr(_Node, method_name, failing)

    return arm


class TrapError(Exception):
    """Raised by TrapId once its call budget runs out."""


class TrapId:
    """
    Identifier whose hashing and comparisons raise after a set number of calls.

    The budget is shared by all instances; None disables the trap.
    """

    budget: int | None = None

    def __init__(self, name: str):
        self.name = name

    @classmethod
    def _spend(cls) -> None:
        if cls.budget is None:
            return
        if cls.budget <= 0:
            raise TrapError("identifier comparison failed")
        cls.budget -= 1

    def __hash__(self) -> int:
        self._spend()
        return hash(self.name)

    def __eq__(self, other: object) -> bool:
        self._spend()
        return isinstance(other, TrapId) and self.name == other.name

    def __lt__(self, other: "TrapId") -> bool:
        self._spend()
        return self.name < other.name

    def __repr__(self) -> str:
        return f"TrapId({self.name!r})"


@pytest.fixture
def trap_ids():
    """Provide TrapId and make sure the trap is disarmed afterwards."""
    TrapId.budget = None
    yield TrapId
    TrapId.budget = None


@pytest.fixture
def sweep_failures(trap_ids, graph_state):
    """
    Return a function failing an operation at every identifier call in turn.

    For each budget the genealogy is rebuilt, the operation is run with the
    trap armed, and the genealogy is compared with its state before the call
    whenever the operation raised. Returns the number of failing runs.
    """

    def sweep(
        build: Callable[[], VirusGenealogy],
        mutate: Callable[[VirusGenealogy], Any],
        max_budget: int = 500,
    ) -> int:
        failures = 0
        for budget in range(max_budget):
            target = build()
            before = graph_state(target)
            trap_ids.budget = budget
            try:
                mutate(target)
            except TrapError:
                failures += 1
            else:
                trap_ids.budget = None
                return failures
            trap_ids.budget = None
            assert graph_state(target) == before, f"state changed failing after {budget} calls"
        raise AssertionError(f"operation still failing after {max_budget} calls")

    return sweep
