"""
Tests for payload models, Outcome and exception kinds.
"""

import pytest

from virus_genealogy import (
    ErrorKind,
    GenealogyError,
    Outcome,
    TriedToRemoveStemVirus,
    Virus,
    VirusAlreadyCreated,
    VirusLike,
    VirusNotFound,
    attempt,
)


class TestVirus:
    """Tests for the reference Virus payload."""

    def test_construct_from_id(self):
        """Test a virus is constructible from its id alone."""
        virus = Virus("H1N1")
        assert virus.get_id() == "H1N1"
        assert virus.virus_id == "H1N1"
        assert virus.metadata == {}

    def test_metadata(self):
        """Test extra data is kept."""
        virus = Virus(7, metadata={"host": "swine"})
        assert virus.metadata["host"] == "swine"

    def test_ordering_follows_id(self):
        """Test comparison follows identifiers."""
        assert Virus("A") < Virus("B")
        assert Virus("A") == Virus("A", metadata={"x": 1})
        assert sorted([Virus(3), Virus(1), Virus(2)])[0].get_id() == 1

    def test_hashable(self):
        """Test viruses can be used in sets."""
        assert len({Virus("A"), Virus("A"), Virus("B")}) == 2

    def test_satisfies_protocol(self):
        """Test Virus matches the payload contract."""
        assert isinstance(Virus("A"), VirusLike)


class TestErrorKinds:
    """Tests for error kinds carried by exceptions."""

    @pytest.mark.parametrize(
        "error_class,kind",
        [
            (VirusNotFound, ErrorKind.NOT_FOUND),
            (VirusAlreadyCreated, ErrorKind.ALREADY_EXISTS),
            (TriedToRemoveStemVirus, ErrorKind.FORBIDDEN_REMOVAL),
        ],
    )
    def test_kind(self, error_class, kind):
        """Test each exception exposes its kind and id."""
        error = error_class("A")
        assert isinstance(error, GenealogyError)
        assert error.kind is kind
        assert error.virus_id == "A"
        assert "'A'" in str(error)

    def test_custom_message(self):
        """Test an explicit message overrides the template."""
        assert str(VirusNotFound("A", "gone")) == "gone"


class TestAttempt:
    """Tests for attempt() and Outcome."""

    def test_success(self, genealogy):
        """Test a successful operation."""
        outcome = attempt(genealogy.create, "A", "S")
        assert outcome.ok
        assert outcome.error is None
        assert genealogy.exists("A")

    def test_success_value(self, genealogy):
        """Test the operation result is carried."""
        outcome = attempt(genealogy.lookup, "S")
        assert outcome.unwrap() is genealogy.lookup("S")

    @pytest.mark.parametrize(
        "operation,args,kind",
        [
            ("create", ("A", "missing"), ErrorKind.NOT_FOUND),
            ("create", ("S", "S"), ErrorKind.ALREADY_EXISTS),
            ("remove", ("S",), ErrorKind.FORBIDDEN_REMOVAL),
            ("connect", ("S", "missing"), ErrorKind.NOT_FOUND),
        ],
    )
    def test_failure_kinds(self, genealogy, operation, args, kind):
        """Test failures are reported by kind."""
        outcome = attempt(getattr(genealogy, operation), *args)
        assert not outcome.ok
        assert outcome.error is kind
        with pytest.raises(ValueError):
            outcome.unwrap()

    def test_other_errors_propagate(self):
        """Test non-genealogy errors are not converted."""

        def broken():
            raise KeyError("x")

        with pytest.raises(KeyError):
            attempt(broken)

    def test_outcome_defaults(self):
        """Test Outcome default fields."""
        outcome = Outcome(ok=True)
        assert outcome.value is None
        assert outcome.message is None
