#!/usr/bin/env python3
"""
Example: Influenza Lineage - Reassortment and Cascading Removal

This example builds a small genealogy in which one strain descends from two
parents (reassortment), then removes a strain and shows which descendants go
with it.
"""

import logging

from virus_genealogy import ErrorKind, VirusGenealogy, attempt
from virus_genealogy.topology import detect_shape


def show(genealogy: VirusGenealogy) -> None:
    for virus_id in genealogy.ids():
        children = [child.get_id() for child in genealogy.children(virus_id)]
        print(f"  {virus_id}: parents={genealogy.get_parents(virus_id)} children={children}")


def main():
    """Build, inspect and prune an influenza genealogy."""
    logging.basicConfig(level=logging.INFO)

    genealogy = VirusGenealogy("H1N1-1918", name="influenza")

    genealogy.create("H2N2-1957", "H1N1-1918")
    genealogy.create("H3N2-1968", "H2N2-1957")
    genealogy.create("H1N1-1977", "H1N1-1918")
    genealogy.create("H1N2-2001", ["H3N2-1968", "H1N1-1977"])
    genealogy.create("H3N2-2004", "H3N2-1968")

    print(f"Built {genealogy!r}")
    print(f"Shape: {detect_shape(genealogy.to_digraph()).value}")
    show(genealogy)

    outcome = attempt(genealogy.remove, genealogy.stem_id)
    assert outcome.error is ErrorKind.FORBIDDEN_REMOVAL
    print(f"\nRemoving the stem is refused: {outcome.message}")

    genealogy.remove("H2N2-1957")
    print("\nAfter removing H2N2-1957:")
    show(genealogy)

    removed = genealogy.journal.get_recent_operations(1)[0].data["removed"]
    print(f"\nCascade removed: {sorted(removed)}")


if __name__ == "__main__":
    main()
