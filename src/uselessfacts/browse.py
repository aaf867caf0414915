"""Search, sort and random picks over a list of facts."""

import random

from .models import Fact

SORT_ORDERS = ("newest", "oldest", "random")


def search(facts: list[Fact], term: str) -> list[Fact]:
    """Keep facts whose text or category contains term, ignoring case."""
    term = term.strip().lower()
    if not term:
        return list(facts)
    return [f for f in facts if term in f.text.lower() or term in f.category.lower()]


def sort_facts(facts: list[Fact], order: str = "random", rng: random.Random | None = None) -> list[Fact]:
    """Sort facts by creation time or shuffle them.

    Facts without a timestamp count as the oldest.
    """
    if order not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order: {order}")

    if order == "random":
        shuffled = list(facts)
        (rng or random).shuffle(shuffled)
        return shuffled

    return sorted(facts, key=lambda f: f.created_at or "", reverse=(order == "newest"))


def pick_random(
    facts: list[Fact],
    current_id: str | None = None,
    rng: random.Random | None = None,
) -> Fact | None:
    """Pick a random fact, avoiding the current one when there is a choice."""
    if not facts:
        return None

    candidates = [f for f in facts if f.id != current_id] or list(facts)
    return (rng or random).choice(candidates)
