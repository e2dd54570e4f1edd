# services/reconciler.py
"""
Membership diff between the users currently assigned to a task and the users
a caller wants assigned.

Matching is by user id only: no ordering semantics and no duplicate counting.
Users present on both sides are kept as they are.
"""

from dataclasses import dataclass, field
from typing import Iterable, Tuple


@dataclass(frozen=True)
class AssigneeDelta:
    """
    Changes that turn the current set into the desired set.

    ``to_add`` and ``to_remove`` are sorted by ascending user id, which is the
    order in which additions are validated and failures reported.
    """

    to_add: Tuple[int, ...] = field(default_factory=tuple)
    to_remove: Tuple[int, ...] = field(default_factory=tuple)
    # Desired set was empty: remove everything without a per-user diff
    remove_all: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


def reconcile(current: Iterable[int], desired: Iterable[int]) -> AssigneeDelta:
    """Computes the minimal add/remove delta from ``current`` to ``desired``."""
    current_ids = set(current)
    desired_ids = set(desired)

    if not desired_ids:
        if not current_ids:
            return AssigneeDelta()
        return AssigneeDelta(to_remove=tuple(sorted(current_ids)), remove_all=True)

    return AssigneeDelta(
        to_add=tuple(sorted(desired_ids - current_ids)),
        to_remove=tuple(sorted(current_ids - desired_ids)),
    )
