"""Priority-aware ordering of dict keys."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)
debug = logger.debug

DEFAULT_PRIORITY_KEYS = ("name", "id", "value", "version", "date", "errors")


class KeyPriorityComparator:
    """Orders keys with a configured set of priority keys first.

    Priority keys are matched case-insensitively and sort in the order they
    were configured. All other keys follow, sorted case-insensitively. Keys
    that are equal after case-folding are ordered by their original text so
    that the result never depends on the input order.

    For example, with priority keys ``["name", "version"]`` the keys
    ``{"z", "name", "version", "a"}`` sort as ``name, version, a, z``.
    """

    def __init__(
        self: KeyPriorityComparator,
        priority_keys: Iterable[str] = DEFAULT_PRIORITY_KEYS,
    ) -> None:
        """Build the rank table for the priority keys."""
        self.priority_keys = tuple(priority_keys)
        self._ranks: dict[str, int] = {}
        for index, key in enumerate(self.priority_keys):
            # First occurrence wins if a key is listed twice
            self._ranks.setdefault(key.lower(), index)
        debug(f"KeyPriorityComparator: ranks={self._ranks}")

    def rank(self: KeyPriorityComparator, key: str) -> int | None:
        """Return the priority rank of a key, or None if it has no priority."""
        return self._ranks.get(key.lower())

    def sort_key(self: KeyPriorityComparator, key: str) -> tuple:
        """Return a tuple that sorts in the same order as compare()."""
        rank = self.rank(key)
        if rank is not None:
            return (0, rank, "", key)
        return (1, 0, key.lower(), key)

    def compare(self: KeyPriorityComparator, a: str, b: str) -> int:
        """Compare two keys, returning a negative, zero or positive number."""
        a_key = self.sort_key(a)
        b_key = self.sort_key(b)
        return (a_key > b_key) - (a_key < b_key)

    def sorted_keys(self: KeyPriorityComparator, keys: Iterable[str]) -> list[str]:
        """Return the keys in priority order."""
        return sorted(keys, key=self.sort_key)
