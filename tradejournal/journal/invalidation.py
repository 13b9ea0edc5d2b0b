"""Pull-based invalidation of derived summaries.

Each summary declares the mutation kinds that make it stale. A mutation
bumps the revision of every dependent summary; memoized values are keyed
by ``(summary, params, revision)`` so a stale value is never returned.
"""

from enum import Enum
from typing import Any, Callable, Hashable


class Mutation(str, Enum):
    TRADE_ADDED = "trade_added"
    TRADE_EDITED = "trade_edited"
    TRADE_DELETED = "trade_deleted"
    CHECKLIST_UPDATED = "checklist_updated"
    PROFILE_SAVED = "profile_saved"


TRADE_MUTATIONS = frozenset(
    {Mutation.TRADE_ADDED, Mutation.TRADE_EDITED, Mutation.TRADE_DELETED}
)
ANALYTICS_MUTATIONS = TRADE_MUTATIONS | {Mutation.PROFILE_SAVED}

# Summaries that embed full trade entries also go stale on checklist changes
SUMMARY_DEPENDENCIES: dict[str, frozenset] = {
    "trades": ANALYTICS_MUTATIONS | {Mutation.CHECKLIST_UPDATED},
    "profile": frozenset({Mutation.PROFILE_SAVED}),
    "calendar": ANALYTICS_MUTATIONS | {Mutation.CHECKLIST_UPDATED},
    "trades_for_day": ANALYTICS_MUTATIONS | {Mutation.CHECKLIST_UPDATED},
    "performance_summary": ANALYTICS_MUTATIONS,
    "ftmo": ANALYTICS_MUTATIONS,
    "goals": ANALYTICS_MUTATIONS,
    "homepage": ANALYTICS_MUTATIONS,
    "statistics": ANALYTICS_MUTATIONS,
}

MAX_ENTRIES_PER_SUMMARY = 16


class SummaryCache:
    """Memo of derived summaries with dependency-driven revisions.

    At most ``max_entries`` parameter sets are kept per summary; the
    oldest is evicted first.
    """

    def __init__(
        self,
        dependencies: dict[str, frozenset] = SUMMARY_DEPENDENCIES,
        max_entries: int = MAX_ENTRIES_PER_SUMMARY,
    ):
        self._dependencies = dependencies
        self._max_entries = max_entries
        self._revisions = {name: 0 for name in dependencies}
        self._values: dict[tuple, Any] = {}

    def __len__(self) -> int:
        return len(self._values)

    def revision(self, summary: str) -> int:
        return self._revisions[summary]

    def entries(self, summary: str) -> int:
        """Number of memoized parameter sets for summary."""
        return sum(1 for key in self._values if key[0] == summary)

    def invalidate(self, mutation: Mutation) -> list[str]:
        """Mark every summary depending on mutation as stale.

        Returns:
            Names of the invalidated summaries.
        """
        stale = [name for name, kinds in self._dependencies.items() if mutation in kinds]
        for name in stale:
            self._revisions[name] += 1
        self._values = {
            key: value for key, value in self._values.items() if key[0] not in stale
        }
        return stale

    def get_or_compute(
        self, summary: str, params: Hashable, compute: Callable[[], Any]
    ) -> Any:
        key = (summary, params, self._revisions[summary])
        if key in self._values:
            return self._values[key]

        same_summary = [k for k in self._values if k[0] == summary]
        # dicts keep insertion order, so the first key is the oldest
        for old in same_summary[: max(0, len(same_summary) - self._max_entries + 1)]:
            del self._values[old]

        value = compute()
        self._values[key] = value
        return value
