"""LinkRegistry: stable link identity across independently rebuilt graphs.

The triangulation is recomputed from nothing every tick, so nothing it
returns survives between ticks. A link's identity is therefore the unordered
pair of particle indices it connects. Reconciling a tick's candidate pairs
against the tracked links:

- a pair that was tracked last tick keeps its ``since`` timestamp
- a pair that was not tracked becomes a new link with ``since = now``
- a tracked pair missing from the candidates is dropped immediately

There is no grace period: a pair that disappears for a single tick and comes
back starts over with a fresh ``since``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from linkfield.model.link import Link, Pair, canonical_pair


@dataclass(frozen=True)
class ReconcileStats:
    """What one reconcile call did to the tracked link set."""

    created: int = 0
    retained: int = 0
    dropped: int = 0

    @property
    def total(self) -> int:
        """Links tracked after the call."""
        return self.created + self.retained


class LinkRegistry:
    """Owns the current link set, keyed by canonical index pair.

    Example:
        >>> registry = LinkRegistry()
        >>> [link.since for link in registry.reconcile({(1, 2)}, now=1.0)]
        [1.0]
        >>> [link.since for link in registry.reconcile({(2, 1)}, now=2.0)]
        [1.0]
    """

    def __init__(self) -> None:
        self._links: dict[Pair, Link] = {}
        self._last_stats = ReconcileStats()

    @property
    def links(self) -> list[Link]:
        """Tracked links ordered by pair."""
        return [self._links[pair] for pair in sorted(self._links)]

    @property
    def last_stats(self) -> ReconcileStats:
        """Counts from the most recent ``reconcile`` call."""
        return self._last_stats

    def __len__(self) -> int:
        return len(self._links)

    def __iter__(self) -> Iterator[Link]:
        return iter(self.links)

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return canonical_pair(*pair) in self._links

    def get(self, a: int, b: int) -> Link | None:
        """Tracked link between ``a`` and ``b`` in either order, if any."""
        return self._links.get(canonical_pair(a, b))

    def clear(self) -> None:
        """Forget every tracked link."""
        self._links.clear()
        self._last_stats = ReconcileStats()

    def reconcile(self, candidate_pairs: Iterable[Pair], now: float) -> list[Link]:
        """Replace the tracked links with exactly ``candidate_pairs``.

        Args:
            candidate_pairs: This tick's edges; either orientation is accepted
                and duplicates collapse.
            now: Clock time stamped on links created by this call.

        Returns:
            The new link set ordered by pair, one link per distinct candidate.
        """
        previous = self._links
        current: dict[Pair, Link] = {}
        retained = 0

        for a, b in candidate_pairs:
            pair = canonical_pair(a, b)
            if pair in current:
                continue
            existing = previous.get(pair)
            if existing is not None:
                current[pair] = existing
                retained += 1
            else:
                current[pair] = Link(a=pair[0], b=pair[1], since=now)

        self._links = current
        self._last_stats = ReconcileStats(
            created=len(current) - retained,
            retained=retained,
            dropped=len(previous) - retained,
        )
        return self.links
