"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

Digest to offset mapping for leaf lookup.

Proofs are requested by leaf digest rather than by position. LeafIndex keeps,
for every digest currently held by a leaf, the set of offsets holding it, so
a lookup does not scan the whole leaf level. When several leaves share a
digest the lowest offset is returned.
"""

import heapq
from typing import Dict, Iterable, List, Optional, Set


class LeafIndex:
    """
    Mapping from leaf digest to the offsets currently holding it.

    Each digest also has a min-heap of candidate offsets. Removed offsets are
    left in the heap and discarded when they reach the top, so lowest() is
    O(log n) amortized even while a uniform tree is overwritten front to back.
    """

    # Rebuild a heap once stale entries outnumber live ones by this factor
    COMPACT_RATIO = 2

    def __init__(self, leaves: Iterable[bytes] = ()):
        self._offsets: Dict[bytes, Set[int]] = {}
        self._heaps: Dict[bytes, List[int]] = {}

        for offset, digest in enumerate(leaves):
            self.add(digest, offset)

    @classmethod
    def uniform(cls, digest: bytes, leaf_count: int) -> "LeafIndex":
        """Build an index where every one of leaf_count offsets holds digest."""
        index = cls()
        index._offsets[digest] = set(range(leaf_count))
        # An ascending list is already a valid heap
        index._heaps[digest] = list(range(leaf_count))
        return index

    def add(self, digest: bytes, offset: int) -> None:
        offsets = self._offsets.setdefault(digest, set())
        if offset in offsets:
            return
        offsets.add(offset)
        heapq.heappush(self._heaps.setdefault(digest, []), offset)

    def remove(self, digest: bytes, offset: int) -> None:
        offsets = self._offsets.get(digest)
        if offsets is None:
            return

        offsets.discard(offset)
        if not offsets:
            del self._offsets[digest]
            del self._heaps[digest]
            return

        heap = self._heaps[digest]
        if len(heap) > self.COMPACT_RATIO * len(offsets) + 16:
            heap[:] = offsets
            heapq.heapify(heap)

    def move(self, old_digest: bytes, new_digest: bytes, offset: int) -> None:
        """Record that the leaf at offset changed from old_digest to new_digest."""
        if old_digest == new_digest:
            return
        self.remove(old_digest, offset)
        self.add(new_digest, offset)

    def lowest(self, digest: bytes) -> Optional[int]:
        """
        Get the lowest offset holding digest.

        Args:
            digest: Leaf digest to look up

        Returns:
            Lowest matching offset, or None if no leaf holds digest
        """
        offsets = self._offsets.get(digest)
        if not offsets:
            return None

        heap = self._heaps[digest]
        while heap[0] not in offsets:
            heapq.heappop(heap)
        return heap[0]

    def offsets(self, digest: bytes) -> Set[int]:
        """Get a copy of every offset holding digest."""
        return set(self._offsets.get(digest, ()))

    def copy(self) -> "LeafIndex":
        clone = LeafIndex()
        clone._offsets = {digest: set(offsets) for digest, offsets in self._offsets.items()}
        clone._heaps = {digest: list(heap) for digest, heap in self._heaps.items()}
        return clone

    def __contains__(self, digest: object) -> bool:
        return digest in self._offsets

    def __len__(self) -> int:
        """Number of distinct digests held by leaves."""
        return len(self._offsets)
