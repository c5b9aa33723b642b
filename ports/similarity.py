from __future__ import annotations

from typing import Protocol


class SimilarityPort(Protocol):
    def similarity(self, text_a: str, text_b: str) -> float:
        """Return a score in [0, 1]. May raise; callers map failures to 0."""
        ...
