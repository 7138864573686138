"""
Fetch round state for paginated model queries.

Tracks, per model, how many records have been retrieved so far (the
offset used for the next round) and whether the model has run dry.
State lives only for one page build and is never persisted.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List


@dataclass
class ModelCursor:
    """Pagination progress for a single model."""
    offset: int = 0
    exhausted: bool = False
    rounds: int = 0

    def advance(self, count: int, limit: int) -> bool:
        """
        Record a batch of ``count`` records fetched with page size ``limit``.

        Returns:
            True if the batch was full, i.e. more data may be pending
        """
        if count < 0:
            raise ValueError(f"Record count cannot be negative: {count}")

        self.offset += count
        self.rounds += 1

        if count == limit:
            return True
        # Never resets once set
        self.exhausted = True
        return False


@dataclass
class FetchRoundState:
    """Offsets and exhaustion flags for every configured model."""
    cursors: Dict[str, ModelCursor] = field(default_factory=dict)
    rounds: int = 0

    @classmethod
    def for_models(cls, models: Iterable[str]) -> "FetchRoundState":
        return cls(cursors={model: ModelCursor() for model in models})

    @property
    def models(self) -> List[str]:
        return list(self.cursors)

    def offset(self, model: str) -> int:
        return self.cursors[model].offset

    def offsets(self) -> Dict[str, int]:
        """Read-only snapshot of the current offsets."""
        return {model: cursor.offset for model, cursor in self.cursors.items()}

    def is_exhausted(self, model: str) -> bool:
        return self.cursors[model].exhausted

    @property
    def all_exhausted(self) -> bool:
        return all(cursor.exhausted for cursor in self.cursors.values())
