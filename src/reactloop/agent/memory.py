"""Append-only step trace for a single run."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MemoryEntry:
    """One acted step: the thought, the action taken, and what came back.

    Exactly one of ``observation`` (the action returned) or ``error`` (it
    raised) is set.
    """

    step: int
    thought: str
    action: str
    action_input: str
    observation: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.step < 1:
            raise ValueError(f"step must be >= 1, got {self.step}")
        if (self.observation is None) == (self.error is None):
            raise ValueError("exactly one of observation or error must be set")

    @classmethod
    def success(
        cls, step: int, thought: str, action: str, action_input: str, observation: str
    ) -> MemoryEntry:
        return cls(step, thought, action, action_input, observation=observation)

    @classmethod
    def failure(
        cls, step: int, thought: str, action: str, action_input: str, error: str
    ) -> MemoryEntry:
        return cls(step, thought, action, action_input, error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "step": self.step,
            "thought": self.thought,
            "action": self.action,
            "actionInput": self.action_input,
        }
        if self.error is not None:
            d["error"] = self.error
        else:
            d["observation"] = self.observation
        return d


class MemoryLog:
    """Ordered, append-only sequence of MemoryEntry.

    Steps must be strictly increasing. There is no way to edit or remove
    an entry once appended; ``entries()`` hands out an immutable snapshot.
    """

    def __init__(self) -> None:
        self._entries: list[MemoryEntry] = []

    def append(self, entry: MemoryEntry) -> None:
        if self._entries and entry.step <= self._entries[-1].step:
            raise ValueError(
                f"step {entry.step} does not follow step {self._entries[-1].step}"
            )
        self._entries.append(entry)

    def first(self) -> MemoryEntry | None:
        return self._entries[0] if self._entries else None

    def last(self) -> MemoryEntry | None:
        return self._entries[-1] if self._entries else None

    def entries(self) -> tuple[MemoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MemoryEntry]:
        return iter(tuple(self._entries))

    def __getitem__(self, index: int) -> MemoryEntry:
        return self._entries[index]
