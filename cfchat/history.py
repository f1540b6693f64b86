"""Flat-file conversation transcript: one pre-serialized JSON message per line."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptStore:
    """Loads and rewrites the transcript file at ``path``.

    Lines are treated as opaque strings. They are never parsed here, so a
    corrupt line from an earlier run is replayed exactly as it was stored.
    """

    path: Path

    def load(self) -> List[str]:
        if not self.path.exists():
            logger.debug("No transcript at %s; starting empty", self.path)
            return []
        with self.path.open("r", encoding="utf-8", errors="replace", newline="") as f:
            lines = f.read().split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        logger.debug("Loaded %d transcript lines from %s", len(lines), self.path)
        return lines

    def save(self, lines: Iterable[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        count = 0
        with self.path.open("w", encoding="utf-8", newline="\n") as f:
            for line in lines:
                f.write(line)
                f.write("\n")
                count += 1
        logger.debug("Wrote %d transcript lines to %s", count, self.path)

    @staticmethod
    def append(lines: Iterable[str], *new_lines: str) -> List[str]:
        return [*lines, *new_lines]


__all__ = ["TranscriptStore"]
