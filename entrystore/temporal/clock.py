"""
Logical Height Source
=====================

Injectable block-height counter used to compute deadlines.

GUARANTEES:
- Heights are monotonically non-decreasing
- Every height handed out is logged, so a run can be replayed
- In replay mode the recorded heights are returned in order and the
  counter never advances on its own
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List
import json
import threading


class HeightLogExhausted(Exception):
    """Raised when a replay height source runs out of recorded heights."""
    pass


class HeightSource:
    """Collaborator that supplies the current height."""

    def current_height(self) -> int:
        raise NotImplementedError


@dataclass
class LogicalHeight(HeightSource):
    """
    Injectable height counter.

    MODES:
    ======
    1. LIVE mode: returns the in-process counter, moved by advance()
    2. REPLAY mode: returns heights from a recorded log

    In LIVE mode reads are appended to the height log only when the
    source was created with record=True.
    """
    _height: int = 0
    _log: List[int] = field(default_factory=list)
    _index: int = 0
    _is_live: bool = True
    _recording: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def current_height(self) -> int:
        with self._lock:
            if self._is_live:
                if self._recording:
                    self._log.append(self._height)
                self._index += 1
                return self._height

            if self._index >= len(self._log):
                raise HeightLogExhausted(
                    f"Replay height log exhausted at index {self._index}. "
                    f"Original execution had {len(self._log)} reads."
                )
            height = self._log[self._index]
            self._index += 1
            self._height = height
            return height

    def advance(self, blocks: int = 1) -> int:
        """Move the counter forward by `blocks` and return the new height."""
        if blocks < 0:
            raise ValueError("height cannot move backwards")
        with self._lock:
            if not self._is_live:
                raise RuntimeError("cannot advance a replay height source")
            self._height += blocks
            return self._height

    def read_count(self) -> int:
        """Number of heights handed out so far."""
        return self._index

    def is_live(self) -> bool:
        return self._is_live

    @classmethod
    def live(cls, start: int = 0, record: bool = False) -> 'LogicalHeight':
        """
        Create height source in LIVE mode starting at `start`.

        With record=True every height handed out is kept for save_log().
        """
        if start < 0:
            raise ValueError("start height must be non-negative")
        return cls(_height=start, _is_live=True, _recording=record)

    @classmethod
    def from_log(cls, log_path: Path) -> 'LogicalHeight':
        """
        Create height source in REPLAY mode from a recorded log.

        Args:
            log_path: Path to JSON file written by save_log()
        """
        with open(log_path, 'r') as f:
            data = json.load(f)

        heights = [int(h) for h in data['heights']]
        for earlier, later in zip(heights, heights[1:]):
            if later < earlier:
                raise ValueError(
                    f"height log is not monotonic: {earlier} followed by {later}"
                )

        return cls(
            _height=heights[0] if heights else 0,
            _log=heights,
            _index=0,
            _is_live=False
        )

    def save_log(self, log_path: Path) -> None:
        """Save the height log for future replay."""
        if self._is_live and not self._recording:
            raise RuntimeError("height source was created without record=True")
        log_path.parent.mkdir(parents=True, exist_ok=True)

        with self._lock:
            data = {
                'version': '1.0',
                'mode': 'live' if self._is_live else 'replay',
                'read_count': len(self._log),
                'heights': list(self._log)
            }

        with open(log_path, 'w') as f:
            json.dump(data, f, indent=2)

    def __repr__(self) -> str:
        mode = "LIVE" if self._is_live else "REPLAY"
        return f"LogicalHeight({mode}, height={self._height}, reads={self._index})"
