"""
Rolling-window primitives for O(1) hot-loop operations.

- RingBuffer: fixed-capacity circular arena (preallocated numpy array,
  head index and count). Never grows past its capacity; the oldest value
  is evicted exactly when a push would exceed it.
- MonotonicWindow: O(1) amortized sliding window min or max.

Performance Contract:
- RingBuffer.push(): O(1)
- RingBuffer.__getitem__(): O(1)
- MonotonicWindow.push(): O(1) amortized
- MonotonicWindow.get(): O(1)
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from typing import Any, Literal

import numpy as np


class RingBuffer:
    """
    Fixed-size circular buffer for O(1) push and index access.

    Elements are accessed by index where 0 is the oldest element
    and len-1 is the most recently pushed element.

    Example:
        >>> buf = RingBuffer(size=3)
        >>> buf.push(1.0)
        >>> buf.push(2.0)
        >>> buf.push(3.0)
        >>> buf.push(4.0)  # overwrites 1.0 and returns it
        1.0
        >>> buf[0], buf[2]
        (2.0, 4.0)
    """

    __slots__ = ("size", "_buffer", "_head", "_count")

    def __init__(self, size: int) -> None:
        """
        Initialize ring buffer with fixed size.

        Args:
            size: Maximum number of elements (must be >= 1).

        Raises:
            ValueError: If size < 1.
        """
        if size < 1:
            raise ValueError(
                f"size must be >= 1, got {size}\n"
                f"\n"
                f"Fix: RingBuffer(size=5)"
            )
        self.size = size
        self._buffer = np.full(size, np.nan, dtype=np.float64)
        self._head = 0  # Next write position
        self._count = 0  # Number of elements stored

    def push(self, value: float) -> float | None:
        """
        Add a value to the buffer, overwriting the oldest if full.

        Returns:
            The evicted value, or None while the buffer is still filling.
        """
        evicted = None
        if self._count == self.size:
            evicted = float(self._buffer[self._head])
        else:
            self._count += 1
        self._buffer[self._head] = value
        self._head = (self._head + 1) % self.size
        return evicted

    def __getitem__(self, idx: int) -> float:
        """
        Get element by logical index (0 = oldest, count-1 = newest).

        Negative indices count from the newest element.

        Raises:
            IndexError: If idx is out of range.
        """
        if idx < 0:
            idx += self._count
        if idx < 0 or idx >= self._count:
            raise IndexError(
                f"Index {idx} out of range [0, {self._count})\n"
                f"\n"
                f"Buffer has {self._count} elements."
            )
        # Physical index: oldest element is at (_head - _count) mod size
        physical = (self._head - self._count + idx) % self.size
        return float(self._buffer[physical])

    def __iter__(self) -> Iterator[float]:
        for i in range(self._count):
            yield self[i]

    @property
    def oldest(self) -> float:
        return self[0]

    @property
    def newest(self) -> float:
        return self[-1]

    def is_full(self) -> bool:
        """True if buffer contains exactly 'size' elements."""
        return self._count == self.size

    def __len__(self) -> int:
        """Return the number of elements currently in the buffer."""
        return self._count

    def clear(self) -> None:
        """Clear all elements from the buffer."""
        self._buffer.fill(np.nan)
        self._head = 0
        self._count = 0

    def to_array(self) -> np.ndarray:
        """Copy of the contents in logical order (oldest first)."""
        if self._count == 0:
            return np.array([], dtype=np.float64)
        start = (self._head - self._count) % self.size
        return np.roll(self._buffer, -start)[: self._count].copy()

    def state_dict(self) -> dict[str, Any]:
        return {"size": self.size, "values": [float(v) for v in self]}

    def load_state_dict(self, state: dict[str, Any]) -> None:
        values = state["values"]
        if state["size"] != self.size or len(values) > self.size:
            raise ValueError(
                f"RingBuffer state for size {state['size']} with {len(values)} "
                f"values cannot be loaded into a buffer of size {self.size}"
            )
        self.clear()
        for value in values:
            self.push(value)


class MonotonicWindow:
    """
    O(1) amortized sliding window min or max.

    Maintains a monotonic invariant so the front element is always
    the min (or max) within the last ``window_size`` pushes:
    - MIN mode: deque values increase (front = smallest)
    - MAX mode: deque values decrease (front = largest)

    Each element is pushed at most once and popped at most once. The deque
    never holds more than ``window_size`` entries.

    Example:
        >>> w = MonotonicWindow(window_size=3, mode="min")
        >>> for v in (5.0, 3.0, 4.0, 6.0):
        ...     w.push(v)
        >>> w.get()  # window [3, 4, 6]
        3.0
        >>> w.push(7.0)  # window [4, 6, 7]
        >>> w.get()
        4.0
    """

    __slots__ = ("window_size", "mode", "_deque", "_index")

    def __init__(self, window_size: int, mode: Literal["min", "max"]) -> None:
        if window_size < 1:
            raise ValueError(
                f"window_size must be >= 1, got {window_size}\n"
                f"\n"
                f"Fix: MonotonicWindow(window_size=20, mode='min')"
            )
        if mode not in ("min", "max"):
            raise ValueError(
                f"mode must be 'min' or 'max', got '{mode}'\n"
                f"\n"
                f"Fix: MonotonicWindow(window_size=20, mode='min')"
            )
        self.window_size = window_size
        self.mode = mode
        self._deque: deque[tuple[int, float]] = deque()
        self._index = 0

    def push(self, value: float) -> None:
        """Add the next value; entries older than the window are evicted."""
        idx = self._index
        self._index += 1

        # Evict entries outside window (by index)
        while self._deque and self._deque[0][0] <= idx - self.window_size:
            self._deque.popleft()

        if self.mode == "min":
            while self._deque and self._deque[-1][1] >= value:
                self._deque.pop()
        else:
            while self._deque and self._deque[-1][1] <= value:
                self._deque.pop()

        self._deque.append((idx, value))

    def get(self) -> float:
        """
        Current min or max of the window.

        Raises:
            ValueError: If nothing has been pushed yet.
        """
        if not self._deque:
            raise ValueError(
                f"MonotonicWindow is empty (mode={self.mode}, "
                f"window_size={self.window_size}). "
                f"Ensure at least one value has been pushed."
            )
        return self._deque[0][1]

    def bars_since(self) -> int:
        """Pushes since the current extreme was seen (0 = latest push)."""
        if not self._deque:
            return 0
        return self._index - 1 - self._deque[0][0]

    def __len__(self) -> int:
        return len(self._deque)

    def clear(self) -> None:
        self._deque.clear()
        self._index = 0

    def state_dict(self) -> dict[str, Any]:
        return {
            "window_size": self.window_size,
            "mode": self.mode,
            "index": self._index,
            "entries": [[idx, value] for idx, value in self._deque],
        }

    def load_state_dict(self, state: dict[str, Any]) -> None:
        if state["window_size"] != self.window_size or state["mode"] != self.mode:
            raise ValueError(
                f"MonotonicWindow state ({state['mode']}, {state['window_size']}) "
                f"does not match ({self.mode}, {self.window_size})"
            )
        self._index = int(state["index"])
        self._deque = deque((int(idx), float(value)) for idx, value in state["entries"])
