"""Sliding frame window and tensor shaping for classifier input."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence

import numpy as np

from .errors import InvalidArgumentError, ensure


def flatten_frames(frames: Iterable[np.ndarray]) -> np.ndarray:
    """Concatenate frames in order into one contiguous float32 array."""
    frames = list(frames)
    if not frames:
        return np.zeros(0, dtype=np.float32)
    return np.concatenate(frames).astype(np.float32, copy=False)


def to_input_tensor(data: np.ndarray, shape: Sequence[int]) -> np.ndarray:
    """Place ``data`` right-aligned into a zero tensor of ``shape``.

    Shorter data is zero padded on the left, so the most recent frames always
    sit at the end of the tensor.

    Args:
        data: Flat array of values.
        shape: Target tensor shape.

    Returns:
        New float32 array with the requested shape.

    Raises:
        InvalidArgumentError: If data holds more values than the shape allows.
    """
    size = int(np.prod(shape))
    data = np.asarray(data, dtype=np.float32).reshape(-1)
    if data.size > size:
        raise InvalidArgumentError(
            f"Cannot fit {data.size} values into tensor of shape {tuple(shape)}"
        )
    vals = np.zeros(size, dtype=np.float32)
    vals[size - data.size :] = data
    return vals.reshape(tuple(shape))


class FrameQueue:
    """Bounded FIFO of equal-width frames.

    Pushing onto a full queue evicts the oldest frame.
    """

    def __init__(self, capacity: int, width: int) -> None:
        ensure(capacity > 0, f"Expected capacity to be positive, but got {capacity}")
        ensure(width > 0, f"Expected frame width to be positive, but got {width}")
        self.capacity = capacity
        self.width = width
        self._frames: deque[np.ndarray] = deque()

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self):
        return iter(self._frames)

    @property
    def is_full(self) -> bool:
        return len(self._frames) == self.capacity

    def push(self, frame: np.ndarray) -> None:
        """Append a copy of ``frame``, evicting the oldest frame when over capacity."""
        frame = np.array(frame, dtype=np.float32).reshape(-1)
        if frame.shape[0] != self.width:
            raise InvalidArgumentError(
                f"Expected frame of width {self.width}, but got {frame.shape[0]}"
            )
        frame.flags.writeable = False
        self._frames.append(frame)
        if len(self._frames) > self.capacity:
            self._frames.popleft()

    def flatten(self) -> np.ndarray:
        """Return all frames concatenated in push order (``len * width`` values)."""
        return flatten_frames(self._frames)

    def clear(self) -> None:
        self._frames.clear()
