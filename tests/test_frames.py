"""Tests for the frame queue and input tensor shaping."""

from __future__ import annotations

import numpy as np
import pytest

from spectrostream.streaming import (
    FrameQueue,
    InvalidArgumentError,
    flatten_frames,
    to_input_tensor,
)


def _frame(value: float, width: int = 3) -> np.ndarray:
    return np.full(width, value, dtype=np.float32)


@pytest.mark.unit
class TestFrameQueue:
    def test_length_stabilizes_at_capacity(self) -> None:
        q = FrameQueue(capacity=4, width=3)
        lengths = []
        for i in range(10):
            q.push(_frame(i))
            lengths.append(len(q))
        assert lengths == [1, 2, 3, 4, 4, 4, 4, 4, 4, 4]
        assert q.is_full

    def test_evicts_oldest_first(self) -> None:
        q = FrameQueue(capacity=3, width=3)
        for i in range(5):
            q.push(_frame(i))
        assert [float(f[0]) for f in q] == [2.0, 3.0, 4.0]

    def test_flatten_full_queue_in_push_order(self) -> None:
        q = FrameQueue(capacity=3, width=2)
        q.push(np.array([1, 2]))
        q.push(np.array([3, 4]))
        q.push(np.array([5, 6]))
        flat = q.flatten()
        assert flat.shape == (6,)
        assert flat.dtype == np.float32
        np.testing.assert_array_equal(flat, [1, 2, 3, 4, 5, 6])

    def test_flatten_partial_queue(self) -> None:
        q = FrameQueue(capacity=4, width=2)
        q.push(np.array([1, 2]))
        assert q.flatten().shape == (2,)

    def test_push_copies_frame(self) -> None:
        q = FrameQueue(capacity=2, width=2)
        frame = np.array([1.0, 2.0], dtype=np.float32)
        q.push(frame)
        frame[0] = 99.0
        assert next(iter(q))[0] == 1.0

    def test_stored_frames_are_read_only(self) -> None:
        q = FrameQueue(capacity=2, width=2)
        q.push(np.array([1.0, 2.0]))
        with pytest.raises(ValueError):
            next(iter(q))[0] = 5.0

    def test_rejects_mismatched_width(self) -> None:
        q = FrameQueue(capacity=2, width=3)
        with pytest.raises(InvalidArgumentError):
            q.push(np.zeros(4))

    @pytest.mark.parametrize("capacity,width", [(0, 3), (3, 0)])
    def test_rejects_bad_dimensions(self, capacity: int, width: int) -> None:
        with pytest.raises(InvalidArgumentError):
            FrameQueue(capacity, width)

    def test_clear(self) -> None:
        q = FrameQueue(capacity=2, width=1)
        q.push(np.zeros(1))
        q.clear()
        assert len(q) == 0


@pytest.mark.unit
class TestTensorShaping:
    def test_flatten_frames_empty(self) -> None:
        assert flatten_frames([]).shape == (0,)

    def test_full_data_fills_tensor(self) -> None:
        data = np.arange(6, dtype=np.float32)
        t = to_input_tensor(data, (1, 3, 2, 1))
        assert t.shape == (1, 3, 2, 1)
        np.testing.assert_array_equal(t[0, :, :, 0], [[0, 1], [2, 3], [4, 5]])

    def test_short_data_is_right_aligned(self) -> None:
        t = to_input_tensor(np.array([7, 8]), (1, 4))
        np.testing.assert_array_equal(t, [[0, 0, 7, 8]])

    def test_rejects_oversized_data(self) -> None:
        with pytest.raises(InvalidArgumentError):
            to_input_tensor(np.zeros(5), (1, 4))
