"""
Tests for frame rate conversion.
"""

import numpy as np
import pytest

from termreel.errors import ConfigurationError
from termreel.streams import FrameSource, RateConverter, SequenceDecoder


def make_source(count: int) -> FrameSource:
    frames = [np.zeros((2, 2, 3), dtype=np.uint8) for _ in range(count)]
    return FrameSource.streamed(SequenceDecoder(frames))


def delivered_indices(converter: RateConverter) -> list[int]:
    indices = []
    while (frame := converter.next_frame()) is not None:
        indices.append(frame.index)
    return indices


class TestRateConverter:
    """Tests for RateConverter class."""

    def test_half_rate(self):
        """30 -> 15 fps delivers every other frame without drift."""
        converter = RateConverter(make_source(60), 30, 15)
        assert converter.error_per_frame == 1.0

        indices = delivered_indices(converter)
        assert indices == list(range(1, 60, 2))
        assert converter.dropped == 30
        assert converter.error == 0.0

    def test_two_thirds_rate(self):
        """30 -> 20 fps drops one frame in three, spread evenly."""
        converter = RateConverter(make_source(12), 30, 20)
        assert delivered_indices(converter) == [0, 2, 3, 5, 6, 8, 9, 11]

    def test_long_run_rate(self):
        """Output count converges to the target ratio."""
        converter = RateConverter(make_source(2997), 29.97, 24)
        delivered = len(delivered_indices(converter))
        assert abs(delivered - 2997 * 24 / 29.97) <= 1

    def test_target_above_source_clamps(self):
        """A target above the source rate delivers every frame."""
        converter = RateConverter(make_source(10), 24, 60)
        assert converter.fps == 24.0
        assert converter.error_per_frame == 0.0
        assert delivered_indices(converter) == list(range(10))
        assert converter.dropped == 0

    def test_zero_target_is_unlimited(self):
        converter = RateConverter(make_source(5), 25, 0)
        assert converter.fps == 25.0
        assert delivered_indices(converter) == list(range(5))

    def test_exhaustion_is_terminal(self):
        converter = RateConverter(make_source(3), 30, 10)
        assert delivered_indices(converter) == [2]
        assert converter.next_frame() is None

    def test_invalid_rates(self):
        with pytest.raises(ConfigurationError):
            RateConverter(make_source(1), 0, 10)
        with pytest.raises(ConfigurationError):
            RateConverter(make_source(1), 30, -1)
