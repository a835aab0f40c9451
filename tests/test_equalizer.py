"""
Tests for cumulative high-shelf EQ.
"""

import numpy as np
import pytest

from spectrum_analyzer import EqShelf, ShelfEqualizer, apply_shelves

# 100 Hz per bin: bin i sits at i * 100 Hz
SAMPLE_RATE = 8000
FFT_SIZE = 80
SHELVES = (EqShelf(400.0, 2.0), EqShelf(1000.0, 2.0))


class TestShelfEqualizer:
    def test_shelves_accumulate(self):
        bins = np.zeros(FFT_SIZE // 2)
        ShelfEqualizer(SHELVES, SAMPLE_RATE, FFT_SIZE).apply(bins)

        assert bins[12] == pytest.approx(4.0)  # 1200 Hz, above both
        assert bins[5] == pytest.approx(2.0)  # 500 Hz, above one
        assert bins[3] == pytest.approx(0.0)  # 300 Hz, below both

    def test_threshold_is_inclusive(self):
        bins = np.zeros(FFT_SIZE // 2)
        ShelfEqualizer(SHELVES, SAMPLE_RATE, FFT_SIZE).apply(bins)
        assert bins[4] == pytest.approx(2.0)  # exactly 400 Hz
        assert bins[10] == pytest.approx(4.0)  # exactly 1000 Hz

    def test_gain_added_to_existing_values(self):
        bins = np.full(FFT_SIZE // 2, -50.0)
        ShelfEqualizer(SHELVES, SAMPLE_RATE, FFT_SIZE).apply(bins)
        assert bins[0] == pytest.approx(-50.0)
        assert bins[-1] == pytest.approx(-46.0)

    def test_order_does_not_matter(self):
        forward = np.zeros(FFT_SIZE // 2)
        backward = np.zeros(FFT_SIZE // 2)
        ShelfEqualizer(SHELVES, SAMPLE_RATE, FFT_SIZE).apply(forward)
        ShelfEqualizer(SHELVES[::-1], SAMPLE_RATE, FFT_SIZE).apply(backward)
        np.testing.assert_array_equal(forward, backward)

    def test_empty_shelf_list_is_noop(self):
        bins = np.linspace(-80, 0, FFT_SIZE // 2)
        expected = bins.copy()
        ShelfEqualizer((), SAMPLE_RATE, FFT_SIZE).apply(bins)
        np.testing.assert_array_equal(bins, expected)

    def test_applied_every_call(self):
        eq = ShelfEqualizer(SHELVES, SAMPLE_RATE, FFT_SIZE)
        for _ in range(3):
            bins = np.zeros(FFT_SIZE // 2)
            eq.apply(bins)
            assert bins[12] == pytest.approx(4.0)

    def test_negative_gain(self):
        bins = np.zeros(FFT_SIZE // 2)
        apply_shelves(bins, [EqShelf(2000.0, -3.0)], SAMPLE_RATE, FFT_SIZE)
        assert bins[19] == 0.0
        assert bins[20] == pytest.approx(-3.0)

    def test_gain_curve(self):
        eq = ShelfEqualizer(SHELVES, SAMPLE_RATE, FFT_SIZE)
        curve = eq.gain_curve(FFT_SIZE // 2)
        assert set(np.unique(curve)) == {0.0, 2.0, 4.0}

    def test_updates_caller_array(self):
        bins = np.zeros(4)
        apply_shelves(bins, [EqShelf(1000.0, 2.0)], 8000, 8)
        np.testing.assert_array_equal(bins, [0.0, 2.0, 2.0, 2.0])

    def test_list_rejected(self):
        bins = [0.0] * 4
        with pytest.raises(TypeError):
            apply_shelves(bins, [EqShelf(1000.0, 2.0)], 8000, 8)
        assert bins == [0.0, 0.0, 0.0, 0.0]

    def test_list_rejected_without_shelves(self):
        with pytest.raises(TypeError):
            ShelfEqualizer((), SAMPLE_RATE, FFT_SIZE).apply([0.0] * 4)
