"""Tests for the distance and similarity metrics."""

import math

import numpy as np
import pytest

from image_retrieval.errors import DimensionMismatch, InvalidArgument
from image_retrieval.histograms import chroma_3d
from image_retrieval.scoring import (
    compute_ssd, histogram_intersection, split_intersection, cosine_similarity,
    split_metric, Polarity, SSD, INTERSECTION, COSINE,
)


@pytest.fixture
def rng():
    return np.random.RandomState(7)


def _random_hist(rng, n=64):
    h = rng.rand(n).astype(np.float32)
    return h / h.sum()


class TestComputeSSD:
    """Tests for sum of squared differences."""

    def test_identity(self, rng):
        v = rng.rand(147).astype(np.float32)
        assert compute_ssd(v, v) == 0.0

    def test_symmetric(self, rng):
        a, b = rng.rand(50), rng.rand(50)
        assert compute_ssd(a, b) == compute_ssd(b, a)

    def test_known_value(self):
        assert compute_ssd([1, 2, 3], [1, 0, 7]) == pytest.approx(20.0)

    def test_length_mismatch(self):
        with pytest.raises(DimensionMismatch, match="same size"):
            compute_ssd(np.zeros(147), np.zeros(150))


class TestHistogramIntersection:
    """Tests for histogram intersection."""

    def test_identity_is_one(self, rng):
        h = _random_hist(rng)
        assert histogram_intersection(h, h) == pytest.approx(1.0, abs=1e-5)

    def test_bounded_and_symmetric(self, rng):
        a, b = _random_hist(rng), _random_hist(rng)
        value = histogram_intersection(a, b)
        assert 0 <= value <= 1
        assert value == histogram_intersection(b, a)

    def test_disjoint_is_zero(self):
        assert histogram_intersection([1, 0], [0, 1]) == 0.0

    def test_real_histograms(self, red_square_image, blue_circle_image):
        a = chroma_3d(red_square_image, 8)
        b = chroma_3d(blue_circle_image, 8)
        assert 0 < histogram_intersection(a, b) < 1

    def test_length_mismatch(self):
        with pytest.raises(DimensionMismatch):
            histogram_intersection(np.zeros(147), np.zeros(150))


class TestSplitIntersection:
    """Tests for the two-part intersection."""

    def test_average_of_parts(self):
        a = np.array([0.5, 0.5, 1.0, 0.0])
        b = np.array([0.5, 0.5, 0.0, 1.0])
        # First part identical (1.0), second disjoint (0.0)
        assert split_intersection(a, b, 2) == pytest.approx(0.5)

    def test_identity(self, rng):
        v = np.concatenate([_random_hist(rng, 8), _random_hist(rng, 4)])
        assert split_intersection(v, v, 8) == pytest.approx(1.0, abs=1e-5)

    @pytest.mark.parametrize("split", [0, 4, -1, 10])
    def test_split_out_of_range(self, split):
        with pytest.raises(InvalidArgument, match="split_point"):
            split_intersection(np.ones(4), np.ones(4), split)

    def test_length_mismatch(self):
        with pytest.raises(DimensionMismatch):
            split_intersection(np.ones(147), np.ones(150), 10)


class TestCosineSimilarity:
    """Tests for cosine similarity."""

    def test_identity(self, rng):
        v = rng.rand(24)
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_bounded_and_symmetric(self, rng):
        a, b = rng.randn(30), rng.randn(30)
        value = cosine_similarity(a, b)
        assert -1 <= value <= 1
        assert value == pytest.approx(cosine_similarity(b, a))

    def test_opposite(self):
        assert cosine_similarity([1, 2], [-1, -2]) == pytest.approx(-1.0)

    def test_zero_vector_is_nan(self):
        assert math.isnan(cosine_similarity([0, 0, 0], [1, 2, 3]))

    def test_length_mismatch(self):
        with pytest.raises(DimensionMismatch):
            cosine_similarity(np.ones(147), np.ones(150))


class TestMetricObjects:
    """Tests for metric polarity bundling."""

    def test_polarities(self):
        assert SSD.polarity is Polarity.LOWER_IS_BETTER
        assert not SSD.higher_is_better
        assert INTERSECTION.higher_is_better
        assert COSINE.higher_is_better

    def test_callable(self):
        assert SSD([0, 0], [3, 4]) == pytest.approx(25.0)

    def test_split_metric_binds_split(self):
        metric = split_metric(2)
        assert metric.higher_is_better
        assert metric([1, 0, 1, 0], [1, 0, 0, 1]) == pytest.approx(0.5)

    def test_split_metric_rejects_zero(self):
        with pytest.raises(InvalidArgument):
            split_metric(0)
