"""Tests for colour histogram descriptors."""

import numpy as np
import pytest

from image_retrieval.errors import InvalidArgument, InvalidInput
from image_retrieval.histograms import (
    extract_center_patch, chroma_2d, chroma_3d, multi_part_rgb,
)
from image_retrieval.scoring import compute_ssd


class TestExtractCenterPatch:
    """Tests for the 7x7 baseline descriptor."""

    def test_output_shape(self, red_square_image):
        vec = extract_center_patch(red_square_image)
        assert vec.shape == (147,)

    def test_output_dtype(self, red_square_image):
        vec = extract_center_patch(red_square_image)
        assert vec.dtype == np.float32

    def test_raw_unnormalized_values(self, red_square_image):
        vec = extract_center_patch(red_square_image)
        # Centre sits inside the red square: every pixel is (30, 30, 200)
        assert list(vec[:3]) == [30.0, 30.0, 200.0]
        assert vec.max() == 200.0

    def test_block_position_and_order(self):
        img = np.zeros((10, 12, 3), dtype=np.uint8)
        img[..., 0] = np.arange(12)[None, :]          # B = column
        img[..., 1] = np.arange(10)[:, None]          # G = row
        vec = extract_center_patch(img).reshape(7, 7, 3)
        # Centre (6, 5) -> columns [3, 10), rows [2, 9)
        assert vec[0, 0, 0] == 3 and vec[0, -1, 0] == 9
        assert vec[0, 0, 1] == 2 and vec[-1, 0, 1] == 8

    def test_all_black_images_zero_ssd(self):
        a = np.zeros((10, 10, 3), dtype=np.uint8)
        b = np.zeros((10, 10, 3), dtype=np.uint8)
        assert compute_ssd(extract_center_patch(a), extract_center_patch(b)) == 0.0

    def test_exactly_7x7_accepted(self):
        img = np.ones((7, 7, 3), dtype=np.uint8)
        assert extract_center_patch(img).shape == (147,)

    @pytest.mark.parametrize("shape", [(6, 20, 3), (20, 6, 3)])
    def test_too_small_raises(self, shape):
        with pytest.raises(InvalidInput, match="too small"):
            extract_center_patch(np.zeros(shape, dtype=np.uint8))

    def test_empty_raises(self):
        with pytest.raises(InvalidInput, match="empty"):
            extract_center_patch(np.zeros((0, 0, 3), dtype=np.uint8))


class TestChroma2D:
    """Tests for the rg-chromaticity histogram."""

    @pytest.mark.parametrize("bins", [1, 2, 8, 16])
    def test_normalized(self, noise_image, bins):
        hist = chroma_2d(noise_image, bins)
        assert hist.shape == (bins * bins,)
        assert abs(hist.sum() - 1.0) < 1e-5
        assert np.all((hist >= 0) & (hist <= 1))

    def test_gray_pixels_land_in_one_third_bin(self, uniform_image):
        hist = chroma_2d(uniform_image, 16)
        # r = g = 1/3 -> bin 5 on both axes
        assert hist[5 * 16 + 5] == pytest.approx(1.0)

    def test_pure_red_clamped_to_last_bin(self):
        img = np.zeros((4, 4, 3), dtype=np.uint8)
        img[..., 2] = 255
        hist = chroma_2d(img, 16)
        assert hist[15 * 16 + 0] == pytest.approx(1.0)

    def test_black_pixels_skipped(self):
        img = np.zeros((4, 4, 3), dtype=np.uint8)
        img[0, 0] = [0, 255, 0]
        hist = chroma_2d(img, 4)
        # The single green pixel is the whole distribution
        assert hist[0 * 4 + 3] == pytest.approx(1.0)

    def test_all_black_gives_zero_vector(self):
        hist = chroma_2d(np.zeros((5, 5, 3), dtype=np.uint8), 8)
        assert hist.shape == (64,)
        assert np.all(hist == 0)

    def test_brightness_invariant(self, red_square_image):
        darker = (red_square_image // 2).astype(np.uint8)
        h1 = chroma_2d(red_square_image, 8)
        h2 = chroma_2d(darker, 8)
        assert np.abs(h1 - h2).sum() < 0.1

    def test_invalid_bins(self, red_square_image):
        with pytest.raises(InvalidArgument):
            chroma_2d(red_square_image, 0)


class TestChroma3D:
    """Tests for the RGB 3D histogram."""

    @pytest.mark.parametrize("bins", [1, 3, 8])
    def test_normalized(self, noise_image, bins):
        hist = chroma_3d(noise_image, bins)
        assert hist.shape == (bins ** 3,)
        assert abs(hist.sum() - 1.0) < 1e-5
        assert np.all((hist >= 0) & (hist <= 1))

    def test_r_most_significant_index(self, red_square_image):
        hist = chroma_3d(red_square_image, 8)
        red_bin = 6 * 64 + 0 * 8 + 0       # R=200, G=30, B=30
        white_bin = 7 * 64 + 7 * 8 + 7
        assert hist[red_bin] == pytest.approx(0.36)
        assert hist[white_bin] == pytest.approx(0.64)

    def test_channel_order_is_bgr(self):
        img = np.zeros((2, 2, 3), dtype=np.uint8)
        img[..., 0] = 255   # blue only
        hist = chroma_3d(img, 2)
        assert hist[1] == pytest.approx(1.0)   # B is least significant

    def test_non_power_of_two_bin_edges(self, bin_boundary_image):
        hist = chroma_3d(bin_boundary_image, 3)
        # 85 -> bin 0, 86 and 170 -> bin 1, 171 and 255 -> bin 2
        assert hist[0] == pytest.approx(1 / 6)
        assert hist[(1 * 3 + 1) * 3 + 1] == pytest.approx(2 / 6)
        assert hist[(2 * 3 + 2) * 3 + 2] == pytest.approx(1 / 6)
        assert hist[2 * 9] == pytest.approx(1 / 6)     # pure red
        assert hist[2] == pytest.approx(1 / 6)         # pure blue

    def test_does_not_mutate_input(self, noise_image):
        before = noise_image.copy()
        chroma_3d(noise_image, 8)
        assert np.array_equal(before, noise_image)


class TestMultiPartRGB:
    """Tests for the top/bottom multi-part histogram."""

    def test_length(self, split_image):
        assert multi_part_rgb(split_image, 4).shape == (2 * 4 ** 3,)

    def test_is_concatenation_of_halves(self, noise_image):
        bins = 4
        vec = multi_part_rgb(noise_image, bins)
        top = chroma_3d(noise_image[:100], bins)
        bottom = chroma_3d(noise_image[100:], bins)
        assert np.array_equal(vec, np.concatenate([top, bottom]))

    def test_odd_rows_bottom_gets_extra(self):
        img = np.zeros((5, 4, 3), dtype=np.uint8)
        img[2:] = 255
        vec = multi_part_rgb(img, 2)
        # Top = rows 0-1 (black), bottom = rows 2-4 (white)
        assert vec[0] == pytest.approx(1.0)
        assert vec[8 + 7] == pytest.approx(1.0)

    def test_odd_rows_with_three_bins(self, bin_boundary_image):
        vec = multi_part_rgb(bin_boundary_image, 3)
        top, bottom = vec[:27], vec[27:]
        # Top is row 0 alone, bottom holds rows 1-2
        assert top[0] == pytest.approx(0.5)
        assert top[13] == pytest.approx(0.5)
        assert bottom[13] == pytest.approx(0.25)
        assert bottom[0] == 0

    def test_halves_each_sum_to_one(self, split_image):
        vec = multi_part_rgb(split_image, 8)
        assert vec[:512].sum() == pytest.approx(1.0, abs=1e-5)
        assert vec[512:].sum() == pytest.approx(1.0, abs=1e-5)

    def test_single_row_raises(self):
        with pytest.raises(InvalidInput):
            multi_part_rgb(np.zeros((1, 10, 3), dtype=np.uint8), 4)
