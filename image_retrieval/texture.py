"""
Texture descriptors.

Four families of texture signal, each returning a float32 vector:
    - Gradient magnitude histogram (Sobel X/Y combined per channel)
    - Gray-level co-occurrence statistics (5 scalars)
    - Laws' filter-bank energies (25 scalars)
    - Gabor filter-bank mean/std (24 scalars)

Colour histograms cannot tell a striped shirt from a plain one of the same
colours; these descriptors can. Input images are BGR uint8.
"""

import cv2
import numpy as np
import logging

from .errors import DimensionMismatch, InvalidArgument, InvalidInput
from .preprocessing import validate_image, to_grayscale

logger = logging.getLogger(__name__)

# GLCM neighbour offsets as (dx, dy) per unit distance, keyed by angle in degrees
GLCM_OFFSETS = {
    0: (1, 0),
    45: (1, -1),
    90: (0, -1),
    135: (-1, -1),
}
GLCM_FEATURES = ("energy", "entropy", "contrast", "homogeneity", "max_probability")

# Laws' 1D kernels: Level, Edge, Spot, Wave, Ripple
LAWS_KERNELS = (
    ("L5", np.array([1, 4, 6, 4, 1], dtype=np.float32)),
    ("E5", np.array([-1, -2, 0, 2, 1], dtype=np.float32)),
    ("S5", np.array([-1, 0, 2, 0, -1], dtype=np.float32)),
    ("W5", np.array([-1, 2, 0, -2, 1], dtype=np.float32)),
    ("R5", np.array([1, -4, 6, -4, 1], dtype=np.float32)),
)
LAWS_DIM = len(LAWS_KERNELS) ** 2

# Gabor bank: 3 wavelengths x 4 orientations, (mean, std) each = 24 values
GABOR_WAVELENGTHS = (10.0, 20.0, 30.0)
GABOR_ORIENTATIONS = (0.0, np.pi / 4, np.pi / 2, 3 * np.pi / 4)
GABOR_KERNEL_SIZE = 31
GABOR_SIGMA = 2.5
GABOR_GAMMA = 0.5
GABOR_PSI = np.pi / 2
GABOR_DIM = 2 * len(GABOR_WAVELENGTHS) * len(GABOR_ORIENTATIONS)


# --- Gradient ---

def _zero_border(gradient: np.ndarray) -> np.ndarray:
    gradient[0, :] = 0
    gradient[-1, :] = 0
    gradient[:, 0] = 0
    gradient[:, -1] = 0
    return gradient


def sobel_x(image_np: np.ndarray) -> np.ndarray:
    """
    Per-channel 3x3 horizontal Sobel derivative (positive to the right).

    Returns:
        int16 array with the input's shape. The outermost rows and columns
        are 0; the filter never reflects or wraps at the border.
    """
    validate_image(image_np)
    gx = cv2.Sobel(image_np, cv2.CV_16S, 1, 0, ksize=3)
    return _zero_border(gx)


def sobel_y(image_np: np.ndarray) -> np.ndarray:
    """Per-channel 3x3 vertical Sobel derivative (positive downwards)."""
    validate_image(image_np)
    gy = cv2.Sobel(image_np, cv2.CV_16S, 0, 1, ksize=3)
    return _zero_border(gy)


def gradient_magnitude(sx: np.ndarray, sy: np.ndarray) -> np.ndarray:
    """
    Combine two gradient images into sqrt(sx^2 + sy^2), saturated to uint8.

    Raises:
        DimensionMismatch: If sx and sy differ in shape or dtype.
    """
    if sx.shape != sy.shape or sx.dtype != sy.dtype:
        raise DimensionMismatch(
            f"Gradient images differ: {sx.shape}/{sx.dtype} vs {sy.shape}/{sy.dtype}"
        )
    fx = sx.astype(np.float32)
    fy = sy.astype(np.float32)
    magnitude = np.sqrt(fx * fx + fy * fy)
    return np.clip(np.rint(magnitude), 0, 255).astype(np.uint8)


def gradient_histogram(magnitude: np.ndarray, bins: int) -> np.ndarray:
    """
    L1-normalized histogram of a single-channel image over [0, 256).

    Args:
        magnitude: 2D uint8 image, usually a grayscale gradient magnitude.
        bins: Number of equal-width bins.

    Returns:
        Float32 vector of length bins summing to 1.
    """
    if bins < 1:
        raise InvalidArgument(f"bins must be >= 1, got {bins}")
    if magnitude.ndim != 2 or magnitude.size == 0:
        raise InvalidInput(
            f"Expected a non-empty single-channel image, got shape {magnitude.shape}"
        )

    hist, _ = np.histogram(magnitude, bins=bins, range=(0, 256))
    hist = hist.astype(np.float64)
    return (hist / hist.sum()).astype(np.float32)


def gradient_texture(image_np: np.ndarray, bins: int) -> np.ndarray:
    """
    Histogram of the grayscale Sobel gradient magnitude of an image.

    Used on its own as the texture descriptor and as the texture half of
    the colour-texture composite.
    """
    magnitude = gradient_magnitude(sobel_x(image_np), sobel_y(image_np))
    gray_magnitude = cv2.cvtColor(magnitude, cv2.COLOR_BGR2GRAY)
    return gradient_histogram(gray_magnitude, bins)


# --- Co-occurrence ---

def glcm(image_np: np.ndarray,
         distance: int = 1,
         angle: int = 0,
         levels: int = 8) -> np.ndarray:
    """
    Extract five gray-level co-occurrence statistics.

    Process:
        1. Convert to grayscale and rescale to `levels` values (g * levels // 256)
        2. Count (pixel, neighbour) level pairs, the neighbour sitting at
           (x + dx, y + dy) for the offset implied by angle and distance
        3. L1-normalize the levels x levels matrix into probabilities p
        4. Summarize p

    Args:
        image_np: BGR uint8 image.
        distance: Neighbour distance in pixels (>= 1).
        angle: One of 0, 45, 90, 135 degrees.
        levels: Number of gray levels.

    Returns:
        Float32 vector [energy, entropy, contrast, homogeneity, max_probability].

    Raises:
        InvalidArgument: For an unsupported angle, distance < 1 or levels < 1.
        InvalidInput: If the image is too small for the offset.
    """
    if angle not in GLCM_OFFSETS:
        raise InvalidArgument(f"Unsupported GLCM angle {angle}, expected one of {sorted(GLCM_OFFSETS)}")
    if distance < 1:
        raise InvalidArgument(f"GLCM distance must be >= 1, got {distance}")
    if levels < 1:
        raise InvalidArgument(f"GLCM levels must be >= 1, got {levels}")

    gray = to_grayscale(image_np)
    quantized = gray.astype(np.int64) * levels // 256

    ux, uy = GLCM_OFFSETS[angle]
    dx, dy = ux * distance, uy * distance
    h, w = quantized.shape

    # Source pixels whose neighbour stays inside the image
    r0, r1 = max(0, -dy), min(h, h - dy)
    c0, c1 = max(0, -dx), min(w, w - dx)
    if r1 <= r0 or c1 <= c0:
        raise InvalidInput(
            f"Image {h}x{w} has no pixel pairs at distance {distance}, angle {angle}"
        )

    source = quantized[r0:r1, c0:c1]
    neighbour = quantized[r0 + dy:r1 + dy, c0 + dx:c1 + dx]

    counts = np.bincount((source * levels + neighbour).ravel(), minlength=levels * levels)
    p = counts.reshape(levels, levels).astype(np.float64)
    p /= p.sum()

    i, j = np.indices((levels, levels))
    diff = i - j

    energy = np.sum(p * p)
    nonzero = p[p > 0]
    # + 0.0 turns -0.0 into 0.0 for single-cell matrices
    entropy = -np.sum(nonzero * np.log2(nonzero)) + 0.0
    contrast = np.sum(p * diff * diff)
    homogeneity = np.sum(p / (1.0 + np.abs(diff)))
    max_probability = p.max()

    return np.array(
        [energy, entropy, contrast, homogeneity, max_probability],
        dtype=np.float32,
    )


# --- Filter banks ---

def laws_texture(image_np: np.ndarray) -> np.ndarray:
    """
    Extract 25 Laws' texture energies.

    For every ordered kernel pair (a, b), outer loop a and inner loop b over
    L5, E5, S5, W5, R5, the 5x5 filter outer(a, b) (a vertical, b horizontal)
    is applied to the grayscale image and the squared response is summed.
    Each kernel is symmetric or antisymmetric, so correlation and
    convolution give the same energies.

    Returns:
        Float32 vector of 25 energies in pair order.
    """
    gray = to_grayscale(image_np).astype(np.float32)

    energies = []
    for _, vertical in LAWS_KERNELS:
        for _, horizontal in LAWS_KERNELS:
            kernel = np.outer(vertical, horizontal)
            response = cv2.filter2D(gray, cv2.CV_32F, kernel,
                                    borderType=cv2.BORDER_REFLECT_101)
            energies.append(np.sum(np.square(response, dtype=np.float64)))

    return np.array(energies, dtype=np.float32)


def gabor_kernel(wavelength: float, orientation: float) -> np.ndarray:
    """
    Build one kernel of the fixed Gabor bank.

    cv2.getGaborKernel stores g(x, y) at [ymax - y, xmax - x], so the array
    is already mirrored and cv2.filter2D with it computes the convolution.
    """
    return cv2.getGaborKernel(
        (GABOR_KERNEL_SIZE, GABOR_KERNEL_SIZE),
        GABOR_SIGMA,
        orientation,
        wavelength,
        GABOR_GAMMA,
        GABOR_PSI,
        ktype=cv2.CV_32F,
    )


def gabor_response(gray: np.ndarray, wavelength: float, orientation: float) -> np.ndarray:
    """Convolve a float32 grayscale image with one Gabor kernel."""
    return cv2.filter2D(gray, cv2.CV_32F, gabor_kernel(wavelength, orientation))


def gabor_features(image_np: np.ndarray) -> np.ndarray:
    """
    Extract mean and standard deviation of 12 Gabor filter responses.

    Wavelengths 10, 20, 30 crossed with orientations 0, pi/4, pi/2, 3pi/4;
    wavelength-major, orientation-minor, (mean, std) per response.

    Returns:
        Float32 vector of 24 values.
    """
    gray = to_grayscale(image_np).astype(np.float32)

    features = []
    for wavelength in GABOR_WAVELENGTHS:
        for orientation in GABOR_ORIENTATIONS:
            response = gabor_response(gray, wavelength, orientation)
            features.append(float(np.mean(response)))
            features.append(float(np.std(response)))

    logger.debug(f"Gabor bank produced {len(features)} statistics")
    return np.array(features, dtype=np.float32)
