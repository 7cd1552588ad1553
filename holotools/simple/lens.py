from typing import Union, Sequence
import numpy as np
import logging

from holotools.utils import grid

log = logging.getLogger(__name__)

array_like = Union[np.ndarray, Sequence, int]


def parabolic(shape: array_like, alpha: float = 1.0) -> np.ndarray:
    """
    A parabolic lens, the default lens of the lenses and prisms algorithm: alpha * r^2.

    :param shape: The shape of the pattern (rows, columns).
    :param alpha: The curvature in waves per pixel squared.
    """
    _, _, rr = grid(shape)
    return alpha * rr ** 2


def spherical(shape: array_like, radius: float, background: float = 0.0) -> np.ndarray:
    """
    A spherical lens, the height of a sphere with the given radius.

    :param shape: The shape of the pattern (rows, columns).
    :param radius: The radius of the sphere in pixels. A negative radius gives a diverging lens.
    :param background: The value outside the sphere. Default: 0.
    """
    _, _, rr = grid(shape)
    inside = rr <= abs(radius)
    height = np.sqrt(np.maximum(radius ** 2 - rr ** 2, 0.0)) * np.sign(radius)
    return np.where(inside, height, background)
