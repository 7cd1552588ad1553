from typing import Union, Sequence, Optional
import numpy as np
import logging

from holotools.utils import Grid

log = logging.getLogger(__name__)

array_like = Union[np.ndarray, Sequence, int]


def gaussian(shape: array_like, sigma: float, scale: float = 1.0, center: Optional[Sequence[float]] = None,
             aspect: float = 1.0, angle: float = 0.0) -> np.ndarray:
    """
    A Gaussian profile: scale * exp(-r^2 / (2 sigma^2)).

    Useful as incident illumination or as an amplitude target.

    :param shape: The shape of the pattern (rows, columns).
    :param sigma: The width of the Gaussian in pixels.
    :param scale: The peak value.
    :param center: (optional) The center in pixels as (y, x). Default: the center pixel.
    :param aspect: The aspect ratio, the vertical axis is scaled by this value.
    :param angle: The rotation angle of the elliptical profile in radians.
    :return: A 2D array of the given shape.
    """
    g = Grid(shape, center=center)
    yy, xx = g[0], g[1]
    xx, yy = np.cos(angle) * xx - np.sin(angle) * yy, np.sin(angle) * xx + np.cos(angle) * yy
    yy = yy * aspect
    return scale * np.exp(-(xx ** 2 + yy ** 2) / (2 * sigma ** 2))
