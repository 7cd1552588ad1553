from typing import Union, Sequence
import numpy as np
import logging

from holotools.utils import grid

log = logging.getLogger(__name__)

array_like = Union[np.ndarray, Sequence, int]


def linear(shape: array_like, spacing: Union[float, Sequence[float]] = 10.0) -> np.ndarray:
    """
    A linear phase gradient (blazed grating) in units of waves.

    :param shape: The shape of the pattern (rows, columns).
    :param spacing: The grating period in pixels, a scalar for a horizontal gradient or the (x, y) periods.
        Use np.inf to have no gradient along an axis.
    :return: A 2D array with xx / spacing_x + yy / spacing_y.
    """
    spacing = np.atleast_1d(np.asarray(spacing, dtype=float)).ravel()
    if spacing.size < 2:
        spacing = np.array([spacing[0], np.inf])
    xx, yy, _ = grid(shape)
    return xx / spacing[0] + yy / spacing[1]
