from typing import Union, Sequence
import numpy as np
import logging

from holotools.errors import ConfigError
from holotools.utils import canvas_shape

log = logging.getLogger(__name__)

array_like = Union[np.ndarray, Sequence, int]


def checkerboard(shape: array_like, spacing: int = 1, values: Sequence = (0, 1)) -> np.ndarray:
    """
    Generates a checkerboard pattern with square cells.

    The top-left cell has the first value, its horizontal and vertical neighbors the second.

    :param shape: The shape of the pattern (rows, columns).
    :param spacing: The width of each cell in pixels. Default: 1.
    :param values: The two values of the cells. Default: (0, 1).
    :return: A 2D array of the given shape.
    """
    if spacing < 1:
        raise ConfigError(f'The checkerboard spacing must be a positive integer, not {spacing}.')
    if len(values) != 2:
        raise ConfigError(f'A checkerboard needs exactly two values, not {len(values)}.')
    rows, cols = canvas_shape(shape)
    odd_cells = np.mod(np.arange(rows)[:, np.newaxis] // spacing + np.arange(cols)[np.newaxis, :] // spacing, 2) > 0
    return np.where(odd_cells, values[1], values[0])
