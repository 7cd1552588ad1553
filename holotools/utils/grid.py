from __future__ import annotations

import functools
import collections.abc as col
from typing import Union, Sequence, Tuple, Optional
import numpy as np
import logging

from holotools.errors import ShapeError

log = logging.getLogger(__name__)

__all__ = ['Grid', 'canvas_shape', 'grid']

array_like = Union[np.ndarray, Sequence, int]


class Grid(col.Sequence):
    """
    A Cartesian pixel grid with its origin at the center pixel.

    Indexing returns broadcastable ranges: grid[0] is a column vector with the vertical coordinates (y, rows),
    grid[1] is a row vector with the horizontal coordinates (x, columns). For an even number of pixels the origin
    is just right of (or below) the center, so that a shape of 8 gives the range -4, -3, ..., 3.
    """
    def __init__(self, shape: array_like, step: Union[float, Sequence[float]] = 1.0,
                 center: Optional[Sequence[float]] = None):
        """
        :param shape: The number of rows and columns as a sequence of two integers, or a single integer for a square.
        :param step: The distance between pixels, a scalar or one value per axis. Default: 1.
        :param center: (optional) The coordinates of the pixel grid center in pixel units, (y, x). Default: the
            center pixel.
        """
        self.__shape = np.array(canvas_shape(shape))
        step = np.atleast_1d(np.asarray(step, dtype=float)).ravel()
        if step.size < 2:
            step = np.concatenate((step, step))
        self.__step = step[:2]
        if center is None:
            center = self.__shape // 2
        self.__center = np.asarray(center, dtype=float)

    @property
    def shape(self) -> np.ndarray:
        return self.__shape

    @property
    def step(self) -> np.ndarray:
        return self.__step

    @property
    def center(self) -> np.ndarray:
        return self.__center

    def __len__(self) -> int:
        return 2

    def __getitem__(self, axis: int) -> np.ndarray:
        if axis < -2 or axis >= 2:
            raise IndexError(f'Grid axis {axis} out of range for a 2D grid.')
        axis %= 2
        rng = (np.arange(self.shape[axis]) - self.center[axis]) * self.step[axis]
        return rng[:, np.newaxis] if axis == 0 else rng[np.newaxis, :]

    def __eq__(self, other) -> bool:
        return isinstance(other, Grid) and np.all(self.shape == other.shape) and np.all(self.step == other.step) \
            and np.all(self.center == other.center)

    def __hash__(self):
        return hash((tuple(self.shape), tuple(self.step), tuple(self.center)))

    def __str__(self) -> str:
        return f'Grid(shape={tuple(self.shape)}, step={tuple(self.step)}, center={tuple(self.center)})'

    def __repr__(self) -> str:
        return str(self)


@functools.lru_cache(maxsize=16)
def _cached_grid(shape: Tuple[int, int]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    log.debug(f'Calculating the coordinate grid for shape {shape}...')
    g = Grid(shape)
    yy, xx = np.broadcast_arrays(g[0], g[1])
    xx = np.array(xx, dtype=float)
    yy = np.array(yy, dtype=float)
    rr = np.sqrt(xx ** 2 + yy ** 2)
    for arr in (xx, yy, rr):
        arr.flags.writeable = False  # shared between callers
    return xx, yy, rr


def canvas_shape(shape: array_like) -> Tuple[int, int]:
    """
    Converts a canvas shape argument to a tuple of two integers. A single integer indicates a square canvas.
    """
    shape = np.atleast_1d(np.asarray(shape, dtype=int)).ravel()
    if shape.size == 1:
        shape = np.concatenate((shape, shape))
    if shape.size != 2 or np.any(shape < 0):
        raise ShapeError(f"The canvas shape must be a pair of non-negative integers, not {shape}.")
    return int(shape[0]), int(shape[1])


def grid(shape: array_like) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Calculates the horizontal, vertical, and radial coordinates of every pixel of a canvas, relative to its center.

    The result is cached per shape and read-only. Copy it before modifying it in place.

    :param shape: The shape of the canvas (rows, columns).
    :return: A tuple (xx, yy, rr) of 2D arrays of the given shape.
    """
    return _cached_grid(canvas_shape(shape))
