"""
Multi-beam holograms with the lenses and prisms algorithm.

Each target beam is steered by a linear phase gradient (a prism) and focused by a quadratic phase (a lens). The
hologram is the argument of the coherent sum of all these wavefronts. Only one complex accumulator is kept in memory,
irrespective of the number of beams.
"""
from __future__ import annotations

from typing import Union, Sequence, Optional, NamedTuple, Tuple
import numpy as np
import logging

from holotools.errors import ShapeError
from holotools.utils import canvas_shape, grid, Backend, gather as gather_array

log = logging.getLogger(__name__)

__all__ = ['TargetBeam', 'beams_to_coefficients', 'lenses_and_prisms']

array_like = Union[np.ndarray, Sequence, complex, float]


class TargetBeam(NamedTuple):
    """
    A single steered and focused spot.

    The gradients are in waves per pixel, the lens power in waves per pixel squared.
    """
    gradient_x: float = 0.0
    gradient_y: float = 0.0
    lens_power: float = 0.0
    amplitude: complex = 1.0


def beams_to_coefficients(beams: Sequence[Union[TargetBeam, Sequence]]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Converts a sequence of target beams to the coefficient matrix and amplitude vector for lenses_and_prisms.

    :param beams: A sequence of TargetBeam objects or of tuples (gradient_x, gradient_y[, lens_power[, amplitude]]).
    :return: A tuple (xyz, amplitude) with a 3xN real matrix and an N-vector.
    """
    beams = [TargetBeam(*_) for _ in beams]
    xyz = np.array([[b.gradient_x, b.gradient_y, b.lens_power] for b in beams], dtype=float).reshape(-1, 3).T
    amplitude = np.array([b.amplitude for b in beams])
    if np.all(np.isreal(amplitude)):
        amplitude = amplitude.real.astype(float)
    return xyz, amplitude


def lenses_and_prisms(shape: Union[int, Sequence[int]], xyz: array_like,
                      amplitude: Optional[array_like] = None,
                      lens: Optional[np.ndarray] = None, xgrad: Optional[np.ndarray] = None,
                      ygrad: Optional[np.ndarray] = None,
                      backend: Union[None, str, Backend] = None, gather: bool = True) -> np.ndarray:
    """
    Generates a phase hologram that places beams at the positions specified by xyz.

    This has the same effect as combining the complex fields of a linear grating and a parabolic lens for every
    beam, but without storing a separate field per beam.

    :param shape: The shape of the canvas (rows, columns).
    :param xyz: A 3xN matrix with one column per target beam. The first two rows are the horizontal and vertical
        gradients, the final row is the lens power. A vector of 3 elements describes a single beam.
    :param amplitude: (optional) A vector with N (complex) amplitudes, one per beam. Default: all ones.
    :param lens: (optional) The pattern to use for the lens. Default: r^2, relative to the canvas center.
    :param xgrad: (optional) The pattern to use for the horizontal gradient. Default: x, the column coordinate.
    :param ygrad: (optional) The pattern to use for the vertical gradient. Default: y, the row coordinate.
    :param backend: (optional) 'host' or 'device'. Default: 'device' if any of the supplied patterns is a device
        array, 'host' otherwise.
    :param gather: When True (default), the result is returned as a numpy array, also for the device backend.
    :return: The phase pattern as a 2D array of the canvas shape with values in [0, 1).
    """
    shape = canvas_shape(shape)

    xyz = np.asarray(gather_array(xyz))
    if xyz.ndim == 1 and xyz.size == 3:
        xyz = xyz[:, np.newaxis]
    if xyz.ndim != 2 or xyz.shape[0] != 3:
        raise ShapeError(f'xyz must be 3xN matrix, not of shape {xyz.shape}.')
    nb_beams = xyz.shape[1]

    if amplitude is None:
        amplitude = np.ones(nb_beams)
    amplitude = np.atleast_1d(np.asarray(gather_array(amplitude))).ravel()
    if amplitude.size != nb_beams:
        raise ShapeError(f'Number of amplitudes ({amplitude.size}) must match number of columns of xyz ({nb_beams}).')

    backend = Backend.infer(lens, xgrad, ygrad, backend=backend)
    xp = backend.xp

    lens, xgrad, ygrad = (backend.asarray(_) for _ in (lens, xgrad, ygrad))
    for name, basis in (('lens', lens), ('xgrad', xgrad), ('ygrad', ygrad)):
        if basis is not None and tuple(basis.shape) != shape:
            raise ShapeError(f'{name} size {tuple(basis.shape)} must match the canvas shape {shape}.')

    if lens is None or xgrad is None or ygrad is None:
        xx, yy, rr = grid(shape)
        if lens is None:
            lens = rr ** 2
        if xgrad is None:
            xgrad = xx
        if ygrad is None:
            ygrad = yy
    lens = backend.asarray(lens)
    xgrad = backend.asarray(xgrad)
    ygrad = backend.asarray(ygrad)

    log.debug(f'Superposing {nb_beams} beams on a canvas of shape {shape}...')
    field = xp.zeros(shape, dtype=complex)
    for (gradient_x, gradient_y, lens_power), amp in zip(xyz.T, amplitude):
        field += amp * xp.exp(2j * np.pi * (lens_power * lens + gradient_x * xgrad + gradient_y * ygrad))

    # Map the argument from [-pi, pi] to [0, 1), pi wraps to 0
    pattern = xp.mod((xp.angle(field) / np.pi + 1.0) / 2.0, 1.0)

    if gather:
        pattern = gather_array(pattern)
    return pattern
