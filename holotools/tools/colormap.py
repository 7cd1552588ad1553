"""
Conversion of normalized patterns to the values that a device displays.

A colormap is one of the preset names, a table of device values, or a :py:class:`LookupTable`:

* 'pmpi': phase in radians from -pi to pi,
* '2pi': phase in radians from 0 to 2 pi,
* 'bin': binary amplitude, 0 or 1,
* 'gray': gray level from 0 to 1.

"""
from __future__ import annotations

from typing import Union, Sequence, Tuple
import numpy as np
import logging

from holotools.errors import ConfigError, ShapeError
from holotools.utils import Backend

log = logging.getLogger(__name__)

__all__ = ['PRESETS', 'LookupTable', 'colormap', 'colormap_range', 'validate_colormap']

array_like = Union[np.ndarray, Sequence]

# name: (scale, offset, lower, upper)
PRESETS = {
    'pmpi': (2 * np.pi, -np.pi, -np.pi, np.pi),
    '2pi': (2 * np.pi, 0.0, 0.0, 2 * np.pi),
    'gray': (1.0, 0.0, 0.0, 1.0),
    'bin': (1.0, 0.0, 0.0, 1.0),
}


class LookupTable:
    """
    Maps phase values to the nearest value that a device can display.

    The device values are often integer gray levels and the phases come from a calibration measurement.
    """
    def __init__(self, phase: array_like, value: array_like, range: float = 2 * np.pi):
        """
        :param phase: A vector with the phases that the device produces.
        :param value: A vector of the same length with the device values that produce each phase.
        :param range: The period of the phase. Phases are compared modulo this value. Default: 2 pi.
        """
        phase = np.asarray(phase, dtype=float).ravel()
        value = np.asarray(value)
        if value.ndim < 1 or value.shape[0] != phase.size:
            raise ShapeError(f'The number of values ({value.shape[0] if value.ndim > 0 else 1}) must match the number of phases ({phase.size}).')
        if phase.size < 1:
            raise ShapeError('A lookup table needs at least one entry.')
        order = np.argsort(phase, kind='stable')
        self.__phase = phase[order]
        self.__value = value[order]
        self.__range = range

    @property
    def phase(self) -> np.ndarray:
        return self.__phase

    @property
    def value(self) -> np.ndarray:
        return self.__value

    @property
    def range(self) -> float:
        return self.__range

    @property
    def period(self) -> float:
        """The phase that corresponds to one wave: the range if it is finite, 2 pi otherwise."""
        if self.range is not None and np.isfinite(self.range):
            return self.range
        return 2 * np.pi

    def __len__(self) -> int:
        return self.phase.size

    def __call__(self, pattern: np.ndarray, backend: Union[None, str, Backend] = None) -> np.ndarray:
        """
        Looks up the device value with the nearest phase for every element of the pattern.

        :param pattern: The target phases in radians.
        :param backend: (optional) The backend to use, inferred from the pattern by default.
        :return: An array with the device values, the shape of the pattern.
        """
        backend = Backend.infer(pattern, backend=backend)
        xp = backend.xp
        pattern = backend.asarray(pattern)
        phase = backend.asarray(self.phase)
        value = backend.asarray(self.value)
        if self.range is not None and np.isfinite(self.range):
            # Wrap into the period of the table, starting at its first entry
            pattern = xp.mod(pattern - phase[0], self.range) + phase[0]
            # Distances to the neighbors, including the first entry one period later
            extended_phase = xp.concatenate((phase, phase[:1] + self.range))
            extended_value = xp.concatenate((value, value[:1]))
        else:
            extended_phase = phase
            extended_value = value
        right = xp.clip(xp.searchsorted(extended_phase, pattern), 1, extended_phase.size - 1)
        left = right - 1
        nearest = xp.where(xp.abs(pattern - extended_phase[left]) <= xp.abs(extended_phase[right] - pattern),
                           left, right)
        if extended_phase.size == 1:
            nearest = xp.zeros_like(nearest)
        return extended_value[nearest]

    def __str__(self) -> str:
        return f'LookupTable({len(self)} entries, range={self.range})'

    def __repr__(self) -> str:
        return str(self)


def validate_colormap(cmap: Union[str, array_like, LookupTable]) -> Union[str, np.ndarray, LookupTable]:
    """
    Checks a colormap argument, returning its normalized form: a lower-case preset name, a 1D table or a LookupTable.
    """
    if isinstance(cmap, LookupTable):
        return cmap
    if isinstance(cmap, str):
        name = cmap.lower()
        if name not in PRESETS:
            raise ConfigError(f"Unknown colormap '{cmap}', use one of {', '.join(PRESETS)}, a table, or a LookupTable.")
        return name
    try:
        table = np.asarray(cmap)
    except (TypeError, ValueError) as err:
        raise ConfigError(f'Unknown colormap {cmap}: {err}')
    if table.ndim != 1 or table.size < 1 or not np.issubdtype(table.dtype, np.number):
        raise ConfigError(f'A colormap table must be a non-empty numeric vector, not {cmap}.')
    return table


def colormap_range(cmap: Union[str, array_like, LookupTable]) -> Tuple[float, float]:
    """
    The smallest and the largest value that the colormap can produce.
    """
    cmap = validate_colormap(cmap)
    if isinstance(cmap, str):
        return PRESETS[cmap][2:]
    values = cmap.value if isinstance(cmap, LookupTable) else cmap
    return np.min(values), np.max(values)


def colormap(pattern: np.ndarray, cmap: Union[str, array_like, LookupTable] = 'gray',
             backend: Union[None, str, Backend] = None) -> np.ndarray:
    """
    Applies a colormap to a pattern.

    Preset colormaps map the normalized range [0, 1] linearly onto their output range and clip values outside of it.
    A table of N values maps [0, 1] onto the N entries, the value is rounded to the nearest entry. For a LookupTable
    the pattern is in waves: it is scaled by the period of the table and the device value with the nearest phase is
    picked. Call the LookupTable directly to look up phases in radians.

    :param pattern: The pattern, normalized to [0, 1], or in waves for a LookupTable.
    :param cmap: The colormap: 'pmpi', '2pi', 'bin', 'gray', a table, or a LookupTable. Default: 'gray'.
    :param backend: (optional) The backend to use, inferred from the pattern by default.
    :return: An array of the shape of the pattern with the device values.
    """
    cmap = validate_colormap(cmap)
    backend = Backend.infer(pattern, backend=backend)
    xp = backend.xp
    pattern = backend.asarray(pattern)

    if isinstance(cmap, LookupTable):
        return cmap(pattern * cmap.period, backend=backend)
    if isinstance(cmap, str):
        if cmap == 'bin':
            return (pattern > 0.5).astype(float)
        scale, offset, lower, upper = PRESETS[cmap]
        return xp.clip(pattern * scale + offset, lower, upper)

    table = backend.asarray(cmap)
    index = xp.rint(xp.clip(pattern, 0.0, 1.0) * (table.size - 1)).astype(int)
    return table[index]
