"""
Conversion of phase and amplitude patterns to the arrays that are shown on a device.

The pipeline has four stages:

#. joint amplitude and phase encoding, only when an amplitude pattern is given,
#. modulo,
#. colormap, see :py:mod:`holotools.tools.colormap`,
#. rotation packing for devices with a 45 degree rotated pixel grid.

Usage:

::

    from holotools.tools import lenses_and_prisms, finalize

    phase = lenses_and_prisms((512, 512), [[0.1, -0.1], [0.0, 0.05], [0.0, 1e-5]])
    image_for_slm = finalize(phase)  # values from -pi to pi
    image_for_dmd = finalize(phase, amplitude=np.ones((512, 512)), device='dmd')  # values from 0 to 1, 45 degree packed

"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Union, Sequence, Optional, Tuple
import warnings
import numpy as np
import logging

from holotools.errors import ConfigError, ShapeError, RangeWarning
from holotools.simple import checkerboard
from holotools.tools.colormap import LookupTable, colormap as apply_colormap, validate_colormap
from holotools.utils import Backend, canvas_shape, gather as gather_array

log = logging.getLogger(__name__)

__all__ = ['DeviceClass', 'RotationPack', 'EncodeMethod', 'NO_MODULO', 'FinalizeConfig', 'resolve_defaults',
           'resolve_config', 'apply_modulo', 'rotation_pack_shape', 'rotation_pack_indices', 'rotation_pack',
           'rotation_unpack', 'encode_checker', 'encode_phase_only', 'encode_amplitude_device', 'finalize']

array_like = Union[np.ndarray, Sequence]
colormap_like = Union[str, array_like, LookupTable]

NO_MODULO = 'none'


class DeviceClass(Enum):
    """The kind of modulation that a device performs."""
    PHASE = 'phase'
    AMPLITUDE = 'amplitude'

    @classmethod
    def parse(cls, device: Union[str, DeviceClass]) -> DeviceClass:
        """
        Converts a device identifier to a DeviceClass.

        :param device: A DeviceClass, 'phase' or 'slm' for phase-only spatial light modulators, 'amplitude' or 'dmd'
            for (binary) amplitude devices such as digital micro-mirror devices.
        """
        if isinstance(device, DeviceClass):
            return device
        if isinstance(device, str):
            aliases = {'phase': cls.PHASE, 'slm': cls.PHASE, 'amplitude': cls.AMPLITUDE, 'dmd': cls.AMPLITUDE}
            if device.lower() in aliases:
                return aliases[device.lower()]
        raise ConfigError(f"Unknown device '{device}', use 'phase' (slm) or 'amplitude' (dmd).")


class RotationPack(Enum):
    """How the pixels of the pattern map onto the pixels of the device."""
    NONE = 'none'
    DEG45 = '45deg'

    @classmethod
    def parse(cls, rpack: Union[str, RotationPack]) -> RotationPack:
        if isinstance(rpack, RotationPack):
            return rpack
        if isinstance(rpack, str):
            for member in cls:
                if member.value == rpack.lower():
                    return member
        raise ConfigError(f"Unknown option for rpack '{rpack}', use 'none' or '45deg'.")


class EncodeMethod(Enum):
    """The method to encode an amplitude on a phase-only device."""
    CHECKER = 'checker'
    GRATING = 'grating'
    MAGNITUDE = 'magnitude'

    @classmethod
    def parse(cls, method: Union[str, EncodeMethod]) -> EncodeMethod:
        if isinstance(method, EncodeMethod):
            return method
        if isinstance(method, str):
            for member in cls:
                if member.value == method.lower():
                    return member
        raise ConfigError(f"Encode method '{method}' not recognized for phase pattern.")


def _validate_modulo(modulo: Union[float, str]) -> Union[float, str]:
    if isinstance(modulo, str):
        if modulo.lower() == NO_MODULO:
            return NO_MODULO
    elif isinstance(modulo, Real) and not isinstance(modulo, bool):
        if np.isfinite(modulo) and modulo > 0:
            return float(modulo)
    raise ConfigError(f"Unknown modulo argument value '{modulo}', use a positive number or 'none'.")


@dataclass(frozen=True)
class FinalizeConfig:
    """
    The options of the finalize pipeline. All values are validated on construction.

    Use :py:func:`resolve_defaults` to get the defaults for a device.
    """
    device: DeviceClass = DeviceClass.PHASE
    modulo: Union[float, str] = 1.0
    colormap: colormap_like = 'pmpi'
    rpack: RotationPack = RotationPack.NONE
    encode_method: EncodeMethod = EncodeMethod.CHECKER

    def __post_init__(self):
        object.__setattr__(self, 'device', DeviceClass.parse(self.device))
        object.__setattr__(self, 'modulo', _validate_modulo(self.modulo))
        object.__setattr__(self, 'colormap', validate_colormap(self.colormap))
        object.__setattr__(self, 'rpack', RotationPack.parse(self.rpack))
        if self.device is DeviceClass.PHASE:
            encode_method = EncodeMethod.parse(self.encode_method)
        else:
            # amplitude devices have a single encoding, the option is ignored
            try:
                encode_method = EncodeMethod.parse(self.encode_method)
            except ConfigError:
                log.debug(f"Ignoring encode method '{self.encode_method}' for an {self.device.value} device.")
                encode_method = EncodeMethod.CHECKER
        object.__setattr__(self, 'encode_method', encode_method)

    def replace(self, **changes) -> FinalizeConfig:
        """Returns a copy with some options changed."""
        return dataclasses.replace(self, **changes)


def resolve_defaults(device: Union[str, DeviceClass]) -> FinalizeConfig:
    """
    The default options for a device class.

    ============  ==========  ===========
    option        phase       amplitude
    ============  ==========  ===========
    modulo        1.0         'none'
    colormap      'pmpi'      'gray'
    rpack         'none'      '45deg'
    ============  ==========  ===========

    """
    device = DeviceClass.parse(device)
    if device is DeviceClass.PHASE:
        return FinalizeConfig(device=device, modulo=1.0, colormap='pmpi', rpack=RotationPack.NONE)
    return FinalizeConfig(device=device, modulo=NO_MODULO, colormap='gray', rpack=RotationPack.DEG45)


def resolve_config(device: Union[str, DeviceClass] = DeviceClass.PHASE,
                   modulo: Union[None, float, str] = None,
                   colormap: Optional[colormap_like] = None,
                   rpack: Union[None, str, RotationPack] = None,
                   encode_method: Union[None, str, EncodeMethod] = None) -> FinalizeConfig:
    """
    Combines the device defaults with the specified options. Options that are None take the default value.

    The device is checked first, so that an unknown device is reported irrespective of the other options.
    """
    config = resolve_defaults(device)
    changes = dict(modulo=modulo, colormap=colormap, rpack=rpack, encode_method=encode_method)
    return config.replace(**{k: v for k, v in changes.items() if v is not None})


def apply_modulo(pattern: np.ndarray, modulo: Union[float, str], backend: Union[None, str, Backend] = None) -> np.ndarray:
    """
    Applies an element-wise modulo. The result is in [0, modulo), or the pattern itself for 'none'.
    """
    modulo = _validate_modulo(modulo)
    if modulo == NO_MODULO:
        return pattern
    backend = Backend.infer(pattern, backend=backend)
    return backend.xp.mod(backend.asarray(pattern), modulo)


def rotation_pack_shape(shape: Union[int, Sequence[int]], rpack: Union[str, RotationPack] = RotationPack.DEG45
                        ) -> Tuple[int, int]:
    """
    The shape of the device buffer for a pattern of the given shape.

    For a 45 degree rotation of a pattern with R rows and C columns, this is (ceil(C/2) + R - 1, ceil((C+1)/2) + R - 1).
    """
    rows, cols = canvas_shape(shape)
    if RotationPack.parse(rpack) is RotationPack.NONE:
        return rows, cols
    return (cols + 1) // 2 + rows - 1, (cols + 2) // 2 + rows - 1


def rotation_pack_indices(shape: Union[int, Sequence[int]]) -> Tuple[np.ndarray, np.ndarray]:
    """
    The destination of every pixel for 45 degree rotation packing.

    Two neighboring columns of the pattern are interleaved into a single diagonal of the buffer, while every next row
    shifts one position to the right and one up.

    :param shape: The shape of the pattern (rows, columns).
    :return: A tuple with the buffer row and column indices, (zero-based) integer arrays of the pattern shape.
    """
    rows, cols = canvas_shape(shape)
    oy, ox = np.meshgrid(np.arange(1, rows + 1), np.arange(1, cols + 1), indexing='ij')
    nx = (ox + 2) // 2 + oy - 1  # ceil((ox + 1) / 2) + oy - 1
    ny = (ox + 1) // 2 + (rows - 1) - (oy - 1)  # ceil(ox / 2) + (R - 1) - (oy - 1)
    return ny - 1, nx - 1


def rotation_pack(pattern: np.ndarray, rpack: Union[str, RotationPack] = RotationPack.DEG45,
                  backend: Union[None, str, Backend] = None) -> np.ndarray:
    """
    Places a pattern in the buffer of a device with a rotated pixel grid.

    :param pattern: The 2D pattern.
    :param rpack: 'none' to return the pattern as it is, or '45deg' (default).
    :param backend: (optional) The backend to use, inferred from the pattern by default.
    :return: The packed pattern, with zeros in all buffer pixels that do not correspond to a pattern pixel.
    """
    rpack = RotationPack.parse(rpack)
    if rpack is RotationPack.NONE:
        return pattern
    backend = Backend.infer(pattern, backend=backend)
    pattern = backend.asarray(pattern)
    if pattern.ndim != 2:
        raise ShapeError(f'Only 2D patterns can be rotation packed, not {pattern.ndim}D.')
    ny, nx = (backend.asarray(_) for _ in rotation_pack_indices(pattern.shape))
    packed = backend.xp.zeros(rotation_pack_shape(pattern.shape, rpack), dtype=pattern.dtype)
    packed[ny, nx] = pattern
    return packed


def rotation_unpack(packed: np.ndarray, shape: Union[int, Sequence[int]],
                    backend: Union[None, str, Backend] = None) -> np.ndarray:
    """
    Recovers the pattern from a buffer that was packed with a 45 degree rotation.

    :param packed: The packed buffer.
    :param shape: The shape of the original pattern.
    :param backend: (optional) The backend to use, inferred from the buffer by default.
    :return: An array of the specified shape.
    """
    expected_shape = rotation_pack_shape(shape)
    if tuple(packed.shape) != expected_shape:
        raise ShapeError(f'A pattern of shape {canvas_shape(shape)} packs to shape {expected_shape}, not {tuple(packed.shape)}.')
    backend = Backend.infer(packed, backend=backend)
    ny, nx = (backend.asarray(_) for _ in rotation_pack_indices(shape))
    return backend.asarray(packed)[ny, nx]


def _normalize_amplitude(amplitude: np.ndarray, backend: Backend, stacklevel: int) -> np.ndarray:
    """
    Divides the amplitude by its peak when that exceeds 1, with a RangeWarning.

    :param stacklevel: As for warnings.warn, but counted from the function that calls this one.
    """
    xp = backend.xp
    if amplitude.size > 0:
        peak = float(xp.max(xp.abs(amplitude)))
        if peak > 1.0:
            warnings.warn('Amplitude > 1.0, normalizing to range 0 to 1', RangeWarning, stacklevel=stacklevel + 1)
            amplitude = amplitude / peak
    return amplitude


def _checker(pattern: np.ndarray, amplitude: np.ndarray, backend: Backend) -> np.ndarray:
    xp = backend.xp
    background = backend.asarray(checkerboard(pattern.shape, values=(-1, 1)))

    # Fraction of the carrier that is needed to suppress the zeroth order to the target amplitude
    mix_ratio = 2.0 / np.pi * xp.arccos(xp.clip(xp.abs(amplitude), 0.0, 1.0))

    pattern = pattern + xp.angle(amplitude) / (2 * np.pi) + 0.5
    pattern = pattern + mix_ratio * xp.angle(background) / (2 * np.pi) + 0.5
    return pattern


def encode_checker(pattern: np.ndarray, amplitude: np.ndarray, backend: Union[None, str, Backend] = None) -> np.ndarray:
    """
    Encodes the amplitude as a loss of contrast against a checkerboard carrier.

    The phase of the carrier alternates between 0 and pi. Where the amplitude is 1 the carrier is not added, where it
    is 0 the full carrier is added so that all light is diffracted away from the zeroth order. The argument of a
    complex amplitude is added to the phase.

    :param pattern: The phase pattern in waves.
    :param amplitude: The target amplitude, normalized to a peak of 1 if it exceeds 1.
    :param backend: (optional) The backend to use, inferred from the inputs by default.
    :return: The encoded phase pattern in waves, without modulo.
    """
    backend = Backend.infer(pattern, amplitude, backend=backend)
    pattern = backend.asarray(pattern)
    amplitude = _normalize_amplitude(backend.asarray(amplitude), backend, stacklevel=2)
    return _checker(pattern, amplitude, backend)


def encode_phase_only(pattern: np.ndarray, config: FinalizeConfig, backend: Union[None, str, Backend] = None
                      ) -> np.ndarray:
    """
    Applies the modulo, colormap, and rotation packing of the configuration.
    """
    backend = Backend.infer(pattern, backend=backend)
    pattern = apply_modulo(pattern, config.modulo, backend=backend)
    pattern = apply_colormap(pattern, config.colormap, backend=backend)
    return rotation_pack(pattern, config.rpack, backend=backend)


def encode_amplitude_device(pattern: np.ndarray, amplitude: np.ndarray, modulo: Union[float, str] = 1.0,
                            backend: Union[None, str, Backend] = None) -> np.ndarray:
    """
    Combines a phase and an amplitude pattern into a single amplitude pattern.

    The phase is converted to a continuous phase map in radians, of which the fringe pattern, cos(phase), is
    multiplied by the amplitude. The result is rescaled to the range [0, 1]. The argument of a complex amplitude is
    added to the phase.

    :param pattern: The phase pattern in waves.
    :param amplitude: The target amplitude.
    :param modulo: The modulo to apply to the phase, 'none' is interpreted as the phase-device default of 1.
    :param backend: (optional) The backend to use, inferred from the inputs by default.
    :return: The amplitude pattern in [0, 1], 0.5 where the amplitude is 0.
    """
    backend = Backend.infer(pattern, amplitude, backend=backend)
    xp = backend.xp
    pattern = backend.asarray(pattern)
    amplitude = backend.asarray(amplitude)

    if xp.iscomplexobj(amplitude):
        pattern = pattern + xp.angle(amplitude) / (2 * np.pi)
        amplitude = xp.abs(amplitude)

    if modulo == NO_MODULO:
        modulo = resolve_defaults(DeviceClass.PHASE).modulo
    phase_config = FinalizeConfig(device=DeviceClass.PHASE, modulo=modulo, colormap='pmpi', rpack=RotationPack.NONE)
    phase = encode_phase_only(pattern, phase_config, backend=backend)

    modulated = amplitude * xp.cos(phase)
    peak = float(xp.max(xp.abs(modulated))) if modulated.size > 0 else 0.0
    if peak > 0.0:
        return 0.5 * modulated / peak + 0.5
    log.debug('The modulated amplitude is zero everywhere.')
    return xp.full(modulated.shape, 0.5)


def finalize(pattern: Optional[array_like] = None, amplitude: Optional[array_like] = None,
             device: Union[str, DeviceClass] = DeviceClass.PHASE,
             modulo: Union[None, float, str] = None, colormap: Optional[colormap_like] = None,
             rpack: Union[None, str, RotationPack] = None, encode_method: Union[None, str, EncodeMethod] = None,
             config: Optional[FinalizeConfig] = None,
             backend: Union[None, str, Backend] = None, gather: bool = True) -> np.ndarray:
    """
    Finalizes a pattern for a device: encodes the amplitude (if given), applies the modulo and the colormap,
    and packs the pixels for a rotated device.

    For phase devices the pattern is the phase in waves, for amplitude devices without an amplitude argument the
    pattern is the amplitude.

    :param pattern: The phase pattern. May be omitted when an amplitude is given, it is then 0 everywhere.
    :param amplitude: (optional) The amplitude pattern to encode together with the phase.
    :param device: 'phase' ('slm', default) or 'amplitude' ('dmd').
    :param modulo: A positive number, or 'none' to skip the modulo. Default: 1.0 for phase, 'none' for amplitude
        devices.
    :param colormap: 'pmpi', '2pi', 'bin', 'gray', a table, or a LookupTable. Default: 'pmpi' for phase, 'gray' for
        amplitude devices.
    :param rpack: 'none' or '45deg'. Default: 'none' for phase, '45deg' for amplitude devices.
    :param encode_method: 'checker' (default), 'grating', or 'magnitude'. Only used for phase devices, amplitude
        devices ignore it.
    :param config: (optional) A FinalizeConfig to use instead of the device and option arguments.
    :param backend: (optional) 'host' or 'device'. Default: inferred from the pattern and the amplitude.
    :param gather: When True (default), the result is returned as a numpy array, also for the device backend.
    :return: A 2D array with the values for the device.
    """
    if config is None:
        config = resolve_config(device, modulo=modulo, colormap=colormap, rpack=rpack, encode_method=encode_method)
    if pattern is None and amplitude is None:
        raise ShapeError('A phase pattern, an amplitude pattern, or both must be specified.')

    backend = Backend.infer(pattern, amplitude, backend=backend)
    xp = backend.xp
    if amplitude is not None:
        amplitude = backend.asarray(amplitude)
        if pattern is None:
            pattern = xp.zeros(amplitude.shape)
    pattern = backend.asarray(pattern)
    if pattern.ndim != 2:
        raise ShapeError(f'The pattern must be a 2D array, not {pattern.ndim}D.')
    if amplitude is not None and tuple(amplitude.shape) != tuple(pattern.shape):
        raise ShapeError(f'The amplitude shape {tuple(amplitude.shape)} must match the pattern shape {tuple(pattern.shape)}.')

    log.debug(f'Finalizing a pattern of shape {tuple(pattern.shape)} with {config}...')

    if amplitude is not None:
        if config.device is DeviceClass.PHASE:
            if config.encode_method is EncodeMethod.CHECKER:
                amplitude = _normalize_amplitude(amplitude, backend, stacklevel=2)
                pattern = _checker(pattern, amplitude, backend)
            else:
                raise ConfigError(f"Encode method '{config.encode_method.value}' is not yet implemented.")
        else:
            pattern = encode_amplitude_device(pattern, amplitude, modulo=config.modulo, backend=backend)
            config = config.replace(modulo=NO_MODULO)  # the modulo is already applied to the phase

    pattern = encode_phase_only(pattern, config, backend=backend)

    if gather:
        pattern = gather_array(pattern)
    return pattern
