from typing import Union, Sequence, Optional, Tuple
import numpy as np
import logging

from holotools.instruments.showable import Showable, ShowableError
from holotools.tools.finalize import DeviceClass, RotationPack, finalize, rotation_pack

log = logging.getLogger(__name__)

__all__ = ['SimulatedSlm', 'SimulatedDmd']

array_like = Union[np.ndarray, Sequence, complex, float]


class SimulatedSlm(Showable):
    """
    A non-physical phase-only spatial light modulator for testing and simulation.

    The raw pattern is a phase in radians. The complex field after the device, the incident illumination multiplied
    by exp(1j * phase), is available as the pattern property.
    """
    def __init__(self, shape: Sequence[int] = (512, 512), incident: Optional[array_like] = None):
        """
        :param shape: The resolution of the device (rows, columns). Default: (512, 512).
        :param incident: (optional) The complex incident illumination. Default: 1 everywhere.
        """
        super().__init__(DeviceClass.PHASE, shape=shape, incident=incident)
        self.__pattern = None
        log.info(f'SimulatedSlm initialized with shape {self.shape}.')
        self.show()

    @property
    def value_range(self) -> Tuple[float, float]:
        return -np.pi, np.pi

    @property
    def pattern(self) -> np.ndarray:
        """The complex field after modulation by the device."""
        with self._lock:
            return self.__pattern

    def show_raw(self, pattern: Optional[np.ndarray] = None):
        """
        Displays a phase pattern in radians.

        :param pattern: A 2D array of the device shape. Default: 0 everywhere.
        """
        if pattern is None:
            pattern = np.zeros(self.shape)
        pattern = np.asarray(pattern)
        if pattern.shape != self.shape:
            raise ShowableError(f'The pattern shape {pattern.shape} must match the device shape {self.shape}.')
        with self._lock:
            self.__pattern = self.incident * np.exp(1j * pattern)


class SimulatedDmd(Showable):
    """
    A non-physical binary amplitude device, such as a digital micro-mirror device, for testing and simulation.

    The pixels of the device are on a grid that is rotated by 45 degrees. When use_rpack is True, the raw pattern and
    the incident illumination are rotation packed, so that the resulting complex pattern is larger than the device,
    with zero padding in the corners.
    """
    def __init__(self, shape: Sequence[int] = (512, 512), incident: Optional[array_like] = None,
                 use_rpack: bool = True):
        """
        :param shape: The resolution of the device (rows, columns) before rotation packing. Default: (512, 512).
        :param incident: (optional) The complex incident illumination. Default: 1 everywhere.
        :param use_rpack: When True (default), the pattern is packed as for a 45 degree rotated device.
        """
        super().__init__(DeviceClass.AMPLITUDE, shape=shape, incident=incident)
        if not isinstance(use_rpack, (bool, np.bool_)):
            raise ShowableError(f'use_rpack must be a boolean, not {use_rpack}.')
        self.__use_rpack = bool(use_rpack)
        self.__pattern = None
        log.info(f'SimulatedDmd initialized with shape {self.shape}' + (' and 45 degree rotation packing.' if self.use_rpack else '.'))
        self.show()

    @property
    def value_range(self) -> Tuple[float, float]:
        return 0.0, 1.0

    @property
    def use_rpack(self) -> bool:
        """True if the pixels are rotation packed when shown."""
        return self.__use_rpack

    @property
    def pattern(self) -> np.ndarray:
        """The complex field after modulation, rotation packed if use_rpack is True."""
        with self._lock:
            return self.__pattern

    def show(self, pattern: Optional[array_like] = None, amplitude: Optional[array_like] = None, **kwargs):
        """
        Finalizes a pattern for this device and displays it. Rotation packing is left to :py:meth:`show_raw`.
        """
        kwargs.setdefault('rpack', RotationPack.NONE)
        super().show(pattern, amplitude=amplitude, **kwargs)

    def show_raw(self, pattern: Optional[np.ndarray] = None):
        """
        Displays an amplitude pattern with values in [0, 1].

        :param pattern: A 2D array of the device shape. Default: 1 everywhere.
        """
        if pattern is None:
            pattern = np.ones(self.shape)
        pattern = np.asarray(pattern)
        if pattern.shape != self.shape:
            raise ShowableError(f'The pattern shape {pattern.shape} must match the device shape {self.shape}.')
        rpack = RotationPack.DEG45 if self.use_rpack else RotationPack.NONE
        pattern = finalize(pattern, device=self.device, rpack=rpack, colormap='gray', modulo='none')
        incident = rotation_pack(self.incident, rpack)
        with self._lock:
            self.__pattern = (pattern * incident).astype(complex)
