from __future__ import annotations

from abc import ABC, abstractmethod
import threading
from typing import Union, Sequence, Optional, Tuple
import numpy as np
import logging

from holotools.errors import HoloError
from holotools.tools.finalize import DeviceClass, finalize
from holotools.utils import canvas_shape

log = logging.getLogger(__name__)

__all__ = ['ShowableError', 'Showable']

array_like = Union[np.ndarray, Sequence, complex, float]


class ShowableError(HoloError):
    """
    An Exception class for devices that show patterns.
    """
    pass


class Showable(ABC):
    """
    A super class for devices that can display a pattern, such as spatial light modulators and digital micro-mirror
    devices.

    Subclasses implement :py:meth:`show_raw`, which receives the device values. :py:meth:`show` first converts a
    phase and/or amplitude pattern with :py:func:`holotools.tools.finalize`, using the defaults of the device class.
    """
    def __init__(self, device: Union[str, DeviceClass], shape: Sequence[int] = (512, 512),
                 incident: Optional[array_like] = None):
        """
        Construct an abstract Showable device.

        :param device: The device class, 'phase' or 'amplitude'.
        :param shape: The resolution of the device as (rows, columns). Default: (512, 512).
        :param incident: (optional) The complex incident illumination, a 2D array of the device shape or a scalar.
            Default: 1 everywhere.
        """
        self.__lock = threading.RLock()
        self.__device = DeviceClass.parse(device)
        self.__shape = canvas_shape(shape)
        self.__incident = None
        self.incident = incident

    @property
    def _lock(self) -> threading.RLock:
        return self.__lock

    @property
    def device(self) -> DeviceClass:
        """The kind of modulation this device performs."""
        return self.__device

    @property
    def pattern_type(self) -> str:
        """'phase' or 'amplitude'."""
        return self.__device.value

    @property
    def shape(self) -> Tuple[int, int]:
        """The resolution of the device as (rows, columns), before any rotation packing."""
        return self.__shape

    @property
    def size(self) -> Tuple[int, int]:
        """Synonym for shape."""
        return self.shape

    @property
    @abstractmethod
    def value_range(self) -> Tuple[float, float]:
        """The lowest and highest raw value that the device accepts."""
        pass

    @property
    def incident(self) -> np.ndarray:
        """
        The complex incident illumination as a 2D array of the device shape.
        """
        with self._lock:
            return self.__incident

    @incident.setter
    def incident(self, new_incident: Optional[array_like]):
        if new_incident is None:
            new_incident = 1.0
        new_incident = np.asarray(new_incident)
        if new_incident.ndim == 0:
            new_incident = np.full(self.shape, new_incident, dtype=complex)
        if new_incident.ndim != 2:
            raise ShowableError(f'The incident illumination must be a 2D array, not {new_incident.ndim}D.')
        if new_incident.shape != self.shape:
            raise ShowableError(f'The incident illumination shape {new_incident.shape} must match the device shape {self.shape}.')
        with self._lock:
            self.__incident = new_incident.astype(complex)

    def show(self, pattern: Optional[array_like] = None, amplitude: Optional[array_like] = None, **kwargs):
        """
        Finalizes a pattern for this device and displays it.

        :param pattern: The phase pattern in waves, or the amplitude for amplitude devices. Default: all zeros for phase
            devices and all ones for amplitude devices.
        :param amplitude: (optional) An amplitude to encode together with the phase.
        :param kwargs: Options for :py:func:`holotools.tools.finalize`, such as modulo, colormap, rpack, and
            encode_method.
        """
        if pattern is None and amplitude is None:
            pattern = np.zeros(self.shape) if self.device is DeviceClass.PHASE else np.ones(self.shape)
        raw = finalize(pattern, amplitude=amplitude, device=self.device, **kwargs)
        log.debug(f'Showing a pattern of shape {raw.shape} on {self}.')
        self.show_raw(raw)

    @abstractmethod
    def show_raw(self, pattern: Optional[np.ndarray] = None):
        """
        Displays the device values without any further conversion.
        This is an abstract function that must be implemented by the subclasses.

        :param pattern: A 2D array with device values.
        """
        pass

    def __str__(self) -> str:
        return f'{self.__class__.__name__}({self.pattern_type}, shape={self.shape})'

    def __repr__(self) -> str:
        return str(self)
