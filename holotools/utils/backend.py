"""
Selection of the array library that performs a computation.

Computations run on the host with :py:mod:`numpy` by default. When :py:mod:`cupy` is installed, the same code
can run on a GPU. The backend is inferred once from the inputs, or chosen explicitly, and then passed along.

Usage:

::

    backend = Backend.infer(lens, xgrad, ygrad, backend=None)
    xp = backend.xp
    result = xp.zeros(shape, dtype=complex)
    ...
    return gather(result) if gather_result else result

"""
from __future__ import annotations

from enum import Enum
from typing import Union, Optional
import numpy as np
import logging

from holotools.errors import ConfigError

try:
    import cupy as cp
except ImportError:
    cp = None

log = logging.getLogger(__name__)

__all__ = ['Backend', 'is_device_array', 'gather']


def is_device_array(arr) -> bool:
    """Returns True if the argument is an array that resides in GPU memory."""
    return cp is not None and isinstance(arr, cp.ndarray)


def gather(arr):
    """
    Copies a device-resident array back to host memory. Host arrays are returned as they are.

    :param arr: A numpy or cupy array.
    :return: A numpy array.
    """
    if is_device_array(arr):
        return cp.asnumpy(arr)
    return arr


class Backend(Enum):
    """The array library used for a computation."""
    HOST = 'host'
    DEVICE = 'device'

    @classmethod
    def parse(cls, backend: Union[None, str, Backend]) -> Optional[Backend]:
        if backend is None or isinstance(backend, Backend):
            return backend
        if isinstance(backend, str):
            aliases = {'host': cls.HOST, 'cpu': cls.HOST, 'numpy': cls.HOST,
                       'device': cls.DEVICE, 'gpu': cls.DEVICE, 'cupy': cls.DEVICE}
            if backend.lower() in aliases:
                return aliases[backend.lower()]
        raise ConfigError(f"Unknown backend '{backend}', use 'host' or 'device'.")

    @classmethod
    def infer(cls, *arrays, backend: Union[None, str, Backend] = None) -> Backend:
        """
        Determines the backend for a computation.

        :param arrays: The input arrays. None values are ignored.
        :param backend: (optional) An explicit choice that overrides the inference.
        :return: Backend.DEVICE if requested, or if no choice is made and any of the inputs is a device array.
        """
        backend = cls.parse(backend)
        if backend is None:
            backend = cls.DEVICE if any(is_device_array(_) for _ in arrays if _ is not None) else cls.HOST
        if backend is cls.DEVICE and cp is None:
            raise ConfigError('The device backend requires the cupy package, which could not be imported.')
        log.debug(f'Using the {backend.value} backend.')
        return backend

    @property
    def xp(self):
        """The array module: numpy or cupy."""
        if self is Backend.DEVICE:
            if cp is None:
                raise ConfigError('The device backend requires the cupy package, which could not be imported.')
            return cp
        return np

    def asarray(self, arr, dtype=None):
        """Moves an array to this backend, copying only when necessary."""
        if arr is None:
            return None
        if self is Backend.HOST:
            return np.asarray(gather(arr), dtype=dtype)
        return self.xp.asarray(arr, dtype=dtype)
