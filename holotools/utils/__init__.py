import logging

from .grid import Grid, canvas_shape, grid
from .backend import Backend, gather, is_device_array

log = logging.getLogger(__name__)

__all__ = ['Grid', 'canvas_shape', 'grid', 'Backend', 'gather', 'is_device_array']
