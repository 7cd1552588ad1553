"""
Elementary patterns that evaluate closed-form functions on a pixel canvas.
"""
import logging

from .checkerboard import checkerboard
from .linear import linear
from .lens import parabolic, spherical
from .gaussian import gaussian

log = logging.getLogger(__name__)

__all__ = ['checkerboard', 'linear', 'parabolic', 'spherical', 'gaussian']
