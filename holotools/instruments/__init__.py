"""
Devices that display the patterns.
"""
import logging

from .showable import Showable, ShowableError
from .simulated import SimulatedSlm, SimulatedDmd

log = logging.getLogger(__name__)

__all__ = ['Showable', 'ShowableError', 'SimulatedSlm', 'SimulatedDmd']
