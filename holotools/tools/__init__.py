"""
The numerical tools to synthesize holograms and to convert them to device patterns.
"""
import logging

from .lenses_and_prisms import TargetBeam, beams_to_coefficients, lenses_and_prisms
from .colormap import LookupTable, colormap
from .finalize import DeviceClass, RotationPack, EncodeMethod, FinalizeConfig, resolve_defaults, resolve_config, \
    rotation_pack, rotation_unpack, finalize

log = logging.getLogger(__name__)

__all__ = ['TargetBeam', 'beams_to_coefficients', 'lenses_and_prisms', 'LookupTable', 'colormap',
           'DeviceClass', 'RotationPack', 'EncodeMethod', 'FinalizeConfig', 'resolve_defaults', 'resolve_config',
           'rotation_pack', 'rotation_unpack', 'finalize']
