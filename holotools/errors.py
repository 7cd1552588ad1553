import logging

log = logging.getLogger(__name__)

__all__ = ['HoloError', 'ConfigError', 'ShapeError', 'RangeWarning']


class HoloError(Exception):
    """
    The base class for all exceptions raised by this package.
    """
    pass


class ConfigError(HoloError, ValueError):
    """
    Raised for unknown devices, colormaps, modulo values, rotation packing or encoding methods, and for
    configurations that are recognized but not implemented.
    """
    pass


class ShapeError(HoloError, ValueError):
    """
    Raised when the shapes of arrays or coefficient matrices don't match.
    """
    pass


class RangeWarning(UserWarning):
    """
    Issued when an input falls outside its controllable range and is rescaled.
    """
    pass
