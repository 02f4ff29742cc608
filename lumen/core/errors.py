# lumen/core/errors.py
"""
Error taxonomy.

Every failure during the load phase derives from AssetError and is fatal
to startup. Math and resource-lifetime errors stand on their own.
"""

from __future__ import annotations


class AssetError(Exception):
    """Base class for asset load failures."""


# =============================================================================
# WAVE container
# =============================================================================

class WaveFormatError(AssetError):
    """A RIFF/WAVE stream could not be decoded."""


class MalformedContainerError(WaveFormatError):
    """Missing RIFF/WAVE signature, or a truncated stream."""


class MissingFormatChunkError(WaveFormatError):
    """The first chunk after the RIFF header is not 'fmt '."""


class FormatChunkTooLargeError(WaveFormatError):
    """The 'fmt ' chunk does not fit the format descriptor."""


class MissingDataChunkError(WaveFormatError):
    """No 'data' chunk follows the format chunk."""


# =============================================================================
# OBJ / MTL
# =============================================================================

class AssetNotFoundError(AssetError, FileNotFoundError):
    """An asset path could not be opened."""


class IndexOutOfRangeError(AssetError, IndexError):
    """A face references an element that has not been declared yet."""


class MalformedDirectiveError(AssetError, ValueError):
    """A recognized directive carries operands that cannot be parsed."""


# =============================================================================
# Math / lifetime
# =============================================================================

class SingularCameraTransformError(ArithmeticError):
    """A camera matrix has no inverse."""


class BufferReleasedError(RuntimeError):
    """A sample buffer was used or released after release."""
