"""Exception hierarchy for mosaic runs."""

from __future__ import annotations


class MosaicError(Exception):
    """Base class for every fatal error raised during a mosaic run."""


class ConfigurationError(MosaicError, ValueError):
    """Invalid settings or inputs detected before pixel processing starts.

    Raised for a zero-sized target image, a tile directory with no usable
    images, or non-positive numeric settings.
    """


class ImageDecodeError(MosaicError):
    """A target or tile image could not be opened or decoded."""
