"""
Exception types raised by the emojify core.

Zero detected faces is not an error; see ``emojify.emojifier.NoFacesFound``.
"""


class EmojifyError(Exception):
    """Base class for all emojify failures."""


class InvalidInputError(EmojifyError, ValueError):
    """A face descriptor or geometry violates the input contract."""


class AssetError(EmojifyError):
    """An overlay or background image is missing, unreadable or unsupported."""
