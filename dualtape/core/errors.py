# dualtape/core/errors.py
"""Exceptions raised by the reverse-mode engine."""


class AutodiffError(Exception):
    """Base class for every error raised by dualtape."""


class VariableIndexError(AutodiffError, IndexError):
    """A variable index does not name a node recorded on the tape / in the Grad."""


class TapeMismatchError(AutodiffError, ValueError):
    """Handles from two different tapes were mixed in one operation."""


class TapeBusyError(AutodiffError, RuntimeError):
    """An append was attempted while another append on the same tape is running."""
