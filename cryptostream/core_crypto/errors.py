"""
Exceptions raised by the CryptoStream modules.
"""


class CryptoStreamError(Exception):
    """Base class for all CryptoStream errors."""
    pass


class InvalidInputError(CryptoStreamError, ValueError):
    """Raised when an IV, key or length argument is malformed."""
    pass


class UnsupportedOperationError(CryptoStreamError):
    """
    Raised when an operation is not supported by the cipher mode or stream.

    Examples: unaligned or negative seeks on a counter IV, seeking a stream
    whose source cannot seek, reading from a closed stream.
    """
    pass
