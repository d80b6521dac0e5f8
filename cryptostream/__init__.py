"""
CryptoStream - streaming AES encryption with seekable counter-mode IVs.
"""

import logging

from .core_crypto import (
    CipherMode,
    CryptoStreamError,
    CtrIv,
    InitializationVector,
    InvalidInputError,
    UnsupportedOperationError,
    generate_iv,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
