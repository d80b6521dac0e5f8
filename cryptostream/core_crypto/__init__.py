# Core Cryptography Module
"""
Counter-mode IV engine including:
- 128-bit big-endian counter arithmetic over 16-bit words - counter.py
- IV strategy interface and CTR implementation - initialization_vector.py
- Exception hierarchy - errors.py
"""

from .errors import (
    CryptoStreamError,
    InvalidInputError,
    UnsupportedOperationError,
)

from .counter import (
    add_counters,
    increment_words,
    split_words,
    join_words,
    counter_to_int,
    int_to_counter,
)

from .initialization_vector import (
    BLOCK_SIZE,
    IV_SIZE,
    CipherMode,
    InitializationVector,
    CtrIv,
    generate_iv,
)

__all__ = [
    'CryptoStreamError',
    'InvalidInputError',
    'UnsupportedOperationError',
    'add_counters',
    'increment_words',
    'split_words',
    'join_words',
    'counter_to_int',
    'int_to_counter',
    'BLOCK_SIZE',
    'IV_SIZE',
    'CipherMode',
    'InitializationVector',
    'CtrIv',
    'generate_iv',
]
