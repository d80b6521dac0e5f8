"""
Fixed-Width Counter Arithmetic

128-bit big-endian counters stored as eight unsigned 16-bit words,
most significant word first. Used to compute CTR-mode initialization
vectors without relying on arbitrary-precision integers for the
carry logic.

All additions wrap modulo 2^128: a carry out of the most significant
word is discarded, matching the fixed width of a 128-bit IV.

Example:
    >>> words = split_words(b"\\x00" * 15 + b"\\x01")
    >>> join_words(add_counters(words, int_to_counter(0xFFFF)))
    b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01\\x00\\x00'
"""

import struct
from typing import List, Sequence, Tuple

from .errors import InvalidInputError


# Constants
WORD_COUNT = 8              # 8 x 16-bit words = 128 bits
WORD_SIZE = 2               # bytes per word
WORD_MODULUS = 65536        # 2^16
COUNTER_BYTES = WORD_COUNT * WORD_SIZE
COUNTER_MODULUS = 1 << (COUNTER_BYTES * 8)

_WORD_FORMAT = '>' + 'H' * WORD_COUNT


def zero_counter() -> List[int]:
    """Return a fresh all-zero mutable counter."""
    return [0] * WORD_COUNT


def split_words(data: bytes) -> Tuple[int, ...]:
    """
    Split 16 bytes into eight big-endian 16-bit words.

    Args:
        data: Exactly 16 bytes

    Returns:
        Tuple of 8 words, most significant first

    Raises:
        InvalidInputError: If data is not 16 bytes long
    """
    if len(data) != COUNTER_BYTES:
        raise InvalidInputError(
            f"Counter requires {COUNTER_BYTES} bytes, got {len(data)}"
        )
    return struct.unpack(_WORD_FORMAT, data)


def join_words(words: Sequence[int]) -> bytes:
    """Encode eight 16-bit words as 16 big-endian bytes."""
    return struct.pack(_WORD_FORMAT, *words)


def add_counters(a: Sequence[int], b: Sequence[int]) -> Tuple[int, ...]:
    """
    Add two counters word by word, modulo 2^128.

    Words are summed from the least significant (index 7) to the most
    significant (index 0), propagating the carry leftward. The carry out
    of word 0 is dropped.

    Args:
        a: First counter (8 words)
        b: Second counter (8 words)

    Returns:
        The sum as a new tuple of 8 words
    """
    result = [0] * WORD_COUNT
    carry = 0
    for i in range(WORD_COUNT - 1, -1, -1):
        total = a[i] + b[i] + carry
        carry = total // WORD_MODULUS
        result[i] = total % WORD_MODULUS
    return tuple(result)


def increment_words(words: List[int], blocks: int) -> None:
    """
    Add a block count to a counter in place.

    The increment is folded into the least significant word and the
    overflow carried toward word 0, so increments larger than 16 bits
    propagate across several words in one pass.

    Args:
        words: Mutable counter (8 words), modified in place
        blocks: Non-negative number of blocks to add

    Raises:
        ValueError: If blocks is negative
    """
    if blocks < 0:
        raise ValueError(f"Cannot increment counter by negative value {blocks}")

    carry = blocks
    for i in range(WORD_COUNT - 1, -1, -1):
        if carry == 0:
            break
        total = words[i] + carry
        carry = total // WORD_MODULUS
        words[i] = total % WORD_MODULUS


def counter_to_int(words: Sequence[int]) -> int:
    """Interpret a counter as an unsigned 128-bit integer."""
    value = 0
    for word in words:
        value = (value << 16) | word
    return value


def int_to_counter(value: int) -> Tuple[int, ...]:
    """Convert an integer (reduced modulo 2^128) to a counter."""
    value %= COUNTER_MODULUS
    return tuple(
        (value >> (16 * (WORD_COUNT - 1 - i))) & 0xFFFF
        for i in range(WORD_COUNT)
    )
