"""
Initialization Vector Strategies

Streaming ciphers ask an IV strategy for the IV of each chunk they
transform and report back how many bytes were consumed. This keeps
the IV bookkeeping independent of the block-cipher primitive.

Components:
- CipherMode: mode tags understood by the streaming driver
- InitializationVector: interface shared by all IV strategies
- CtrIv: counter-mode IV (base IV + 128-bit block counter)

Counter mode IVs support arbitrary forward seeking: the IV for any
block-aligned offset is computed directly from the base IV without
processing the intervening blocks.
"""

import io
import logging
import secrets
from abc import ABC, abstractmethod
from enum import Enum

from .counter import (
    COUNTER_BYTES, add_counters, counter_to_int, increment_words,
    join_words, split_words, zero_counter,
)
from .errors import InvalidInputError, UnsupportedOperationError


logger = logging.getLogger(__name__)

# Constants
BLOCK_SIZE = 16             # AES block size in bytes
IV_SIZE = COUNTER_BYTES     # 128-bit IV for AES-CTR


class CipherMode(Enum):
    """Block cipher modes of operation an IV strategy can drive."""

    CTR = "CTR"


def generate_iv() -> bytes:
    """Generate a random 16-byte initialization vector."""
    return secrets.token_bytes(IV_SIZE)


class InitializationVector(ABC):
    """
    Interface for per-mode IV handling.

    A streaming driver calls get_current_iv() before transforming a
    chunk and update() with the transformed chunk afterwards. Seek
    requests are only forwarded when supports_arbitrary_seeking()
    returns True; otherwise the driver replays from the start.
    """

    @abstractmethod
    def get_cipher_mode(self) -> CipherMode:
        """Mode tag for the cipher this IV drives."""

    @abstractmethod
    def requires_padding(self) -> bool:
        """Whether the mode pads plaintext to a whole number of blocks."""

    @abstractmethod
    def supports_arbitrary_seeking(self) -> bool:
        """Whether seek() can jump to an offset without replaying."""

    @abstractmethod
    def get_current_iv(self) -> bytes:
        """IV to use for the next block."""

    @abstractmethod
    def advance(self, byte_count: int) -> None:
        """Record that byte_count bytes were just transformed."""

    @abstractmethod
    def seek(self, offset: int, whence: int = io.SEEK_SET) -> None:
        """Move the IV to a byte offset in the logical stream."""

    def update(self, block: bytes) -> None:
        """Record a transformed block. Same as advance(len(block))."""
        self.advance(len(block))


class CtrIv(InitializationVector):
    """
    Counter-mode initialization vector.

    The current IV is the base IV plus the number of blocks processed
    so far, computed as a 128-bit big-endian sum that wraps on
    overflow. Only the block offset is mutable; the base IV is fixed
    at construction.

    Example:
        >>> iv = CtrIv(b"\\x00" * 16)
        >>> iv.advance(32)
        >>> iv.get_current_iv().hex()
        '00000000000000000000000000000002'
        >>> iv.seek(16)
        >>> iv.block_offset
        1
    """

    BLOCK_SIZE = BLOCK_SIZE
    IV_SIZE = IV_SIZE

    def __init__(self, iv: bytes):
        """
        Initialize from a base IV.

        Args:
            iv: 16-byte initialization vector

        Raises:
            InvalidInputError: If iv is not 16 bytes
        """
        if not isinstance(iv, (bytes, bytearray)):
            raise InvalidInputError(
                f"Initialization vector must be bytes, got {type(iv).__name__}"
            )
        if len(iv) != self.IV_SIZE:
            raise InvalidInputError(
                f"Invalid initialization vector provided to {type(self).__name__}: "
                f"expected {self.IV_SIZE} bytes, got {len(iv)}"
            )

        self._base = split_words(bytes(iv))
        self._offset = zero_counter()

    @property
    def base_iv(self) -> bytes:
        """The IV supplied at construction."""
        return join_words(self._base)

    @property
    def block_offset(self) -> int:
        """Number of blocks the counter has advanced (mod 2^128)."""
        return counter_to_int(self._offset)

    def get_cipher_mode(self) -> CipherMode:
        return CipherMode.CTR

    def requires_padding(self) -> bool:
        return False

    def supports_arbitrary_seeking(self) -> bool:
        return True

    def get_current_iv(self) -> bytes:
        """
        Compute the IV for the current block.

        Returns:
            16 bytes: (base IV + block offset) mod 2^128, big-endian
        """
        return join_words(add_counters(self._base, self._offset))

    def advance(self, byte_count: int) -> None:
        """
        Advance the counter past byte_count transformed bytes.

        A trailing partial block still consumes a whole counter value,
        since the keystream is generated one full block at a time.

        Args:
            byte_count: Bytes just transformed (non-negative)

        Raises:
            InvalidInputError: If byte_count is negative
        """
        if byte_count < 0:
            raise InvalidInputError(f"Byte count must be non-negative, got {byte_count}")

        blocks = -(-byte_count // self.BLOCK_SIZE)
        increment_words(self._offset, blocks)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> None:
        """
        Move the counter to a block-aligned byte offset.

        Args:
            offset: Byte offset, a multiple of BLOCK_SIZE
            whence: io.SEEK_SET (absolute) or io.SEEK_CUR (relative)

        Raises:
            UnsupportedOperationError: If the offset is unaligned or
                negative, or whence is not recognized
        """
        if offset % self.BLOCK_SIZE != 0:
            raise UnsupportedOperationError(
                f"CTR initialization vectors only support seeking to offsets "
                f"that are multiples of {self.BLOCK_SIZE}, got {offset}"
            )

        if whence == io.SEEK_SET:
            if offset < 0:
                raise UnsupportedOperationError(
                    f"Cannot seek before the start of the stream (offset {offset})"
                )
            self._offset = zero_counter()
        elif whence == io.SEEK_CUR:
            if offset < 0:
                raise UnsupportedOperationError("Negative relative seeks are not supported")
        else:
            raise UnsupportedOperationError(f"Unrecognized whence: {whence!r}")

        increment_words(self._offset, offset // self.BLOCK_SIZE)
        logger.debug("CTR IV seek to block %d (whence=%s)", self.block_offset, whence)

    def __repr__(self) -> str:
        return f"CtrIv(base={self.base_iv.hex()}, block_offset={self.block_offset})"
