"""
AES Streaming Encryption Module

Wraps a readable byte stream and encrypts or decrypts it on the fly:
- Constant memory (one chunk buffered at a time)
- IV handling delegated to an InitializationVector strategy
- Random-access seeking for modes that support it (CTR)
- Replay seeking for modes that do not

The block cipher itself is AES from the `cryptography` package. Each
chunk is transformed with a fresh cipher context keyed with the IV the
strategy reports for the chunk's first block, so the output is
identical to a one-shot AES-CTR transform of the whole stream.

Example:
    >>> iv = generate_iv()
    >>> with open("large.bin", "rb") as f:
    ...     stream = AesEncryptingStream(f, key, CtrIv(iv))
    ...     for chunk in stream.iter_chunks():
    ...         out.write(chunk)
"""

import copy
import io
import logging
import os
from abc import ABC, abstractmethod
from typing import BinaryIO, Generator, Optional

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..core_crypto.errors import InvalidInputError, UnsupportedOperationError
from ..core_crypto.initialization_vector import (
    BLOCK_SIZE, CipherMode, CtrIv, InitializationVector,
)


logger = logging.getLogger(__name__)

# Constants
KEY_SIZES = (16, 24, 32)            # AES-128, AES-192, AES-256
DEFAULT_CHUNK_SIZE = 64 * 1024      # 64 KB, a multiple of BLOCK_SIZE

# cryptography mode classes for each IV strategy mode
_MODES = {
    CipherMode.CTR: modes.CTR,
}


class _AesStream(ABC):
    """
    Shared machinery for the encrypting and decrypting streams.

    Subclasses choose the cipher direction in _new_context().
    """

    def __init__(self, source: BinaryIO, key: bytes, iv: InitializationVector,
                 chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize the stream.

        Args:
            source: Readable binary stream providing the input
            key: AES key (16, 24 or 32 bytes)
            iv: IV strategy, owned by this stream from now on
            chunk_size: Bytes transformed per cipher call, a positive
                multiple of the block size

        Raises:
            InvalidInputError: If the key or chunk size is invalid
            UnsupportedOperationError: If the IV's mode needs padding
        """
        if not isinstance(key, (bytes, bytearray)) or len(key) not in KEY_SIZES:
            size = len(key) if isinstance(key, (bytes, bytearray)) else type(key).__name__
            raise InvalidInputError(
                f"AES key must be one of {KEY_SIZES} bytes, got {size}"
            )
        if chunk_size <= 0 or chunk_size % BLOCK_SIZE != 0:
            raise InvalidInputError(
                f"Chunk size must be a positive multiple of {BLOCK_SIZE}, got {chunk_size}"
            )
        if iv.requires_padding():
            raise UnsupportedOperationError(
                f"{iv.get_cipher_mode().value} mode requires padding and cannot be streamed"
            )
        if iv.get_cipher_mode() not in _MODES:
            raise UnsupportedOperationError(
                f"No cipher available for mode {iv.get_cipher_mode().value}"
            )

        self._source = source
        self._algorithm = algorithms.AES(bytes(key))
        self._mode = _MODES[iv.get_cipher_mode()]
        self._iv = iv
        self._initial_iv = copy.deepcopy(iv)
        self._chunk_size = chunk_size

        self._buffer = b""
        self._buffer_pos = 0
        self._position = 0
        self._source_eof = False
        self._closed = False

        logger.debug("Opened %s (mode=%s, chunk_size=%d)",
                     type(self).__name__, iv.get_cipher_mode().value, chunk_size)

    @abstractmethod
    def _new_context(self, cipher: Cipher):
        """Cipher context (encryptor or decryptor) for one chunk."""

    def _read_source_chunk(self) -> bytes:
        """Read a full chunk from the source, looping over short reads."""
        parts = []
        remaining = self._chunk_size
        while remaining > 0:
            data = self._source.read(remaining)
            if not data:
                self._source_eof = True
                break
            parts.append(data)
            remaining -= len(data)
        return b"".join(parts)

    def _next_chunk(self) -> bytes:
        """Transform the next source chunk and advance the IV past it."""
        if self._source_eof:
            return b""

        chunk = self._read_source_chunk()
        if not chunk:
            return b""

        cipher = Cipher(self._algorithm, self._mode(self._iv.get_current_iv()))
        context = self._new_context(cipher)
        transformed = context.update(chunk) + context.finalize()
        self._iv.update(chunk)
        return transformed

    def _check_open(self):
        if self._closed:
            raise UnsupportedOperationError("I/O operation on closed stream")

    def _fill_buffer(self) -> bool:
        """Refill the buffer once it is drained. False at end of stream."""
        if self._buffer_pos >= len(self._buffer):
            self._buffer = self._next_chunk()
            self._buffer_pos = 0
        return self._buffer_pos < len(self._buffer)

    def _take_buffered(self, size: int) -> bytes:
        start = self._buffer_pos
        data = self._buffer[start:start + size]
        self._buffer_pos += len(data)
        return data

    def read(self, size: int = -1) -> bytes:
        """
        Read up to size transformed bytes.

        Args:
            size: Maximum bytes to return; negative reads to the end

        Returns:
            Transformed bytes, b"" at end of stream
        """
        self._check_open()

        parts = []
        if size is None or size < 0:
            while self._fill_buffer():
                parts.append(self._take_buffered(len(self._buffer)))
        else:
            remaining = size
            while remaining > 0 and self._fill_buffer():
                data = self._take_buffered(remaining)
                parts.append(data)
                remaining -= len(data)

        data = b"".join(parts)
        self._position += len(data)
        return data

    def iter_chunks(self) -> Generator[bytes, None, None]:
        """
        Iterate over the remaining output in chunk-sized pieces.

        Yields:
            Transformed chunks
        """
        while True:
            data = self.read(self._chunk_size)
            if not data:
                break
            yield data

    def eof(self) -> bool:
        """True when no more output remains."""
        self._check_open()
        return not self._fill_buffer()

    def tell(self) -> int:
        """Current position in the transformed stream."""
        self._check_open()
        return self._position

    def readable(self) -> bool:
        return not self._closed

    def seekable(self) -> bool:
        if self._closed:
            return False
        seekable = getattr(self._source, "seekable", None)
        return bool(seekable and seekable())

    def get_size(self) -> Optional[int]:
        """
        Total size of the transformed stream, if known.

        Stream modes do not pad, so this is the size of the source.
        Returns None when the source cannot seek.
        """
        self._check_open()
        if not self.seekable():
            return None
        current = self._source.tell()
        size = self._source.seek(0, io.SEEK_END)
        self._source.seek(current)
        return size

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """
        Move to a position in the transformed stream.

        Any offset is accepted; the stream seeks to the enclosing block
        boundary and discards the bytes in front of the target. Targets
        past the end stop at the end of the stream. When the
        IV cannot jump directly, the stream rewinds to the start and
        replays up to the target.

        Args:
            offset: Byte offset
            whence: io.SEEK_SET, io.SEEK_CUR or io.SEEK_END

        Returns:
            The new position

        Raises:
            UnsupportedOperationError: If the source cannot seek, the
                target is negative, or whence is not recognized
        """
        self._check_open()
        if not self.seekable():
            raise UnsupportedOperationError("Underlying stream is not seekable")

        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self._position + offset
        elif whence == io.SEEK_END:
            target = self.get_size() + offset
        else:
            raise UnsupportedOperationError(f"Unrecognized whence: {whence!r}")

        if target < 0:
            raise UnsupportedOperationError(
                f"Cannot seek to negative position {target}"
            )
        target = min(target, self.get_size())

        if self._iv.supports_arbitrary_seeking():
            aligned = target - target % BLOCK_SIZE
            self._iv.seek(aligned, io.SEEK_SET)
            self._source.seek(aligned)
            logger.debug("Seek to %d via block %d", target, aligned // BLOCK_SIZE)
        else:
            aligned = 0
            self._iv = copy.deepcopy(self._initial_iv)
            self._source.seek(0)
            logger.debug("Seek to %d by replaying from start", target)

        self._buffer = b""
        self._buffer_pos = 0
        self._source_eof = False
        self._position = aligned

        remaining = target - aligned
        while remaining > 0:
            skipped = self.read(min(remaining, self._chunk_size))
            if not skipped:
                break
            remaining -= len(skipped)

        return self._position

    def close(self) -> None:
        """Close the stream and its source."""
        if self._closed:
            return
        self._closed = True
        self._buffer = b""
        self._buffer_pos = 0
        self._source.close()
        logger.debug("Closed %s", type(self).__name__)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


class AesEncryptingStream(_AesStream):
    """
    Stream that yields the AES encryption of its source.

    Example:
        >>> stream = AesEncryptingStream(io.BytesIO(b"secret"), key, CtrIv(iv))
        >>> ciphertext = stream.read()
    """

    def _new_context(self, cipher: Cipher):
        return cipher.encryptor()


class AesDecryptingStream(_AesStream):
    """Stream that yields the AES decryption of its source."""

    def _new_context(self, cipher: Cipher):
        return cipher.decryptor()


def encrypt_bytes(data: bytes, key: bytes, iv: bytes) -> bytes:
    """Encrypt an in-memory buffer with AES-CTR."""
    return AesEncryptingStream(io.BytesIO(data), key, CtrIv(iv)).read()


def decrypt_bytes(data: bytes, key: bytes, iv: bytes) -> bytes:
    """Decrypt an in-memory buffer with AES-CTR."""
    return AesDecryptingStream(io.BytesIO(data), key, CtrIv(iv)).read()


def _transform_file(stream_class, input_path: str, output_path: str,
                    key: bytes, iv: bytes, chunk_size: int) -> dict:
    with open(input_path, 'rb') as fin, open(output_path, 'wb') as fout:
        with stream_class(fin, key, CtrIv(iv), chunk_size) as stream:
            for chunk in stream.iter_chunks():
                fout.write(chunk)

    return {
        'input_size': os.path.getsize(input_path),
        'output_size': os.path.getsize(output_path),
        'iv': iv.hex(),
        'chunk_size': chunk_size,
    }


def encrypt_file(input_path: str, output_path: str, key: bytes, iv: bytes,
                 chunk_size: int = DEFAULT_CHUNK_SIZE) -> dict:
    """
    Encrypt a file with AES-CTR, streaming chunk by chunk.

    Args:
        input_path: Path to plaintext file
        output_path: Path for encrypted output
        key: AES key (16, 24 or 32 bytes)
        iv: 16-byte base IV
        chunk_size: Chunk size for streaming

    Returns:
        Dict with encryption metadata
    """
    return _transform_file(AesEncryptingStream, input_path, output_path,
                           key, iv, chunk_size)


def decrypt_file(input_path: str, output_path: str, key: bytes, iv: bytes,
                 chunk_size: int = DEFAULT_CHUNK_SIZE) -> dict:
    """Decrypt a file produced by encrypt_file()."""
    return _transform_file(AesDecryptingStream, input_path, output_path,
                           key, iv, chunk_size)
