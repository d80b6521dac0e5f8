# Streaming Encryption Module
"""
AES streaming encryption implementations including:
- Encrypting and decrypting stream wrappers
- Random-access seeking for CTR mode
- In-memory and file convenience helpers

Features:
- Streaming (doesn't load large inputs into RAM)
- Output identical to a one-shot AES-CTR transform
"""

from .aes_stream import (
    AesEncryptingStream,
    AesDecryptingStream,
    encrypt_bytes,
    decrypt_bytes,
    encrypt_file,
    decrypt_file,
    KEY_SIZES,
    DEFAULT_CHUNK_SIZE,
)

__all__ = [
    'AesEncryptingStream',
    'AesDecryptingStream',
    'encrypt_bytes',
    'decrypt_bytes',
    'encrypt_file',
    'decrypt_file',
    'KEY_SIZES',
    'DEFAULT_CHUNK_SIZE',
]
