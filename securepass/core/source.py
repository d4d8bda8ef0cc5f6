"""
SecurePass Sources - Cryptographically secure random byte sources.

Every source is safe for concurrent callers: each read returns bytes no
other caller receives.
"""

import hashlib
import os
import secrets
import threading
from typing import Literal, Optional, Union

import numpy as np

from securepass.core.errors import EntropySourceExhausted
from securepass.core.log import get_logger

logger = get_logger('source')


# =============================================================================
# Source interface
# =============================================================================

class ByteSource:
    """Base class for random byte sources."""

    name = "unknown"

    def read(self, n: int) -> bytes:
        """
        Return exactly ``n`` random bytes.

        Raises:
            EntropySourceExhausted: If the source cannot supply ``n`` bytes
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def _check_request(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise ValueError(f"Byte count must be a non-negative integer, got {n!r}")


# =============================================================================
# System CSPRNG
# =============================================================================

class SystemSource(ByteSource):
    """
    Operating system CSPRNG via ``secrets.token_bytes``.

    The first read may block briefly while the OS pool is seeded.
    """

    name = "CSPRNG"

    def read(self, n: int) -> bytes:
        _check_request(n)
        try:
            data = secrets.token_bytes(n)
        except OSError as e:
            raise EntropySourceExhausted(f"OS CSPRNG failure requesting {n} byte(s): {e}") from e
        if len(data) != n:
            raise EntropySourceExhausted(
                f"OS CSPRNG returned unexpected byte count ({len(data)} of {n})"
            )
        return data


_default_source = SystemSource()


def get_default_source() -> ByteSource:
    """Process-wide production source."""
    return _default_source


# =============================================================================
# Finite pre-captured entropy
# =============================================================================

class ArrayByteSource(ByteSource):
    """
    Finite buffer of previously captured entropy.

    Bytes are handed out once, in order. Running out is fatal: the caller gets
    EntropySourceExhausted and nothing is reused or padded.
    """

    name = "buffer"

    def __init__(self, data: Union[bytes, bytearray, np.ndarray], name: Optional[str] = None):
        if isinstance(data, np.ndarray):
            self._data = np.ascontiguousarray(data, dtype=np.uint8).copy()
        else:
            self._data = np.frombuffer(bytes(data), dtype=np.uint8).copy()
        self._offset = 0
        self._lock = threading.Lock()
        if name is not None:
            self.name = name

    @classmethod
    def from_file(cls, filepath: str, apply_hash: bool = True) -> "ArrayByteSource":
        """
        Load entropy from a file.

        Args:
            filepath: Path to the entropy file
            apply_hash: Apply hash whitening

        Returns:
            Source serving the file's (whitened) bytes
        """
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"File not found: {filepath}")

        data = np.fromfile(filepath, dtype=np.uint8)
        if apply_hash:
            hashed = hash_entropy(data)
            secure_zero(data)
            data = hashed

        logger.info("Loaded %d entropy bytes from %s", len(data), filepath)
        return cls(data, name="file")

    @property
    def remaining(self) -> int:
        with self._lock:
            return len(self._data) - self._offset

    def snapshot(self) -> np.ndarray:
        """Copy of the unread bytes; nothing is consumed."""
        with self._lock:
            return self._data[self._offset:].copy()

    def read(self, n: int) -> bytes:
        _check_request(n)
        with self._lock:
            end = self._offset + n
            if end > len(self._data):
                raise EntropySourceExhausted(
                    f"Not enough entropy: requested {n} byte(s), "
                    f"{len(self._data) - self._offset} remaining"
                )
            chunk = self._data[self._offset:end].tobytes()
            self._data[self._offset:end] = 0
            self._offset = end
        return chunk


# =============================================================================
# Deterministic stream for tests
# =============================================================================

class DeterministicSource(ByteSource):
    """
    Seedable SHA-512 counter-mode stream.

    Output block i is SHA-512(seed || i). Identical seeds give identical
    streams; meant for reproducible tests, not for production passwords.
    """

    name = "deterministic"

    def __init__(self, seed: Union[int, str, bytes]):
        if isinstance(seed, int):
            seed = seed.to_bytes(max(1, (seed.bit_length() + 7) // 8), 'big', signed=False)
        elif isinstance(seed, str):
            seed = seed.encode('utf-8')
        self._seed = bytes(seed)
        self._counter = 0
        self._pending = bytearray()
        self._lock = threading.Lock()

    def read(self, n: int) -> bytes:
        _check_request(n)
        with self._lock:
            while len(self._pending) < n:
                ctx = hashlib.sha512()
                ctx.update(self._seed)
                ctx.update(self._counter.to_bytes(8, 'big'))
                self._pending.extend(ctx.digest())
                self._counter += 1
            out = bytes(self._pending[:n])
            del self._pending[:n]
        return out


# =============================================================================
# Helpers
# =============================================================================

def hash_entropy(
    raw_entropy: np.ndarray,
    hash_algo: Literal['sha256', 'sha512'] = 'sha512'
) -> np.ndarray:
    """
    Cryptographic whitening using hash function.

    Args:
        raw_entropy: Raw entropy data
        hash_algo: Hash algorithm to use ('sha256' or 'sha512')

    Returns:
        Whitened entropy as numpy uint8 array, same length as the input
    """
    if hash_algo == 'sha256':
        h = hashlib.sha256
        hash_size = 32
    elif hash_algo == 'sha512':
        h = hashlib.sha512
        hash_size = 64
    else:
        raise ValueError(f"Unsupported hash: {hash_algo}")

    output = bytearray()
    offset = 0
    chunk_index = 0

    while offset < len(raw_entropy):
        chunk = raw_entropy[offset:offset + hash_size]

        ctx = h()
        ctx.update(chunk_index.to_bytes(4, 'big'))
        ctx.update(chunk.tobytes())
        output.extend(ctx.digest()[:len(chunk)])

        offset += len(chunk)
        chunk_index += 1

    result = np.frombuffer(bytes(output), dtype=np.uint8).copy()
    secure_zero(output)
    return result


def secure_zero(data: Union[np.ndarray, bytearray]) -> None:
    """
    Overwrite a writable buffer with zeros (best-effort).

    Python may already hold copies elsewhere; immutable bytes are left alone.
    """
    if isinstance(data, np.ndarray):
        if data.flags.writeable:
            data[:] = 0
    elif isinstance(data, bytearray):
        data[:] = bytes(len(data))
