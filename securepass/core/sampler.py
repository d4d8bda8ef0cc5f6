"""
SecurePass Sampler - Unbiased uniform indices from a secure byte source.
"""

from typing import Optional, Sequence, TypeVar

import numpy as np

from securepass.core.log import get_logger
from securepass.core.source import ByteSource, get_default_source

logger = get_logger('sampler')

T = TypeVar('T')

WORD_BYTES = 4
WORD_RANGE = 1 << (8 * WORD_BYTES)


def _check_bound(bound: int) -> None:
    if isinstance(bound, bool) or not isinstance(bound, (int, np.integer)) or bound < 1:
        raise ValueError(f"Sampling bound must be a positive integer, got {bound!r}")


def _word_bytes_for(bound: int) -> int:
    """Width of one draw; bounds past 32 bits get a spare byte of headroom."""
    if bound <= WORD_RANGE:
        return WORD_BYTES
    return ((bound - 1).bit_length() + 7) // 8 + 1


def rejection_limit(bound: int, word_bytes: int = WORD_BYTES) -> int:
    """
    Largest multiple of ``bound`` not exceeding the word range.

    Draws at or above this value are rejected; below it, ``value % bound`` is
    exactly uniform.
    """
    word_range = 1 << (8 * word_bytes)
    return (word_range // bound) * bound


class SecureSampler:
    """
    Draws uniformly distributed indices by rejection sampling.

    A fixed-width unsigned word is read from the byte source; words at or
    above ``rejection_limit(bound)`` are discarded and redrawn, so no index is
    favoured for any bound. Source failures propagate as
    EntropySourceExhausted and are never retried.
    """

    def __init__(self, source: Optional[ByteSource] = None):
        self._source = source if source is not None else get_default_source()

    @property
    def source(self) -> ByteSource:
        return self._source

    def uniform_index(self, bound: int) -> int:
        """
        Draw one integer uniformly from ``[0, bound)``.

        Args:
            bound: Exclusive upper bound (>= 1)

        Returns:
            Uniform index
        """
        _check_bound(bound)
        bound = int(bound)
        if bound == 1:
            return 0

        width = _word_bytes_for(bound)
        limit = rejection_limit(bound, width)
        while True:
            value = int.from_bytes(self._source.read(width), 'big')
            if value < limit:
                return value % bound

    def uniform_indices(self, bound: int, count: int) -> np.ndarray:
        """
        Draw ``count`` independent uniform indices from ``[0, bound)``.

        Vectorised with numpy for 32-bit bounds; indices come back in draw order.

        Returns:
            int64 numpy array of length ``count``
        """
        _check_bound(bound)
        bound = int(bound)
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValueError(f"Sample count must be a non-negative integer, got {count!r}")

        if bound == 1:
            return np.zeros(count, dtype=np.int64)
        if bound > WORD_RANGE:
            return np.array([self.uniform_index(bound) for _ in range(count)], dtype=np.int64)

        limit = rejection_limit(bound)
        out = np.empty(count, dtype=np.int64)
        filled = 0
        rejected = 0

        while filled < count:
            need = count - filled
            raw = self._source.read(need * WORD_BYTES)
            words = np.frombuffer(raw, dtype='>u4').astype(np.uint64)
            accepted = words[words < limit]
            rejected += need - len(accepted)
            out[filled:filled + len(accepted)] = (accepted % bound).astype(np.int64)
            filled += len(accepted)

        if rejected:
            logger.debug("Rejected %d of %d draws for bound %d", rejected, count + rejected, bound)
        return out

    def choice(self, seq: Sequence[T]) -> T:
        """Pick one element of a non-empty sequence uniformly."""
        if not len(seq):
            raise ValueError("Cannot choose from an empty sequence")
        return seq[self.uniform_index(len(seq))]
