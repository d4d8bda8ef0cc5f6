from __future__ import annotations

import os
import tempfile
import threading
import unittest
from pathlib import Path
from unittest.mock import patch

import numpy as np

from securepass.core.errors import EntropySourceExhausted
from securepass.core.source import (
    ArrayByteSource,
    DeterministicSource,
    SystemSource,
    get_default_source,
    hash_entropy,
    secure_zero,
)


class SystemSourceTests(unittest.TestCase):
    def test_reads_requested_length(self) -> None:
        self.assertEqual(len(SystemSource().read(32)), 32)
        self.assertEqual(SystemSource().read(0), b"")

    def test_wraps_os_errors(self) -> None:
        with patch("securepass.core.source.secrets.token_bytes", side_effect=OSError("rng unavailable")):
            with self.assertRaisesRegex(EntropySourceExhausted, "OS CSPRNG failure requesting 16 byte\\(s\\)"):
                SystemSource().read(16)

    def test_rejects_short_reads(self) -> None:
        with patch("securepass.core.source.secrets.token_bytes", return_value=b"\x00"):
            with self.assertRaisesRegex(EntropySourceExhausted, "unexpected byte count"):
                SystemSource().read(2)

    def test_rejects_bad_counts(self) -> None:
        with self.assertRaises(ValueError):
            SystemSource().read(-1)

    def test_default_source_is_system(self) -> None:
        self.assertIsInstance(get_default_source(), SystemSource)
        self.assertIs(get_default_source(), get_default_source())


class ArrayByteSourceTests(unittest.TestCase):
    def test_bytes_are_served_once_in_order(self) -> None:
        source = ArrayByteSource(b"abcdef")
        self.assertEqual(source.read(2), b"ab")
        self.assertEqual(source.read(3), b"cde")
        self.assertEqual(source.remaining, 1)
        with self.assertRaisesRegex(EntropySourceExhausted, "Not enough entropy"):
            source.read(2)
        # a failed read does not consume the remainder
        self.assertEqual(source.read(1), b"f")

    def test_snapshot_copies_unread_bytes(self) -> None:
        source = ArrayByteSource(b"abcdef")
        source.read(2)
        snapshot = source.snapshot()
        self.assertEqual(snapshot.tobytes(), b"cdef")
        snapshot[:] = 0
        self.assertEqual(source.remaining, 4)
        self.assertEqual(source.read(4), b"cdef")

    def test_accepts_numpy_arrays_without_aliasing(self) -> None:
        data = np.arange(8, dtype=np.uint8)
        source = ArrayByteSource(data)
        self.assertEqual(source.read(8), bytes(range(8)))
        self.assertEqual(data.tolist(), list(range(8)))

    def test_concurrent_reads_are_disjoint(self) -> None:
        source = ArrayByteSource(np.arange(1000, dtype=">u4").tobytes())
        seen: list[int] = []
        lock = threading.Lock()

        def worker() -> None:
            for _ in range(100):
                value = int.from_bytes(source.read(4), "big")
                with lock:
                    seen.append(value)

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(sorted(seen), list(range(1000)))

    def test_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "entropy.bin"
            payload = os.urandom(200)
            path.write_bytes(payload)

            raw = ArrayByteSource.from_file(str(path), apply_hash=False)
            self.assertEqual(raw.name, "file")
            self.assertEqual(raw.read(200), payload)

            whitened = ArrayByteSource.from_file(str(path))
            self.assertEqual(whitened.remaining, 200)
            self.assertNotEqual(whitened.read(200), payload)

    def test_from_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            ArrayByteSource.from_file(".tmp_missing_entropy.bin")


class DeterministicSourceTests(unittest.TestCase):
    def test_same_seed_same_stream(self) -> None:
        self.assertEqual(DeterministicSource(42).read(100), DeterministicSource(42).read(100))
        self.assertNotEqual(DeterministicSource(42).read(64), DeterministicSource(43).read(64))
        self.assertEqual(DeterministicSource("seed").read(10), DeterministicSource(b"seed").read(10))

    def test_reads_are_a_continuous_stream(self) -> None:
        whole = DeterministicSource("stream").read(150)
        split = DeterministicSource("stream")
        self.assertEqual(split.read(30) + split.read(70) + split.read(50), whole)


class HelperTests(unittest.TestCase):
    def test_hash_entropy_preserves_length(self) -> None:
        data = np.frombuffer(os.urandom(130), dtype=np.uint8)
        for algo in ("sha256", "sha512"):
            out = hash_entropy(data, algo)
            self.assertEqual(len(out), 130)
            self.assertEqual(out.dtype, np.uint8)
        with self.assertRaisesRegex(ValueError, "Unsupported hash"):
            hash_entropy(data, "md5")  # type: ignore[arg-type]

    def test_secure_zero(self) -> None:
        buf = bytearray(b"secret")
        secure_zero(buf)
        self.assertEqual(buf, bytearray(6))
        arr = np.ones(4, dtype=np.uint8)
        secure_zero(arr)
        self.assertEqual(arr.tolist(), [0, 0, 0, 0])


if __name__ == "__main__":
    unittest.main()
