"""
SecurePass Health - Statistical self-tests for byte sources and the sampler.

A subset of NIST SP 800-22 over raw source bytes, plus a chi-square
goodness-of-fit test over sampled indices.
"""

from typing import Any, Dict, Optional

import numpy as np
from scipy import special, stats

from securepass.core.log import get_logger
from securepass.core.sampler import SecureSampler
from securepass.core.source import ArrayByteSource, ByteSource

logger = get_logger('health')

P_VALUE_THRESHOLD = 0.01


class HealthTests:
    """Randomness checks run before trusting a source."""

    @staticmethod
    def bytes_to_bits(data):
        """Convert bytes to bit array."""
        if isinstance(data, (bytes, bytearray)):
            data = np.frombuffer(bytes(data), dtype=np.uint8)
        return np.unpackbits(data)

    @staticmethod
    def frequency_monobit_test(bits):
        """Frequency (Monobit) Test"""
        n = len(bits)
        ones_count = np.sum(bits, dtype=np.int64)
        s = 2 * ones_count - n
        s_obs = abs(s) / np.sqrt(n)
        p_value = float(special.erfc(s_obs / np.sqrt(2)))

        return {
            'name': 'Frequency (Monobit)',
            'p_value': p_value,
            'passed': p_value >= P_VALUE_THRESHOLD,
            'statistic': float(s_obs)
        }

    @staticmethod
    def frequency_block_test(bits, block_size=128):
        """Frequency Test within a Block"""
        n = len(bits)
        num_blocks = n // block_size

        if num_blocks < 1:
            return None

        blocks = bits[:num_blocks * block_size].reshape(num_blocks, block_size)
        proportions = np.mean(blocks, axis=1)
        chi_squared = 4 * block_size * np.sum((proportions - 0.5) ** 2)
        p_value = float(special.gammaincc(num_blocks / 2, chi_squared / 2))

        return {
            'name': 'Block Frequency',
            'p_value': p_value,
            'passed': p_value >= P_VALUE_THRESHOLD,
            'statistic': float(chi_squared)
        }

    @staticmethod
    def runs_test(bits):
        """Runs Test"""
        n = len(bits)
        proportion = np.mean(bits)

        if abs(proportion - 0.5) >= 2 / np.sqrt(n):
            return {
                'name': 'Runs',
                'p_value': 0.0,
                'passed': False,
                'statistic': None,
                'note': 'Pre-test failed: proportion too far from 0.5'
            }

        runs = 1 + np.sum(bits[:-1] != bits[1:])
        expected_runs = 2 * n * proportion * (1 - proportion)
        v_obs = abs(runs - expected_runs) / (2 * np.sqrt(2 * n) * proportion * (1 - proportion))
        p_value = float(special.erfc(v_obs))

        return {
            'name': 'Runs',
            'p_value': p_value,
            'passed': p_value >= P_VALUE_THRESHOLD,
            'statistic': float(v_obs),
            'runs': int(runs),
            'expected': float(expected_runs)
        }

    @staticmethod
    def uniformity_test(samples: np.ndarray, bound: int) -> Dict[str, Any]:
        """
        Chi-square goodness of fit of sampled indices against uniform on [0, bound).

        Any sample outside the range fails the test outright.
        """
        samples = np.asarray(samples, dtype=np.int64)
        out_of_range = int(np.sum((samples < 0) | (samples >= bound)))
        if out_of_range:
            return {
                'name': 'Sampler Uniformity',
                'p_value': 0.0,
                'passed': False,
                'statistic': None,
                'note': f'{out_of_range} sample(s) outside [0, {bound})'
            }

        observed = np.bincount(samples, minlength=bound)
        statistic, p_value = stats.chisquare(observed)
        p_value = float(p_value)

        return {
            'name': 'Sampler Uniformity',
            'p_value': p_value,
            'passed': p_value >= P_VALUE_THRESHOLD,
            'statistic': float(statistic),
            'bound': bound,
            'samples': int(len(samples))
        }

    @classmethod
    def run_all(
        cls,
        source: ByteSource,
        data_bytes: int = 10000,
        bound: int = 77,
        samples: int = 50000,
        sampler: Optional[SecureSampler] = None,
        verbose: bool = True
    ) -> Dict[str, Any]:
        """
        Run the bit-level tests on ``data_bytes`` from the source and the
        uniformity test on ``samples`` indices drawn with bound ``bound``.

        Args:
            source: Byte source under test
            data_bytes: Bytes to read for the bit-level tests
            bound: Sampling bound (pick one that is not a power of two)
            samples: Number of indices to draw
            sampler: Sampler to test (default: one built on ``source``)
            verbose: Log a result summary

        Returns:
            Dictionary with test results
        """
        bits = cls.bytes_to_bits(source.read(data_bytes))
        sampler = sampler if sampler is not None else SecureSampler(source)
        drawn = sampler.uniform_indices(bound, samples)

        tests = [
            cls.frequency_monobit_test(bits),
            cls.frequency_block_test(bits),
            cls.runs_test(bits),
            cls.uniformity_test(drawn, bound),
        ]
        return cls._summarize(tests, source.name, data_bytes, samples, bound, verbose)

    @classmethod
    def run_on_buffer(
        cls,
        data: np.ndarray,
        bound: int = 77,
        name: str = "buffer",
        verbose: bool = True
    ) -> Dict[str, Any]:
        """
        Run the same tests on captured bytes without spending a finite source.

        The bit-level tests cover the whole buffer. The uniformity test samples
        a copy of it, using at most half its 4-byte words so rejections cannot
        run it dry; it is skipped when that leaves fewer than 5 expected hits
        per bin.

        Args:
            data: Captured bytes (e.g. ``ArrayByteSource.snapshot()``)
            bound: Sampling bound for the uniformity test
            name: Source name for the log summary
            verbose: Log a result summary

        Returns:
            Dictionary with test results, as ``run_all``
        """
        data = np.asarray(data, dtype=np.uint8)
        bits = cls.bytes_to_bits(data)
        tests = [
            cls.frequency_monobit_test(bits) if len(bits) else None,
            cls.frequency_block_test(bits),
            cls.runs_test(bits) if len(bits) > 1 else None,
        ]

        samples = len(data) // 8
        if samples >= 5 * bound:
            sampler = SecureSampler(ArrayByteSource(data, name=name))
            tests.append(cls.uniformity_test(sampler.uniform_indices(bound, samples), bound))
        else:
            samples = 0
        return cls._summarize(tests, name, len(data), samples, bound, verbose)

    @staticmethod
    def _summarize(tests, name, data_bytes, samples, bound, verbose) -> Dict[str, Any]:
        tests = [t for t in tests if t is not None]

        passed = sum(1 for t in tests if t['passed'])
        total = len(tests)

        if verbose:
            logger.info("Health tests on %s source: %s bytes, %s samples (bound %d)",
                        name, f"{data_bytes:,}", f"{samples:,}", bound)
            for test in tests:
                status = "PASS" if test['passed'] else "FAIL"
                logger.info("%s  %-30s p-value: %.6f", status, test['name'], test['p_value'])
            logger.info("Result: %d/%d tests passed", passed, total)
            if passed < total:
                logger.warning("Random source FAILED health tests - do not generate passwords from it")

        return {
            'tests': tests,
            'passed': passed,
            'total': total,
            'pass_rate': passed / total if total else 0
        }
