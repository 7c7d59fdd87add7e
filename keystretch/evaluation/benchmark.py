"""
Benchmark module for PBKDF2 derivation cost.

Measures how long derivations take per algorithm and iteration count, and
turns a measured round rate into a suggested iteration count for a given
time budget.
"""

import gc
import math
import statistics
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import psutil

from ..crypto.algorithms import AlgorithmLike, HashAlgorithm, HashProvider, get_default_provider, resolve_algorithm
from ..crypto.pbkdf2 import pbkdf2
from ..crypto.utils import int_to_bytes

BENCH_PASSWORD = b"keystretch-benchmark"
BENCH_SALT = b"keystretch-salt"


@dataclass
class BenchmarkResult:
    """Container for benchmark results."""
    algorithm: str
    iterations: int
    repeats: int
    mean_time: float
    min_time: float
    rounds_per_second: float
    rss_delta_mb: Optional[float] = None


class DerivationBenchmark:
    """
    Times pbkdf2() for a set of algorithms and iteration counts.
    """

    def __init__(self, provider: Optional[HashProvider] = None):
        """Initialize benchmark suite."""
        self.provider = provider or get_default_provider()
        self.results: List[BenchmarkResult] = []

    def measure_memory_usage(self) -> float:
        """Return the current resident set size in MB."""
        return psutil.Process().memory_info().rss / 1024 / 1024

    def benchmark(self, algorithm: AlgorithmLike, iterations: int, repeats: int = 3) -> BenchmarkResult:
        """
        Time a single-block derivation.

        Args:
            algorithm: Algorithm to benchmark
            iterations: PBKDF2 iteration count
            repeats: Number of timed derivations

        Returns:
            BenchmarkResult for this configuration
        """
        if repeats < 1:
            raise ValueError("repeats must be at least 1")
        algorithm = resolve_algorithm(algorithm, self.provider)

        gc.collect()
        memory_before = self.measure_memory_usage()

        timings = []
        for i in range(repeats):
            salt = BENCH_SALT + int_to_bytes(i, 4)
            start = time.perf_counter()
            pbkdf2(algorithm, BENCH_PASSWORD, salt, iterations, 0, provider=self.provider)
            timings.append(time.perf_counter() - start)

        mean_time = statistics.mean(timings)
        result = BenchmarkResult(
            algorithm=algorithm.value,
            iterations=iterations,
            repeats=repeats,
            mean_time=mean_time,
            min_time=min(timings),
            rounds_per_second=iterations / mean_time if mean_time > 0 else float('inf'),
            rss_delta_mb=self.measure_memory_usage() - memory_before,
        )
        self.results.append(result)
        return result

    def compare_algorithms(self, algorithms: Optional[Sequence[AlgorithmLike]] = None,
                           iteration_counts: Sequence[int] = (1000, 10000),
                           repeats: int = 3) -> List[BenchmarkResult]:
        """Benchmark every algorithm at every iteration count."""
        if algorithms is None:
            algorithms = [a for a in HashAlgorithm if self.provider.supports(a)]
        return [
            self.benchmark(algorithm, iterations, repeats)
            for algorithm in algorithms
            for iterations in iteration_counts
        ]

    def get_summary_report(self) -> Dict[str, Any]:
        """Best observed rounds per second, keyed by algorithm."""
        summary: Dict[str, Any] = {}
        for result in self.results:
            best = summary.get(result.algorithm, 0.0)
            summary[result.algorithm] = max(best, result.rounds_per_second)
        return {'total_runs': len(self.results), 'rounds_per_second': summary}


def estimate_iterations(algorithm: AlgorithmLike, target_seconds: float,
                        sample_iterations: int = 2000,
                        provider: Optional[HashProvider] = None) -> int:
    """
    Suggest an iteration count that makes one derivation take about target_seconds.

    Args:
        algorithm: Algorithm to calibrate
        target_seconds: Desired time per single-block derivation
        sample_iterations: Iterations used for the measurement run

    Returns:
        Suggested iteration count, at least 1
    """
    if target_seconds <= 0:
        raise ValueError("target_seconds must be positive")
    result = DerivationBenchmark(provider).benchmark(algorithm, sample_iterations, repeats=1)
    if math.isinf(result.rounds_per_second):
        return sample_iterations
    return max(1, int(result.rounds_per_second * target_seconds))
