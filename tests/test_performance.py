"""
Performance tests for keystretch.

Exercises the benchmark tooling with small iteration counts.
"""

import pytest

from keystretch import HashAlgorithm, HashlibHashProvider, UnsupportedAlgorithm
from keystretch.evaluation import BenchmarkResult, DerivationBenchmark, estimate_iterations


class TestDerivationBenchmark:
    """Test benchmark measurements."""
    
    def test_single_benchmark(self):
        benchmark = DerivationBenchmark()
        result = benchmark.benchmark("SHA256", iterations=50, repeats=2)
        
        assert isinstance(result, BenchmarkResult)
        assert result.algorithm == "SHA256"
        assert result.iterations == 50
        assert result.repeats == 2
        assert 0 < result.min_time <= result.mean_time
        assert result.rounds_per_second > 0
        assert result.rss_delta_mb is not None
        assert benchmark.results == [result]
    
    def test_compare_algorithms(self):
        benchmark = DerivationBenchmark()
        results = benchmark.compare_algorithms(["SHA1", HashAlgorithm.SHA512], [5, 10], repeats=1)
        
        assert [(r.algorithm, r.iterations) for r in results] == [
            ("SHA1", 5), ("SHA1", 10), ("SHA512", 5), ("SHA512", 10),
        ]
        summary = benchmark.get_summary_report()
        assert summary['total_runs'] == 4
        assert set(summary['rounds_per_second']) == {"SHA1", "SHA512"}
    
    def test_compare_all_algorithms_by_default(self):
        results = DerivationBenchmark(HashlibHashProvider()).compare_algorithms(
            iteration_counts=[2], repeats=1)
        assert {r.algorithm for r in results} == {a.value for a in HashAlgorithm}
    
    def test_invalid_repeats(self):
        with pytest.raises(ValueError):
            DerivationBenchmark().benchmark("SHA256", 10, repeats=0)
    
    def test_unknown_algorithm(self):
        with pytest.raises(UnsupportedAlgorithm):
            DerivationBenchmark().benchmark("SHA3-512", 10)


class TestEstimateIterations:
    """Test iteration calibration."""
    
    def test_estimate_positive(self):
        assert estimate_iterations("SHA256", 0.01, sample_iterations=200) >= 1
    
    def test_estimate_scales_with_target(self):
        short = estimate_iterations("SHA1", 0.001, sample_iterations=500)
        long = estimate_iterations("SHA1", 10.0, sample_iterations=500)
        assert long > short
    
    def test_estimate_rejects_non_positive_target(self):
        with pytest.raises(ValueError):
            estimate_iterations("SHA256", 0)
