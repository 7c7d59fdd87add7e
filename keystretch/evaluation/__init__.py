"""
Evaluation tools for keystretch.
"""

from .benchmark import BenchmarkResult, DerivationBenchmark, estimate_iterations

__all__ = [
    'BenchmarkResult',
    'DerivationBenchmark',
    'estimate_iterations',
]
