"""OXT performance benchmarking: setup time, index growth, search latency."""

from .benchmark import run_benchmark, BENCHMARK_COUNTS

__all__ = ["run_benchmark", "BENCHMARK_COUNTS"]
