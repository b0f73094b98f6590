"""Disk Throughput Benchmark"""

from .base import BenchmarkBase, BenchmarkFatalError, BenchmarkResult, FileResult
from .filesystem import FilesystemBenchmark
from .metrics import MetricsCollector
from .visualize import generate_all_plots
from .workloads import AssignmentPolicy, BenchmarkConfig, WorkloadConfig, WorkerSpec, plan_workers

__all__ = [
    'BenchmarkBase',
    'BenchmarkFatalError',
    'BenchmarkResult',
    'FileResult',
    'FilesystemBenchmark',
    'MetricsCollector',
    'generate_all_plots',
    'AssignmentPolicy',
    'BenchmarkConfig',
    'WorkloadConfig',
    'WorkerSpec',
    'plan_workers',
]
