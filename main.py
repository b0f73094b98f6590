#!/usr/bin/env python3
"""
Disk Throughput Benchmark Tool
Запись N файлов со случайными данными в одну или несколько директорий,
затем чтение всего содержимого обратно, с замером MB/s
"""
import argparse
import logging
import os
import queue
import sys
import threading
from pathlib import Path
from typing import Callable, List, Optional

from diskbench import (
    BenchmarkConfig,
    BenchmarkFatalError,
    BenchmarkResult,
    FilesystemBenchmark,
    MetricsCollector,
    WorkloadConfig,
    generate_all_plots,
    plan_workers,
)
from diskbench.logger import set_logger
from diskbench.workloads import parse_directories


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Disk Throughput Benchmark Tool',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One worker per directory
  python3 main.py --dir /mnt/ssd,/mnt/hdd --files 20 --size 10

  # Four workers sharing one directory
  python3 main.py --dir /mnt/ssd --readers 4 --files 20 --size 10

  # Save JSON/text report and chart
  python3 main.py --dir /mnt/ssd --files 20 --output-dir benchmark_results
        """
    )

    parser.add_argument('--dir', default=WorkloadConfig.DEFAULT_DIR,
                       help="comma ',' separated directories to write and read")
    parser.add_argument('--readers', type=positive_int, default=WorkloadConfig.DEFAULT_READERS,
                       help='Number of workers per directory')
    parser.add_argument('--files', type=non_negative_int, default=WorkloadConfig.DEFAULT_FILES,
                       help='Amount of files to write per worker')
    parser.add_argument('--size', type=positive_int, default=WorkloadConfig.DEFAULT_SIZE_MB,
                       help='File size in MB (to write)')
    parser.add_argument('--log-file', default=None,
                       help='Also write log records to this file')
    parser.add_argument('--log-level', default='INFO',
                       choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                       help='Logging level')
    parser.add_argument('--output-dir', default=None,
                       help='Output directory for JSON/text report and chart')
    parser.add_argument('--cleanup', action='store_true',
                       help='Remove written files after each worker finishes')

    return parser


def config_from_args(args: argparse.Namespace) -> BenchmarkConfig:
    return BenchmarkConfig(
        directories=parse_directories(args.dir),
        files_to_write=args.files,
        file_size_mb=args.size,
        readers=args.readers,
        cleanup=args.cleanup,
    )


def build_benchmarks(config: BenchmarkConfig, logger: logging.Logger,
                     random_source: Callable[[int], bytes] = os.urandom) -> List[FilesystemBenchmark]:
    """Один экземпляр бенчмарка на каждого воркера"""
    return [
        FilesystemBenchmark(
            directory=spec.directory,
            files_to_write=config.files_to_write,
            file_size_mb=config.file_size_mb,
            logger=logger,
            worker_id=spec.worker_id,
            random_source=random_source,
            label=spec.label,
        )
        for spec in plan_workers(config)
    ]


def _run_worker(index: int, benchmark: FilesystemBenchmark, cleanup: bool, done: queue.Queue):
    try:
        result = benchmark.run(cleanup=cleanup)
    except Exception as e:
        done.put((index, None, e))
    else:
        done.put((index, result, None))


def run_benchmarks(benchmarks: List[FilesystemBenchmark], cleanup: bool = False) -> List[BenchmarkResult]:
    """
    Запуск всех воркеров параллельно и ожидание каждого.

    Каждый поток кладет в очередь ровно один сигнал завершения.
    Первая же ошибка воркера пробрасывается наружу, не дожидаясь остальных
    (потоки-демоны не держат процесс).
    """
    done: queue.Queue = queue.Queue()

    for index, benchmark in enumerate(benchmarks):
        thread = threading.Thread(
            target=_run_worker,
            args=(index, benchmark, cleanup, done),
            name=f"bench-{index}",
            daemon=True,
        )
        thread.start()

    results: List[Optional[BenchmarkResult]] = [None] * len(benchmarks)
    for _ in benchmarks:
        index, result, error = done.get()
        if error is not None:
            raise error
        results[index] = result

    return results


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    logger = set_logger(log_file=args.log_file, level=getattr(logging, args.log_level))
    config = config_from_args(args)

    logger.debug(f"Directories: {', '.join(config.directories)}, policy: {config.policy}, "
                 f"files: {config.files_to_write}, size: {config.file_size_mb} MB")

    benchmarks = build_benchmarks(config, logger)

    try:
        results = run_benchmarks(benchmarks, cleanup=config.cleanup)
    except BenchmarkFatalError as e:
        logger.critical(str(e))
        sys.exit(1)

    collector = MetricsCollector(logger)
    for result in results:
        collector.add_result(result)
    collector.log_final_report()

    if args.output_dir:
        output_dir = Path(args.output_dir)
        collector.save_raw_data(output_dir)
        collector.generate_report(output_dir)
        if collector.results:
            generate_all_plots(collector.results, output_dir, logger)


if __name__ == '__main__':
    main()
