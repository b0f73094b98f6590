"""Сбор и вывод итоговых метрик"""

import json
import logging
from pathlib import Path
from typing import List
from datetime import datetime

import numpy as np

from .base import BenchmarkResult, throughput_mbps
from .workloads import WorkloadConfig


class MetricsCollector:
    """Сборщик итогов со всех воркеров"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.results: List[BenchmarkResult] = []
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    def add_result(self, result: BenchmarkResult):
        """Добавить результат воркера"""
        self.results.append(result)

    def log_final_report(self):
        """Итоговые цифры по каждому воркеру, по очереди"""
        for r in self.results:
            wrote_mb = r.bytes_written / WorkloadConfig.MB
            read_mb = r.bytes_read / WorkloadConfig.MB
            self.logger.info(f"{r.label} - Wrote: {wrote_mb:6.3f} MB in {r.write_time_sec:6.3f} seconds")
            self.logger.info(f"{r.label} - Write Speed is: {r.write_throughput_mbps:6.3f} MB/s")
            self.logger.info(f"{r.label} - Read: {read_mb:6.3f} MB in {r.read_time_sec:6.3f} seconds")
            self.logger.info(f"{r.label} - Read Speed is: {r.read_throughput_mbps:6.3f} MB/s")

            if r.errors:
                self.logger.warning(f"{r.label} - Files written: {r.files_written}/{r.files_attempted}, "
                                    f"errors: {len(r.errors)}")
                for error in r.errors:
                    self.logger.warning(f"{r.label} -   {error}")

    def totals(self) -> dict:
        """Суммарные цифры по всем воркерам (воркеры работают параллельно)"""
        if not self.results:
            return {
                'bytes_written': 0,
                'bytes_read': 0,
                'write_throughput_mbps': 0.0,
                'read_throughput_mbps': 0.0,
                'errors': 0,
            }

        bytes_written = int(np.sum([r.bytes_written for r in self.results]))
        bytes_read = int(np.sum([r.bytes_read for r in self.results]))
        write_time = float(np.max([r.write_time_sec for r in self.results]))
        read_time = float(np.max([r.read_time_sec for r in self.results]))

        return {
            'bytes_written': bytes_written,
            'bytes_read': bytes_read,
            'write_throughput_mbps': throughput_mbps(bytes_written, write_time),
            'read_throughput_mbps': throughput_mbps(bytes_read, read_time),
            'errors': sum(len(r.errors) for r in self.results),
        }

    def save_raw_data(self, output_dir: Path) -> Path:
        """Сохранить сырые данные в JSON"""
        output_dir.mkdir(parents=True, exist_ok=True)

        data = {
            'timestamp': self.timestamp,
            'results': [r.to_dict() for r in self.results],
            'totals': self.totals(),
        }

        output_file = output_dir / f"benchmark_raw_{self.timestamp}.json"
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        self.logger.info(f"Raw data saved: {output_file}")
        return output_file

    def generate_report(self, output_dir: Path) -> str:
        """Генерация текстового отчета"""
        output_dir.mkdir(parents=True, exist_ok=True)

        report_lines = []
        report_lines.append("=" * 80)
        report_lines.append("DISK THROUGHPUT BENCHMARK REPORT")
        report_lines.append("=" * 80)
        report_lines.append(f"Timestamp: {self.timestamp}")

        # Группируем воркеров по директории
        directories = list(dict.fromkeys(r.directory for r in self.results))

        for directory in directories:
            results = self.get_results_by_directory(directory)
            report_lines.append(f"\n{'=' * 80}")
            report_lines.append(f"DIRECTORY: {directory} ({len(results)} worker(s))")
            report_lines.append('=' * 80)

            for r in results:
                report_lines.append(f"\n  Worker: {r.label}")
                report_lines.append(f"  {'─' * 70}")
                report_lines.append(f"    Files written:   {r.files_written:>10} / {r.files_attempted}")
                report_lines.append(f"    Write:           {r.write_throughput_mbps:>10.2f} MB/s")
                report_lines.append(f"    Write time:      {r.write_time_sec:>10.2f} sec")
                report_lines.append(f"    Entries read:    {r.entries_read:>10}")
                report_lines.append(f"    Read:            {r.read_throughput_mbps:>10.2f} MB/s")
                report_lines.append(f"    Read time:       {r.read_time_sec:>10.2f} sec")
                report_lines.append(f"    Errors:          {len(r.errors):>10}")
                for error in r.errors:
                    report_lines.append(f"      {error}")

        totals = self.totals()
        report_lines.append(f"\n{'=' * 80}")
        report_lines.append("TOTAL")
        report_lines.append('=' * 80)
        report_lines.append(f"    Written:         {totals['bytes_written'] / WorkloadConfig.MB:>10.2f} MB")
        report_lines.append(f"    Write:           {totals['write_throughput_mbps']:>10.2f} MB/s")
        report_lines.append(f"    Read:            {totals['bytes_read'] / WorkloadConfig.MB:>10.2f} MB")
        report_lines.append(f"    Read:            {totals['read_throughput_mbps']:>10.2f} MB/s")
        report_lines.append(f"    Errors:          {totals['errors']:>10}")
        report_lines.append("=" * 80)

        report_text = "\n".join(report_lines)

        report_file = output_dir / f"benchmark_report_{self.timestamp}.txt"
        with open(report_file, 'w', encoding='utf-8') as f:
            f.write(report_text)

        self.logger.info(f"Report saved: {report_file}")
        return report_text

    def get_results_by_directory(self, directory: str) -> List[BenchmarkResult]:
        """Получить результаты воркеров одной директории"""
        return [r for r in self.results if r.directory == directory]
