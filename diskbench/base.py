"""Базовые классы для бенчмарков"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict, field
from typing import List, Optional

from .workloads import WorkloadConfig


class BenchmarkFatalError(Exception):
    """Ошибка, после которой продолжать замер нельзя (создание/листинг директории)"""


def throughput_mbps(num_bytes: float, seconds: float) -> float:
    """MB/s; при нулевой длительности возвращает 0"""
    if seconds <= 0:
        return 0.0
    return (num_bytes / WorkloadConfig.MB) / seconds


@dataclass
class FileResult:
    """Результат операции над одним файлом"""
    path: str
    phase: str
    ok: bool
    num_bytes: int
    error: Optional[str] = None

    def describe(self) -> str:
        return f"{self.phase} {self.path}: {self.error}"


@dataclass
class BenchmarkResult:
    """Итоговые цифры одного воркера"""
    label: str
    directory: str
    worker_id: Optional[int]
    files_attempted: int
    files_written: int
    bytes_written: int
    write_time_sec: float
    entries_read: int
    bytes_read: int
    read_time_sec: float
    errors: List[str] = field(default_factory=list)

    @property
    def write_throughput_mbps(self) -> float:
        return throughput_mbps(self.bytes_written, self.write_time_sec)

    @property
    def read_throughput_mbps(self) -> float:
        return throughput_mbps(self.bytes_read, self.read_time_sec)

    def to_dict(self):
        data = asdict(self)
        data['write_throughput_mbps'] = self.write_throughput_mbps
        data['read_throughput_mbps'] = self.read_throughput_mbps
        return data


class BenchmarkBase(ABC):
    """Базовый класс для всех бенчмарков"""

    def __init__(self, label: str, logger: logging.Logger):
        self.label = label
        self.logger = logger
        self.file_results: List[FileResult] = []

    @abstractmethod
    def setup(self):
        """Подготовка перед тестом"""
        pass

    @abstractmethod
    def write_phase(self):
        """Фаза записи"""
        pass

    @abstractmethod
    def read_phase(self):
        """Фаза чтения"""
        pass

    @abstractmethod
    def cleanup(self):
        """Очистка после теста"""
        pass

    @abstractmethod
    def result(self) -> BenchmarkResult:
        """Итоговые цифры"""
        pass

    def run(self, cleanup: bool = False) -> BenchmarkResult:
        """Полный цикл: подготовка, запись, чтение"""
        self.logger.debug(f"[{self.label}] Starting benchmark...")

        self.setup()
        self.write_phase()
        self.read_phase()

        if cleanup:
            self.cleanup()

        return self.result()

    @property
    def errors(self) -> List[FileResult]:
        return [r for r in self.file_results if not r.ok]

    def record(self, result: FileResult) -> FileResult:
        self.file_results.append(result)
        if not result.ok:
            self.logger.warning(f"{self.label} - {result.describe()}")
        return result

    def report_write(self, num_bytes: float, seconds: float):
        data_mb = num_bytes / WorkloadConfig.MB
        self.logger.info(f"{self.label} - Wrote: {data_mb:6.3f} MB in {seconds:6.3f} seconds")
        speed = throughput_mbps(num_bytes, seconds)
        self.logger.info(f"{self.label} - Write Speed is: {speed:6.3f} MB/s")

    def report_read(self, num_bytes: float, seconds: float):
        data_mb = num_bytes / WorkloadConfig.MB
        self.logger.info(f"{self.label} - Read: {data_mb:6.3f} MB in {seconds:6.3f} seconds")
        speed = throughput_mbps(num_bytes, seconds)
        self.logger.info(f"{self.label} - Read Speed is: {speed:6.3f} MB/s")
