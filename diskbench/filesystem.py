"""Бенчмарк записи/чтения файлов в директории"""

import logging
import os
import time
from typing import Callable, List, Optional

from .base import BenchmarkBase, BenchmarkFatalError, BenchmarkResult, FileResult
from .workloads import WorkerSpec, WorkloadConfig, file_name


def _file_opener(path, flags):
    return os.open(path, flags, WorkloadConfig.FILE_MODE)


class FilesystemBenchmark(BenchmarkBase):
    """
    Бенчмарк для одной директории.

    Пишет `files_to_write` одинаковых файлов по `file_size_mb` MB,
    затем читает обратно все, что лежит в директории.
    """

    def __init__(self, directory: str, files_to_write: int, file_size_mb: int,
                 logger: logging.Logger, worker_id: Optional[int] = None,
                 random_source: Callable[[int], bytes] = os.urandom,
                 label: Optional[str] = None):
        if label is None:
            label = WorkerSpec(directory, worker_id).label
        super().__init__(label, logger)
        self.directory = directory
        self.files_to_write = files_to_write
        self.file_size_mb = file_size_mb
        self.worker_id = worker_id
        self.random_source = random_source

        self.random_data: Optional[bytes] = None
        self.written_paths: List[str] = []
        self.files_written = 0
        self.write_duration = 0.0
        self.entries_read = 0
        self.bytes_read = 0
        self.read_duration = 0.0

    @property
    def file_size_bytes(self) -> int:
        return self.file_size_mb * WorkloadConfig.MB

    def setup(self):
        """Создание тестовой директории"""
        try:
            os.makedirs(self.directory, exist_ok=True)
        except OSError as e:
            raise BenchmarkFatalError(f"cannot create directory {self.directory}: {e}") from e

    def write_phase(self):
        self.generate_files()

    def read_phase(self):
        self.iterate_dir()

    def write_file(self, path: str) -> FileResult:
        """Запись payload в файл (перезапись, если файл уже есть)"""
        try:
            with open(path, 'wb', opener=_file_opener) as f:
                f.write(self.random_data)
        except OSError as e:
            return self.record(FileResult(path, "write", False, 0, str(e)))

        self.written_paths.append(path)
        return self.record(FileResult(path, "write", True, len(self.random_data)))

    def read_file(self, path: str) -> FileResult:
        """
        Чтение файла целиком в буфер размера st_size.

        Читаем в цикле, пока буфер не заполнится или не наступит EOF;
        в результат идет реально прочитанное количество байт.
        """
        got = 0
        size = 0
        try:
            with open(path, 'rb') as f:
                size = os.fstat(f.fileno()).st_size
                buf = bytearray(size)
                with memoryview(buf) as view:
                    while got < size:
                        n = f.readinto(view[got:])
                        if not n:
                            break
                        got += n
        except OSError as e:
            return self.record(FileResult(path, "read", False, got, str(e)))

        if got < size:
            return self.record(FileResult(path, "read", False, got,
                                          f"short read: got {got} of {size} bytes"))
        return self.record(FileResult(path, "read", True, got))

    def generate_files(self):
        """Генерация файлов со случайным содержимым"""
        # payload создается один раз на экземпляр
        if self.random_data is None:
            self.random_data = self.random_source(self.file_size_bytes)

        self.files_written = 0
        start = time.perf_counter()

        for i in range(1, self.files_to_write + 1):
            path = os.path.join(self.directory, file_name(i, self.worker_id))
            self.write_file(path)
            self.files_written = i

            if i % WorkloadConfig.CHECKPOINT_EVERY == 0:
                self.write_duration = time.perf_counter() - start
                self.report_write(self.files_written * self.file_size_bytes, self.write_duration)

        self.write_duration = time.perf_counter() - start
        self.report_write(self.files_written * self.file_size_bytes, self.write_duration)

    def iterate_dir(self):
        """Чтение всех записей директории"""
        try:
            entries = sorted(os.listdir(self.directory))
        except OSError as e:
            raise BenchmarkFatalError(f"cannot list directory {self.directory}: {e}") from e

        self.bytes_read = 0
        self.entries_read = 0
        start = time.perf_counter()

        for i, name in enumerate(entries, start=1):
            result = self.read_file(os.path.join(self.directory, name))
            self.bytes_read += result.num_bytes
            self.entries_read = i

            if i % WorkloadConfig.CHECKPOINT_EVERY == 0:
                self.read_duration = time.perf_counter() - start
                self.report_read(self.bytes_read, self.read_duration)

        self.read_duration = time.perf_counter() - start
        self.report_read(self.bytes_read, self.read_duration)

    def cleanup(self):
        """Удаление записанных файлов"""
        for path in self.written_paths:
            try:
                os.remove(path)
            except OSError as e:
                self.logger.warning(f"{self.label} - Cleanup warning: {e}")
        self.written_paths = []

    def result(self) -> BenchmarkResult:
        succeeded = sum(1 for r in self.file_results if r.phase == "write" and r.ok)
        return BenchmarkResult(
            label=self.label,
            directory=self.directory,
            worker_id=self.worker_id,
            files_attempted=self.files_written,
            files_written=succeeded,
            bytes_written=succeeded * self.file_size_bytes,
            write_time_sec=self.write_duration,
            entries_read=self.entries_read,
            bytes_read=self.bytes_read,
            read_time_sec=self.read_duration,
            errors=[r.describe() for r in self.errors],
        )
