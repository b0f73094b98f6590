"""Параметры нагрузки и распределение воркеров по директориям"""

import os
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional


class WorkloadConfig:
    """Конфигурация нагрузки"""

    MB = 1024 * 1024

    # Промежуточный отчет после каждого N-го файла
    CHECKPOINT_EVERY = 5

    FILE_MODE = 0o644
    FILE_NAME = "file_{index:06d}.dat"
    WORKER_FILE_NAME = "w{worker:02d}_file_{index:06d}.dat"

    # Значения по умолчанию для CLI
    DEFAULT_DIR = "."
    DEFAULT_FILES = 0
    DEFAULT_SIZE_MB = 10
    DEFAULT_READERS = 1


class AssignmentPolicy:
    """Политики распределения воркеров"""
    PER_DIRECTORY = "per_directory"
    SHARED_DIRECTORY = "shared_directory"


@dataclass
class BenchmarkConfig:
    """Конфигурация одного запуска"""
    directories: List[str]
    files_to_write: int = WorkloadConfig.DEFAULT_FILES
    file_size_mb: int = WorkloadConfig.DEFAULT_SIZE_MB
    readers: int = WorkloadConfig.DEFAULT_READERS
    cleanup: bool = False

    @property
    def policy(self) -> str:
        if self.readers > 1:
            return AssignmentPolicy.SHARED_DIRECTORY
        return AssignmentPolicy.PER_DIRECTORY


@dataclass
class WorkerSpec:
    """Задание для одного воркера"""
    directory: str
    worker_id: Optional[int] = None

    @property
    def label(self) -> str:
        if self.worker_id is None:
            return self.directory
        return f"{self.directory} [worker {self.worker_id}]"


def file_name(index: int, worker_id: Optional[int] = None) -> str:
    """Имя файла для 1-based индекса"""
    if worker_id is None:
        return WorkloadConfig.FILE_NAME.format(index=index)
    return WorkloadConfig.WORKER_FILE_NAME.format(worker=worker_id, index=index)


def parse_directories(value: str) -> List[str]:
    """Разбор списка директорий через запятую"""
    dirs = [d.strip() for d in value.split(",")]
    return [d for d in dirs if d] or [WorkloadConfig.DEFAULT_DIR]


def plan_workers(config: BenchmarkConfig) -> List[WorkerSpec]:
    """
    Построение списка воркеров.

    per_directory: один воркер на директорию, имена файлов без префикса.
    shared_directory: `readers` воркеров на каждую директорию, у каждого
    свой id и свои имена файлов.

    Директории сравниваются по realpath: если в одну и ту же директорию
    попадает больше одного воркера, все они получают id, уникальный
    в пределах этой директории.
    """
    counts = Counter(os.path.realpath(d) for d in config.directories)
    next_id: Dict[str, int] = defaultdict(int)

    workers = []
    for directory in config.directories:
        key = os.path.realpath(directory)
        scoped = config.policy == AssignmentPolicy.SHARED_DIRECTORY or counts[key] > 1
        for _ in range(config.readers):
            if not scoped:
                workers.append(WorkerSpec(directory=directory))
                continue
            next_id[key] += 1
            workers.append(WorkerSpec(directory=directory, worker_id=next_id[key]))
    return workers
