"""Визуализация результатов бенчмарков"""

import logging
import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path
from typing import List
from .base import BenchmarkResult


def generate_all_plots(results: List[BenchmarkResult], output_dir: Path,
                       logger: logging.Logger) -> List[Path]:
    """Генерация всех графиков"""
    output_dir.mkdir(parents=True, exist_ok=True)

    output_path = output_dir / "throughput_comparison.png"
    plot_throughput_comparison(results, output_path)
    logger.info(f"Plot saved: {output_path}")

    return [output_path]


def plot_throughput_comparison(results: List[BenchmarkResult], output_path: Path):
    """Сравнение write/read throughput по воркерам"""
    fig, ax = plt.subplots(figsize=(max(8, 2 * len(results)), 6))

    labels = [r.label for r in results]
    x = np.arange(len(labels))
    width = 0.35

    phases = [
        ('Write', [r.write_throughput_mbps for r in results], '#e74c3c'),
        ('Read', [r.read_throughput_mbps for r in results], '#3498db'),
    ]

    for i, (phase, values, color) in enumerate(phases):
        offset = width * (i - len(phases)/2 + 0.5)
        bars = ax.bar(x + offset, values, width, label=phase, color=color)

        # Значения над столбцами
        for bar in bars:
            height = bar.get_height()
            if height > 0:
                ax.text(bar.get_x() + bar.get_width()/2., height,
                       f'{height:.1f}',
                       ha='center', va='bottom', fontsize=9)

    ax.set_xlabel('Worker', fontsize=12, fontweight='bold')
    ax.set_ylabel('Throughput (MB/s)', fontsize=12, fontweight='bold')
    ax.set_title('Write/Read Throughput per Worker',
                fontsize=14, fontweight='bold', pad=20)
    ax.set_xticks(x)
    ax.set_xticklabels(labels, fontsize=10, rotation=15)
    ax.legend(fontsize=11, loc='upper right')
    ax.grid(axis='y', alpha=0.3, linestyle='--')

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
