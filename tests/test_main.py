import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import main
from diskbench.base import BenchmarkFatalError
from diskbench.workloads import WorkloadConfig

MB = WorkloadConfig.MB


class TestParser(unittest.TestCase):
    def test_defaults(self):
        args = main.build_parser().parse_args([])
        config = main.config_from_args(args)
        self.assertEqual(config.directories, ["."])
        self.assertEqual(config.files_to_write, 0)
        self.assertEqual(config.file_size_mb, 10)
        self.assertEqual(config.readers, 1)
        self.assertFalse(config.cleanup)

    def test_directory_list(self):
        args = main.build_parser().parse_args(["--dir", "/a,/b", "--files", "3", "--size", "2"])
        config = main.config_from_args(args)
        self.assertEqual(config.directories, ["/a", "/b"])
        self.assertEqual(config.files_to_write, 3)
        self.assertEqual(config.file_size_mb, 2)

    @patch("sys.stderr")
    def test_rejects_invalid_values(self, _stderr):
        parser = main.build_parser()
        for argv in (["--files", "-1"], ["--size", "0"], ["--readers", "0"], ["--files", "x"]):
            with self.assertRaises(SystemExit) as ctx:
                parser.parse_args(argv)
            self.assertEqual(ctx.exception.code, 2)


class TestRunBenchmarks(unittest.TestCase):
    def test_results_keep_worker_order(self):
        benchmarks = [MagicMock(), MagicMock(), MagicMock()]
        for i, bench in enumerate(benchmarks):
            bench.run.return_value = f"result-{i}"

        results = main.run_benchmarks(benchmarks, cleanup=True)

        self.assertEqual(results, ["result-0", "result-1", "result-2"])
        for bench in benchmarks:
            bench.run.assert_called_once_with(cleanup=True)

    def test_fatal_error_is_raised(self):
        ok = MagicMock()
        failing = MagicMock()
        failing.run.side_effect = BenchmarkFatalError("cannot list directory /x")

        with self.assertRaises(BenchmarkFatalError):
            main.run_benchmarks([ok, failing])

    def test_build_benchmarks_shared_directory(self):
        config = main.BenchmarkConfig(directories=["/data"], files_to_write=4, file_size_mb=1, readers=2)
        benchmarks = main.build_benchmarks(config, logging.getLogger("diskbench.tests"))

        self.assertEqual([b.worker_id for b in benchmarks], [1, 2])
        self.assertEqual(benchmarks[0].label, "/data [worker 1]")
        self.assertTrue(all(b.files_to_write == 4 for b in benchmarks))


class TestMain(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def test_three_directories(self):
        dirs = [os.path.join(self.tmp.name, name) for name in ("d1", "d2", "d3")]

        with self.assertLogs("diskbench", level="INFO") as cm:
            main.main(["--dir", ",".join(dirs), "--files", "10", "--size", "1"])

        for d in dirs:
            names = sorted(os.listdir(d))
            self.assertEqual(names, [f"file_{i:06d}.dat" for i in range(1, 11)])
            for name in names:
                self.assertEqual(os.path.getsize(os.path.join(d, name)), MB)

        # checkpoints 5, 10, итог фазы и итоговый отчет
        for d in dirs:
            wrote = [l for l in cm.output if f"{d} - Wrote:" in l]
            read = [l for l in cm.output if f"{d} - Read:" in l]
            self.assertEqual(len(wrote), 4)
            self.assertEqual(len(read), 4)
            self.assertIn("10.000 MB in", wrote[-1])
            self.assertIn("10.000 MB in", read[-1])

    def test_shared_directory_readers(self):
        target = os.path.join(self.tmp.name, "shared")

        with self.assertLogs("diskbench", level="INFO"):
            main.main(["--dir", target, "--readers", "3", "--files", "5", "--size", "1"])

        names = os.listdir(target)
        self.assertEqual(len(names), 15)
        self.assertEqual(len(set(names)), 15)
        for worker_id in (1, 2, 3):
            self.assertEqual(len([n for n in names if n.startswith(f"w{worker_id:02d}_")]), 5)

    def test_same_directory_listed_twice_does_not_collide(self):
        target = os.path.join(self.tmp.name, "same")

        with self.assertLogs("diskbench", level="INFO"):
            main.main(["--dir", f"{target},{target}/", "--files", "3", "--size", "1"])

        names = sorted(os.listdir(target))
        self.assertEqual(len(names), 6)
        self.assertEqual(len(set(names)), len(names))
        self.assertTrue(all(n.startswith(("w01_", "w02_")) for n in names))

    def test_log_file_receives_report(self):
        target = os.path.join(self.tmp.name, "target")
        log_file = os.path.join(self.tmp.name, "logs", "bench.log")
        logger = logging.getLogger("diskbench")

        try:
            main.main(["--dir", target, "--files", "5", "--size", "1",
                       "--log-file", log_file, "--log-level", "DEBUG"])
        finally:
            for handler in list(logger.handlers):
                if isinstance(handler, logging.FileHandler):
                    handler.close()
                    logger.removeHandler(handler)

        with open(log_file, encoding="utf-8") as f:
            lines = f.read().splitlines()

        self.assertTrue(any("policy: per_directory" in l for l in lines))
        self.assertEqual(len([l for l in lines if f"{target} - Write Speed is:" in l]), 3)
        self.assertEqual(len([l for l in lines if f"{target} - Read Speed is:" in l]), 3)
        self.assertEqual(logger.level, logging.DEBUG)

    def test_zero_files_reads_existing_content(self):
        target = os.path.join(self.tmp.name, "existing")
        os.mkdir(target)
        with open(os.path.join(target, "old.bin"), "wb") as f:
            f.write(b"\1" * MB)

        with self.assertLogs("diskbench", level="INFO") as cm:
            main.main(["--dir", target, "--files", "0"])

        self.assertEqual(os.listdir(target), ["old.bin"])
        self.assertIn(f"{target} - Read:  1.000 MB in", [l for l in cm.output if "- Read:" in l][-1])

    def test_fatal_error_exits(self):
        blocker = os.path.join(self.tmp.name, "blocker")
        with open(blocker, "w") as f:
            f.write("x")

        with self.assertLogs("diskbench", level="CRITICAL") as cm:
            with self.assertRaises(SystemExit) as ctx:
                main.main(["--dir", os.path.join(blocker, "target"), "--files", "1", "--size", "1"])

        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("cannot create directory", cm.output[0])

    @patch("main.generate_all_plots")
    def test_output_dir(self, mock_plots):
        target = os.path.join(self.tmp.name, "target")
        output_dir = Path(self.tmp.name) / "results"

        with self.assertLogs("diskbench", level="INFO"):
            main.main(["--dir", target, "--files", "2", "--size", "1",
                       "--output-dir", str(output_dir), "--cleanup"])

        self.assertEqual(len(list(output_dir.glob("benchmark_raw_*.json"))), 1)
        self.assertEqual(len(list(output_dir.glob("benchmark_report_*.txt"))), 1)
        mock_plots.assert_called_once()
        self.assertEqual(os.listdir(target), [])


if __name__ == "__main__":
    unittest.main()
