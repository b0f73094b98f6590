import unittest

from diskbench.workloads import (
    AssignmentPolicy,
    BenchmarkConfig,
    WorkerSpec,
    file_name,
    parse_directories,
    plan_workers,
)


class TestFileName(unittest.TestCase):
    def test_plain_name_is_zero_padded(self):
        self.assertEqual(file_name(1), "file_000001.dat")
        self.assertEqual(file_name(123456), "file_123456.dat")

    def test_worker_scoped_name(self):
        self.assertEqual(file_name(7, worker_id=3), "w03_file_000007.dat")
        self.assertNotEqual(file_name(1, worker_id=1), file_name(1, worker_id=2))


class TestParseDirectories(unittest.TestCase):
    def test_comma_separated(self):
        self.assertEqual(parse_directories("/a,/b, /c"), ["/a", "/b", "/c"])

    def test_empty_falls_back_to_current_dir(self):
        self.assertEqual(parse_directories(""), ["."])
        self.assertEqual(parse_directories(",,"), ["."])


class TestPlanWorkers(unittest.TestCase):
    def test_one_worker_per_directory(self):
        config = BenchmarkConfig(directories=["/a", "/b", "/c"], files_to_write=10, file_size_mb=1)
        self.assertEqual(config.policy, AssignmentPolicy.PER_DIRECTORY)

        workers = plan_workers(config)
        self.assertEqual(workers, [WorkerSpec("/a"), WorkerSpec("/b"), WorkerSpec("/c")])
        self.assertEqual(workers[0].label, "/a")

    def test_shared_directory_readers(self):
        config = BenchmarkConfig(directories=["/data"], readers=3)
        self.assertEqual(config.policy, AssignmentPolicy.SHARED_DIRECTORY)

        workers = plan_workers(config)
        self.assertEqual([w.worker_id for w in workers], [1, 2, 3])
        self.assertTrue(all(w.directory == "/data" for w in workers))
        self.assertEqual(workers[1].label, "/data [worker 2]")

    def test_readers_apply_to_every_directory(self):
        config = BenchmarkConfig(directories=["/a", "/b"], readers=2)
        workers = plan_workers(config)
        self.assertEqual(len(workers), 4)
        self.assertEqual([(w.directory, w.worker_id) for w in workers],
                         [("/a", 1), ("/a", 2), ("/b", 1), ("/b", 2)])

    def test_same_directory_listed_twice_gets_worker_ids(self):
        config = BenchmarkConfig(directories=["/data", "/data/", "/other"], files_to_write=2)
        self.assertEqual(config.policy, AssignmentPolicy.PER_DIRECTORY)

        workers = plan_workers(config)
        self.assertEqual([(w.directory, w.worker_id) for w in workers],
                         [("/data", 1), ("/data/", 2), ("/other", None)])

    def test_same_directory_across_entries_in_shared_mode(self):
        config = BenchmarkConfig(directories=["/data", "/data/./"], readers=2)

        workers = plan_workers(config)
        self.assertEqual([w.worker_id for w in workers], [1, 2, 3, 4])
        names = {file_name(1, w.worker_id) for w in workers}
        self.assertEqual(len(names), 4)


if __name__ == "__main__":
    unittest.main()
