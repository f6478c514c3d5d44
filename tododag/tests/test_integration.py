import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from datetime import datetime

from tododag.__main__ import main, load_graph
from tododag.examples.simple_project import create_sample_graph, print_report


class TodoIntegrationTest(unittest.TestCase):
    def setUp(self):
        self.graph = create_sample_graph()

    def test_sample_graph(self):
        """Test the sample project schedules end-to-end"""
        self.assertEqual(self.graph.root_tasks(), [1, 5])
        self.assertEqual(self.graph.earliest_start(4), 6)
        self.assertEqual(self.graph.earliest_start(6), 3)
        self.assertEqual(self.graph.critical_path_from(1), [1, 3, 4])
        self.assertEqual(self.graph.critical_path_weight(1), 6)
        self.graph.check_invariants()

    def test_report(self):
        out = io.StringIO()
        with redirect_stdout(out):
            print_report(self.graph, now=datetime(2025, 4, 5, 9))
        report = out.getvalue()

        self.assertIn("Roots: 1, 5", report)
        self.assertIn("From 1: 1 -> 3 -> 4 (6h)", report)
        self.assertIn("From 5: 5 -> 6 (3h)", report)
        self.assertIn("Earliest: 2025-4-5 3 PM", report)
        self.assertIn("[OVERDUE]", report)

    def test_report_unknown_root(self):
        out = io.StringIO()
        with redirect_stdout(out):
            print_report(self.graph, root=99)
        self.assertIn("Todo 99 not found", out.getvalue())


class CommandLineTest(unittest.TestCase):
    def setUp(self):
        fd, self.path = tempfile.mkstemp(suffix=".json")
        with os.fdopen(fd, "w") as f:
            json.dump(create_sample_graph().to_schema(), f)

    def tearDown(self):
        os.remove(self.path)

    def test_load_graph(self):
        graph = load_graph(self.path)
        self.assertEqual(graph.critical_path_from(1), [1, 3, 4])

    def test_file_option(self):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(["--file", self.path, "--from", "5"])
        self.assertEqual(code, 0)
        self.assertIn("From 5: 5 -> 6 (3h)", out.getvalue())

    def test_example_option(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(main(["--example"]), 0)
        self.assertIn("Running example project...", out.getvalue())

    def test_no_options_prints_help(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(main([]), 1)

    def test_bad_file(self):
        with open(self.path, "w") as f:
            f.write("{not json")
        self.assertEqual(main(["--file", self.path]), 2)
        self.assertEqual(main(["--file", self.path + ".missing"]), 2)


if __name__ == "__main__":
    unittest.main()
