import contextlib
import io
import os
import shutil
import tempfile
import unittest

from benchmark import compare_solvers, default_solver_names, print_summary, save_results, summarize
from data_generator import generate_random_points
from tsp_core import Graph

FAST_GA = {"ga": {"population_size": 20, "max_generations": 15}}


class TestBenchmark(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.graph = Graph(generate_random_points(6, seed=21))
        cls.runs = compare_solvers(cls.graph, n_runs=3, params=FAST_GA, progress=False)

    def test_one_row_per_run(self):
        counts = self.runs.groupby("key").size().to_dict()
        self.assertEqual(counts, {"nn": 1, "2opt": 1, "ga": 3, "bf": 1})
        self.assertTrue(self.runs["valid"].all())

    def test_seeds_make_runs_repeatable(self):
        again = compare_solvers(self.graph, ["ga"], n_runs=3, params=FAST_GA, progress=False)
        ga = self.runs[self.runs["key"] == "ga"]
        self.assertEqual(list(again["distance"]), list(ga["distance"]))

    def test_summary(self):
        summary = summarize(self.runs).set_index("key")
        self.assertEqual(summary.loc["ga", "runs"], 3)
        self.assertTrue(summary.loc["bf", "exact"])
        self.assertAlmostEqual(summary.loc["bf", "quality"], 100.0)
        self.assertAlmostEqual(summary["best_dist"].min(), summary.loc["bf", "best_dist"])
        for key in ("nn", "2opt", "ga"):
            self.assertLessEqual(summary.loc[key, "quality"], 100.0 + 1e-9)

    def test_brute_force_skipped_for_large_graphs(self):
        self.assertIn("bf", default_solver_names(self.graph))
        self.assertNotIn("bf", default_solver_names(Graph(generate_random_points(9, seed=1))))

    def test_report_and_csv(self):
        summary = summarize(self.runs)
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            print_summary(summary)
        self.assertIn("FINAL RESULTS SUMMARY", out.getvalue())
        self.assertIn("Brute Force", out.getvalue())

        tmpdir = tempfile.mkdtemp()
        try:
            with contextlib.redirect_stdout(io.StringIO()):
                save_results(self.runs, summary, tmpdir)
            self.assertTrue(os.path.exists(os.path.join(tmpdir, "runs.csv")))
            self.assertTrue(os.path.exists(os.path.join(tmpdir, "summary.csv")))
        finally:
            shutil.rmtree(tmpdir)


if __name__ == "__main__":
    unittest.main()
