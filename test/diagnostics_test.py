"""
Tests for the loopback diagnostics endpoint.
"""

import unittest

from s3skunk.observability.prom import DiagnosticsExporter


class TestDiagnosticsExporter(unittest.TestCase):

    def test_exposes_only_process_metrics(self):
        exporter = DiagnosticsExporter(port=0)
        names = [metric.name for metric in exporter.registry.collect()]

        self.assertTrue(any(name.startswith("python_") for name in names))
        self.assertFalse(any(name.startswith("s3skunk") for name in names))

    def test_separate_instances_do_not_collide(self):
        DiagnosticsExporter(port=0)
        DiagnosticsExporter(port=0)


if __name__ == '__main__':
    unittest.main()
