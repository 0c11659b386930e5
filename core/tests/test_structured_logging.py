"""Tests for run-correlated structured logging."""

import logging
import unittest

from core.structured_logging import (
    _RunContextFilter,
    get_run_id,
    node_type_scope,
    phase_scope,
    resolve_log_level,
    set_run_id,
)
from identity.node_types import NodeType


class TestStructuredLogging(unittest.TestCase):
    def _record(self) -> logging.LogRecord:
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)
        _RunContextFilter().filter(record)
        return record

    def test_filter_injects_context(self) -> None:
        set_run_id("run-abc")
        with phase_scope("audit"), node_type_scope(NodeType.METHOD):
            record = self._record()
        self.assertEqual(record.run_id, "run-abc")
        self.assertEqual(record.phase, "audit")
        self.assertEqual(record.node_type, "METHOD")

    def test_scopes_reset_on_exit(self) -> None:
        with phase_scope("config"):
            pass
        with node_type_scope(NodeType.CLASS):
            pass
        record = self._record()
        self.assertEqual(record.phase, "-")
        self.assertEqual(record.node_type, "-")

    def test_set_run_id_generates_when_missing(self) -> None:
        run_id = set_run_id()
        self.assertEqual(get_run_id(), run_id)
        self.assertEqual(len(run_id), 36)

    def test_resolve_log_level(self) -> None:
        self.assertEqual(resolve_log_level("debug"), logging.DEBUG)
        self.assertEqual(resolve_log_level(logging.WARNING), logging.WARNING)
        with self.assertRaises(ValueError):
            resolve_log_level("chatty")


if __name__ == "__main__":
    unittest.main()
