"""Tests for reading node identifiers from Neo4j (driver mocked)."""

import unittest
from unittest.mock import MagicMock, patch

from audit.graph_source import get_neo4j_driver, iter_graph_node_ids
from identity.node_types import NodeType


def _driver_with_pages(pages: list[list[dict]]) -> tuple[MagicMock, MagicMock]:
    session = MagicMock()
    session.run.side_effect = pages
    driver = MagicMock()
    driver.session.return_value.__enter__.return_value = session
    return driver, session


class TestIterGraphNodeIds(unittest.TestCase):
    def test_pages_through_labels_and_skips_missing_ids(self) -> None:
        driver, session = _driver_with_pages(
            [
                [{"node_id": "class::A"}, {"node_id": None}],
                [{"node_id": "class::B"}],
                [{"node_id": "package:com.acme"}],
            ]
        )
        items = list(iter_graph_node_ids(driver, labels=["Class", "Package"], batch_size=2))

        self.assertEqual(
            items,
            [
                ("class::A", NodeType.CLASS),
                ("class::B", NodeType.CLASS),
                ("package:com.acme", NodeType.PACKAGE),
            ],
        )
        self.assertEqual(session.run.call_count, 3)
        first_query = session.run.call_args_list[0].args[0]
        self.assertIn("MATCH (n:Class)", first_query)
        self.assertEqual(session.run.call_args_list[0].kwargs, {"skip": 0, "limit": 2})
        self.assertEqual(session.run.call_args_list[1].kwargs, {"skip": 2, "limit": 2})

    def test_unknown_label_is_rejected(self) -> None:
        driver, session = _driver_with_pages([])
        with self.assertRaises(ValueError):
            list(iter_graph_node_ids(driver, labels=["Widget"]))
        session.run.assert_not_called()


class TestGetNeo4jDriver(unittest.TestCase):
    @patch("audit.graph_source.time.sleep")
    @patch("audit.graph_source.GraphDatabase")
    def test_retries_then_connects(self, mock_graph_db: MagicMock, _sleep: MagicMock) -> None:
        driver = MagicMock()
        driver.verify_connectivity.side_effect = [OSError("refused"), None]
        mock_graph_db.driver.return_value = driver

        self.assertIs(get_neo4j_driver(), driver)
        self.assertEqual(mock_graph_db.driver.call_count, 2)

    @patch("audit.graph_source.time.sleep")
    @patch("audit.graph_source.GraphDatabase")
    def test_gives_up_with_connection_error(
        self, mock_graph_db: MagicMock, _sleep: MagicMock
    ) -> None:
        mock_graph_db.driver.return_value.verify_connectivity.side_effect = OSError("down")
        with self.assertRaises(ConnectionError):
            get_neo4j_driver()


if __name__ == "__main__":
    unittest.main()
