"""
Read-only access to node identifiers already stored in Neo4j.

Pages through every node of each audited label and yields its identifier
together with the node type implied by the label.
"""

import logging
import time
from typing import Iterable, Iterator, Optional, Tuple

from neo4j import Driver, GraphDatabase

from audit.config import (
    NEO4J_CONNECTION_RETRIES,
    NEO4J_CONNECTION_RETRY_DELAY,
    NEO4J_DATABASE,
    NEO4J_PASSWORD,
    NEO4J_URI,
    NEO4J_USERNAME,
    NODE_ID_PROPERTY,
)
from identity.node_types import GRAPH_LABELS, NodeType, node_type_for_label

logger = logging.getLogger(__name__)


def get_neo4j_driver() -> Driver:
    """Connect to Neo4j using environment configuration.

    Returns:
        Connected Neo4j Driver instance.

    Raises:
        ConnectionError: If unable to connect after retries.
    """
    logger.info("Connecting to Neo4j at %s...", NEO4J_URI)

    for attempt in range(NEO4J_CONNECTION_RETRIES):
        try:
            driver = GraphDatabase.driver(
                NEO4J_URI,
                auth=(NEO4J_USERNAME, NEO4J_PASSWORD),
            )
            driver.verify_connectivity()
            logger.info("Connected to Neo4j at %s", NEO4J_URI)
            return driver

        except Exception as e:
            logger.warning(
                "Connection attempt %d/%d failed: %s",
                attempt + 1,
                NEO4J_CONNECTION_RETRIES,
                e,
            )
            if attempt < NEO4J_CONNECTION_RETRIES - 1:
                time.sleep(NEO4J_CONNECTION_RETRY_DELAY)
            else:
                raise ConnectionError(
                    f"Failed to connect to Neo4j at {NEO4J_URI} "
                    f"after {NEO4J_CONNECTION_RETRIES} attempts"
                ) from e

    raise ConnectionError("Unexpected error in connection logic")


def _node_id_query(label: str) -> str:
    # Labels come from the fixed GRAPH_LABELS table, never from user input.
    return (
        f"MATCH (n:{label}) "
        f"RETURN n.{NODE_ID_PROPERTY} AS node_id "
        f"ORDER BY node_id SKIP $skip LIMIT $limit"
    )


def iter_graph_node_ids(
    driver: Driver,
    labels: Optional[Iterable[str]] = None,
    batch_size: int = 1000,
    database: Optional[str] = NEO4J_DATABASE,
) -> Iterator[Tuple[str, Optional[NodeType]]]:
    """Yield ``(node_id, node_type)`` for every node of the given labels.

    Nodes without an id property are skipped with a warning, since a
    missing primary key cannot be audited as a string.

    Args:
        driver: Connected Neo4j driver.
        labels: Graph labels to read; defaults to every known label.
        batch_size: Page size for each query.
        database: Target database name.

    Raises:
        ValueError: If a label is not a known node label.
    """
    selected = list(labels) if labels is not None else list(GRAPH_LABELS.values())
    for label in selected:
        if node_type_for_label(label) is None:
            raise ValueError(f"Unknown graph label: {label}")

    with driver.session(database=database) as session:
        for label in selected:
            node_type = node_type_for_label(label)
            query = _node_id_query(label)
            skip = 0
            missing = 0
            read = 0
            while True:
                records = list(session.run(query, skip=skip, limit=batch_size))
                for record in records:
                    node_id = record["node_id"]
                    if node_id is None:
                        missing += 1
                        continue
                    read += 1
                    yield str(node_id), node_type
                if len(records) < batch_size:
                    break
                skip += batch_size

            if missing:
                logger.warning("%d %s nodes have no '%s' property", missing, label,
                               NODE_ID_PROPERTY)
            logger.info("Read %d %s node IDs from Neo4j", read, label)
