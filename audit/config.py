"""
Configuration constants for reading node identifiers back from Neo4j.

Connection values come from environment variables; a .env file is loaded
at import time via python-dotenv.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Neo4j connection
# ---------------------------------------------------------------------------
NEO4J_URI: str = os.getenv("NEO4J_URI", "bolt://127.0.0.1:7687")
NEO4J_USERNAME: str = os.getenv("NEO4J_USERNAME", "neo4j")
NEO4J_PASSWORD: str = os.getenv("NEO4J_PASSWORD", "password")
NEO4J_DATABASE: str = os.getenv("NEO4J_DATABASE", "neo4j")

NEO4J_CONNECTION_RETRIES: int = 3
NEO4J_CONNECTION_RETRY_DELAY: float = 2.0  # seconds

# ---------------------------------------------------------------------------
# Graph schema
# ---------------------------------------------------------------------------
# Node property that holds the identifier (the primary key of every label).
NODE_ID_PROPERTY: str = "id"
