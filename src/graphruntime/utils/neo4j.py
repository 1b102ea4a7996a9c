"""
Neo4j connection settings and driver helpers for the runtime's store.
"""

import os
from typing import Any, Dict, Optional

__all__ = ["get_config", "get_driver", "get_session"]


def get_config() -> Dict[str, Any]:
    """Read the NEO4J_* environment variables, defaulting to a local server."""
    return {
        "uri": os.environ.get("NEO4J_URI", "bolt://localhost:7687"),
        "user": os.environ.get("NEO4J_USER", "neo4j"),
        "password": os.environ.get("NEO4J_PASSWORD", "password"),
        "database": os.environ.get("NEO4J_DATABASE", "neo4j"),
        "connection_timeout": float(os.environ.get("NEO4J_CONNECTION_TIMEOUT", "30")),
    }


def get_driver(config: Optional[Dict[str, Any]] = None):
    """
    Create a driver from connection settings.

    Args:
        config: Settings shaped like get_config() (read from the environment if None)

    Raises:
        ImportError: If neo4j package is not installed
    """
    try:
        from neo4j import GraphDatabase
    except ImportError:
        raise ImportError(
            "neo4j package not installed. Run: pip install neo4j"
        )

    config = config or get_config()
    return GraphDatabase.driver(
        config["uri"],
        auth=(config["user"], config["password"]),
        connection_timeout=config["connection_timeout"],
    )


def get_session(driver, database: Optional[str] = None):
    """Open a session on `database`, or on NEO4J_DATABASE when None."""
    return driver.session(database=database or get_config()["database"])
