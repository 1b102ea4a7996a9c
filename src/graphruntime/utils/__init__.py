"""
Shared utilities for the graph runtime.

- hashing: configuration fingerprints
- neo4j: database connection and session management
"""

from graphruntime.utils.hashing import compute_config_fingerprint
from graphruntime.utils.neo4j import get_config, get_driver, get_session

__all__ = [
    "compute_config_fingerprint",
    "get_config",
    "get_driver",
    "get_session",
]
