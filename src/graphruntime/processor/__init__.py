"""
Runtime Daemon

Long-running process that starts the graph runtime against Neo4j and
drives its modules until interrupted.

Usage:
    python -m graphruntime.processor.daemon

Or:
    from graphruntime.processor import RuntimeDaemon
    daemon = RuntimeDaemon(store, modules)
    daemon.run()
"""

from .daemon import RuntimeDaemon, main

__all__ = ["RuntimeDaemon", "main"]
