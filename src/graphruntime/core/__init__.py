"""
Runtime facade tying the registry and the scheduler together.
"""

from graphruntime.core.runtime import GraphRuntime

__all__ = ["GraphRuntime"]
