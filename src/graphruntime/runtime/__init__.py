"""
Module lifecycle: records, the anchor node and the registry.
"""

from graphruntime.runtime.context import ANCHOR_LABEL, RuntimeContext, get_or_create_anchor
from graphruntime.runtime.module import BaseRuntimeModule, RuntimeModule
from graphruntime.runtime.records import (
    Fingerprint,
    ForcedReinit,
    LifecycleState,
    ModuleRecord,
    decide_lifecycle,
    decode_record,
    encode_record,
)
from graphruntime.runtime.registry import ModuleRegistry

__all__ = [
    "ANCHOR_LABEL",
    "BaseRuntimeModule",
    "Fingerprint",
    "ForcedReinit",
    "LifecycleState",
    "ModuleRecord",
    "ModuleRegistry",
    "RuntimeContext",
    "RuntimeModule",
    "decide_lifecycle",
    "decode_record",
    "encode_record",
    "get_or_create_anchor",
]
