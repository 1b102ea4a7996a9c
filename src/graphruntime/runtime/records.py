"""
Module records stored on the anchor node.

A record is either the fingerprint of the configuration a module was last
initialized with, or a marker forcing the module to re-initialize on the next
start. Both are serialized into one string property per module:

    CONFIG:<fingerprint>
    FORCE_INIT:<timestamp in ms>
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

__all__ = [
    "CONFIG_PREFIX",
    "FORCE_INIT_PREFIX",
    "Fingerprint",
    "ForcedReinit",
    "ModuleRecord",
    "LifecycleState",
    "encode_record",
    "decode_record",
    "decide_lifecycle",
]

CONFIG_PREFIX = "CONFIG:"
FORCE_INIT_PREFIX = "FORCE_INIT:"


@dataclass(frozen=True)
class Fingerprint:
    value: str


@dataclass(frozen=True)
class ForcedReinit:
    timestamp: int


ModuleRecord = Union[Fingerprint, ForcedReinit]


class LifecycleState(Enum):
    NEVER_RUN = "never_run"
    UP_TO_DATE = "up_to_date"
    CONFIG_CHANGED = "config_changed"
    FORCED_REINIT = "forced_reinit"


def encode_record(record: ModuleRecord) -> str:
    if isinstance(record, ForcedReinit):
        return f"{FORCE_INIT_PREFIX}{record.timestamp}"
    return f"{CONFIG_PREFIX}{record.value}"


def decode_record(raw: str) -> ModuleRecord:
    """
    Parse a stored property value.

    A forced marker with an unreadable timestamp still forces
    re-initialization (timestamp 0). Values without a known prefix are
    treated as bare fingerprints.
    """
    if raw.startswith(FORCE_INIT_PREFIX):
        try:
            return ForcedReinit(int(raw[len(FORCE_INIT_PREFIX):]))
        except ValueError:
            return ForcedReinit(0)
    if raw.startswith(CONFIG_PREFIX):
        return Fingerprint(raw[len(CONFIG_PREFIX):])
    return Fingerprint(raw)


def decide_lifecycle(record: Optional[ModuleRecord], fingerprint: str) -> LifecycleState:
    """Decide what a module needs at startup given its stored record."""
    if record is None:
        return LifecycleState.NEVER_RUN
    if isinstance(record, ForcedReinit):
        return LifecycleState.FORCED_REINIT
    if record.value != fingerprint:
        return LifecycleState.CONFIG_CHANGED
    return LifecycleState.UP_TO_DATE
