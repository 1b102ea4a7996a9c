"""
Configuration fingerprinting.

A fingerprint is an opaque string standing for a module's configuration.
The runtime stores it on the anchor node and compares it on the next start
to detect configuration drift. Uses SHA-256 truncated to 128 bits
(32 hex chars) over a canonical JSON encoding.
"""

import hashlib
import json
from typing import Any, Mapping

__all__ = ["compute_config_fingerprint", "canonical_json"]


def canonical_json(config: Mapping[str, Any]) -> str:
    """
    Encode a configuration mapping deterministically.

    Keys are sorted and separators fixed so that equal configurations
    always produce the same text regardless of insertion order. Values
    that JSON cannot represent fall back to their str() form.
    """
    return json.dumps(config, sort_keys=True, separators=(",", ":"), default=str)


def compute_config_fingerprint(module_type: str, config: Mapping[str, Any]) -> str:
    """
    Compute the fingerprint of a module configuration.

    The module type is part of the hashed content so that two different
    kinds of module with identical settings do not share a fingerprint.

    Args:
        module_type: Kind of module (e.g. "crawler")
        config: Module settings

    Returns:
        32 lowercase hex characters
    """
    content = f"{module_type}|{canonical_json(config)}"
    return hashlib.sha256(content.encode()).hexdigest()[:32]
