"""Tests for configuration fingerprinting."""

import pytest

from graphruntime.utils.hashing import canonical_json, compute_config_fingerprint


class TestCanonicalJson:
    """Tests for canonical_json function."""

    def test_key_order_irrelevant(self):
        """Insertion order should not change the encoding."""
        assert canonical_json({"a": 1, "b": 2}) == canonical_json({"b": 2, "a": 1})

    def test_compact_separators(self):
        """Should not contain whitespace."""
        assert canonical_json({"a": [1, 2]}) == '{"a":[1,2]}'

    def test_non_json_values(self):
        """Values JSON cannot represent should fall back to str()."""
        assert canonical_json({"s": {1}}) == '{"s":"{1}"}'


class TestComputeConfigFingerprint:
    """Tests for compute_config_fingerprint function."""

    def test_returns_correct_format(self):
        """Fingerprint should be 32 lowercase hex chars."""
        result = compute_config_fingerprint("crawler", {"max_depth": 9})
        assert len(result) == 32
        assert all(c in "0123456789abcdef" for c in result)

    def test_deterministic(self):
        """Same inputs should produce same fingerprint."""
        fp1 = compute_config_fingerprint("crawler", {"max_depth": 9, "label": "Person"})
        fp2 = compute_config_fingerprint("crawler", {"label": "Person", "max_depth": 9})
        assert fp1 == fp2

    def test_different_config_different_fingerprint(self):
        """Changing a setting should change the fingerprint."""
        fp1 = compute_config_fingerprint("crawler", {"max_depth": 9})
        fp2 = compute_config_fingerprint("crawler", {"max_depth": 3})
        assert fp1 != fp2

    def test_different_type_different_fingerprint(self):
        """Module type should be part of the fingerprint."""
        fp1 = compute_config_fingerprint("crawler", {})
        fp2 = compute_config_fingerprint("indexer", {})
        assert fp1 != fp2
