"""
Content fingerprints for schema documents.

Two documents with the same content share a fingerprint regardless of the order in
which their mapping keys were declared. Used by ``SchemaDocument.fingerprint()`` to
compare builds (e.g., to detect whether a re-registered schema actually changed).

Notes:
    - Canonical JSON: sort_keys=True, separators=(",", ":"), ensure_ascii=False.
    - The digest is SHA-256 over the UTF-8 encoded canonical JSON string.
    - Values must already be JSON-mode (``model_dump(mode="json")``); nothing is coerced.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any

__all__ = [
    "json_dumps_canonical",
    "hash_document",
]


def json_dumps_canonical(obj: Any) -> str:
    """Serialize ``obj`` with sorted keys, compact separators and unescaped unicode."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def hash_document(doc: Mapping[str, Any]) -> str:
    """
    SHA-256 hex digest of a JSON-mode document mapping.

    Examples:
        >>> from capra.core.hashing import hash_document
        >>> hash_document({"a": 1, "b": 2}) == hash_document({"b": 2, "a": 1})
        True
    """
    return hashlib.sha256(json_dumps_canonical(dict(doc)).encode("utf-8")).hexdigest()
