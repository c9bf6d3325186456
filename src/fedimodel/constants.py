"""
Well-known identifiers and parsing defaults.

Defines the JSON-LD context URLs, public addressing collections and the limits
consumed by `fedimodel.config.ParseSettings`. This module is zero-IO and uses
only the Python standard library.

Notes:
    - Changing the defaults here changes `ParseSettings()`; the settings class
      simply consumes them.
"""

from __future__ import annotations

__all__ = [
    "ACTIVITYSTREAMS_CONTEXT",
    "SECURITY_CONTEXT",
    "PUBLIC_COLLECTION",
    "FEDINEKO_PUBLIC_COLLECTION",
    "FEDINEKO_INDEX_PROPERTY",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_MAX_NESTING",
    "DEFAULT_PRESERVE_MALFORMED",
]

ACTIVITYSTREAMS_CONTEXT: str = "https://www.w3.org/ns/activitystreams"

SECURITY_CONTEXT: str = "https://w3id.org/security/v1"

# Special collection meaning "everyone"; appears in to/cc/searchableBy.
PUBLIC_COLLECTION: str = "https://www.w3.org/ns/activitystreams#Public"

FEDINEKO_PUBLIC_COLLECTION: str = "https://fedineko.org/indexing#Public"

# PropertyValue attachment name carrying an explicit indexing choice.
FEDINEKO_INDEX_PROPERTY: str = "fedineko:index"

# Embedded entities nested deeper than this are treated as malformed fields.
DEFAULT_MAX_DEPTH: int = 32

# JSON text nested deeper than this (arrays and objects) is rejected by parse.
DEFAULT_MAX_NESTING: int = 128

# Keep malformed optional values in extra_fields so re-emission restores them.
DEFAULT_PRESERVE_MALFORMED: bool = True
