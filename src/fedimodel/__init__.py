"""
Tolerant, polymorphic models for ActivityPub / ActivityStreams payloads.

## Layers
- Values: `UNSET`, `SingleOrMany`, `EmbeddedOrReference` and the readers that absorb shape variability.
- Schema: immutable pydantic models (Link, Object, Actor, Activity, Collection, CollectionPage).
- Dispatch: `type` tags -> every matching interpretation, GenericObject as fallback.
- Serde: JSON text <-> generic values, entity re-emission.
- Extras: `@context` helpers, indexing consent (discovery), URL guessing.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO (config loading is opt-in).
- Producers' mistakes on optional fields become diagnostics, never exceptions.
- Unknown keys are kept in `extra_fields` (frozen, like every model) and re-emitted.

## Examples
```python
from fedimodel import Actor, Activity, load

result = load('{"type": "Create", "actor": "https://example.org/alice", '
              '"object": {"type": "Note", "content": "hi"}}')
activity = result.get(Activity)
activity.actor_id()            # 'https://example.org/alice'
activity.inner_object_kind()   # EntityKind.NOTE
result.diagnostics             # ()
```
"""

from .config import ParseSettings
from .dispatch import DispatchResult, dispatch, extract, interpret, load, serialize
from .errors import (
    DispatchError,
    ExtractError,
    FediModelError,
    FieldTypeError,
    MissingFieldError,
    NotAnObject,
    PayloadSyntaxError,
    UnrecognizedKind,
)
from .schema import (
    Activity,
    Actor,
    Attachment,
    Collection,
    CollectionPage,
    Endpoints,
    Entity,
    EntityKindSet,
    Extraction,
    GenericObject,
    Image,
    Link,
    Object,
    PublicKey,
    Tag,
)
from .serde import dumps, parse
from .values import UNSET, Embedded, EmbeddedOrReference, FrozenDict, FrozenList, Reference, SingleOrMany, Unset
from .vocabulary import EntityKind, KindFamily

__all__ = [
    "ParseSettings",
    "DispatchResult",
    "dispatch",
    "extract",
    "interpret",
    "load",
    "serialize",
    "DispatchError",
    "ExtractError",
    "FediModelError",
    "FieldTypeError",
    "MissingFieldError",
    "NotAnObject",
    "PayloadSyntaxError",
    "UnrecognizedKind",
    "Activity",
    "Actor",
    "Attachment",
    "Collection",
    "CollectionPage",
    "Endpoints",
    "Entity",
    "EntityKindSet",
    "Extraction",
    "GenericObject",
    "Image",
    "Link",
    "Object",
    "PublicKey",
    "Tag",
    "dumps",
    "parse",
    "UNSET",
    "Embedded",
    "EmbeddedOrReference",
    "FrozenDict",
    "FrozenList",
    "Reference",
    "SingleOrMany",
    "Unset",
    "EntityKind",
    "KindFamily",
]
