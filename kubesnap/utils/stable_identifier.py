"""Stable identifiers for contexts and resources.

Resources get a deterministic UUID so the same object keeps its identity
across refreshes. Contexts get a generated UUID that is stable for the
lifetime of the process.
"""

from __future__ import annotations

import hashlib
import threading
import uuid


def stable_uuid(
    metadata_uid: str | None,
    context: str,
    namespace: str | None,
    kind: str,
    name: str,
) -> uuid.UUID:
    """Return the object's own UID when valid, else a deterministic UUID."""
    if metadata_uid:
        try:
            return uuid.UUID(metadata_uid)
        except ValueError:
            pass
    seed = "|".join([context, namespace or "", kind, name])
    return _deterministic_uuid(seed)


def _deterministic_uuid(seed: str) -> uuid.UUID:
    characters = list(hashlib.sha256(seed.encode("utf-8")).hexdigest()[:32])
    characters[12] = "4"
    characters[16] = "8"
    return uuid.UUID("".join(characters))


class IdentifierTable:
    """Maps logical names (context names) to generated identifiers.

    Lookups from concurrent callers are serialized by a lock so that a name
    is only ever assigned one identifier.
    """

    def __init__(self) -> None:
        self._identifiers: dict[str, uuid.UUID] = {}
        self._lock = threading.Lock()

    def identifier_for(self, name: str) -> uuid.UUID:
        """Return the identifier for ``name``, generating it on first use."""
        with self._lock:
            existing = self._identifiers.get(name)
            if existing is not None:
                return existing
            generated = uuid.uuid4()
            self._identifiers[name] = generated
            return generated

    def __len__(self) -> int:
        with self._lock:
            return len(self._identifiers)
