"""In-memory object stores, an event recorder and the observers' lister set."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from authop.conditions import NotFoundError


def _meta_value(obj: Any, key: str) -> str:
    meta = obj.get("metadata", obj) if isinstance(obj, Mapping) else getattr(obj, "metadata", obj)
    value = meta.get(key) if isinstance(meta, Mapping) else getattr(meta, key, None)
    return value or ""


class InMemoryLister:
    """A store of objects keyed by namespace and name.

    Objects carry ``name`` and optional ``namespace`` either as attributes,
    as mapping keys, or under a ``metadata`` entry.
    """

    def __init__(self, resource: str = "") -> None:
        self.resource = resource
        self._objects: Dict[Tuple[str, str], Any] = {}

    def add(self, obj: Any) -> None:
        name = _meta_value(obj, "name")
        if not name:
            raise ValueError("object has no name")
        self._objects[(_meta_value(obj, "namespace"), name)] = obj

    def get(self, name: str, namespace: str = "") -> Any:
        try:
            return self._objects[(namespace or "", name)]
        except KeyError:
            raise NotFoundError(self.resource, name) from None


class InMemoryRecorder:
    """Collects events in memory."""

    def __init__(self, source: str = "") -> None:
        self.source = source
        self._events: List[Tuple[str, str]] = []

    def eventf(self, reason: str, message_format: str, *args: Any) -> None:
        message = message_format % args if args else message_format
        self._events.append((reason, message))

    def events(self) -> List[Tuple[str, str]]:
        """Recorded events as (reason, message) pairs, oldest first."""
        return list(self._events)


@dataclass
class Listers:
    """The stores a config observer reads from."""

    secrets_lister: Optional[InMemoryLister] = None
    config_map_lister: Optional[InMemoryLister] = None
    api_server_lister: Optional[InMemoryLister] = None
    console_lister: Optional[InMemoryLister] = None
    cluster_version_lister: Optional[InMemoryLister] = None
    infrastructure_lister: Optional[InMemoryLister] = None
    oauth_lister: Optional[InMemoryLister] = None
    ingress_lister: Optional[InMemoryLister] = None
    resource_syncer: Any = None
    pre_run_caches_synced: List[Any] = field(default_factory=list)