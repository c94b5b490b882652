"""Trigger attribute registry and the matcher that gates snapshot export."""

import logging
import threading
from typing import Iterable

from netout.attributes import Attribute
from netout.snapshot import SnapshotRecord

logger = logging.getLogger(__name__)

EVENT_SET_ATTR = "snapshot.event.set"
EVENT_END_ATTR = "snapshot.event.end"


class TriggerRegistry:
    """Maps live attribute ids to the configured trigger attributes.

    Filled incrementally as the host creates attributes; entries are never
    removed. Reads and writes may come from different threads.
    """

    def __init__(self, trigger_names: Iterable[str]):
        self._names = tuple(dict.fromkeys(trigger_names))
        self._lock = threading.Lock()
        self._attrs: dict[int, Attribute] = {}

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    def on_attribute_created(self, attr: Attribute) -> None:
        if attr.skip_events or attr.name not in self._names:
            return
        with self._lock:
            if attr.id in self._attrs:
                return
            self._attrs[attr.id] = attr
        logger.debug("Registered trigger attribute %s (id=%d)", attr.name, attr.id)

    def lookup(self, attr_id) -> Attribute | None:
        with self._lock:
            return self._attrs.get(attr_id)

    def __contains__(self, attr_id) -> bool:
        return self.lookup(attr_id) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._attrs)


class TriggerMatcher:
    """Decides whether a snapshot is reportable from its trigger metadata."""

    def __init__(self, registry: TriggerRegistry):
        self._registry = registry
        self._set_attr: Attribute | None = None
        self._end_attr: Attribute | None = None

    @property
    def enabled(self) -> bool:
        return self._set_attr is not None and self._end_attr is not None

    def bind_event_attributes(self, set_attr: Attribute | None, end_attr: Attribute | None) -> None:
        self._set_attr = set_attr
        self._end_attr = end_attr
        if not self.enabled:
            logger.info("Note: event trigger attributes not registered, disabling text log")

    def triggering_id(self, trigger_info: SnapshotRecord | None):
        """Return the attribute id carried by the end event, else the set event."""
        if trigger_info is None or not self.enabled:
            return None
        event = trigger_info.get(self._end_attr)
        if event.is_empty():
            event = trigger_info.get(self._set_attr)
        if event.is_empty():
            return None
        return event.value

    def match(self, trigger_info: SnapshotRecord | None, snapshot: SnapshotRecord) -> Attribute | None:
        attr_id = self.triggering_id(trigger_info)
        if attr_id is None:
            return None
        attr = self._registry.lookup(attr_id)
        if attr is None or snapshot.get(attr).is_empty():
            return None
        return attr
