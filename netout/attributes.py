"""In-memory attribute store: the host side of attribute creation and lookup."""

import enum
import itertools
import logging
import threading
from dataclasses import dataclass

from netout.events import Events

logger = logging.getLogger(__name__)


class AttrType(enum.Enum):
    INV = "inv"
    USR = "usr"
    INT = "int"
    STRING = "string"
    ADDR = "addr"
    DOUBLE = "double"
    BOOL = "bool"
    TYPE = "type"
    UINT = "uint"


class AttrProperty(enum.IntFlag):
    DEFAULT = 0
    ASVALUE = 1
    NOMERGE = 2
    SKIP_EVENTS = 64
    HIDDEN = 128
    NESTED = 256
    GLOBAL = 512


@dataclass(frozen=True)
class Attribute:
    id: int
    name: str
    type: AttrType = AttrType.STRING
    properties: AttrProperty = AttrProperty.DEFAULT

    @property
    def skip_events(self) -> bool:
        return bool(self.properties & AttrProperty.SKIP_EVENTS)

    @property
    def nested(self) -> bool:
        return bool(self.properties & AttrProperty.NESTED)


class AttributeStore:
    """Creates attributes with stable ids and announces them on create_attr_evt."""

    def __init__(self, events: Events | None = None):
        self._events = events
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._by_id: dict[int, Attribute] = {}
        self._by_name: dict[str, Attribute] = {}

    def create_attribute(
        self,
        name: str,
        type: AttrType = AttrType.STRING,
        properties: AttrProperty = AttrProperty.DEFAULT,
    ) -> Attribute:
        """Return the attribute called *name*, creating it if needed.

        Only a newly created attribute fires the creation event.
        """
        if not name:
            raise ValueError("attribute name must not be empty")
        with self._lock:
            existing = self._by_name.get(name)
            if existing is not None:
                return existing
            attr = Attribute(next(self._ids), name, type, AttrProperty(properties))
            self._by_id[attr.id] = attr
            self._by_name[name] = attr

        logger.debug("Created attribute %s (id=%d, type=%s)", name, attr.id, type.value)
        if self._events is not None:
            self._events.create_attr_evt.emit(attr)
        return attr

    def find_attribute(self, name: str) -> Attribute | None:
        with self._lock:
            return self._by_name.get(name)

    def attribute(self, attr_id: int) -> Attribute | None:
        with self._lock:
            return self._by_id.get(attr_id)

    def attribute_name(self, attr_id: int) -> str | None:
        attr = self.attribute(attr_id)
        return attr.name if attr else None

    def attribute_type(self, attr_id: int) -> AttrType:
        attr = self.attribute(attr_id)
        return attr.type if attr else AttrType.INV

    def attribute_properties(self, attr_id: int) -> AttrProperty:
        attr = self.attribute(attr_id)
        return attr.properties if attr else AttrProperty.DEFAULT

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
