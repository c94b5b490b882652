"""Context tree nodes, entries, and snapshot records."""

from dataclasses import dataclass
from typing import Any, Iterator, NamedTuple

from netout.attributes import Attribute


@dataclass(frozen=True, eq=False)
class ContextNode:
    """One attribute/value pair in the shared context tree."""

    attribute: Attribute
    value: Any
    parent: "ContextNode | None" = None

    def chain(self) -> Iterator["ContextNode"]:
        """Yield this node and its ancestors, leaf first."""
        node: ContextNode | None = self
        while node is not None:
            yield node
            node = node.parent

    def path(self) -> list["ContextNode"]:
        """Nodes from the root down to this one."""
        return list(reversed(list(self.chain())))

    def child(self, attribute: Attribute, value: Any) -> "ContextNode":
        return ContextNode(attribute, value, self)


@dataclass(frozen=True)
class Entry:
    """A resolved snapshot entry: a tree node reference or an immediate pair."""

    attribute: Attribute | None = None
    value: Any = None
    node: ContextNode | None = None

    @classmethod
    def from_node(cls, node: ContextNode) -> "Entry":
        return cls(node.attribute, node.value, node)

    @classmethod
    def immediate(cls, attribute: Attribute, value: Any) -> "Entry":
        return cls(attribute, value)

    @classmethod
    def empty(cls) -> "Entry":
        return cls()

    def is_empty(self) -> bool:
        return self.attribute is None

    @property
    def is_reference(self) -> bool:
        return self.node is not None


class Sizes(NamedTuple):
    n_nodes: int
    n_immediate: int


class Data(NamedTuple):
    node_entries: tuple[ContextNode, ...]
    immediate_attr: tuple[Attribute, ...]
    immediate_data: tuple[Any, ...]


@dataclass(frozen=True)
class SnapshotRecord:
    node_entries: tuple[ContextNode, ...] = ()
    immediate_attr: tuple[Attribute, ...] = ()
    immediate_data: tuple[Any, ...] = ()

    def __post_init__(self):
        if len(self.immediate_attr) != len(self.immediate_data):
            raise ValueError("immediate_attr and immediate_data must be same length")

    @classmethod
    def build(cls, nodes=(), immediates=()) -> "SnapshotRecord":
        """Build a record from node references and (attribute, value) pairs."""
        pairs = list(immediates)
        return cls(
            node_entries=tuple(nodes),
            immediate_attr=tuple(a for a, _ in pairs),
            immediate_data=tuple(v for _, v in pairs),
        )

    def size(self) -> Sizes:
        return Sizes(len(self.node_entries), len(self.immediate_attr))

    def data(self) -> Data:
        return Data(self.node_entries, self.immediate_attr, self.immediate_data)

    def get(self, attribute: Attribute | None) -> Entry:
        """Find the entry for *attribute*; tree chains first, then immediates."""
        if attribute is None:
            return Entry.empty()
        for leaf in self.node_entries:
            for node in leaf.chain():
                if node.attribute.id == attribute.id:
                    return Entry.from_node(node)
        for attr, value in zip(self.immediate_attr, self.immediate_data):
            if attr.id == attribute.id:
                return Entry.immediate(attr, value)
        return Entry.empty()
