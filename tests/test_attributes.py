"""Tests for the attribute store and event hooks."""

import pytest

from netout.attributes import Attribute, AttributeStore, AttrProperty, AttrType
from netout.events import Events, Signal


class TestAttributeStore:
    def test_create_assigns_unique_ids(self, store):
        a = store.create_attribute("a")
        b = store.create_attribute("b", AttrType.INT)
        assert a.id != b.id
        assert store.attribute(b.id) == b
        assert store.attribute_name(b.id) == "b"
        assert store.attribute_type(b.id) is AttrType.INT

    def test_create_existing_returns_same_attribute(self, store):
        first = store.create_attribute("region")
        second = store.create_attribute("region", AttrType.INT)
        assert first is second
        assert len(store) == 1

    def test_find_attribute(self, store):
        attr = store.create_attribute("region")
        assert store.find_attribute("region") == attr
        assert store.find_attribute("missing") is None

    def test_unknown_id(self, store):
        assert store.attribute(999) is None
        assert store.attribute_name(999) is None
        assert store.attribute_type(999) is AttrType.INV
        assert store.attribute_properties(999) == AttrProperty.DEFAULT

    def test_empty_name_rejected(self, store):
        with pytest.raises(ValueError):
            store.create_attribute("")

    def test_properties(self, store):
        attr = store.create_attribute("path", properties=AttrProperty.NESTED | AttrProperty.SKIP_EVENTS)
        assert attr.nested
        assert attr.skip_events
        assert store.attribute_properties(attr.id) & AttrProperty.NESTED

    def test_creation_event_fires_once(self, events):
        seen = []
        events.create_attr_evt.connect(seen.append)
        store = AttributeStore(events)
        attr = store.create_attribute("region")
        store.create_attribute("region")
        assert seen == [attr]

    def test_store_without_events(self):
        store = AttributeStore()
        assert store.create_attribute("x").name == "x"


class TestSignal:
    def test_callbacks_run_in_order(self):
        calls = []
        signal = Signal("test")
        signal.connect(lambda v: calls.append(("first", v)))
        signal.connect(lambda v: calls.append(("second", v)))
        signal.emit(1)
        assert calls == [("first", 1), ("second", 1)]
        assert len(signal) == 2

    def test_events_has_three_hooks(self):
        events = Events()
        assert events.create_attr_evt.name == "create_attr_evt"
        assert events.post_init_evt.name == "post_init_evt"
        assert events.process_snapshot.name == "process_snapshot"


def test_attribute_defaults():
    attr = Attribute(1, "a")
    assert attr.type is AttrType.STRING
    assert not attr.skip_events
    assert not attr.nested
