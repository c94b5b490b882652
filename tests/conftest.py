import pytest

from netout.attributes import AttributeStore, AttrProperty, AttrType
from netout.events import Events
from netout.registry import EVENT_END_ATTR, EVENT_SET_ATTR


@pytest.fixture
def events():
    return Events()


@pytest.fixture
def store(events):
    return AttributeStore(events)


@pytest.fixture
def event_attrs(store):
    """The host's set/end event attributes, as (set_attr, end_attr)."""
    hidden = AttrProperty.SKIP_EVENTS | AttrProperty.HIDDEN
    return (
        store.create_attribute(EVENT_SET_ATTR, AttrType.UINT, hidden),
        store.create_attribute(EVENT_END_ATTR, AttrType.UINT, hidden),
    )


@pytest.fixture
def duration_attr(store):
    return store.create_attribute(
        "time.inclusive.duration", AttrType.DOUBLE,
        AttrProperty.SKIP_EVENTS | AttrProperty.ASVALUE,
    )
