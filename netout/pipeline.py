"""Attribute-triggered snapshot export: match, flatten, render, deliver."""

import logging

from netout.attributes import Attribute, AttributeStore
from netout.config import Config
from netout.events import Events
from netout.flatten import flatten
from netout.formatter import SnapshotTextFormatter, default_format_string
from netout.metrics import PipelineMetrics
from netout.registry import EVENT_END_ATTR, EVENT_SET_ATTR, TriggerMatcher, TriggerRegistry
from netout.sinks import DeliveryResult, Sink, create_sink
from netout.snapshot import SnapshotRecord

logger = logging.getLogger(__name__)


class NetOutPipeline:
    """Exports snapshots triggered by the configured attributes to one sink."""

    def __init__(self, config: Config, store: AttributeStore, sink: Sink | None = None):
        self._config = config
        self._store = store
        self.registry = TriggerRegistry(config.trigger_names)
        self.matcher = TriggerMatcher(self.registry)
        self.formatter = SnapshotTextFormatter()
        self.sink = sink if sink is not None else create_sink(config)
        self.metrics = PipelineMetrics()

    @classmethod
    def register(cls, config: Config, store: AttributeStore, events: Events, sink: Sink | None = None):
        """Create a pipeline and subscribe it to the host's event hooks."""
        pipeline = cls(config, store, sink)
        events.create_attr_evt.connect(pipeline.on_attribute_created)
        events.post_init_evt.connect(pipeline.on_post_init)
        events.process_snapshot.connect(pipeline.on_process_snapshot)
        logger.info("Registered text log service (triggers=%s, sink=%s)",
                    ":".join(config.trigger_names) or "<none>", pipeline.sink.kind)
        return pipeline

    def on_attribute_created(self, attr: Attribute) -> None:
        self.registry.on_attribute_created(attr)

    def on_post_init(self) -> None:
        formatstr = self._config.formatstring
        if not formatstr:
            formatstr = default_format_string(self.registry.names)
        self.formatter.reset(formatstr)
        logger.debug("Using format string %r", formatstr)

        self.matcher.bind_event_attributes(
            self._store.find_attribute(EVENT_SET_ATTR),
            self._store.find_attribute(EVENT_END_ATTR),
        )

    def on_process_snapshot(self, trigger_info: SnapshotRecord | None,
                            snapshot: SnapshotRecord) -> DeliveryResult | None:
        """Export *snapshot* if its trigger is watched. Returns None when dropped."""
        self.metrics.record_seen()
        if self.matcher.match(trigger_info, snapshot) is None:
            return None
        self.metrics.record_matched()

        text = self.formatter.format(flatten(snapshot))
        result = self.sink.deliver(text)
        self.metrics.record_delivery(result.ok)
        if not result.ok:
            logger.warning("Delivery to %s sink failed: %s", self.sink.kind, result.error)
        return result

    def close(self) -> None:
        self.sink.close()
        stats = self.metrics.snapshot()
        logger.info("Text log service finished: delivered=%d, failed=%d",
                    stats["records_delivered"], stats["records_failed"])
