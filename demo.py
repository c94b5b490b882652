#!/usr/bin/env python3
"""Demo: replays a few synthetic region snapshots through the export pipeline."""

import argparse
import logging
import random
import sys

from netout.attributes import AttributeStore, AttrProperty, AttrType
from netout.config import load_config, load_yaml_config
from netout.events import Events
from netout.pipeline import NetOutPipeline
from netout.registry import EVENT_END_ATTR, EVENT_SET_ATTR
from netout.snapshot import ContextNode, SnapshotRecord

logger = logging.getLogger(__name__)

PHASES = ["init", "solve", "output"]


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="netout pipeline demo")
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--trigger", default=None, help="Colon-separated trigger attributes")
    parser.add_argument("--formatstring", default=None, help="Record template")
    parser.add_argument("--filename", default=None, help="stdout, stderr, none, or a file path")
    parser.add_argument("--posturl", default=None, help="Collector URL for the remote sink")
    parser.add_argument("--sink", choices=["stream", "remote"], default=None)
    parser.add_argument("--iterations", type=int, default=3)
    return parser


def main(argv=None):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [NETOUT] %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
    args = build_cli_parser().parse_args(argv)

    yaml_data = load_yaml_config(args.config)
    for key in ("trigger", "formatstring", "filename", "posturl", "sink"):
        if getattr(args, key) is not None:
            yaml_data[key] = getattr(args, key)
    config = load_config(yaml_data)
    if not config.trigger:
        config = load_config({**yaml_data, "trigger": "phase"})

    events = Events()
    store = AttributeStore(events)
    pipeline = NetOutPipeline.register(config, store, events)

    hidden = AttrProperty.SKIP_EVENTS | AttrProperty.HIDDEN
    set_attr = store.create_attribute(EVENT_SET_ATTR, AttrType.UINT, hidden)
    end_attr = store.create_attribute(EVENT_END_ATTR, AttrType.UINT, hidden)
    duration = store.create_attribute("time.inclusive.duration", AttrType.DOUBLE,
                                      hidden | AttrProperty.ASVALUE)
    function = store.create_attribute("function", AttrType.STRING, AttrProperty.NESTED)
    phase = store.create_attribute("phase", AttrType.STRING)
    events.post_init_evt.emit()

    root = ContextNode(function, "main")
    for i in range(args.iterations):
        leaf = root.child(function, f"step{i}")
        for name in PHASES:
            node = leaf.child(phase, name)
            snapshot = SnapshotRecord.build(
                nodes=[node],
                immediates=[(duration, round(random.uniform(10, 500), 1))],
            )
            trigger_info = SnapshotRecord.build(immediates=[(end_attr, phase.id)])
            events.process_snapshot.emit(trigger_info, snapshot)
        set_info = SnapshotRecord.build(immediates=[(set_attr, function.id)])
        events.process_snapshot.emit(set_info, SnapshotRecord.build(nodes=[leaf]))

    pipeline.close()
    logger.info("Metrics: %s", pipeline.metrics.snapshot())


if __name__ == "__main__":
    main()
