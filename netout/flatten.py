"""Flatten a snapshot record into one ordered list of entries."""

from netout.snapshot import Entry, SnapshotRecord


def flatten(record: SnapshotRecord) -> list[Entry]:
    """Tree-node entries in stored order, then immediate entries in stored order.

    Nothing is de-duplicated; the formatter resolves a name to its first entry.
    """
    size = record.size()
    data = record.data()

    entries = [Entry.from_node(data.node_entries[n]) for n in range(size.n_nodes)]
    for n in range(size.n_immediate):
        entries.append(Entry.immediate(data.immediate_attr[n], data.immediate_data[n]))
    return entries
