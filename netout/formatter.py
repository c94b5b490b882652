"""Column-template compiler and renderer for snapshot text records.

Template grammar::

    literal text %name% more text %[20]name% %[8r]name%

``%[width]name%`` pads the value on the right up to *width* characters,
``%[widthr]name%`` pads on the left. Values longer than the width are not
truncated; widths above MAX_FIELD_WIDTH are clamped. Names that are absent
from the record render as empty fields.
"""

import enum
import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, Sequence, Union

from netout.attributes import Attribute, AttrType
from netout.snapshot import Entry

logger = logging.getLogger(__name__)

DURATION_ATTR = "time.inclusive.duration"
LINE_WIDTH = 80
MAX_FIELD_WIDTH = 4096

_FIELD_RE = re.compile(r"%(?:\[(?P<width>\d*)(?P<align>r?)\])?(?P<name>[^%]*)%")


class Align(enum.Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Field:
    name: str
    width: int = 0
    align: Align = Align.LEFT

    def pad(self, text: str) -> str:
        if self.align is Align.RIGHT:
            return text.rjust(self.width)
        return text.ljust(self.width)


Segment = Union[Literal, Field]
FormatTemplate = tuple[Segment, ...]


def default_format_string(attr_names: Sequence[str]) -> str:
    """One column per trigger attribute, sized to keep lines near 80 columns."""
    names = list(dict.fromkeys(attr_names))
    if not names:
        return f"%{DURATION_ATTR}%"

    name_sizes = sum(len(s) for s in names)
    w = max(0, (LINE_WIDTH - 10 - name_sizes - 2 * len(names)) // len(names))

    parts = [f"{s}=%[{w}]{s}% " for s in names]
    parts.append(f"%[8r]{DURATION_ATTR}%")
    return "".join(parts)


def compile_format(template: str) -> FormatTemplate:
    """Split a template string into literal runs and field descriptors."""
    segments: list[Segment] = []
    pos = 0
    for m in _FIELD_RE.finditer(template):
        if m.start() > pos:
            segments.append(Literal(template[pos:m.start()]))
        align = Align.RIGHT if m.group("align") else Align.LEFT
        digits = (m.group("width") or "0").lstrip("0") or "0"
        width = MAX_FIELD_WIDTH if len(digits) > 5 else min(int(digits), MAX_FIELD_WIDTH)
        segments.append(Field(m.group("name"), width, align))
        pos = m.end()
    if pos < len(template):
        segments.append(Literal(template[pos:]))
    return tuple(segments)


def format_value(attr: Attribute, value: Any) -> str:
    """Convert a value to text according to the attribute's declared type."""
    if value is None:
        return ""
    try:
        if attr.type is AttrType.BOOL:
            return "true" if value else "false"
        if attr.type is AttrType.DOUBLE:
            return f"{float(value):g}"
        if attr.type in (AttrType.INT, AttrType.UINT):
            return str(int(value))
        if attr.type is AttrType.ADDR:
            return hex(int(value))
        if attr.type is AttrType.TYPE and isinstance(value, AttrType):
            return value.value
    except (TypeError, ValueError, OverflowError):
        logger.debug("Value of %s does not fit type %s", attr.name, attr.type.value)
    try:
        return str(value)
    except ValueError:
        # ints past the interpreter's digit limit
        return f"<{type(value).__name__}>"


def _resolve(name: str, entries: Iterable[Entry]) -> str | None:
    for entry in entries:
        if entry.is_empty():
            continue
        if entry.is_reference:
            matches = [n for n in entry.node.path() if n.attribute.name == name]
            if not matches:
                continue
            leaf = matches[-1]
            if leaf.attribute.nested:
                return "/".join(format_value(n.attribute, n.value) for n in matches)
            return format_value(leaf.attribute, leaf.value)
        if entry.attribute.name == name:
            return format_value(entry.attribute, entry.value)
    return None


def render(template: FormatTemplate, entries: Sequence[Entry]) -> str:
    out: list[str] = []
    for segment in template:
        if isinstance(segment, Literal):
            out.append(segment.text)
        else:
            out.append(segment.pad(_resolve(segment.name, entries) or ""))
    return "".join(out)


class SnapshotTextFormatter:
    """Holds a compiled template and renders flattened records with it."""

    def __init__(self, template: str = ""):
        self._template_str = ""
        self._template: FormatTemplate = ()
        self.reset(template)

    @property
    def template(self) -> FormatTemplate:
        return self._template

    @property
    def template_string(self) -> str:
        return self._template_str

    def reset(self, template: str) -> None:
        self._template_str = template
        self._template = compile_format(template)

    def format(self, entries: Sequence[Entry]) -> str:
        return render(self._template, entries)
