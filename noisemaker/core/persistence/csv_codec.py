"""
CSV codec — Record <-> one line of the activity log.

The format is comma-delimited with backslash escaping only:

    \\        ->  \\\\
    ,        ->  \\,
    newline  ->  \\n
    CR       ->  \\r

There is no quoting. Every free-text field is escaped on encode and
unescaped on decode, so a line written by encode survives decode -> encode
unchanged. Unknown escape pairs in older files decode verbatim.

The ordered column list below is the single source of truth for both the
header line and field order; encode, decode and the header are all
derived from it.
"""

from __future__ import annotations

from dataclasses import dataclass

from noisemaker.core.models.record import Record


# (column name, Record attribute), in file order
BASE_COLUMNS: tuple[tuple[str, str], ...] = (
    ("timestamp", "timestamp"),
    ("activity", "activity"),
    ("os", "os"),
    ("username", "username"),
    ("processName", "process_name"),
    ("processCmd", "process_cmd"),
    ("pid", "pid"),
    ("path", "path"),
    ("status", "status"),
    ("method", "method"),
    ("sourceAddr", "source_addr"),
    ("sourcePort", "source_port"),
    ("destAddr", "dest_addr"),
    ("destPort", "dest_port"),
    ("bytesSent", "bytes_sent"),
    ("protocol", "protocol"),
)

# Optional trailing columns, enabled by ``record_response``
RESPONSE_COLUMNS: tuple[tuple[str, str], ...] = (
    ("responseStatusCd", "response_status"),
    ("responseBody", "response_body"),
)

HEADER = ",".join(name for name, _ in BASE_COLUMNS)

_FIELD_BY_COLUMN = dict(BASE_COLUMNS + RESPONSE_COLUMNS)
_BASE_NAMES = frozenset(name for name, _ in BASE_COLUMNS)
_INT_FIELDS = frozenset({"pid", "source_port", "dest_port", "bytes_sent", "response_status"})


@dataclass(frozen=True)
class ParseError:
    """A log line that could not be turned into a Record."""

    row: int
    reason: str

    def __str__(self) -> str:
        return f"row {self.row}: {self.reason}"


# ── Escaping ────────────────────────────────────────────────────


def escape(text: str) -> str:
    """Escape one field: backslash, comma, newline and carriage return."""
    return (
        text.replace("\\", "\\\\")
        .replace(",", "\\,")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


_UNESCAPES = {",": ",", "n": "\n", "r": "\r", "\\": "\\"}


def unescape(text: str) -> str:
    """Reverse ``escape``. Unknown escape pairs are kept verbatim."""
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            out.append(_UNESCAPES.get(nxt, ch + nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def split_row(line: str) -> list[str]:
    """Split a line on unescaped commas. Tokens are returned still escaped."""
    fields: list[str] = []
    current: list[str] = []
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\" and i + 1 < len(line):
            current.append(line[i : i + 2])
            i += 2
            continue
        if ch == ",":
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    fields.append("".join(current))
    return fields


def _to_int(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        return 0


# ── Codec ───────────────────────────────────────────────────────


class RecordCodec:
    """Encode and decode records against an ordered column list.

    Args:
        include_response: Append ``responseStatusCd`` and ``responseBody``
            after the 16 base columns.
    """

    def __init__(self, include_response: bool = False):
        self._columns = BASE_COLUMNS + (RESPONSE_COLUMNS if include_response else ())

    @property
    def columns(self) -> tuple[tuple[str, str], ...]:
        return self._columns

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self._columns)

    @property
    def header(self) -> str:
        return ",".join(self.column_names)

    def is_header_line(self, line: str) -> bool:
        """Exact match against this codec's header."""
        return line == self.header

    def encode(self, record: Record) -> str:
        """Serialize a record to one line (no trailing newline)."""
        values = []
        for _, attr in self._columns:
            value = getattr(record, attr)
            values.append(str(value) if attr in _INT_FIELDS else escape(value))
        return ",".join(values)

    def decode(
        self,
        line: str,
        row: int = 0,
        layout: tuple[str, ...] | None = None,
    ) -> Record | ParseError:
        """Parse one line into a Record.

        Numeric fields that do not parse default to 0. Returns a
        ParseError (never raises) when the line has too few fields.

        Args:
            line: The raw line, without its line terminator.
            row: 1-based line number, for diagnostics.
            layout: Column order from a non-canonical header line.
                Defaults to this codec's columns.
        """
        names = layout or self.column_names
        tokens = split_row(line)
        required = _required_fields(names)
        if len(tokens) < required:
            return ParseError(
                row=row,
                reason=f"not enough fields ({required} required, {len(tokens)} found)",
            )

        values: dict[str, str | int] = {}
        for idx, name in enumerate(names):
            attr = _FIELD_BY_COLUMN.get(name)
            if attr is None or idx >= len(tokens):
                continue
            raw = unescape(tokens[idx])
            values[attr] = _to_int(raw) if attr in _INT_FIELDS else raw

        return Record(**values)


def _required_fields(names: tuple[str, ...]) -> int:
    """Number of leading tokens needed to cover every base column."""
    positions = [idx for idx, name in enumerate(names) if name in _BASE_NAMES]
    return max(positions) + 1 if positions else len(names)


def parse_layout(line: str) -> tuple[str, ...] | None:
    """Recognize a header line with a non-canonical column order.

    Returns the column names when every token is a known column, none
    repeats and all base columns are present. Otherwise None: the line is
    data, not a header.
    """
    tokens = split_row(line)
    if len(set(tokens)) != len(tokens):
        return None
    if not all(token in _FIELD_BY_COLUMN for token in tokens):
        return None
    if not _BASE_NAMES.issubset(tokens):
        return None
    return tuple(tokens)


# ── Module-level helpers (canonical 16-column codec) ────────────

_DEFAULT_CODEC = RecordCodec()


def encode(record: Record) -> str:
    return _DEFAULT_CODEC.encode(record)


def decode(line: str, row: int = 0) -> Record | ParseError:
    return _DEFAULT_CODEC.decode(line, row=row)


def is_header_line(line: str) -> bool:
    return line == HEADER
