"""
PrefixWriter: byte sink wrapper that prefixes container output.

Every chunk written through it gets the container prefix in front, and every
line break inside the chunk is followed by the prefix again so multi-line
output stays attributed. When enabled, a JSON object embedded in the chunk is
expanded into indented form first.
"""
import json
import logging
import re
import uuid
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)

JSON_INDENT = 4


def pretty_print_json(chunk: bytes) -> Optional[bytes]:
    """
    Expand the JSON object spanning the first '{' to the last '}' of a chunk.

    Detection is purely positional. An object split across two chunks is not
    seen, and a span that is not a single valid JSON value is left alone.

    Args:
        chunk: Raw bytes as read from a container stream.

    Returns:
        The chunk with the object replaced by its indented rendering, or None
        when no valid object was found.
    """
    start = chunk.find(b"{")
    end = chunk.rfind(b"}")
    if start == -1 or end <= start:
        return None

    span = chunk[start:end + 1]
    marker = uuid.uuid4().hex
    if marker.encode("ascii") in span:
        return None
    literals = []

    def keep_literal(text: str) -> str:
        literals.append(text)
        return f"{marker}{len(literals) - 1}{marker}"

    # Numbers pass through as their source text; NaN and Infinity are not JSON.
    try:
        value = json.loads(
            span,
            parse_int=keep_literal,
            parse_float=keep_literal,
            parse_constant=_reject_constant,
        )
        indented = json.dumps(value, indent=JSON_INDENT, ensure_ascii=False)
    except (ValueError, RecursionError):
        return None

    indented = re.sub(f'"{marker}(\\d+){marker}"', lambda m: literals[int(m.group(1))], indented)
    return chunk[:start] + indented.encode("utf-8") + chunk[end + 1:]


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


class PrefixWriter:
    """
    Wraps a binary sink and writes prefixed output to it.

    Args:
        sink: Underlying binary stream, e.g. `sys.stdout.buffer`.
        prefix: Text put at the start of each line.
        pretty_json: Expand embedded JSON objects into indented form.
    """

    def __init__(self, sink: BinaryIO, prefix: str, pretty_json: bool = True) -> None:
        self.sink = sink
        self.prefix = prefix.encode("utf-8")
        self.pretty_json = pretty_json

    def transform(self, chunk: bytes) -> bytes:
        """Return the bytes `write` would send to the sink for this chunk."""
        if not chunk:
            return b""

        if self.pretty_json:
            chunk = pretty_print_json(chunk) or chunk

        # The last line break ends the chunk; only the ones before it open a new line.
        breaks = chunk.count(b"\n")
        if breaks > 1:
            chunk = chunk.replace(b"\n", b"\n" + self.prefix, breaks - 1)
        return self.prefix + chunk

    def write(self, chunk: bytes) -> int:
        """
        Write one chunk of container output.

        Sink errors are not reported back; the caller always sees the whole
        chunk as consumed.
        """
        if not chunk:
            return 0
        data = self.transform(chunk)
        try:
            self.sink.write(data)
            self.sink.flush()
        except (OSError, ValueError) as e:
            logger.debug(f"PrefixWriter: dropped {len(data)} bytes: {e}")
        return len(chunk)
