"""
Encoding of prose as a block of line comments.

A prose block in source looks like::

    (def a 1)

    ;; First line of prose
    ;; second line

    (def b 2)

The separator region between the two forms starts with a blank line followed
by the comment marker. Decoding removes the marker from every line and
remembers how much whitespace surrounded the block; encoding puts both back.

Pre/postconditions:
- ``decode_comment_block`` requires ``is_comment_block(region)``.
- Its content always starts with a newline (the one before the first comment
  line) and never ends with whitespace.
- ``encode_comment_block(*decode_comment_block(region)) == region`` when every
  comment line of the region starts with the marker. Lines that do not are
  kept as they are, and that region will not round-trip.
"""

from typing import Tuple

from ..config import DEFAULT_COMMENT_MARKER
from ..models.notebook import ProseMetadata


def is_comment_block(region: str, marker: str = DEFAULT_COMMENT_MARKER) -> bool:
    """True when a separator region opens with a blank line and a comment line."""
    return region.startswith("\n\n" + marker)


def decode_comment_block(region: str, marker: str = DEFAULT_COMMENT_MARKER) -> Tuple[str, ProseMetadata]:
    """Strip comment markers from a separator region."""
    if not is_comment_block(region, marker):
        raise ValueError("region does not start with a comment block")

    leading = region.index("\n" + marker)
    trimmed = region.rstrip()
    trailing = len(region) - len(trimmed)

    # The first line is the empty remainder of the newline at ``leading``
    lines = trimmed[leading:].split("\n")
    content = "\n".join(lines[:1] + [_strip_marker(line, marker) for line in lines[1:]])

    metadata = ProseMetadata(
        is_comment_derived=True,
        leading_blank_lines=leading,
        trailing_blank_lines=trailing,
    )
    return content, metadata


def encode_comment_block(content: str, metadata: ProseMetadata, marker: str = DEFAULT_COMMENT_MARKER) -> str:
    """Turn prose back into the comment block it was decoded from."""
    lines = content.split("\n")
    body = lines[0] + "".join("\n" + marker + line for line in lines[1:])
    return "\n" * metadata.leading_blank_lines + body + "\n" * metadata.trailing_blank_lines


def _strip_marker(line: str, marker: str) -> str:
    if line.startswith(marker):
        return line[len(marker):]
    return line
