"""
Default boundary locator for Clojure-style source.

Finds the ``[start, end)`` span of every top-level form without building a
syntax tree. It only knows enough of the reader to skip over strings,
character literals, comments and nested brackets; it never evaluates or
validates the forms it finds.

Malformed input is tolerated: an unclosed bracket or string runs to the end
of the text, and a stray closing bracket is reported as a one-character form.
"""

from typing import List, Optional, Protocol, Tuple, Union

Span = Tuple[int, int]

OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = set(OPENERS.values())
# Characters that end a symbol, number or keyword
DELIMITERS = set("()[]{}\";")
# Prefixes that apply to the next form
QUOTE_PREFIXES = ("~@", "'", "`", "~", "@")
DISPATCH_PREFIXES = ("#'", "#_", "#=")


class BoundaryLocator(Protocol):
    """Anything that can report the top-level forms of a text."""

    def __call__(self, text: str) -> List[Span]:
        ...


def _is_whitespace(char: str) -> bool:
    return char.isspace() or char == ","


class _Scanner:
    def __init__(self, text: str):
        self.text = text
        self.length = len(text)

    def skip_blank(self, pos: int) -> int:
        """Skip whitespace, commas and line comments."""
        while pos < self.length:
            char = self.text[pos]
            if _is_whitespace(char):
                pos += 1
            elif char == ";":
                newline = self.text.find("\n", pos)
                pos = self.length if newline == -1 else newline
            else:
                break
        return pos

    def read_form(self, pos: int) -> int:
        """
        Return the end offset of the form starting at ``pos``.

        Nesting is tracked on an explicit stack so arbitrarily deep input
        cannot exhaust the interpreter stack. Open collections push their
        closer; reader prefixes push the number of forms they still need.
        """
        text = self.text
        stack: List[Union[str, int]] = []
        while True:
            pos, end = self._open(pos, stack)

            # Settle completed forms until another form has to be opened
            while True:
                if end is not None:
                    while stack and isinstance(stack[-1], int):
                        if stack[-1] > 1:
                            stack[-1] -= 1
                            break
                        stack.pop()
                    if not stack:
                        return end
                    pos, end = end, None

                pos = self.skip_blank(pos)
                if pos >= self.length:
                    return self.length
                if text[pos] not in CLOSERS:
                    break
                if isinstance(stack.pop(), int):
                    # Dangling prefix; leave the closer to the enclosing collection
                    end = pos
                else:
                    # Matching or mismatched, a closer ends the innermost collection
                    end = pos + 1

    def _open(self, pos: int, stack: List[Union[str, int]]) -> Tuple[int, Optional[int]]:
        """
        Start the form at ``pos``.

        Returns ``(pos, end)``: ``end`` is set when the form is already
        complete, otherwise ``pos`` is where its contents begin.
        """
        text = self.text
        char = text[pos]

        if char in OPENERS:
            stack.append(OPENERS[char])
            return pos + 1, None
        if char in CLOSERS:
            return pos, pos + 1
        if char == '"':
            return pos, self.read_string(pos + 1)
        if char == "\\":
            return pos, self.read_character(pos)
        if char == "^":
            # Metadata: the map/keyword/symbol, then the form it decorates
            stack.append(2)
            return pos + 1, None
        for prefix in QUOTE_PREFIXES:
            if text.startswith(prefix, pos):
                stack.append(1)
                return pos + len(prefix), None
        if char == "#":
            return self._open_dispatch(pos, stack)
        return pos, self.read_token(pos)

    def _open_dispatch(self, pos: int, stack: List[Union[str, int]]) -> Tuple[int, Optional[int]]:
        text = self.text
        following = text[pos + 1:pos + 2]

        if following in ("(", "{"):
            stack.append(OPENERS[following])
            return pos + 2, None
        if following == '"':
            return pos, self.read_string(pos + 2)
        if following == "#":
            # Symbolic values: ##Inf, ##NaN
            return pos, self.read_token(pos + 2)
        if following == "?":
            # Reader conditionals: #?( ... ) and #?@( ... )
            stack.append(1)
            return (pos + 3 if text.startswith("#?@", pos) else pos + 2), None
        if following == ":":
            # Namespaced maps: #:ns{...} and #::{...}
            stack.append(1)
            return self.read_token(pos + 1), None
        for prefix in DISPATCH_PREFIXES:
            if text.startswith(prefix, pos):
                stack.append(1)
                return pos + len(prefix), None
        if following == "" or _is_whitespace(following) or following in DELIMITERS:
            return pos, pos + 1
        # Tagged literal: #inst "..." or #my/tag {...}
        stack.append(1)
        return self.read_token(pos + 1), None

    def read_string(self, pos: int) -> int:
        text = self.text
        while pos < self.length:
            char = text[pos]
            if char == "\\":
                pos += 2
            elif char == '"':
                return pos + 1
            else:
                pos += 1
        return self.length

    def read_character(self, pos: int) -> int:
        # The character after a backslash is always taken, even a delimiter: \( \space
        pos += 2
        return self.read_token(min(pos, self.length))

    def read_token(self, pos: int) -> int:
        text = self.text
        while pos < self.length and not _is_whitespace(text[pos]) and text[pos] not in DELIMITERS:
            pos += 1
        return pos


def locate_top_level_forms(text: str) -> List[Span]:
    """
    Report the span of every top-level form in ``text``.

    Spans are ordered, non-overlapping and within ``[0, len(text)]``.
    """
    scanner = _Scanner(text)
    spans: List[Span] = []
    pos = scanner.skip_blank(0)
    while pos < scanner.length:
        end = scanner.read_form(pos)
        spans.append((pos, end))
        pos = scanner.skip_blank(end)
    return spans
