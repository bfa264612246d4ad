from __future__ import annotations
from dataclasses import dataclass
from functools import partial
from typing import List, Optional, Tuple

from engine.console import Console
from engine.errors import MarkerError
from engine.narrative.types import LinkKind

MARKER = "$"
OPEN, CLOSE = "[", "]"
_LINK_KINDS = {
    "T": LinkKind.TREE, "t": LinkKind.TREE,
    "D": LinkKind.DIALOG, "d": LinkKind.DIALOG,
}

@dataclass(eq=False)
class Token:
    text: str = ""
    id: Optional[str] = None
    link: Optional[str] = None
    link_kind: Optional[LinkKind] = None

    @property
    def has_id(self) -> bool:
        return self.id is not None

    @property
    def has_link(self) -> bool:
        return self.link is not None


def read_marker_value(line: str, pos: int, trim: bool = True) -> Tuple[str, int]:
    """
    `pos` sits on the opening '['. Returns (content, cursor after the marker).
    Content runs to the next ']'; without one, the rest of the line is taken.
    With `trim`, spaces right after the ']' are consumed too.
    """
    start = pos + 1
    end = line.find(CLOSE, start)
    if end < 0:
        return line[start:], len(line)

    pos = end + 1
    if trim:
        while pos < len(line) and line[pos] == " ":
            pos += 1
    return line[start:end], pos


def scan_line(line: str,
              token: Optional[Token] = None,
              pos: int = 0,
              *,
              trim_after_markers: bool = True,
              console: Optional[Console] = None) -> Token:
    """
    Scan `line` from `pos` to its end into `token` (a new one if None).

        $[id]       id of the token
        $T[x] $t[x] link to tree x
        $D[x] $d[x] link to dialog x
        $?          anything else is literal text

    A second id or a second link in the same token raises MarkerError with
    the token attached; the first value and the text read so far are kept.
    """
    token = token if token is not None else Token()
    console = console or Console()
    chunks: List[str] = []
    n = len(line)

    try:
        while pos < n:
            ch = line[pos]
            if ch != MARKER:
                chunks.append(ch)
                pos += 1
                continue

            nxt = line[pos + 1:pos + 2]

            # `$[` id marker
            if nxt == OPEN:
                value, pos = read_marker_value(line, pos + 1, trim_after_markers)
                if token.has_id:
                    console.fail(partial(MarkerError, token=token), f"found another id within token: {value}")
                token.id = value
                continue

            # `$T[` / `$D[` link markers
            kind = _LINK_KINDS.get(nxt) if nxt else None
            if kind is not None and line[pos + 2:pos + 3] == OPEN:
                value, pos = read_marker_value(line, pos + 2, trim_after_markers)
                if token.has_link:
                    console.fail(partial(MarkerError, token=token), f"found another link within token: {value}")
                token.link = value
                token.link_kind = kind
                continue

            # not a marker: keep `$` and what was looked at
            width = 3 if kind is not None else 2
            chunks.append(line[pos:pos + width])
            pos += width
    finally:
        token.text += "".join(chunks)

    return token
