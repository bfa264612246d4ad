from __future__ import annotations
from functools import partial
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from engine.console import Console
from engine.errors import MarkerError, ScriptLoadError
from engine.settings import ParserCfg
from engine.narrative.lexer import Token, scan_line
from engine.narrative.types import Decision, Dialog, LinkKind, Tree

# Line conventions of a plot script:
#   $[id] text ...      starts a dialog
#   > $[id] text ...    starts a decision of the current dialog
#   text ...            continues the current dialog/decision message
#   # ...               comment; blank lines are ignored
DECISION_PREFIX = ">"
COMMENT_PREFIX = "#"

DIALOG = "dialog"
DECISION = "decision"


def construct(root: str, initial_score: int = 0, *, tree_id: str = "", console: Optional[Console] = None) -> Tree:
    """ Empty tree whose root is the dialog id `root`. """
    return Tree(root, initial_score, id=tree_id, console=console)


class TreeBuilder:
    """
    Turns plot script lines into a Tree. One builder per script: feed() every
    line, then finish(). Any error raises and no tree is handed out.
    """
    def __init__(self,
                 cfg: Optional[ParserCfg] = None,
                 *,
                 tree_id: str = "",
                 initial_score: int = 0,
                 console: Optional[Console] = None):
        self.cfg = cfg or ParserCfg()
        self.tree_id = tree_id
        self.initial_score = initial_score
        self.console = console or Console()
        self.tree: Optional[Tree] = None

        self._dialog: Optional[Dialog] = None       # dialog new decisions attach to
        self._pending: Optional[Token] = None       # entity still collecting lines
        self._pending_kind: str = DIALOG
        self._pending_line = 0
        self._line_no = 0
        self._decisions = 0

    # --- public API ---------------------------------------------------------
    def feed(self, line: str) -> None:
        self._line_no += 1
        line = line.rstrip("\r\n")
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            return

        if stripped.startswith(DECISION_PREFIX):
            self._flush()
            if self._dialog is None:
                self._fail(f"decision before any dialog at line {self._line_no}")
            self._start(DECISION, self._scan(stripped[len(DECISION_PREFIX):].lstrip(" ")))
            return

        token = self._scan(stripped)
        if token.has_id:
            self._flush()
            self._start(DIALOG, token)
            return

        if self._pending is None:
            self._fail(f"text outside of any dialog at line {self._line_no}", token)
        self._continue(token)

    def finish(self) -> Tree:
        self._flush()
        if self.tree is None:
            self._fail(f"no dialog found in tree: {self.tree_id}")
        self._check_links(self.tree)
        self.console.info(f"parsed tree: {self.tree_id}",
                          f"dialogs: {len(self.tree)}",
                          f"decisions: {self._decisions}")
        return self.tree

    # --- helpers ------------------------------------------------------------
    def _scan(self, text: str) -> Token:
        return scan_line(text,
                         trim_after_markers=self.cfg.trim_whitespaces_behind_markers,
                         console=self.console)

    def _fail(self, message: str, token: Optional[Token] = None) -> None:
        self.console.fail(partial(MarkerError, token=token), message)

    def _start(self, kind: str, token: Token) -> None:
        self._pending = token
        self._pending_kind = kind
        self._pending_line = self._line_no

    def _continue(self, token: Token) -> None:
        """ Merge a continuation line into the pending entity. """
        pending = self._pending
        pending.text += "\n" + token.text
        if token.has_link:
            if pending.has_link:
                self._fail(f"found another link within token: {token.link} (line {self._line_no})", pending)
            pending.link = token.link
            pending.link_kind = token.link_kind

    def _flush(self) -> None:
        token = self._pending
        if token is None:
            return
        self._pending = None

        if not token.id:
            self._fail(f"missing id for {self._pending_kind} at line {self._pending_line}", token)
        # lines arrive stripped: leading spaces left here follow a marker and are kept when trim is off
        parts = (part.rstrip() for part in token.text.split("\n"))
        message = "\n".join(part for part in parts if part)

        if self._pending_kind == DIALOG:
            if self.tree is None:
                self.tree = construct(token.id, self.initial_score, tree_id=self.tree_id, console=self.console)
            dialog = Dialog(token.id, message, token.link, token.link_kind, console=self.console)
            self._dialog = self.tree.insert(dialog)
        else:
            self._dialog.insert(Decision(token.id, message, token.link, token.link_kind))
            self._decisions += 1

    def _check_links(self, tree: Tree) -> None:
        """ Warn about dialog-links that lead nowhere. Tree-links are checked by the registry. """
        if tree.root not in tree:
            self.console.warn(f"root dialog not found: {tree.root}", f"in tree: {tree.id}")
        for dialog_id, owner_id, target in dangling_dialog_links(tree):
            self.console.warn(f"dangling dialog link: {target}",
                              f"from: {owner_id}",
                              f"in dialog: {dialog_id}")


def dangling_dialog_links(tree: Tree) -> List[Tuple[str, str, str]]:
    """ (dialog id, dialog or decision id, missing target) for every unresolvable dialog-link. """
    out: List[Tuple[str, str, str]] = []
    for dialog in tree:
        owners = [dialog, *dialog]
        for owner in owners:
            if owner.link_kind is LinkKind.DIALOG and owner.link not in tree:
                out.append((dialog.id, owner.id, owner.link))
    return out


def parse_stream(source: Iterable[str],
                 cfg: Optional[ParserCfg] = None,
                 *,
                 tree_id: str = "",
                 initial_score: int = 0,
                 console: Optional[Console] = None) -> Tree:
    builder = TreeBuilder(cfg, tree_id=tree_id, initial_score=initial_score, console=console)
    for line in source:
        builder.feed(line)
    return builder.finish()


def load_script_file(path: str | Path,
                     cfg: Optional[ParserCfg] = None,
                     *,
                     initial_score: int = 0,
                     console: Optional[Console] = None) -> Tree:
    """
    Parse one plot script. The tree id is the file name without suffix.
    The file is closed whether parsing succeeds or not.
    """
    console = console or Console()
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            return parse_stream(f, cfg, tree_id=p.stem, initial_score=initial_score, console=console)
    except (OSError, UnicodeDecodeError) as e:
        console.fail(ScriptLoadError, f"cannot open file: {path}", str(e))
