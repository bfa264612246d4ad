from __future__ import annotations
from enum import Enum
from typing import Dict, Iterator, Optional

from engine.console import Console
from engine.errors import DuplicateIdError, NotFoundError


class LinkKind(Enum):
    TREE = "tree"       # jump to another script's tree
    DIALOG = "dialog"   # jump to a dialog of the same tree


class Decision:
    """ One option the player can pick at a dialog. """

    def __init__(self,
                 id: str,
                 message: str = "",
                 link: Optional[str] = None,
                 link_kind: Optional[LinkKind] = None,
                 enabled: bool = True,      # False: shown (maybe) but cannot be chosen
                 score: int = 0):           # Added to the tree score when chosen
        self._id = id
        self.message = message
        self.link = link
        self.link_kind = link_kind if link is not None else None
        self.enabled = enabled
        self.score = score

    @property
    def id(self) -> str:
        return self._id

    def __repr__(self) -> str:
        return f"Decision({self._id!r}, link={self.link!r}, enabled={self.enabled}, score={self.score})"


class Dialog:
    """ One node of a tree: a message plus the decisions available there. """

    def __init__(self,
                 id: str,
                 message: str = "",
                 link: Optional[str] = None,                # Fallback target when no decision is taken
                 link_kind: Optional[LinkKind] = None,
                 console: Optional[Console] = None):
        self._id = id
        self.message = message
        self.link = link
        self.link_kind = link_kind if link is not None else None
        self.console = console or Console()
        self._decisions: Dict[str, Decision] = {}

    @property
    def id(self) -> str:
        return self._id

    # --- decisions ------------------------------------------------------------
    def insert(self, decision: Decision) -> Decision:
        if decision.id in self._decisions:
            self.console.fail(DuplicateIdError, f"duplicate decision id: {decision.id}", f"in dialog: {self._id}")
        self._decisions[decision.id] = decision
        return decision

    def add_decision(self,
                     id: str,
                     message: str,
                     link: Optional[str] = None,
                     link_kind: Optional[LinkKind] = None,
                     enabled: bool = True,
                     score: int = 0) -> Decision:
        return self.insert(Decision(id, message, link, link_kind, enabled, score))

    def get(self, id: str) -> Decision:
        decision = self._decisions.get(id)
        if decision is None:
            self.console.fail(NotFoundError, f"cannot find decision with id: {id}", f"in dialog: {self._id}")
        return decision

    decision = get

    def all_decisions(self) -> Dict[str, Decision]:
        """ Snapshot of the decisions, keyed by id. """
        return dict(self._decisions)

    def __contains__(self, id: object) -> bool:
        return id in self._decisions

    def __len__(self) -> int:
        return len(self._decisions)

    def __iter__(self) -> Iterator[Decision]:
        return iter(list(self._decisions.values()))

    def __repr__(self) -> str:
        return f"Dialog({self._id!r}, decisions={list(self._decisions)!r})"


class Tree:
    """
    One script's worth of dialogs. Recommended: one tree per level, linked
    to other trees through tree-links.
    """

    def __init__(self,
                 root: str,                     # Id of the first dialog, not checked here
                 initial_score: int = 0,
                 id: str = "",
                 console: Optional[Console] = None):
        self._root = root
        self._id = id
        self.score = initial_score
        self.console = console or Console()
        self._dialogs: Dict[str, Dialog] = {}

    @property
    def id(self) -> str:
        return self._id

    @property
    def root(self) -> str:
        return self._root

    # --- dialogs --------------------------------------------------------------
    def insert(self, dialog: Dialog) -> Dialog:
        if dialog.id in self._dialogs:
            self.console.fail(DuplicateIdError, f"duplicate dialog id: {dialog.id}", f"in tree: {self._id}")
        self._dialogs[dialog.id] = dialog
        return dialog

    def add_dialog(self,
                   id: str,
                   message: str,
                   link: Optional[str] = None,
                   link_kind: Optional[LinkKind] = None) -> Dialog:
        return self.insert(Dialog(id, message, link, link_kind, console=self.console))

    def get(self, id: str) -> Dialog:
        dialog = self._dialogs.get(id)
        if dialog is None:
            self.console.fail(NotFoundError, f"cannot find dialog with id: {id}", f"in tree: {self._id}")
        return dialog

    dialog = get

    def all_dialogs(self) -> Dict[str, Dialog]:
        return dict(self._dialogs)

    def root_dialog(self) -> Dialog:
        return self.get(self._root)

    def resolve_link(self, owner) -> Optional[Dialog]:
        """
        Dialog a Decision/Dialog dialog-link points to. None when the owner
        has no link or links to another tree (see TreeRegistry).
        """
        if owner.link is None or owner.link_kind is not LinkKind.DIALOG:
            return None
        return self.get(owner.link)

    # --- score ----------------------------------------------------------------
    def increment_score(self, value: int) -> int:
        """ Add `value` (negative to decrement), returns the new score. """
        self.score += value
        return self.score

    def __contains__(self, id: object) -> bool:
        return id in self._dialogs

    def __len__(self) -> int:
        return len(self._dialogs)

    def __iter__(self) -> Iterator[Dialog]:
        return iter(list(self._dialogs.values()))

    def __repr__(self) -> str:
        return f"Tree({self._id!r}, root={self._root!r}, score={self.score}, dialogs={len(self._dialogs)})"
