from __future__ import annotations
from typing import List, Optional, Tuple

from engine.console import Console
from engine.errors import ChoiceError
from engine.narrative.registry import TreeRegistry
from engine.narrative.types import Decision, Dialog, Tree


class StorySession:
    """
    Walks the trees of a registry, one dialog at a time.

    Rules:
      - choose() adds the decision score to the current tree and follows the
        decision link, or the dialog link when the decision has none.
      - advance() follows the dialog link (dialogs without decisions).
      - No link to follow ends the session.
    """
    def __init__(self, registry: TreeRegistry, start: str, console: Optional[Console] = None):
        self.registry = registry
        self.console = console or registry.console
        self._tree: Optional[Tree] = registry.get(start)
        self._dialog: Optional[Dialog] = self._tree.root_dialog()
        self.history: List[Tuple[str, str]] = [(self._tree.id, self._dialog.id)]

    # --- queries ------------------------------------------------------------
    @property
    def tree(self) -> Optional[Tree]:
        return self._tree

    @property
    def current(self) -> Optional[Dialog]:
        return self._dialog

    @property
    def ended(self) -> bool:
        return self._dialog is None

    def decisions(self) -> List[Decision]:
        return list(self._dialog) if self._dialog is not None else []

    # --- progression --------------------------------------------------------
    def choose(self, decision_id: str) -> Optional[Dialog]:
        if self._dialog is None:
            self.console.fail(ChoiceError, f"story has ended, cannot choose: {decision_id}")
        decision = self._dialog.get(decision_id)
        if not decision.enabled:
            self.console.fail(ChoiceError, f"decision is disabled: {decision_id}", f"in dialog: {self._dialog.id}")

        # a broken link raises before the score changes
        owner = decision if decision.link is not None else self._dialog
        target = self.registry.resolve(self._tree, owner)
        score = self._tree.increment_score(decision.score)
        self.console.info(f"chose: {decision_id}", f"score of {self._tree.id}: {score}")
        return self._move(target)

    def advance(self) -> Optional[Dialog]:
        if self._dialog is None:
            return None
        return self._move(self.registry.resolve(self._tree, self._dialog))

    def _move(self, target: Optional[Tuple[Tree, Dialog]]) -> Optional[Dialog]:
        if target is None:
            self._dialog = None
            return None
        self._tree, self._dialog = target
        self.history.append((self._tree.id, self._dialog.id))
        return self._dialog
