from __future__ import annotations
from typing import List, Optional

from engine.console import Console
from engine.narrative.types import Decision, Dialog


class DialogPresenter:
    def __init__(self,
                 console: Console,
                 display_disabled_decisions: bool = True,   # False: disabled decisions are not listed
                 player_prefix: str = "You: ",              # Prefix of the echoed player choice
                 disabled_suffix: str = " (unavailable)"):
        self.console = console
        self.display_disabled = bool(display_disabled_decisions)
        self.player_prefix = player_prefix
        self.disabled_suffix = disabled_suffix

    @classmethod
    def from_settings(cls, console: Console, cfg) -> "DialogPresenter":
        """ `cfg` is a PresenterCfg. """
        return cls(console, display_disabled_decisions=cfg.display_disabled_decisions)

    def visible_decisions(self, dialog: Dialog) -> List[Decision]:
        return [d for d in dialog if d.enabled or self.display_disabled]

    def lines(self, dialog: Dialog) -> List[str]:
        out = (dialog.message or "").splitlines() or [""]
        for n, d in enumerate(self.visible_decisions(dialog), start=1):
            text = d.message or d.id
            out.append(f"{n}) {text}{'' if d.enabled else self.disabled_suffix}")
        return out

    def show(self, dialog: Dialog) -> None:
        # first message line flush left, the rest indented by the console
        self.console.out(*self.lines(dialog))

    def pick(self, dialog: Dialog, index: int) -> Optional[Decision]:
        """ 1-based index into the listed decisions. None if out of range or disabled. """
        shown = self.visible_decisions(dialog)
        if index < 1 or index > len(shown):
            return None
        decision = shown[index - 1]
        return decision if decision.enabled else None

    def show_choice(self, decision: Decision) -> None:
        self.console.out(f"{self.player_prefix}{decision.message or decision.id}")
