from __future__ import annotations

import sys
import logging
import argparse
from typing import List, Optional

from engine.console import Console
from engine.errors import TextEngineError
from engine.settings import DEFAULTS_PATH, load_settings
from engine.narrative.presenter import DialogPresenter
from engine.narrative.registry import TreeRegistry
from engine.narrative.session import StorySession


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Parse plot scripts into dialog trees and play them in the console.")
    ap.add_argument("scripts", nargs="*", help="Plot scripts (default: 'scripts' from the config file)")
    ap.add_argument("--config", default=DEFAULTS_PATH, help="YAML settings file")
    ap.add_argument("--log-level", type=int, choices=range(0, 4), help="0 nothing, 1 errors, 2 warnings, 3 all")
    ap.add_argument("--play", metavar="TREE", help="Play from the root of TREE (script path or tree id)")
    return ap


def play(session: StorySession, presenter: DialogPresenter) -> None:
    while not session.ended:
        dialog = session.current
        presenter.show(dialog)
        if not len(presenter.visible_decisions(dialog)):
            session.advance()
            continue

        try:
            raw = input("> ").strip()
        except EOFError:
            return
        if raw in ("q", "quit"):
            return
        decision = presenter.pick(dialog, int(raw)) if raw.isdigit() else None
        if decision is None:
            presenter.console.out("(no such choice)")
            continue
        presenter.show_choice(decision)
        session.choose(decision.id)

    presenter.console.out(f"The end. Score: {session.tree.score}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    cfg = load_settings(args.config)
    if args.log_level is not None:
        cfg.console.log_level = args.log_level

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    console = Console.from_settings(cfg.console)
    registry = TreeRegistry(cfg.parser, console)

    try:
        registry.parse_plot_scripts(args.scripts or cfg.scripts)
        registry.check_links()
        for key, tree in registry.trees().items():
            console.out(f"{key}", f"tree: {tree.id}", f"root: {tree.root}", f"dialogs: {len(tree)}")

        if args.play:
            presenter = DialogPresenter.from_settings(console, cfg.presenter)
            play(StorySession(registry, args.play, console), presenter)
    except TextEngineError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
