from __future__ import annotations
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from engine.console import Console
from engine.errors import DuplicateIdError, NotFoundError
from engine.settings import ParserCfg
from engine.narrative.loader import load_script_file
from engine.narrative.types import Dialog, LinkKind, Tree


class TreeRegistry:
    """
    Parsed plot scripts keyed by the path they came from. Tree-links are
    resolved here, by tree id or by source path.
    """
    def __init__(self, cfg: Optional[ParserCfg] = None, console: Optional[Console] = None):
        self.cfg = cfg or ParserCfg()
        self.console = console or Console()
        self._trees: Dict[str, Tree] = {}

    # --- loading ------------------------------------------------------------
    def parse_plot_scripts(self, files: Iterable[str | Path]) -> List[Tree]:
        """ Parse every file in order; the first failure aborts. """
        return [self.load(f) for f in files]

    def load(self, path: str | Path) -> Tree:
        key = str(path)
        if key in self._trees:
            self.console.fail(DuplicateIdError, f"script already loaded: {key}")
        tree = load_script_file(path, self.cfg, console=self.console)
        return self.add(key, tree)

    def add(self, key: str, tree: Tree) -> Tree:
        if key in self._trees:
            self.console.fail(DuplicateIdError, f"duplicate tree source: {key}")
        if self._find_by_id(tree.id) is not None:
            self.console.warn(f"tree id used twice: {tree.id}", f"source: {key}")
        self._trees[key] = tree
        return tree

    # --- lookup -------------------------------------------------------------
    def _find_by_id(self, tree_id: str) -> Optional[Tree]:
        for tree in self._trees.values():
            if tree.id == tree_id:
                return tree
        return None

    def get(self, key: str) -> Tree:
        """ Tree by source path, falling back to tree id. """
        tree = self._trees.get(key)
        if tree is None:
            tree = self._find_by_id(key)
        if tree is None:
            self.console.fail(NotFoundError, f"cannot find tree: {key}")
        return tree

    def resolve_tree(self, link: str) -> Tree:
        return self.get(link)

    def resolve(self, tree: Tree, owner) -> Optional[Tuple[Tree, Dialog]]:
        """
        Follow the link of a Decision/Dialog that lives in `tree`.
        Dialog-links stay in the tree, tree-links land on the target tree root.
        """
        if owner.link is None:
            return None
        if owner.link_kind is LinkKind.TREE:
            target = self.resolve_tree(owner.link)
            return target, target.root_dialog()
        return tree, tree.resolve_link(owner)

    def dangling_tree_links(self) -> List[Tuple[str, str, str]]:
        """ (tree id, dialog or decision id, missing tree) for unresolvable tree-links. """
        out: List[Tuple[str, str, str]] = []
        for tree in self._trees.values():
            for dialog in tree:
                for owner in [dialog, *dialog]:
                    if owner.link_kind is LinkKind.TREE and not self.has(owner.link):
                        out.append((tree.id, owner.id, owner.link))
        return out

    def check_links(self) -> None:
        for tree_id, owner_id, target in self.dangling_tree_links():
            self.console.warn(f"dangling tree link: {target}", f"from: {owner_id}", f"in tree: {tree_id}")

    def has(self, key: str) -> bool:
        return key in self._trees or self._find_by_id(key) is not None

    def keys(self) -> List[str]:
        return list(self._trees)

    def trees(self) -> Dict[str, Tree]:
        return dict(self._trees)

    def __len__(self) -> int:
        return len(self._trees)
