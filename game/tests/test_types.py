# test_types.py
import unittest

from engine.errors import DuplicateIdError, NotFoundError, TextEngineError
from engine.narrative.loader import construct
from engine.narrative.types import Decision, Dialog, LinkKind, Tree


class TestDecision(unittest.TestCase):
    def test_defaults(self):
        d = Decision("d1", "Open the door")
        self.assertEqual(d.id, "d1")
        self.assertIsNone(d.link)
        self.assertIsNone(d.link_kind)
        self.assertTrue(d.enabled)
        self.assertEqual(d.score, 0)

    def test_setters_and_readonly_id(self):
        d = Decision("d1", "x", "D2", LinkKind.DIALOG)
        d.message = "y"
        d.enabled = False
        d.score = 5
        self.assertEqual((d.message, d.enabled, d.score), ("y", False, 5))
        with self.assertRaises(AttributeError):
            d.id = "other"

    def test_link_kind_dropped_without_link(self):
        self.assertIsNone(Decision("d", "x", None, LinkKind.TREE).link_kind)


class TestDialog(unittest.TestCase):
    def test_insert_and_get(self):
        dlg = Dialog("D1", "Hello")
        dec = dlg.add_decision("a", "Wave", link="D2", link_kind=LinkKind.DIALOG, score=3)
        self.assertIs(dlg.get("a"), dec)
        self.assertIs(dlg.decision("a"), dec)
        self.assertIn("a", dlg)
        self.assertEqual(len(dlg), 1)

    def test_duplicate_decision_keeps_first(self):
        dlg = Dialog("D1", "Hello")
        first = dlg.insert(Decision("a", "first"))
        with self.assertRaises(DuplicateIdError):
            dlg.insert(Decision("a", "second"))
        self.assertIs(dlg.get("a"), first)
        self.assertEqual(dlg.get("a").message, "first")

    def test_missing_decision(self):
        with self.assertRaises(NotFoundError) as ctx:
            Dialog("D1").get("nope")
        self.assertIn("nope", str(ctx.exception))

    def test_all_decisions_is_a_snapshot(self):
        dlg = Dialog("D1")
        dlg.add_decision("a", "A")
        snap = dlg.all_decisions()
        snap.pop("a")
        dlg.add_decision("b", "B")
        self.assertEqual(sorted(dlg.all_decisions()), ["a", "b"])
        self.assertEqual(snap, {})

    def test_returned_decision_is_live(self):
        dlg = Dialog("D1")
        dlg.add_decision("a", "A")
        dlg.get("a").enabled = False
        self.assertFalse(dlg.all_decisions()["a"].enabled)


class TestTree(unittest.TestCase):
    def test_construct_empty(self):
        tree = construct("D1", 10, tree_id="intro")
        self.assertEqual((tree.id, tree.root, tree.score, len(tree)), ("intro", "D1", 10, 0))

    def test_duplicate_dialog_keeps_first(self):
        tree = Tree("D1")
        first = tree.insert(Dialog("D1", "first"))
        with self.assertRaises(DuplicateIdError):
            tree.insert(Dialog("D1", "second"))
        self.assertIs(tree.get("D1"), first)
        self.assertEqual(len(tree), 1)

    def test_lookup_miss_leaves_tree_untouched(self):
        tree = Tree("D1")
        tree.add_dialog("D1", "hi")
        with self.assertRaises(NotFoundError):
            tree.get("missing")
        self.assertEqual(list(tree.all_dialogs()), ["D1"])
        self.assertNotIn("missing", tree)

    def test_errors_share_a_base(self):
        tree = Tree("D1")
        with self.assertRaises(TextEngineError):
            tree.get("missing")

    def test_root_is_not_validated(self):
        tree = Tree("nowhere")
        with self.assertRaises(NotFoundError):
            tree.root_dialog()

    def test_score(self):
        tree = Tree("D1", 5)
        self.assertEqual(tree.increment_score(3), 8)
        self.assertEqual(tree.increment_score(-10), -2)
        tree.score = 1
        self.assertEqual(tree.score, 1)

    def test_resolve_link(self):
        tree = Tree("D1")
        d1 = tree.add_dialog("D1", "one")
        d2 = tree.add_dialog("D2", "two")
        go = d1.add_decision("go", "Go", "D2", LinkKind.DIALOG)
        jump = d1.add_decision("jump", "Jump", "other", LinkKind.TREE)
        self.assertIs(tree.resolve_link(go), d2)
        self.assertIsNone(tree.resolve_link(jump))
        self.assertIsNone(tree.resolve_link(d2))


if __name__ == "__main__":
    unittest.main()
