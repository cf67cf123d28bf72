"""
test_fixup.py
-------------

One advance() = one CLRS case.  Every insert and delete case is driven on
a hand-built tree in both mirrors, checking the case id reported, the
shape after the step, and the red-black invariants at the stop state.
Randomised insert/delete sequences run through TreeStepper close it off.
"""

import random
import unittest

from rbtree import RED, BLACK, LEFT, RIGHT, RBTree, RealNode, DeficientSlot
from fixup import InsertFixup, DeleteFixup, INSERT_CASES, DELETE_CASES
from history import SnapshotNode, build_from_snapshot, snapshot_tree
from stepper import TreeStepper, Outcome


def n(value, color=BLACK, left=None, right=None):
    return SnapshotNode(value, color, left, right)


def make_tree(snap):
    return RBTree(build_from_snapshot(snap))


def run(machine):
    """Advance until done; return the case ids seen."""
    cases = []
    while True:
        step = machine.advance()
        cases.append(step.case)
        if step.done:
            return cases


# ═════════════════════════════════════════════════════════════════
#  INSERT FIXUP
# ═════════════════════════════════════════════════════════════════
class TestInsertFixup(unittest.TestCase):
    def test_case_ids_are_named(self):
        for case in ("case0", "case1", "case2", "case3"):
            self.assertIn(case, INSERT_CASES)

    def test_parent_black_is_terminal(self):
        tree = make_tree(n(20, BLACK, n(10, RED)))
        fix = InsertFixup(tree, tree.root.left)
        step = fix.advance()
        self.assertTrue(step.done)
        self.assertIsNone(step.case)
        self.assertTrue(fix.done)
        self.assertTrue(tree.is_valid())

    def test_red_root_recolored(self):
        tree = make_tree(n(10, RED))
        step = InsertFixup(tree, tree.root).advance()
        self.assertEqual(step.case, "case0")
        self.assertTrue(step.done)
        self.assertEqual(tree.root.color, BLACK)

    def test_case1_recolors_and_moves_up(self):
        tree = make_tree(n(20, BLACK, n(10, RED), n(30, RED, None, n(40, RED))))
        fix = InsertFixup(tree, tree.root.right.right)

        step = fix.advance()
        self.assertEqual(step.case, "case1")
        self.assertFalse(step.done)
        self.assertIs(fix.node, tree.root)
        self.assertEqual(tree.root.left.color, BLACK)
        self.assertEqual(tree.root.right.color, BLACK)
        self.assertEqual(tree.root.color, RED)

        step = fix.advance()
        self.assertEqual(step.case, "case0")
        self.assertTrue(step.done)
        self.assertTrue(tree.is_valid())

    def test_case1_mirror(self):
        tree = make_tree(n(20, BLACK, n(10, RED, n(5, RED)), n(30, RED)))
        self.assertEqual(run(InsertFixup(tree, tree.root.left.left)),
                         ["case1", "case0"])
        self.assertTrue(tree.is_valid())

    def test_case2_falls_through_to_case3(self):
        tree = make_tree(n(30, BLACK, n(10, RED, None, n(20, RED))))
        fix = InsertFixup(tree, tree.root.left.right)

        step = fix.advance()
        self.assertEqual(step.case, "case2")
        self.assertTrue(step.done)
        self.assertIn("Case 2", step.desc)
        self.assertIn("Case 3", step.desc)
        self.assertEqual(snapshot_tree(tree.root),
                         n(20, BLACK, n(10, RED), n(30, RED)))

    def test_case2_mirror(self):
        tree = make_tree(n(10, BLACK, None, n(30, RED, n(20, RED))))
        self.assertEqual(run(InsertFixup(tree, tree.root.right.left)), ["case2"])
        self.assertEqual(snapshot_tree(tree.root),
                         n(20, BLACK, n(10, RED), n(30, RED)))

    def test_case3_left_line(self):
        tree = make_tree(n(30, BLACK, n(20, RED, n(10, RED))))
        step = InsertFixup(tree, tree.root.left.left).advance()
        self.assertEqual(step.case, "case3")
        self.assertIn("RIGHT-ROTATE(30)", step.desc)
        self.assertEqual(set(step.highlight), {10, 20, 30})
        self.assertEqual(snapshot_tree(tree.root),
                         n(20, BLACK, n(10, RED), n(30, RED)))

    def test_case3_right_line(self):
        tree = make_tree(n(10, BLACK, None, n(20, RED, None, n(30, RED))))
        step = InsertFixup(tree, tree.root.right.right).advance()
        self.assertEqual(step.case, "case3")
        self.assertIn("LEFT-ROTATE(10)", step.desc)
        self.assertEqual(snapshot_tree(tree.root),
                         n(20, BLACK, n(10, RED), n(30, RED)))

    def test_case3_with_black_uncle(self):
        tree = make_tree(
            n(40, BLACK,
              n(20, BLACK, n(10, RED), n(30, RED)),
              n(60, RED,
                n(50, BLACK),
                n(70, BLACK, n(65, RED), n(80, RED, None, n(90, RED))))))
        # 90 triggers case 1 at 80, then a right-line case 3 at 40
        self.assertEqual(run(InsertFixup(tree, tree.search(90))), ["case1", "case3"])
        self.assertTrue(tree.is_valid())
        self.assertEqual(tree.root.value, 60)

    def test_advance_after_done(self):
        tree = make_tree(n(10, RED))
        fix = InsertFixup(tree, tree.root)
        fix.advance()
        step = fix.advance()
        self.assertTrue(step.done)
        self.assertIsNone(step.case)


# ═════════════════════════════════════════════════════════════════
#  DELETE FIXUP
#
#  Trees below are the state right after the BST splice of a BLACK
#  node, with x given as the position the splice produced.
# ═════════════════════════════════════════════════════════════════
class TestDeleteFixup(unittest.TestCase):
    def test_case_ids_are_named(self):
        for case in ("case0", "case1", "case2", "case3", "case4"):
            self.assertIn(case, DELETE_CASES)

    def test_root_is_terminal(self):
        tree = make_tree(n(10, BLACK, None, n(20, RED)))
        step = DeleteFixup(tree, RealNode(tree.root)).advance()
        self.assertTrue(step.done)
        self.assertTrue(tree.is_valid())

    def test_emptied_tree_is_terminal(self):
        tree = RBTree()
        fix = DeleteFixup(tree, DeficientSlot(None, None))
        self.assertTrue(fix.advance().done)
        self.assertTrue(fix.done)

    def test_red_x_absorbs_extra_black(self):
        # RED 10 took the place of a spliced-out BLACK node
        tree = make_tree(n(20, BLACK, n(10, RED), n(30, BLACK)))
        step = DeleteFixup(tree, RealNode(tree.root.left)).advance()
        self.assertEqual(step.case, "case0")
        self.assertTrue(step.done)
        self.assertEqual(tree.root.left.color, BLACK)
        self.assertTrue(tree.is_valid())

    def test_case2_red_parent_stops(self):
        # deleted BLACK 25 from 20B(10B, 30R(25B, 35B))
        tree = make_tree(n(20, BLACK, n(10), n(30, RED, None, n(35))))
        fix = DeleteFixup(tree, DeficientSlot(tree.root.right, LEFT))
        step = fix.advance()
        self.assertEqual(step.case, "case2")
        self.assertTrue(step.done)
        self.assertEqual(snapshot_tree(tree.root),
                         n(20, BLACK, n(10), n(30, BLACK, None, n(35, RED))))
        self.assertTrue(tree.is_valid())

    def test_case2_red_parent_mirror(self):
        tree = make_tree(n(20, BLACK, n(10), n(30, RED, n(25))))
        fix = DeleteFixup(tree, DeficientSlot(tree.root.right, RIGHT))
        self.assertEqual(run(fix), ["case2"])
        self.assertTrue(tree.is_valid())

    def test_case2_black_parent_propagates(self):
        # deleted BLACK 10 from 20B(10B, 30B)
        tree = make_tree(n(20, BLACK, None, n(30)))
        fix = DeleteFixup(tree, DeficientSlot(tree.root, LEFT))

        step = fix.advance()
        self.assertEqual(step.case, "case2")
        self.assertFalse(step.done)
        self.assertIsInstance(fix.position, RealNode)
        self.assertIs(fix.position.node, tree.root)

        self.assertTrue(fix.advance().done)
        self.assertTrue(tree.is_valid())

    def test_case1_then_case2(self):
        # deleted BLACK 10 from 20B(10B, 40R(30B, 50B))
        tree = make_tree(n(20, BLACK, None, n(40, RED, n(30), n(50))))
        fix = DeleteFixup(tree, DeficientSlot(tree.root, LEFT))

        step = fix.advance()
        self.assertEqual(step.case, "case1")
        self.assertFalse(step.done)
        self.assertEqual(tree.root.value, 40)
        self.assertIsInstance(fix.position, DeficientSlot)
        self.assertEqual(fix.position.parent.value, 20)

        self.assertEqual(run(fix), ["case2"])
        self.assertEqual(snapshot_tree(tree.root),
                         n(40, BLACK, n(20, BLACK, None, n(30, RED)), n(50)))
        self.assertTrue(tree.is_valid())

    def test_case1_mirror(self):
        # deleted BLACK 50 from 40B(20R(10B, 30B), 50B)
        tree = make_tree(n(40, BLACK, n(20, RED, n(10), n(30))))
        fix = DeleteFixup(tree, DeficientSlot(tree.root, RIGHT))
        self.assertEqual(run(fix), ["case1", "case2"])
        self.assertEqual(snapshot_tree(tree.root),
                         n(20, BLACK, n(10), n(40, BLACK, n(30, RED))))
        self.assertTrue(tree.is_valid())

    def test_case3_then_case4(self):
        # deleted BLACK 10 from 20B(10B, 30B(25R, -))
        tree = make_tree(n(20, BLACK, None, n(30, BLACK, n(25, RED))))
        fix = DeleteFixup(tree, DeficientSlot(tree.root, LEFT))

        step = fix.advance()
        self.assertEqual(step.case, "case3")
        self.assertFalse(step.done)
        self.assertEqual(tree.root.right.value, 25)

        step = fix.advance()
        self.assertEqual(step.case, "case4")
        self.assertTrue(step.done)
        self.assertEqual(snapshot_tree(tree.root), n(25, BLACK, n(20), n(30)))

    def test_case3_mirror(self):
        # deleted BLACK 30 from 20B(10B(-, 15R), 30B)
        tree = make_tree(n(20, BLACK, n(10, BLACK, None, n(15, RED))))
        fix = DeleteFixup(tree, DeficientSlot(tree.root, RIGHT))
        self.assertEqual(run(fix), ["case3", "case4"])
        self.assertEqual(snapshot_tree(tree.root), n(15, BLACK, n(10), n(20)))

    def test_case4_keeps_parent_color_on_sibling(self):
        # red parent: deleted BLACK 25 from 40B(30R(25B, 35B(-, 37R)), 50B)
        tree = make_tree(
            n(40, BLACK,
              n(30, RED, None, n(35, BLACK, None, n(37, RED))),
              n(50)))
        fix = DeleteFixup(tree, DeficientSlot(tree.search(30), LEFT))
        self.assertEqual(run(fix), ["case4"])
        self.assertEqual(tree.search(35).color, RED)
        self.assertTrue(tree.is_valid())

    def test_case4_mirror(self):
        tree = make_tree(n(20, BLACK, n(10, BLACK, n(5, RED))))
        fix = DeleteFixup(tree, DeficientSlot(tree.root, RIGHT))
        step = fix.advance()
        self.assertEqual(step.case, "case4")
        self.assertIn("RIGHT-ROTATE(20)", step.desc)
        self.assertEqual(snapshot_tree(tree.root), n(10, BLACK, n(5), n(20)))

    def test_missing_sibling_logs_and_stops(self):
        tree = make_tree(n(20))
        fix = DeleteFixup(tree, DeficientSlot(tree.root, LEFT))
        with self.assertLogs('rbstep.fixup', level='ERROR'):
            step = fix.advance()
        self.assertTrue(step.done)
        self.assertIsNone(step.case)
        self.assertTrue(fix.done)


# ═════════════════════════════════════════════════════════════════
#  RANDOMISED SEQUENCES
# ═════════════════════════════════════════════════════════════════
class TestRandomSequences(unittest.TestCase):
    def _apply(self, stepper, op, value):
        if op(value) is Outcome.FIXUP_STARTED:
            stepper.run_to_completion()
        self.assertTrue(stepper.tree.is_valid(), f"invalid after {op.__name__}({value})")

    def test_random_insert_delete(self):
        for seed in range(5):
            rng = random.Random(seed)
            stepper = TreeStepper()
            expected = set()
            for _ in range(120):
                value = rng.randint(0, 60)
                if rng.random() < 0.6:
                    self._apply(stepper, stepper.insert, value)
                    expected.add(value)
                else:
                    self._apply(stepper, stepper.delete, value)
                    expected.discard(value)
                self.assertEqual(stepper.values(), sorted(expected))

    def test_every_stop_state_is_valid(self):
        rng = random.Random(42)
        stepper = TreeStepper()
        values = rng.sample(range(200), 80)
        for v in values:
            stepper.insert(v)
            while stepper.advance_fix():
                pass
            self.assertTrue(stepper.tree.is_valid())
        rng.shuffle(values)
        for v in values:
            stepper.delete(v)
            while stepper.advance_fix():
                pass
            self.assertTrue(stepper.tree.is_valid())
        self.assertIsNone(stepper.tree.root)


if __name__ == "__main__":
    unittest.main()
