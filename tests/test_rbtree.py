"""
test_rbtree.py
--------------

Node model and tree primitives:

* rotations (both directions, root and non-root pivots, missing pivot)
* transplant with a node, with None and with a DeficientSlot
* search / minimum
* height, node count, black-height (including the ERROR sentinel)
* is_valid on hand-built good and bad trees
"""

import unittest

from rbtree import (RED, BLACK, LEFT, RIGHT, ERROR, RBNode, RBTree, RealNode,
                    DeficientSlot, opposite, side_of, black_height)
from history import SnapshotNode, build_from_snapshot, snapshot_tree


def n(value, color=BLACK, left=None, right=None):
    return SnapshotNode(value, color, left, right)


def make_tree(snap):
    return RBTree(build_from_snapshot(snap))


def check_parents(testcase, node, parent=None):
    if node is None:
        return
    testcase.assertIs(node.parent, parent)
    check_parents(testcase, node.left, node)
    check_parents(testcase, node.right, node)


class TestHelpers(unittest.TestCase):
    def test_opposite(self):
        self.assertEqual(opposite(LEFT), RIGHT)
        self.assertEqual(opposite(RIGHT), LEFT)

    def test_new_node_is_red_and_unlinked(self):
        node = RBNode(5)
        self.assertEqual(node.color, RED)
        self.assertIsNone(node.left)
        self.assertIsNone(node.right)
        self.assertIsNone(node.parent)

    def test_side_of(self):
        tree = make_tree(n(10, BLACK, n(5, RED), n(15, RED)))
        self.assertIsNone(side_of(tree.root))
        self.assertEqual(side_of(tree.root.left), LEFT)
        self.assertEqual(side_of(tree.root.right), RIGHT)

    def test_positions(self):
        tree = make_tree(n(10, BLACK, n(5, RED)))
        real = RealNode(tree.root.left)
        self.assertIs(real.parent, tree.root)
        self.assertEqual(real.side, LEFT)
        self.assertEqual(real.color, RED)

        slot = DeficientSlot(tree.root, RIGHT)
        self.assertEqual(slot.color, BLACK)
        self.assertEqual(slot.label(), "NIL")


class TestRotations(unittest.TestCase):
    def test_rotate_left_at_root(self):
        tree = make_tree(n(10, BLACK, n(5), n(20, RED, n(15), n(25))))
        tree.rotate_left(tree.root)

        self.assertEqual(tree.root.value, 20)
        self.assertEqual(tree.root.left.value, 10)
        self.assertEqual(tree.root.left.right.value, 15)
        self.assertEqual(tree.root.right.value, 25)
        self.assertEqual(tree.inorder_values(), [5, 10, 15, 20, 25])
        check_parents(self, tree.root)

    def test_rotate_right_below_root(self):
        tree = make_tree(n(50, BLACK, n(30, BLACK, n(20, RED, n(10), n(25)), n(40))))
        tree.rotate_right(tree.root.left)

        self.assertEqual(tree.root.value, 50)
        self.assertEqual(tree.root.left.value, 20)
        self.assertEqual(tree.root.left.right.value, 30)
        self.assertEqual(tree.root.left.right.left.value, 25)
        self.assertEqual(tree.inorder_values(), [10, 20, 25, 30, 40, 50])
        check_parents(self, tree.root)

    def test_rotate_dispatch(self):
        tree = make_tree(n(10, BLACK, None, n(20)))
        tree.rotate(tree.root, LEFT)
        self.assertEqual(tree.root.value, 20)
        tree.rotate(tree.root, RIGHT)
        self.assertEqual(tree.root.value, 10)
        check_parents(self, tree.root)

    def test_rotate_without_pivot_child_raises(self):
        tree = make_tree(n(10, BLACK, n(5)))
        with self.assertRaises(ValueError):
            tree.rotate_left(tree.root)
        with self.assertRaises(ValueError):
            tree.rotate_right(tree.root.left)
        # nothing moved
        self.assertEqual(tree.inorder_values(), [5, 10])
        self.assertEqual(tree.root.value, 10)


class TestTransplant(unittest.TestCase):
    def test_transplant_node(self):
        tree = make_tree(n(10, BLACK, n(5), n(20, BLACK, None, n(30, RED))))
        old = tree.root.right
        tree.transplant(old, old.right)
        self.assertEqual(tree.root.right.value, 30)
        self.assertIs(tree.root.right.parent, tree.root)

    def test_transplant_root_with_none(self):
        tree = make_tree(n(10))
        tree.transplant(tree.root, None)
        self.assertIsNone(tree.root)

    def test_transplant_deficient_slot_leaves_link_empty(self):
        tree = make_tree(n(10, BLACK, n(5), n(20)))
        parent = tree.root
        slot = DeficientSlot(parent, LEFT)
        tree.transplant(parent.left, slot)

        self.assertIsNone(parent.left)
        self.assertIs(slot.parent, parent)
        self.assertEqual(slot.side, LEFT)


class TestSearchAndMetrics(unittest.TestCase):
    def setUp(self):
        self.tree = make_tree(
            n(20, BLACK,
              n(10, BLACK, n(5, RED)),
              n(30, BLACK, n(25, RED), n(40, RED))))

    def test_search(self):
        self.assertEqual(self.tree.search(25).value, 25)
        self.assertIsNone(self.tree.search(26))
        self.assertIsNone(RBTree().search(1))

    def test_minimum(self):
        self.assertEqual(RBTree.minimum(self.tree.root).value, 5)
        self.assertEqual(RBTree.minimum(self.tree.root.right).value, 25)

    def test_height_and_count(self):
        self.assertEqual(self.tree.get_height(), 3)
        self.assertEqual(self.tree.get_node_count(), 6)
        self.assertEqual(RBTree().get_height(), 0)
        self.assertEqual(RBTree().get_node_count(), 0)

    def test_black_height(self):
        self.assertEqual(self.tree.get_black_height(), 3)
        self.assertTrue(self.tree.is_valid())

    def test_empty_black_height_is_one(self):
        self.assertEqual(RBTree().get_black_height(), 1)
        self.assertEqual(black_height(None), 1)
        self.assertTrue(RBTree().is_valid())

    def test_black_height_mismatch_is_error(self):
        tree = make_tree(n(10, BLACK, n(5, BLACK)))
        self.assertEqual(tree.get_black_height(), ERROR)
        self.assertFalse(tree.is_valid())

    def test_error_propagates_upwards(self):
        tree = make_tree(n(20, BLACK, n(10, RED, n(5, BLACK)), n(30, RED)))
        self.assertEqual(tree.get_black_height(), ERROR)

    def test_invalid_trees(self):
        red_root = make_tree(n(10, RED))
        self.assertFalse(red_root.is_valid())

        red_red = make_tree(n(10, BLACK, n(5, RED, n(3, RED)), n(20, RED)))
        self.assertTrue(red_red.has_red_violation())
        self.assertFalse(red_red.is_valid())

        unordered = make_tree(n(10, BLACK, n(15, RED), n(20, RED)))
        self.assertFalse(unordered.is_valid())

    def test_snapshot_round_trip_preserves_parents(self):
        copy = make_tree(snapshot_tree(self.tree.root))
        self.assertEqual(snapshot_tree(copy.root), snapshot_tree(self.tree.root))
        check_parents(self, copy.root)


if __name__ == "__main__":
    unittest.main()
