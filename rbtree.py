"""
╔══════════════════════════════════════════════════════════════════╗
║        Steppable Red-Black Tree  —  NODE MODEL & PRIMITIVES       ║
║                                                                  ║
║  Pure structural layer with no case logic and no GUI code:       ║
║    • RBNode          — binary node (value, colour, links)        ║
║    • RealNode /      — the two shapes a delete-fixup position    ║
║      DeficientSlot     can take (tagged union)                   ║
║    • RBTree          — rotations, transplant, search, minimum,   ║
║                        plus height / count / black-height        ║
║    • parse_value     — text → finite numeric key (or None)       ║
║                                                                  ║
║  The fix-up state machines (fixup.py) and the orchestrator       ║
║  (stepper.py) are built on top of these primitives.              ║
║                                                                  ║
║  Author : Arshanhp                                               ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

import math
from dataclasses import dataclass

# ═════════════════════════════════════════════════════════════════
#  CONSTANTS
# ═════════════════════════════════════════════════════════════════
RED   = True          # RB-Tree color constant: RED   = True
BLACK = False         # RB-Tree color constant: BLACK = False

LEFT  = "left"
RIGHT = "right"

ERROR = "ERROR"       # get_black_height() result when paths disagree


def opposite(side):
    """Return the mirror side: LEFT ↔ RIGHT."""
    return RIGHT if side == LEFT else LEFT


def color_name(color):
    return "RED" if color == RED else "BLACK"


def parse_value(text):
    """
    Parse one tree key typed by the user.

    Keys must be totally ordered, so NaN and the infinities are refused
    along with anything that is not a number.

    Returns:
        int|float|None: None when the text is not a finite number.
    """
    token = text.strip()
    try:
        return int(token)
    except ValueError:
        pass
    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


# ═════════════════════════════════════════════════════════════════
#  RB NODE
#
#  Five fields only:
#    value  : comparable – the key
#    color  : bool       – RED (True) or BLACK (False)
#    left   : RBNode?    – owned left child  (None = empty leaf)
#    right  : RBNode?    – owned right child (None = empty leaf)
#    parent : RBNode?    – back-reference, never ownership
# ═════════════════════════════════════════════════════════════════
class RBNode:
    """
    A single node in the Red-Black tree.

    New nodes start RED, as RB-INSERT colours them.  Empty leaves are
    plain ``None`` rather than a shared NIL sentinel so that snapshot
    copies never alias a live object.

    Attributes:
        value  : Node key (unique, totally ordered).
        color  (bool)       : RED (True) or BLACK (False).
        left   (RBNode|None): Left child.
        right  (RBNode|None): Right child.
        parent (RBNode|None): Parent pointer (None for root).
    """
    __slots__ = ('value', 'color', 'left', 'right', 'parent')

    def __init__(self, value, color=RED):
        self.value  = value
        self.color  = color
        self.left   = None
        self.right  = None
        self.parent = None

    def child(self, side):
        return self.left if side == LEFT else self.right

    def set_child(self, side, node):
        if side == LEFT:
            self.left = node
        else:
            self.right = node

    def __repr__(self):
        return f"RBNode({self.value!r}, {color_name(self.color)})"


def is_red(node):
    """Absent children count as BLACK."""
    return node is not None and node.color == RED


def side_of(node):
    """Which side of its parent ``node`` hangs on (None for the root)."""
    if node.parent is None:
        return None
    return LEFT if node.parent.left is node else RIGHT


# ═════════════════════════════════════════════════════════════════
#  FIX-UP POSITIONS
#
#  During RB-DELETE-FIXUP the "double-black" x is either a real
#  node or an empty slot.  Both are modelled explicitly so the
#  state machine can branch on the type instead of probing fields.
# ═════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class RealNode:
    """A deficiency sitting on an actual node of the tree."""
    node: RBNode

    @property
    def parent(self):
        return self.node.parent

    @property
    def side(self):
        return side_of(self.node)

    @property
    def color(self):
        return self.node.color

    def label(self):
        return str(self.node.value)


@dataclass(frozen=True)
class DeficientSlot:
    """
    A deficiency at a position that holds no node.

    The slot is never linked into the tree.  ``parent`` and ``side``
    say where the missing child would hang; ``parent`` is None only
    when the tree itself became empty.
    """
    parent: object
    side: object

    @property
    def color(self):
        return BLACK

    def label(self):
        return "NIL"


# ═════════════════════════════════════════════════════════════════
#  RB TREE — STRUCTURE
#
#  Algorithm reference: CLRS "Introduction to Algorithms" 4th ed.
#  Chapter 13: Red-Black Trees
# ═════════════════════════════════════════════════════════════════
class RBTree:
    """
    Owner of the node graph.

    Holds nothing but ``root``; every mutation goes through the
    primitives below so that parent pointers stay consistent.
    """

    def __init__(self, root=None):
        self.root = root

    # ─────────────────────────────────────────────────────────────
    #  ROTATIONS
    # ─────────────────────────────────────────────────────────────

    def rotate_left(self, x):
        """
        Left-rotate subtree rooted at x.

        Before:       After:
            x           y
           / \\         / \\
          α   y       x   γ
             / \\     / \\
            β   γ   α   β

        Raises:
            ValueError: x has no right child to pivot on.
        """
        y = x.right
        if y is None:
            raise ValueError(f"LEFT-ROTATE({x.value!r}) needs a right child")

        x.right = y.left           # Turn y's left subtree into x's right
        if y.left is not None:
            y.left.parent = x

        y.parent = x.parent        # Link x's parent to y
        if x.parent is None:
            self.root = y
        elif x is x.parent.left:
            x.parent.left = y
        else:
            x.parent.right = y

        y.left   = x
        x.parent = y

    def rotate_right(self, y):
        """
        Right-rotate subtree rooted at y  (mirror of left-rotate).

        Before:       After:
            y           x
           / \\         / \\
          x   γ       α   y
         / \\             / \\
        α   β           β   γ

        Raises:
            ValueError: y has no left child to pivot on.
        """
        x = y.left
        if x is None:
            raise ValueError(f"RIGHT-ROTATE({y.value!r}) needs a left child")

        y.left = x.right
        if x.right is not None:
            x.right.parent = y

        x.parent = y.parent
        if y.parent is None:
            self.root = x
        elif y is y.parent.left:
            y.parent.left = x
        else:
            y.parent.right = x

        x.right  = y
        y.parent = x

    def rotate(self, node, direction):
        """Rotate at ``node``; direction LEFT means LEFT-ROTATE."""
        if direction == LEFT:
            self.rotate_left(node)
        else:
            self.rotate_right(node)

    # ─────────────────────────────────────────────────────────────
    #  TRANSPLANT / SEARCH / MINIMUM
    # ─────────────────────────────────────────────────────────────

    def transplant(self, u, v):
        """
        Replace subtree rooted at u with v in u.parent's eyes.
        (CLRS RB-TRANSPLANT; does NOT update v's children.)

        Args:
            u (RBNode): Node being replaced.
            v (RBNode|DeficientSlot|None): Node taking u's position.
                A DeficientSlot leaves the link empty and keeps its
                own parent/side untouched.
        """
        placeholder = isinstance(v, DeficientSlot)
        child = None if placeholder else v

        if u.parent is None:
            self.root = child
        elif u is u.parent.left:
            u.parent.left = child
        else:
            u.parent.right = child

        if child is not None:
            child.parent = u.parent

    def search(self, value):
        """
        Standard BST descent from the root.

        Returns:
            RBNode|None: The node holding ``value``, or None.
        """
        node = self.root
        while node is not None and value != node.value:
            node = node.left if value < node.value else node.right
        return node

    @staticmethod
    def minimum(node):
        """Leftmost descendant of ``node`` (must not be None)."""
        while node.left is not None:
            node = node.left
        return node

    # ─────────────────────────────────────────────────────────────
    #  METRICS & VALIDATION  (whole-tree wrappers)
    # ─────────────────────────────────────────────────────────────

    def get_height(self):
        return tree_height(self.root)

    def get_node_count(self):
        return count_nodes(self.root)

    def get_black_height(self):
        return black_height(self.root)

    def inorder_values(self):
        return collect_values(self.root)

    def has_red_violation(self):
        return has_red_violation(self.root)

    def is_valid(self):
        """
        Check every red-black invariant plus strict BST ordering.

        Checks:
            • root BLACK (or tree empty)
            • no RED node with a RED child
            • equal black-height on all paths
            • in-order values strictly increasing
        """
        if self.root is not None and self.root.color != BLACK:
            return False
        if has_red_violation(self.root):
            return False
        if black_height(self.root) == ERROR:
            return False
        values = collect_values(self.root)
        return all(a < b for a, b in zip(values, values[1:]))


# ═════════════════════════════════════════════════════════════════
#  TREE UTILITY FUNCTIONS
#
#  Operate on any subtree of live RBNode objects.  Used for the
#  stats panel and for validating states reached by the fix-ups.
# ═════════════════════════════════════════════════════════════════

def tree_height(node):
    """Height in nodes (0 for None / empty)."""
    if node is None:
        return 0
    return 1 + max(tree_height(node.left), tree_height(node.right))


def count_nodes(node):
    """Count total nodes in the subtree."""
    if node is None:
        return 0
    return 1 + count_nodes(node.left) + count_nodes(node.right)


def black_height(node):
    """
    Black-height of the subtree rooted at ``node``.

    An empty subtree counts 1 (the NIL leaf).  When the two children
    disagree the result is the ERROR sentinel rather than an
    exception: a fix-up in progress may legitimately leave the tree
    in that state.

    Returns:
        int|str: Black-height, or ERROR.
    """
    if node is None:
        return 1
    left_bh  = black_height(node.left)
    right_bh = black_height(node.right)
    if left_bh == ERROR or right_bh == ERROR or left_bh != right_bh:
        return ERROR
    return left_bh + (1 if node.color == BLACK else 0)


def has_red_violation(node):
    """True if some RED node in the subtree has a RED child."""
    if node is None:
        return False
    if node.color == RED and (is_red(node.left) or is_red(node.right)):
        return True
    return has_red_violation(node.left) or has_red_violation(node.right)


def collect_values(node):
    """In-order traversal to collect all values of the subtree."""
    values = []
    def _in(n):
        if n is None:
            return
        _in(n.left); values.append(n.value); _in(n.right)
    _in(node)
    return values
