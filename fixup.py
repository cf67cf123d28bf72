"""
╔══════════════════════════════════════════════════════════════════╗
║        Steppable Red-Black Tree  —  FIX-UP STATE MACHINES         ║
║                                                                  ║
║  RB-INSERT-FIXUP and RB-DELETE-FIXUP rewritten as resumable      ║
║  machines.  Each ``advance()`` call applies exactly ONE case,    ║
║  mutates the tree, and returns a FixStep describing it.          ║
║                                                                  ║
║      InsertFixup(tree, z)         DeleteFixup(tree, x)           ║
║          │                            │                          ║
║          ▼  advance()                 ▼  advance()               ║
║      FixStep(desc, case, highlight, done)                        ║
║                                                                  ║
║  The caller (stepper.TreeStepper) snapshots the tree after       ║
║  every step and stops calling once ``done`` is True.             ║
║                                                                  ║
║  Author : Arshanhp                                               ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

import logging
from typing import NamedTuple, Optional

from rbtree import RED, BLACK, LEFT, RealNode, is_red, opposite, side_of

logger = logging.getLogger('rbstep.fixup')


# ═════════════════════════════════════════════════════════════════
#  CLRS CASE DESCRIPTIONS
#
#  Short names for every Insert / Delete case, keyed by the same
#  "caseN" ids stored in each history entry.
# ═════════════════════════════════════════════════════════════════
INSERT_CASES = {
    "case0": "Root Node → color BLACK",
    "case1": "Case 1: Uncle is RED",
    "case2": "Case 2: Uncle BLACK, inner child",
    "case3": "Case 3: Uncle BLACK, outer child",
}

DELETE_CASES = {
    "case0": "Extra black absorbed",
    "case1": "Case 1: Sibling RED",
    "case2": "Case 2: Both nephews BLACK",
    "case3": "Case 3: Near nephew RED",
    "case4": "Case 4: Far nephew RED",
}


class FixStep(NamedTuple):
    """
    Outcome of a single ``advance()`` call.

    Attributes:
        desc      (str)      : Human-readable explanation of the step.
        case      (str|None) : CLRS case id ("case0"…"case4").
        highlight (tuple)    : Values of the nodes involved.
        done      (bool)     : True when the machine reached a stop state.
    """
    desc: str
    case: Optional[str]
    highlight: tuple
    done: bool


def _rotate_name(direction):
    return "LEFT-ROTATE" if direction == LEFT else "RIGHT-ROTATE"


def _values(*nodes):
    return tuple(n.value for n in nodes if n is not None)


# ═════════════════════════════════════════════════════════════════
#  INSERT FIXUP  (CLRS RB-INSERT-FIXUP, one case per step)
#
#  Case 1: Uncle is RED    → recolour P, U, GP; move z up
#  Case 2: Uncle BLACK, z inner → rotate to straighten (→ Case 3)
#  Case 3: Uncle BLACK, z outer → recolour + rotate GP (terminal)
#
#  Case 2 falls straight through into Case 3 inside the same
#  step, so the history shows one entry for both.
# ═════════════════════════════════════════════════════════════════
class InsertFixup:
    """
    Resumable RB-INSERT-FIXUP.

    Attributes:
        tree (RBTree)      : Tree being repaired.
        node (RBNode|None) : Current node-to-fix (z); None once done.
    """

    kind = "insert"

    def __init__(self, tree, z):
        self.tree = tree
        self.node = z

    @property
    def done(self):
        return self.node is None

    def advance(self):
        """
        Apply exactly one case and report it.

        Returns:
            FixStep: ``done`` is False only after Case 1.
        """
        z = self.node
        if z is None:
            return FixStep("Fix-up already complete.", None, (), True)

        tree   = self.tree
        parent = z.parent

        # ── Terminal: no RED-RED edge left at z ──
        if parent is None or parent.color == BLACK or parent.parent is None:
            self.node = None
            root = tree.root
            if root is not None and root.color == RED:
                root.color = BLACK
                logger.debug("insert fixup: root %r recolored BLACK", root.value)
                return FixStep(
                    f"Final: Root({root.value}) recolored BLACK. Fix-up complete.",
                    "case0", _values(root), True)
            return FixStep("Parent is BLACK → no RED-RED violation. Fix-up complete.",
                           None, _values(z), True)

        grandparent = parent.parent
        p_side = side_of(parent)
        uncle  = grandparent.child(opposite(p_side))

        # ═══════════════════════════════════
        #  CASE 1: Uncle is RED
        # ═══════════════════════════════════
        if is_red(uncle):
            parent.color      = BLACK
            uncle.color       = BLACK
            grandparent.color = RED
            self.node = grandparent
            logger.debug("insert fixup: case 1 at z=%r", z.value)
            return FixStep(
                f"Case 1: Parent({parent.value}) and Uncle({uncle.value}) are RED.\n"
                f"1. Recolor parent {parent.value} → BLACK.\n"
                f"2. Recolor uncle {uncle.value} → BLACK.\n"
                f"3. Recolor grandparent {grandparent.value} → RED.\n"
                f"4. Set z ← {grandparent.value}.",
                "case1", _values(z, parent, uncle, grandparent), False)

        lines = []
        case  = "case3"
        uncle_label = uncle.value if uncle is not None else "NIL"

        # ═══════════════════════════════════
        #  CASE 2: z is the inner grandchild
        # ═══════════════════════════════════
        z_side = side_of(z)
        if z_side != p_side:
            direction = opposite(z_side)
            tree.rotate(parent, direction)
            lines.append(
                f"Case 2: Parent({parent.value}) RED, Uncle({uncle_label}) BLACK, "
                f"z={z.value} is the inner child.")
            lines.append(f"1. {_rotate_name(direction)}({parent.value}).")
            lines.append(f"2. Set z ← former parent {parent.value}.")
            z, parent = parent, z
            case = "case2"
            logger.debug("insert fixup: case 2 at z=%r", z.value)

        # ═══════════════════════════════════
        #  CASE 3: z is the outer grandchild
        # ═══════════════════════════════════
        direction = opposite(p_side)
        parent.color      = BLACK
        grandparent.color = RED
        tree.rotate(grandparent, direction)
        lines.append(
            f"Case 3: Parent({parent.value}) RED, Uncle({uncle_label}) BLACK, "
            f"z={z.value} is the outer child.")
        lines.append(f"1. Recolor parent {parent.value} → BLACK.")
        lines.append(f"2. Recolor grandparent {grandparent.value} → RED.")
        lines.append(f"3. {_rotate_name(direction)}({grandparent.value}). Fix-up complete.")
        self.node = None
        logger.debug("insert fixup: case 3 at z=%r", z.value)
        return FixStep("\n".join(lines), case,
                       _values(z, parent, grandparent), True)


# ═════════════════════════════════════════════════════════════════
#  DELETE FIXUP  (CLRS RB-DELETE-FIXUP, one case per step)
#
#  x is a RealNode or a DeficientSlot; parent and side are always
#  read from the position, never from a (possibly absent) node.
#
#  Case 1: Sibling w RED          → rotate parent toward x, continue
#  Case 2: w BLACK, nephews BLACK → w RED; stop or move x up
#  Case 3: near nephew RED        → rotate w away, continue
#  Case 4: far nephew RED         → recolour + rotate parent, stop
# ═════════════════════════════════════════════════════════════════
class DeleteFixup:
    """
    Resumable RB-DELETE-FIXUP.

    Attributes:
        tree     (RBTree)                          : Tree being repaired.
        position (RealNode|DeficientSlot|None)     : Current double-black x.
    """

    kind = "delete"

    def __init__(self, tree, position):
        self.tree = tree
        self.position = position

    @property
    def done(self):
        return self.position is None

    def _finish(self, desc, case, highlight=()):
        self.position = None
        return FixStep(desc, case, highlight, True)

    def advance(self):
        x = self.position
        if x is None:
            return FixStep("Fix-up already complete.", None, (), True)

        tree   = self.tree
        parent = x.parent
        side   = x.side

        # ── Terminal: x reached the root ──
        if parent is None:
            root = tree.root
            if root is not None and root.color == RED:
                root.color = BLACK
            return self._finish(
                "Fix-up complete: Reached root. Final root color is BLACK.",
                None, _values(root))

        # ── Terminal: a RED x simply absorbs the extra black ──
        if isinstance(x, RealNode) and x.color == RED:
            x.node.color = BLACK
            return self._finish(
                f"x={x.node.value} is RED → recolor BLACK. Fix-up complete.",
                "case0", _values(x.node))

        sibling = parent.child(opposite(side))
        if sibling is None:
            logger.error("delete fixup: no sibling for x=%s under %r; tree inconsistent",
                         x.label(), parent.value)
            return self._finish(
                f"No sibling for x={x.label()} under {parent.value}. Fix-up aborted.",
                None, _values(parent))

        # ═══════════════════════════════════
        #  CASE 1: Sibling w is RED
        # ═══════════════════════════════════
        if sibling.color == RED:
            sibling.color = BLACK
            parent.color  = RED
            tree.rotate(parent, side)
            logger.debug("delete fixup: case 1 at x=%s", x.label())
            return FixStep(
                f"Case 1: Sibling w={sibling.value} is RED.\n"
                f"1. Recolor w → BLACK.\n"
                f"2. Recolor p={parent.value} → RED.\n"
                f"3. {_rotate_name(side)}({parent.value}).\n"
                f"4. New sibling found. Repeat fix-up.",
                "case1", _values(sibling, parent), False)

        near = sibling.child(side)
        far  = sibling.child(opposite(side))

        # ═══════════════════════════════════
        #  CASE 2: Both nephews BLACK
        # ═══════════════════════════════════
        if not is_red(near) and not is_red(far):
            sibling.color = RED
            logger.debug("delete fixup: case 2 at x=%s", x.label())
            if parent.color == RED:
                parent.color = BLACK
                return self._finish(
                    f"Case 2: Sibling w={sibling.value} and its children are BLACK. "
                    f"Parent is RED.\n"
                    f"1. Recolor w → RED.\n"
                    f"2. Recolor p={parent.value} → BLACK.\n"
                    f"3. Fix-up complete.",
                    "case2", _values(sibling, parent))
            self.position = RealNode(parent)
            return FixStep(
                f"Case 2: Sibling w={sibling.value} and its children are BLACK. "
                f"Parent is BLACK.\n"
                f"1. Recolor w → RED.\n"
                f"2. Propagate double-black to parent (x ← {parent.value}).",
                "case2", _values(sibling, parent), False)

        # ═══════════════════════════════════
        #  CASE 3: Near nephew RED, far BLACK
        # ═══════════════════════════════════
        if not is_red(far):
            direction = opposite(side)
            near.color    = BLACK
            sibling.color = RED
            tree.rotate(sibling, direction)
            logger.debug("delete fixup: case 3 at x=%s", x.label())
            return FixStep(
                f"Case 3: Near child {near.value} of w={sibling.value} is RED.\n"
                f"1. Recolor {near.value} → BLACK, w → RED.\n"
                f"2. {_rotate_name(direction)}({sibling.value}).\n"
                f"3. Now in Case 4 setup.",
                "case3", _values(near, sibling), False)

        # ═══════════════════════════════════
        #  CASE 4: Far nephew RED (TERMINAL)
        # ═══════════════════════════════════
        sibling.color = parent.color
        parent.color  = BLACK
        far.color     = BLACK
        tree.rotate(parent, side)
        logger.debug("delete fixup: case 4 at x=%s", x.label())
        return self._finish(
            f"Case 4: Far child {far.value} of w={sibling.value} is RED.\n"
            f"1. Recolor w ← p.color, p={parent.value} → BLACK.\n"
            f"2. Recolor {far.value} → BLACK.\n"
            f"3. {_rotate_name(side)}({parent.value}). Fix-up complete.",
            "case4", _values(sibling, parent, far))
