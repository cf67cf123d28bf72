"""
╔══════════════════════════════════════════════════════════════════╗
║        Steppable Red-Black Tree  —  OPERATION ORCHESTRATOR        ║
║                                                                  ║
║  TreeStepper ties BST mutation, fix-up initialisation and the    ║
║  history log together, then lets an injected scheduler drive     ║
║  the fix-up machine one step at a time.                          ║
║                                                                  ║
║  Data Flow                                                       ║
║  ─────────                                                       ║
║  1. insert()/delete()/clear()  → history.reset(start snapshot)   ║
║  2. BST mutation               → history.append(...)             ║
║  3. fix-up machine created     → scheduler.call_later(_tick)     ║
║  4. _tick() → advance_fix()    → one case, one history entry,    ║
║                                  display(tree_state, show_null)  ║
║  5. display calls display_settled() → next tick may run          ║
║  6. machine reports done       → idle, invariants hold           ║
║                                                                  ║
║  Collaborators                                                   ║
║  ─────────────                                                   ║
║  scheduler : call_later(delay_ms, callback) -> handle            ║
║              cancel(handle)                                      ║
║  display   : callable(tree_state, show_null_nodes)               ║
║                                                                  ║
║  Author : Arshanhp                                               ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

import logging
from enum import Enum

from rbtree import RED, BLACK, LEFT, RIGHT, RBNode, RBTree, RealNode, DeficientSlot, side_of
from fixup import InsertFixup, DeleteFixup
from history import HistoryLog, snapshot_tree, build_from_snapshot

logger = logging.getLogger('rbstep.stepper')


class Outcome(Enum):
    """Result of a top-level insert / delete."""
    FIXUP_STARTED   = "fixup_started"     # machine armed, steps pending
    COMPLETE        = "complete"          # no fix-up needed
    DUPLICATE_VALUE = "duplicate_value"   # insert of an existing key
    VALUE_NOT_FOUND = "value_not_found"   # delete of an absent key


class TreeStepper:
    """
    Red-black tree whose fix-ups advance one case per call.

    Attributes:
        tree            (RBTree)     : Working tree.
        history         (HistoryLog) : Snapshots of the current operation.
        fixup           (InsertFixup|DeleteFixup|None): Active machine.
        operation       (str|None)   : Kind of the operation the history belongs to.
        scheduler                    : Optional; drives ``_tick`` automatically.
        display                      : Optional display-update callable.
        step_interval   (int)        : ms between scheduled steps.
        start_delay     (int)        : ms before the first scheduled step.
        show_null_nodes (bool)       : Passed through to the display.
    """

    def __init__(self, scheduler=None, display=None, settings=None):
        self.tree      = RBTree()
        self.history   = HistoryLog()
        self.fixup     = None
        self.operation = None      # "insert" / "delete" / "clear": owner of the history
        self.scheduler = scheduler
        self.display   = display

        self.step_interval   = settings.step_interval if settings else 500
        self.start_delay     = settings.start_delay if settings else 100
        self.show_null_nodes = settings.show_null_nodes if settings else False

        self._pending          = None    # scheduler handle of the next tick
        self._stepping         = False   # a step is executing right now
        self._awaiting_display = False   # display has not settled yet

    # ─────────────────────────────────────────────────────────────
    #  STATE
    # ─────────────────────────────────────────────────────────────

    @property
    def fixup_kind(self):
        """"insert", "delete", or None when idle."""
        return self.fixup.kind if self.fixup is not None else None

    @property
    def busy(self):
        """True while a step runs or its display update has not settled."""
        return self._stepping or self._awaiting_display

    @property
    def step_scheduled(self):
        return self._pending is not None

    def display_settled(self):
        """Called by the display once the last update finished animating."""
        self._awaiting_display = False

    def set_show_null_nodes(self, flag):
        self.show_null_nodes = bool(flag)
        self._refresh_display()

    # ─────────────────────────────────────────────────────────────
    #  INTERNAL HELPERS
    # ─────────────────────────────────────────────────────────────

    def _record(self, desc, action="step", case=None, highlight=()):
        self.history.append(snapshot_tree(self.tree.root), desc,
                            action, case, highlight)

    def _refresh_display(self):
        if self.display is None:
            return
        self._awaiting_display = True
        self.display(snapshot_tree(self.tree.root), self.show_null_nodes)

    def _cancel_pending(self):
        if self._pending is not None:
            self.scheduler.cancel(self._pending)
            self._pending = None

    def _schedule(self, delay):
        if self.scheduler is not None:
            self._pending = self.scheduler.call_later(delay, self._tick)

    def _finish_pending_fixup(self):
        """Run an interrupted fix-up to the end without recording it."""
        if self.fixup is None:
            return
        logger.info("Completing interrupted %s fix-up before the next operation",
                    self.fixup.kind)
        while not self.fixup.advance().done:
            pass
        self.fixup = None

    def _begin(self, operation, desc, highlight=()):
        """Common prologue of every top-level operation."""
        self._cancel_pending()
        self._finish_pending_fixup()
        self.operation = operation
        self._stepping = False
        self.history.reset(snapshot_tree(self.tree.root), desc,
                           "start", highlight=highlight)

    # ─────────────────────────────────────────────────────────────
    #  INSERT  (CLRS RB-INSERT, fix-up deferred to the scheduler)
    # ─────────────────────────────────────────────────────────────

    def insert(self, value):
        """
        Insert ``value`` and arm the insert fix-up.

        Returns:
            Outcome: DUPLICATE_VALUE (no change), COMPLETE (tree was
            empty, new root coloured BLACK) or FIXUP_STARTED.
        """
        self._begin("insert", f"Starting insert for: {value}", (value,))
        logger.info("insert %r", value)

        if self.tree.search(value) is not None:
            logger.info("insert %r: value already present", value)
            self._record("Value already exists in tree (No change)",
                         "duplicate", highlight=(value,))
            self._refresh_display()
            return Outcome.DUPLICATE_VALUE

        z = RBNode(value, RED)

        if self.tree.root is None:
            z.color = BLACK
            self.tree.root = z
            self._record(f"Root: {value} inserted as BLACK. Fix-up complete.",
                         "done", case="case0", highlight=(value,))
            self._refresh_display()
            return Outcome.COMPLETE

        # ── BST walk to the insertion point ──
        parent, current = None, self.tree.root
        while current is not None:
            parent  = current
            current = current.left if value < current.value else current.right

        z.parent = parent
        parent.set_child(LEFT if value < parent.value else RIGHT, z)

        self._record(f"Inserted {value} as RED node (z) under {parent.value}. "
                     f"Starting fix-up.", "place", highlight=(value, parent.value))
        self.fixup = InsertFixup(self.tree, z)
        self._refresh_display()
        self._schedule(self.start_delay)
        return Outcome.FIXUP_STARTED

    # ─────────────────────────────────────────────────────────────
    #  DELETE  (CLRS RB-DELETE, fix-up deferred to the scheduler)
    #
    #  Three structural cases:
    #    a) No left child   → transplant right child
    #    b) No right child  → transplant left child
    #    c) Two children    → replace with in-order successor
    # ─────────────────────────────────────────────────────────────

    def delete(self, value):
        """
        Delete ``value`` and arm the delete fix-up if a BLACK left.

        Returns:
            Outcome: VALUE_NOT_FOUND (no change), COMPLETE (a RED
            node was removed) or FIXUP_STARTED.
        """
        self._begin("delete", f"Starting delete for: {value}", (value,))
        logger.info("delete %r", value)

        tree = self.tree
        z = tree.search(value)
        if z is None:
            logger.info("delete %r: value not found", value)
            self._record("Value not found in tree (No change)", "not_found")
            self._refresh_display()
            return Outcome.VALUE_NOT_FOUND

        y = z
        removed_color = y.color

        if z.left is None:
            x, x_parent, x_side = z.right, z.parent, side_of(z)
            self._record(f"Pre-Delete: Node {value} has no left child. "
                         f"Replacing with right child.", "pre_delete", highlight=(value,))
            tree.transplant(z, z.right)

        elif z.right is None:
            x, x_parent, x_side = z.left, z.parent, side_of(z)
            self._record(f"Pre-Delete: Node {value} has no right child. "
                         f"Replacing with left child.", "pre_delete", highlight=(value,))
            tree.transplant(z, z.left)

        else:
            y = tree.minimum(z.right)             # in-order successor
            removed_color = y.color
            x = y.right
            self._record(f"Pre-Delete: Successor {y.value} found.",
                         "pre_delete", highlight=(value, y.value))

            if y.parent is z:
                x_parent, x_side = y, RIGHT
            else:
                x_parent, x_side = y.parent, LEFT
                self._record(f"Pre-Delete: Transplanting {y.value}'s right child "
                             f"to fill successor hole.", "pre_delete",
                             highlight=(y.value,))
                tree.transplant(y, y.right)
                y.right = z.right
                y.right.parent = y

            self._record(f"Pre-Delete: Transplanting {value} with successor {y.value}.",
                         "pre_delete", highlight=(value, y.value))
            tree.transplant(z, y)
            y.left = z.left
            y.left.parent = y
            y.color = z.color

        # ── Fix-up only if a BLACK node left its position ──
        if removed_color == RED:
            self._record(f"Deleted RED node {value}. Fix-up complete.", "done")
            self._refresh_display()
            return Outcome.COMPLETE

        position = RealNode(x) if x is not None else DeficientSlot(x_parent, x_side)
        anchor = x_parent.value if x_parent is not None else "root"
        self._record(f"Deleted BLACK node. Starting double-black fix-up "
                     f"on parent {anchor}.", "fixup_start",
                     highlight=tuple(n.value for n in (x, x_parent) if n is not None))
        self.fixup = DeleteFixup(tree, position)
        self._refresh_display()
        self._schedule(self.start_delay)
        return Outcome.FIXUP_STARTED

    def clear(self):
        """Empty the tree and restart the history."""
        self._cancel_pending()
        self.fixup = None
        self.operation = "clear"
        self._stepping = False
        self.tree.root = None
        self.history.reset(None, "Tree cleared", "start")
        logger.info("tree cleared")
        self._refresh_display()

    # ─────────────────────────────────────────────────────────────
    #  STEPPING
    # ─────────────────────────────────────────────────────────────

    def advance_fix(self):
        """
        Apply one fix-up case of whichever machine is active.

        Returns:
            bool: True if more steps remain, False on stop or when idle.
        """
        if self.fixup is None:
            return False
        self._stepping = True
        try:
            step = self.fixup.advance()
        finally:
            self._stepping = False
        if step.done:
            self.fixup = None
        self._record(step.desc, "done" if step.done else "fixup",
                     step.case, step.highlight)
        self._refresh_display()
        return not step.done

    def advance_insert_fix(self):
        if self.fixup_kind != "insert":
            return False
        return self.advance_fix()

    def advance_delete_fix(self):
        if self.fixup_kind != "delete":
            return False
        return self.advance_fix()

    def run_to_completion(self):
        """Step the active machine until it stops.  Returns steps taken."""
        self._cancel_pending()
        steps = 0
        while self.fixup is not None:
            self.advance_fix()
            steps += 1
        return steps

    def cancel(self):
        """Halt the pending scheduled step and abandon the active fix-up."""
        self._cancel_pending()
        self.fixup             = None
        self._stepping         = False
        self._awaiting_display = False

    def _tick(self):
        """
        Scheduled step: poll-and-skip while busy, never queue.

        Re-arms itself until the machine reports stop.
        """
        self._pending = None
        if self.fixup is None:
            return
        if not self.busy and not self.advance_fix():
            return
        self._schedule(self.step_interval)

    # ─────────────────────────────────────────────────────────────
    #  HISTORY NAVIGATION
    # ─────────────────────────────────────────────────────────────

    def navigate(self, index):
        """
        Load the snapshot at ``index`` as the working tree.

        Abandons any in-flight fix-up and pending scheduled step.

        Returns:
            bool: False (nothing changed) if ``index`` is out of range.
        """
        entry = self.history.entry_at(index)
        if entry is None:
            logger.info("navigate(%s) ignored: history has %d entries",
                        index, len(self.history))
            return False
        self.cancel()
        self.history.seek(index)
        self.tree.root = build_from_snapshot(entry.tree_state)
        self._refresh_display()
        return True

    def step_back(self):
        return self.navigate(self.history.cursor - 1)

    def step_forward(self):
        return self.navigate(self.history.cursor + 1)

    # ─────────────────────────────────────────────────────────────
    #  METRICS
    # ─────────────────────────────────────────────────────────────

    def get_height(self):
        return self.tree.get_height()

    def get_node_count(self):
        return self.tree.get_node_count()

    def get_black_height(self):
        return self.tree.get_black_height()

    def values(self):
        return self.tree.inorder_values()
