"""
╔══════════════════════════════════════════════════════════════════╗
║        Steppable Red-Black Tree  —  SNAPSHOTS & HISTORY           ║
║                                                                  ║
║  Snapshot format                                                 ║
║  ───────────────                                                 ║
║  SnapshotNode(value, color, left, right)   (immutable, nested)   ║
║                                                                  ║
║  History entry                                                   ║
║  ─────────────                                                   ║
║  HistoryEntry(tree_state, desc, action, case, highlight)         ║
║                                                                  ║
║  HistoryLog keeps an ordered list of entries plus a cursor.      ║
║  Appending while the cursor is not at the tail discards every    ║
║  entry after the cursor first (branch-discard on new edit).      ║
║                                                                  ║
║  Author : Arshanhp                                               ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

from typing import Any, NamedTuple, Optional

from rbtree import RBNode


class SnapshotNode(NamedTuple):
    """Frozen copy of one node; children are SnapshotNode or None."""
    value: Any
    color: bool
    left: Optional["SnapshotNode"]
    right: Optional["SnapshotNode"]


class HistoryEntry(NamedTuple):
    """
    One recorded step.

    Attributes:
        tree_state (SnapshotNode|None): Frozen tree at this moment.
        desc       (str)             : Human-readable explanation.
        action     (str)             : Category: "start", "place",
                                       "pre_delete", "fixup", "done", …
        case       (str|None)        : CLRS case id, e.g. "case1".
        highlight  (tuple)           : Values to highlight when drawn.
    """
    tree_state: Optional[SnapshotNode]
    desc: str
    action: str = "step"
    case: Optional[str] = None
    highlight: tuple = ()


# ═════════════════════════════════════════════════════════════════
#  SNAPSHOT ↔ LIVE TREE
# ═════════════════════════════════════════════════════════════════

def snapshot_tree(node):
    """
    Deep-copy a live node graph into nested SnapshotNode tuples.

    Returns:
        SnapshotNode|None: None for an empty tree.
    """
    if node is None:
        return None
    return SnapshotNode(node.value, node.color,
                        snapshot_tree(node.left), snapshot_tree(node.right))


def build_from_snapshot(snap, parent=None):
    """
    Build a fresh, independent RBNode graph from a snapshot.

    Args:
        snap   (SnapshotNode|None): Snapshot root.
        parent (RBNode|None)      : Parent for the rebuilt root.

    Returns:
        RBNode|None: Root of the new graph with parent links set.
    """
    if snap is None:
        return None
    node = RBNode(snap.value, snap.color)
    node.parent = parent
    node.left   = build_from_snapshot(snap.left, node)
    node.right  = build_from_snapshot(snap.right, node)
    return node


def snapshot_values(snap):
    """In-order values of a snapshot."""
    if snap is None:
        return []
    return snapshot_values(snap.left) + [snap.value] + snapshot_values(snap.right)


# ═════════════════════════════════════════════════════════════════
#  HISTORY LOG
# ═════════════════════════════════════════════════════════════════
class HistoryLog:
    """
    Ordered snapshots of a single operation plus a navigable cursor.

    ``cursor`` is -1 only while the log is empty.
    """

    def __init__(self):
        self.entries = []
        self.cursor  = -1

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def reset(self, tree_state, desc, action="start", case=None, highlight=()):
        """Drop everything and start over with a single entry."""
        self.entries = [HistoryEntry(tree_state, desc, action, case, tuple(highlight))]
        self.cursor  = 0

    def append(self, tree_state, desc, action="step", case=None, highlight=()):
        """
        Add an entry after the cursor.

        Entries past the cursor are discarded first, then the new
        entry becomes the tail and the cursor moves onto it.
        """
        if self.cursor != len(self.entries) - 1:
            del self.entries[self.cursor + 1:]
        self.entries.append(HistoryEntry(tree_state, desc, action, case, tuple(highlight)))
        self.cursor = len(self.entries) - 1

    def entry_at(self, index):
        if 0 <= index < len(self.entries):
            return self.entries[index]
        return None

    def seek(self, index):
        """
        Move the cursor to ``index``.

        Returns:
            HistoryEntry|None: The entry, or None if ``index`` is out of
            range (cursor unchanged).
        """
        entry = self.entry_at(index)
        if entry is not None:
            self.cursor = index
        return entry

    @property
    def current(self):
        return self.entry_at(self.cursor)

    def can_step_back(self):
        return self.cursor > 0

    def can_step_forward(self):
        return self.cursor < len(self.entries) - 1

    def descriptions(self):
        return [e.desc for e in self.entries]
