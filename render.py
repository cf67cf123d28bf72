"""
╔══════════════════════════════════════════════════════════════════╗
║        Steppable Red-Black Tree  —  LAYOUT & IMAGE EXPORT         ║
║                                                                  ║
║  layout_tree()      — in-order slot layout of a snapshot, with   ║
║                       optional NIL placeholders; shared by the   ║
║                       Tk canvas and the PNG renderer             ║
║  TreeImageRenderer  — off-screen Pillow rendering of a snapshot  ║
║                                                                  ║
║  Dependencies                                                    ║
║  ────────────                                                    ║
║  Pillow  → PNG export of the displayed step                      ║
║                                                                  ║
║  Author : Arshanhp                                               ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

from typing import NamedTuple

from PIL import Image, ImageDraw, ImageFont

NODE_RADIUS = 20           # Circle radius for nodes (pixels)
NULL_RADIUS = 12           # Circle radius for NIL placeholders
MIN_SPACING = NODE_RADIUS * 2 + 30
TOP_MARGIN  = 50


class Layout(NamedTuple):
    """
    Pixel layout of one snapshot.

    Attributes:
        nodes (dict) : value → (x, y, color).
        edges (list) : ((x1, y1), (x2, y2)) parent → child segments,
                       including segments to NIL placeholders.
        nulls (list) : (parent_value, x, y) centres of NIL placeholders.
    """
    nodes: dict
    edges: list
    nulls: list


def _depth(snap):
    if snap is None:
        return 0
    return 1 + max(_depth(snap.left), _depth(snap.right))


def layout_tree(tree_state, width, height, show_null_nodes=False):
    """
    Assign every node an in-order horizontal slot and a depth row.

    With ``show_null_nodes`` each absent child also takes a slot, so
    NIL leaves get room of their own one row below their parent.

    Args:
        tree_state (SnapshotNode|None): Snapshot root.
        width, height (int)           : Drawing area in pixels.
        show_null_nodes (bool)        : Lay out NIL placeholders too.

    Returns:
        Layout: Empty layout for an empty tree.
    """
    layout = Layout({}, [], [])
    if tree_state is None:
        return layout

    slots = {}          # id(snapshot node) or ("nil", id(parent), side) → slot
    counter = [0]

    def assign(snap, parent, side):
        if snap is None:
            if show_null_nodes and parent is not None:
                slots[("nil", id(parent), side)] = counter[0]
                counter[0] += 1
            return
        assign(snap.left, snap, "left")
        slots[id(snap)] = counter[0]
        counter[0] += 1
        assign(snap.right, snap, "right")

    assign(tree_state, None, None)

    total   = max(counter[0], 1)
    spacing = min(MIN_SPACING, width / (total + 1))
    start_x = (width - total * spacing) / 2 + spacing / 2
    levels  = _depth(tree_state) + (1 if show_null_nodes else 0)
    v_space = min(80, height / (levels + 1))

    def xy(slot, level):
        return start_x + slot * spacing, TOP_MARGIN + level * v_space

    def place(snap, level):
        x, y = xy(slots[id(snap)], level)
        layout.nodes[snap.value] = (x, y, snap.color)
        for side, child in (("left", snap.left), ("right", snap.right)):
            if child is not None:
                cx, cy = place(child, level + 1)
                layout.edges.append(((x, y), (cx, cy)))
            elif show_null_nodes:
                nx, ny = xy(slots[("nil", id(snap), side)], level + 1)
                layout.nulls.append((snap.value, nx, ny))
                layout.edges.append(((x, y), (nx, ny)))
        return x, y

    place(tree_state, 0)
    return layout


# ═════════════════════════════════════════════════════════════════
#  TREE IMAGE RENDERER
#
#  Renders a snapshot to a Pillow Image for PNG export.
#  Layout: title at top, tree below, NIL leaves on request.
# ═════════════════════════════════════════════════════════════════
class TreeImageRenderer:
    """
    Off-screen tree renderer using Pillow.

    Args:
        settings (Settings): For colour lookups.
        width    (int)     : Image width in pixels.
        height   (int)     : Image height in pixels.
    """

    def __init__(self, settings, width=800, height=500):
        self.settings = settings
        self.width    = width
        self.height   = height

    # ── Font loading ────────────────────────────────────────────
    @staticmethod
    def _load_fonts():
        """
        Try a few platform monospace fonts, falling back to Pillow's
        built-in bitmap font.

        Returns:
            tuple[ImageFont, ImageFont]: (node_font, title_font)
        """
        candidates_mono = [
            "consola.ttf",                                         # Windows
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf", # Debian/Ubuntu
            "/usr/share/fonts/TTF/DejaVuSansMono.ttf",             # Arch
            "/System/Library/Fonts/Menlo.ttc",                     # macOS
        ]
        for p in candidates_mono:
            try:
                return ImageFont.truetype(p, 14), ImageFont.truetype(p, 16)
            except OSError:
                continue
        font = ImageFont.load_default()
        return font, font

    # ── Main render method ──────────────────────────────────────
    def render(self, tree_state, highlight=(), title="", show_null_nodes=False):
        """
        Render a tree snapshot to a Pillow Image.

        Args:
            tree_state (SnapshotNode|None): Snapshot to draw.
            highlight  (iterable)         : Values to ring in HIGHLIGHT.
            title      (str)              : Text drawn at the top.
            show_null_nodes (bool)        : Draw NIL placeholders.

        Returns:
            Image: RGB image of ``width`` × ``height``.
        """
        s = self.settings
        highlight = set(highlight or ())

        img  = Image.new("RGB", (self.width, self.height), s.get("CANVAS_BG"))
        draw = ImageDraw.Draw(img)
        font, font_t = self._load_fonts()

        if title:
            draw.text((10, 8), title.splitlines()[0][:90],
                      fill=s.get("ACCENT"), font=font_t)

        if tree_state is None:
            draw.text((self.width // 2 - 40, self.height // 2),
                      "Tree is empty", fill=s.get("FG2"), font=font)
            return img

        layout = layout_tree(tree_state, self.width, self.height, show_null_nodes)

        # ── Edges first so circles sit on top ──
        for (x1, y1), (x2, y2) in layout.edges:
            draw.line([(x1, y1), (x2, y2)], fill=s.get("EDGE"), width=2)

        r = NULL_RADIUS
        for _, x, y in layout.nulls:
            draw.ellipse([x - r, y - r, x + r, y + r], fill=s.get("NODE_NULL_FILL"))
            self._centered_text(draw, x, y, "N", font, s.get("NODE_TEXT"))

        r = NODE_RADIUS
        for value, (x, y, color) in layout.nodes.items():
            fill    = s.get("NODE_RED_FILL") if color else s.get("NODE_BLACK_FILL")
            hl      = value in highlight
            outline = s.get("HIGHLIGHT") if hl else s.get("EDGE")
            draw.ellipse([x - r, y - r, x + r, y + r],
                         fill=fill, outline=outline, width=3 if hl else 1)
            self._centered_text(draw, x, y, str(value), font, s.get("NODE_TEXT"))
        return img

    @staticmethod
    def _centered_text(draw, x, y, txt, font, fill):
        bb = draw.textbbox((0, 0), txt, font=font)
        tw, th = bb[2] - bb[0], bb[3] - bb[1]
        draw.text((x - tw // 2, y - th // 2), txt, fill=fill, font=font)

    def save_png(self, path, tree_state, **kwargs):
        """Render and write a PNG to ``path``.  Returns the path."""
        self.render(tree_state, **kwargs).save(path, "PNG")
        return path
