"""
╔══════════════════════════════════════════════════════════════════╗
║        Steppable Red-Black Tree  —  TK VIEWER                     ║
║                                                                  ║
║  The two collaborators TreeStepper consumes, on Tkinter:         ║
║    • TkScheduler     — call_later()/cancel() over after()        ║
║    • TreeViewWindow  — display callable: lays out the snapshot,  ║
║                        tweens nodes into place, then reports     ║
║                        display_settled() back to the stepper     ║
║                                                                  ║
║  Layout (pack order, top → bottom):                              ║
║    1. inp   — value entry + Insert / Delete / Clear              ║
║    2. nav   — ◀ Prev / Next ▶, NIL toggle, theme, PNG export     ║
║    3. body  — canvas (left) + stats & step list (right)          ║
║                                                                  ║
║  Author : Arshanhp                                               ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

import logging
from tkinter import (Tk, Toplevel, Frame, Canvas, Label, Entry, Button, Listbox,
                     Scrollbar, StringVar, LEFT, RIGHT, BOTH, X, Y, END,
                     VERTICAL, messagebox, filedialog)

from rbtree import ERROR, parse_value
from settings import Settings
from fixup import INSERT_CASES, DELETE_CASES
from stepper import TreeStepper, Outcome
from render import layout_tree, TreeImageRenderer, NODE_RADIUS, NULL_RADIUS

logger = logging.getLogger('rbstep.viewer')

TWEEN_FACTOR = 0.15      # fraction of the remaining distance per frame
FRAME_MS     = 16


class TkScheduler:
    """Scheduler protocol implemented with a widget's ``after()``."""

    def __init__(self, widget):
        self.widget = widget

    def call_later(self, delay_ms, callback):
        return self.widget.after(delay_ms, callback)

    def cancel(self, handle):
        self.widget.after_cancel(handle)


class TreeViewWindow(Toplevel):
    """
    Interactive window around a TreeStepper.

    Attributes:
        settings (Settings)    : Theme, timings, NIL toggle.
        stepper  (TreeStepper) : Core engine; this window is its display.
        current  (tuple)       : (tree_state, show_null_nodes) last shown.
        positions (dict)       : value → [x, y] currently drawn.
        after_id (str|None)    : Pending animation frame.
    """

    def __init__(self, master, settings):
        super().__init__(master)
        self.settings = settings
        self.title("Red-Black Tree: Step-by-Step Fix-up")
        self.geometry("1200x760")
        self.minsize(900, 600)

        self.stepper   = TreeStepper(TkScheduler(self), self.show_tree, settings)
        self.current   = (None, settings.show_null_nodes)
        self.positions = {}
        self.targets   = None
        self.after_id  = None

        self._build_ui()
        self._apply_theme()
        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self.show_tree(None, settings.show_null_nodes)

    def _on_close(self):
        self.stepper.cancel()
        if self.after_id:
            self.after_cancel(self.after_id)
            self.after_id = None
        self.destroy()
        if isinstance(self.master, Tk) and not self.master.winfo_children():
            self.master.destroy()

    # ═══════════════════════════════════════════════════════════════
    #  BUILD UI
    # ═══════════════════════════════════════════════════════════════
    def _build_ui(self):
        self.value_var = StringVar()

        inp = Frame(self)
        inp.pack(fill=X, padx=10, pady=(10, 4))
        Label(inp, text="Value:", font=("Consolas", 11)).pack(side=LEFT)
        self.entry = Entry(inp, textvariable=self.value_var, width=12,
                           font=("Consolas", 12))
        self.entry.pack(side=LEFT, padx=6)
        self.entry.bind("<Return>", lambda e: self._insert())
        self.buttons = [
            Button(inp, text="➕ Insert", command=self._insert),
            Button(inp, text="➖ Delete", command=self._delete),
            Button(inp, text="🗑 Clear",  command=self._clear),
        ]
        for b in self.buttons:
            b.pack(side=LEFT, padx=3)

        nav = Frame(self)
        nav.pack(fill=X, padx=10, pady=4)
        for text, cmd in (("◀ Prev", self._prev), ("Next ▶", self._next),
                          ("NIL nodes", self._toggle_null),
                          ("Theme", self._toggle_theme),
                          ("Export PNG", self._export_png)):
            b = Button(nav, text=text, command=cmd)
            b.pack(side=LEFT, padx=3)
            self.buttons.append(b)

        body = Frame(self)
        body.pack(fill=BOTH, expand=True, padx=10, pady=(4, 10))

        self.canvas = Canvas(body, highlightthickness=0)
        self.canvas.pack(side=LEFT, fill=BOTH, expand=True)
        self.canvas.bind("<Configure>", lambda e: self._relayout())

        side = Frame(body, width=340)
        side.pack(side=RIGHT, fill=Y, padx=(10, 0))
        side.pack_propagate(False)

        self.stats_labels = {}
        for key, text in (("height", "Height"), ("nodes", "Nodes"),
                          ("bh", "Black-height"), ("case", "Case")):
            row = Frame(side)
            row.pack(fill=X)
            Label(row, text=f"{text}:", font=("Consolas", 10)).pack(side=LEFT)
            lbl = Label(row, text="0", font=("Consolas", 10, "bold"))
            lbl.pack(side=RIGHT)
            self.stats_labels[key] = lbl

        Label(side, text="Steps", font=("Consolas", 11, "bold")).pack(anchor="w",
                                                                      pady=(10, 2))
        lf = Frame(side)
        lf.pack(fill=BOTH, expand=True)
        sb = Scrollbar(lf, orient=VERTICAL)
        self.steps_list = Listbox(lf, yscrollcommand=sb.set, font=("Consolas", 9),
                                  activestyle="none", exportselection=False)
        sb.config(command=self.steps_list.yview)
        sb.pack(side=RIGHT, fill=Y)
        self.steps_list.pack(side=LEFT, fill=BOTH, expand=True)
        self.steps_list.bind("<<ListboxSelect>>", self._on_step_select)

        self.detail = Label(side, text="", font=("Consolas", 9), justify=LEFT,
                            anchor="w", wraplength=320)
        self.detail.pack(fill=X, pady=(6, 0))

        self.frames = [self, inp, nav, body, side, lf]

    def _apply_theme(self):
        s = self.settings
        for f in self.frames:
            f.configure(bg=s.get("BG"))
        for w in self.frames[1:]:
            for child in w.winfo_children():
                if isinstance(child, Label):
                    child.configure(bg=s.get("BG"), fg=s.get("FG"))
                elif isinstance(child, Frame):
                    child.configure(bg=s.get("BG"))
                    for lbl in child.winfo_children():
                        if isinstance(lbl, Label):
                            lbl.configure(bg=s.get("BG"), fg=s.get("FG"))
        for b in self.buttons:
            b.configure(bg=s.get("BTN_BG"), fg=s.get("FG"),
                        activebackground=s.get("ACCENT"), relief="flat")
        self.canvas.configure(bg=s.get("CANVAS_BG"))
        self.steps_list.configure(bg=s.get("BG2"), fg=s.get("FG"),
                                  selectbackground=s.get("ACCENT"))

    # ═══════════════════════════════════════════════════════════════
    #  USER ACTIONS
    # ═══════════════════════════════════════════════════════════════
    def _read_value(self):
        value = parse_value(self.value_var.get())
        if value is None:
            messagebox.showwarning("Warning", "Please enter a valid number", parent=self)
        return value

    def _run(self, operation):
        if self.stepper.busy:
            return None
        value = self._read_value()
        if value is None:
            return None
        self.value_var.set("")
        return operation(value)

    def _insert(self):
        if self._run(self.stepper.insert) is Outcome.DUPLICATE_VALUE:
            logger.info("duplicate value rejected")

    def _delete(self):
        if self._run(self.stepper.delete) is Outcome.VALUE_NOT_FOUND:
            logger.info("delete of absent value ignored")

    def _clear(self):
        if not self.stepper.busy:
            self.stepper.clear()

    def _prev(self):
        if not self.stepper.busy:
            self.stepper.step_back()

    def _next(self):
        if not self.stepper.busy:
            self.stepper.step_forward()

    def _on_step_select(self, event):
        sel = self.steps_list.curselection()
        if sel and sel[0] != self.stepper.history.cursor and not self.stepper.busy:
            self.stepper.navigate(sel[0])

    def _toggle_null(self):
        self.settings.show_null_nodes = not self.settings.show_null_nodes
        self.settings.save()
        self.stepper.set_show_null_nodes(self.settings.show_null_nodes)

    def _toggle_theme(self):
        self.settings.toggle_theme()
        self.settings.save()
        self._apply_theme()
        self._refresh_steps()
        self._draw()

    def _export_png(self):
        entry = self.stepper.history.current
        path = filedialog.asksaveasfilename(parent=self, defaultextension=".png",
                                            filetypes=[("PNG image", "*.png")])
        if not path:
            return
        renderer = TreeImageRenderer(self.settings)
        try:
            renderer.save_png(path, self.current[0],
                              highlight=entry.highlight if entry else (),
                              title=entry.desc if entry else "",
                              show_null_nodes=self.current[1])
        except OSError as exc:
            logger.warning("PNG export to %s failed: %s", path, exc)
            messagebox.showerror("Export failed", str(exc), parent=self)
            return
        logger.info("exported %s", path)

    # ═══════════════════════════════════════════════════════════════
    #  DISPLAY — called by TreeStepper after every change
    # ═══════════════════════════════════════════════════════════════
    def show_tree(self, tree_state, show_null_nodes):
        self.current = (tree_state, show_null_nodes)
        self._update_stats()
        self._refresh_steps()
        self._relayout()

    def _relayout(self):
        tree_state, show_null = self.current
        w = max(self.canvas.winfo_width(), 400)
        h = max(self.canvas.winfo_height(), 300)
        self.targets = layout_tree(tree_state, w, h, show_null)
        # drop vanished nodes; new nodes appear directly at their target
        self.positions = {v: self.positions.get(v, [x, y])
                          for v, (x, y, _) in self.targets.nodes.items()}
        if self.after_id is None:
            self._animate()

    def _animate(self):
        self.after_id = None
        settled = True
        for value, pos in self.positions.items():
            tx, ty, _ = self.targets.nodes[value]
            dx, dy = tx - pos[0], ty - pos[1]
            if abs(dx) > 0.5 or abs(dy) > 0.5:
                pos[0] += dx * TWEEN_FACTOR
                pos[1] += dy * TWEEN_FACTOR
                settled = False
            else:
                pos[0], pos[1] = tx, ty
        self._draw()
        if settled:
            self.stepper.display_settled()
        else:
            self.after_id = self.after(FRAME_MS, self._animate)

    def _draw(self):
        c, s = self.canvas, self.settings
        c.delete("all")
        tree_state, _ = self.current
        if tree_state is None:
            c.create_text(c.winfo_width() // 2, c.winfo_height() // 2,
                          text="Tree is empty", fill=s.get("FG2"),
                          font=("Consolas", 16))
            return
        entry = self.stepper.history.current
        highlight = set(entry.highlight) if entry else set()

        def edges(snap):
            x, y = self.positions[snap.value]
            for child in (snap.left, snap.right):
                if child is not None:
                    cx, cy = self.positions[child.value]
                    c.create_line(x, y, cx, cy, fill=s.get("EDGE"), width=2)
                    edges(child)
        edges(tree_state)

        # NIL placeholders follow their parent's current offset
        r = NULL_RADIUS
        for parent, nx, ny in self.targets.nulls:
            px, py, _ = self.targets.nodes[parent]
            cx, cy = self.positions[parent]
            x, y = nx + cx - px, ny + cy - py
            c.create_line(cx, cy, x, y, fill=s.get("EDGE"), width=1)
            c.create_oval(x - r, y - r, x + r, y + r, fill=s.get("NODE_NULL_FILL"),
                          outline="")
            c.create_text(x, y, text="N", fill=s.get("NODE_TEXT"),
                          font=("Consolas", 8))

        r = NODE_RADIUS
        for value, (x, y) in self.positions.items():
            color = self.targets.nodes[value][2]
            fill = s.get("NODE_RED_FILL") if color else s.get("NODE_BLACK_FILL")
            hl = value in highlight
            c.create_oval(x - r, y - r, x + r, y + r, fill=fill,
                          outline=s.get("HIGHLIGHT") if hl else s.get("EDGE"),
                          width=3 if hl else 1)
            c.create_text(x, y, text=str(value), fill=s.get("NODE_TEXT"),
                          font=("Consolas", 11, "bold"))

    def _update_stats(self):
        bh = self.stepper.get_black_height()
        self.stats_labels["height"].config(text=str(self.stepper.get_height()))
        self.stats_labels["nodes"].config(text=str(self.stepper.get_node_count()))
        self.stats_labels["bh"].config(text="INVALID" if bh == ERROR else str(bh))

        entry = self.stepper.history.current
        cases = DELETE_CASES if self.stepper.operation == "delete" else INSERT_CASES
        case  = cases.get(entry.case, "-") if entry and entry.case else "-"
        self.stats_labels["case"].config(text=case)
        self.detail.config(text=entry.desc if entry else "")

    def _refresh_steps(self):
        history = self.stepper.history
        lb = self.steps_list
        lb.delete(0, END)
        for i, entry in enumerate(history):
            lb.insert(END, f"{i:>3}  {entry.desc.splitlines()[0]}")
            if entry.case or entry.action == "fixup":
                lb.itemconfig(i, fg=self.settings.get("VIOLATION"))
        if history.cursor >= 0:
            lb.selection_clear(0, END)
            lb.selection_set(history.cursor)
            lb.see(history.cursor)


def open_viewer(root=None, settings=None, values=()):
    """
    Launch the viewer window and run the Tk event loop.

    Args:
        root     (Tk|None)      : Master window; a hidden one is created if None.
        settings (Settings|None): Preferences; loaded from disk if None.
        values   (iterable)     : Values inserted (each run to completion)
                                  before the window is shown.
    """
    settings = settings or Settings()
    if root is None:
        root = Tk()
        root.withdraw()

    win = TreeViewWindow(root, settings)
    for v in values:
        if win.stepper.insert(v) is Outcome.FIXUP_STARTED:
            win.stepper.run_to_completion()

    if root.winfo_exists():
        root.mainloop()
