"""
╔══════════════════════════════════════════════════════════════════╗
║        Steppable Red-Black Tree  —  SETTINGS & THEMES             ║
║                                                                  ║
║  Persisted user preferences (theme, step timing, null-node       ║
║  display, colour overrides) plus the two built-in palettes.      ║
║                                                                  ║
║  File location:  ~/.rbstep_v1.json                               ║
║                                                                  ║
║  Author : Arshanhp                                               ║
║  License: MIT                                                    ║
╚══════════════════════════════════════════════════════════════════╝
"""

import os, json, logging

logger = logging.getLogger('rbstep.settings')


# ═════════════════════════════════════════════════════════════════
#  THEME DEFINITIONS
#  Two built-in Catppuccin-inspired palettes.
# ═════════════════════════════════════════════════════════════════
THEMES = {
    # ── Dark theme (Catppuccin Mocha) ────────────────────────────
    "dark": {
        "BG": "#1e1e2e",           # Main window background
        "BG2": "#2a2a3d",          # Side panels
        "FG": "#cdd6f4",           # Primary foreground text
        "FG2": "#a6adc8",          # Secondary text (placeholders)
        "ACCENT": "#89b4fa",       # Buttons, headings
        "BTN_BG": "#45475a",       # Button face colour
        "CANVAS_BG": "#1e1e2e",    # Tree-drawing canvas
        "NODE_RED_FILL": "#f38ba8",    # Fill for RED nodes
        "NODE_BLACK_FILL": "#585b70",  # Fill for BLACK nodes
        "NODE_NULL_FILL": "#313244",   # Fill for NIL placeholders
        "NODE_TEXT": "#ffffff",    # Text inside nodes
        "EDGE": "#6c7086",         # Lines connecting nodes
        "HIGHLIGHT": "#f9e2af",    # Node highlight ring colour
        "VIOLATION": "#fab387",    # Step list: case / rotate / recolor
    },
    # ── Light theme (Catppuccin Latte) ───────────────────────────
    "light": {
        "BG": "#eff1f5",
        "BG2": "#dce0e8",
        "FG": "#4c4f69",
        "FG2": "#6c6f85",
        "ACCENT": "#1e66f5",
        "BTN_BG": "#ccd0da",
        "CANVAS_BG": "#e6e9ef",
        "NODE_RED_FILL": "#d20f39",
        "NODE_BLACK_FILL": "#4c4f69",
        "NODE_NULL_FILL": "#bcc0cc",
        "NODE_TEXT": "#ffffff",
        "EDGE": "#8c8fa1",
        "HIGHLIGHT": "#df8e1d",
        "VIOLATION": "#fe640b",
    },
}


class Settings:
    """
    Persistent user preferences manager.

    Attributes:
        theme           (str) : Active theme name ("dark" / "light").
        step_interval   (int) : Milliseconds between scheduled fix-up steps.
        start_delay     (int) : Milliseconds before the first fix-up step.
        show_null_nodes (bool): Draw NIL leaves as placeholders.
        custom_colors   (dict): Key→hex overrides on top of the theme.
    """
    DEFAULT_PATH = os.path.join(os.path.expanduser("~"), ".rbstep_v1.json")

    def __init__(self, path=None):
        self.path            = path or self.DEFAULT_PATH
        self.theme           = "dark"
        self.step_interval   = 500
        self.start_delay     = 100
        self.show_null_nodes = False
        self.custom_colors   = {}
        self._load()

    # ── Load from disk ──────────────────────────────────────────
    def _load(self):
        """Read settings JSON; a missing or corrupt file keeps defaults."""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path) as f:
                d = json.load(f)
            theme         = d.get("theme", self.theme)
            step_interval = int(d.get("step_interval", self.step_interval))
            start_delay   = int(d.get("start_delay", self.start_delay))
            show_null     = d.get("show_null_nodes", self.show_null_nodes)
            custom        = dict(d.get("custom_colors", {}))
            if not isinstance(theme, str) or theme not in THEMES:
                theme = "dark"
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, exc)
            return
        self.theme           = theme
        self.step_interval   = max(1, step_interval)
        self.start_delay     = max(0, start_delay)
        self.show_null_nodes = show_null if isinstance(show_null, bool) else False
        self.custom_colors   = custom

    # ── Save to disk ────────────────────────────────────────────
    def save(self):
        """Write settings JSON.  Returns False (and logs) on I/O failure."""
        try:
            with open(self.path, "w") as f:
                json.dump({"theme": self.theme,
                           "step_interval": self.step_interval,
                           "start_delay": self.start_delay,
                           "show_null_nodes": self.show_null_nodes,
                           "custom_colors": self.custom_colors}, f, indent=2)
        except OSError as exc:
            logger.warning("Could not save settings to %s: %s", self.path, exc)
            return False
        return True

    def toggle_theme(self):
        self.theme = "light" if self.theme == "dark" else "dark"
        return self.theme

    # ── Colour lookup ───────────────────────────────────────────
    def get(self, key):
        """
        Resolve a colour key to its hex value.

        Priority: custom_colors[key]  →  THEMES[theme][key]  →  "#ffffff"
        """
        if key in self.custom_colors:
            return self.custom_colors[key]
        return THEMES.get(self.theme, THEMES["dark"]).get(key, "#ffffff")
