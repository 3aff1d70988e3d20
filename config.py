"""
Calculator 3 Configuration Settings
"""
import os

# Application Settings
APP_NAME = "Calculator 3"
VERSION = "3.0.0"

# Display Settings (portrait, phone-like proportions)
WINDOW_WIDTH = 400
WINDOW_HEIGHT = 720
DISPLAY_FONT = ("Consolas", 36, "bold")
BUTTON_FONT = ("Segoe UI", 18)
SMALL_BUTTON_FONT = ("Segoe UI", 14)
LABEL_FONT = ("Segoe UI", 11)
HISTORY_HEIGHT = 12   # visible rows in the history list

# ── Palettes ───────────────────────────────────────────────────────────────────

# LIGHT palette
NEU_LIGHT = {
    "bg":           "#F2F2F7",
    "bg_dark":      "#E0E0E6",
    "shadow_dark":  "#C7C7CC",
    "display_bg":   "#F2F2F7",
    "display_fg":   "#1C1C1E",
    "digit_bg":     "#505050",   # dark gray digit keys
    "digit_fg":     "#FFFFFF",
    "func_bg":      "#D4D4D2",   # C ( ) ⌫
    "func_fg":      "#1C1C1E",
    "point_bg":     "#8E8E93",
    "point_fg":     "#FFFFFF",
    "operator_bg":  "#FF9500",   # orange operators and "="
    "operator_fg":  "#FFFFFF",
    "accent":       "#FF9500",
    "text":         "#1C1C1E",
    "subtext":      "#8E8E93",
    "memo_fg":      "#007AFF",
    "success":      "#34C759",
    "danger":       "#FF3B30",
    "warning":      "#FF9500",
    "hdr_bg":       "#E5E5EA",
    "entry_bg":     "#FFFFFF",
    "entry_fg":     "#1C1C1E",
    "tree_bg":      "#FFFFFF",
    "tree_fg":      "#1C1C1E",
    "tree_group":   "#E5E5EA",
}

# DARK palette
NEU_DARK = {
    "bg":           "#000000",
    "bg_dark":      "#1C1C1E",
    "shadow_dark":  "#2C2C2E",
    "display_bg":   "#000000",
    "display_fg":   "#FFFFFF",
    "digit_bg":     "#333333",
    "digit_fg":     "#FFFFFF",
    "func_bg":      "#A5A5A5",
    "func_fg":      "#000000",
    "point_bg":     "#636366",
    "point_fg":     "#FFFFFF",
    "operator_bg":  "#FF9F0A",
    "operator_fg":  "#FFFFFF",
    "accent":       "#FF9F0A",
    "text":         "#FFFFFF",
    "subtext":      "#8E8E93",
    "memo_fg":      "#0A84FF",
    "success":      "#30D158",
    "danger":       "#FF453A",
    "warning":      "#FF9F0A",
    "hdr_bg":       "#1C1C1E",
    "entry_bg":     "#2C2C2E",
    "entry_fg":     "#FFFFFF",
    "tree_bg":      "#1C1C1E",
    "tree_fg":      "#FFFFFF",
    "tree_group":   "#2C2C2E",
}


def get_theme(dark: bool) -> dict:
    """Return the active colour palette."""
    return NEU_DARK if dark else NEU_LIGHT


# Storage Settings (per-user, outside the install directory)
DATA_DIR = os.path.join(os.path.expanduser("~"), ".calculator3")
DB_PATH = os.path.join(DATA_DIR, "calculator3.db")
SETTINGS_PATH = os.path.join(DATA_DIR, "settings.json")

# Language Settings
DEFAULT_LANGUAGE = "zh"
LANGUAGES = ["zh", "en"]

# History Settings
MAX_HISTORY_ITEMS = 100

# Result formatting
RESULT_MAX_FRACTION_DIGITS = 4
