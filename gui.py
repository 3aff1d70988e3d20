"""
GUI for Calculator 3
Tkinter interface: day-grouped history list, expression display and keypad
"""
import json
import logging
import os
import tkinter as tk
from tkinter import ttk

import config
import locales
from calculator import Calculator, InvalidExpression, KEYPAD, OPERATORS, key_to_button
from database import PersistenceFailure
from history_manager import open_history

logger = logging.getLogger(__name__)


class CalculatorGUI:
    def __init__(self, root, history_manager=None):
        self.root = root
        self.root.title(config.APP_NAME)
        self.root.geometry(f"{config.WINDOW_WIDTH}x{config.WINDOW_HEIGHT}")

        # Initialize components
        self.calculator = Calculator()
        # None when the database cannot be opened; the calculator still works
        self.history_manager = history_manager if history_manager is not None else open_history()

        # ── Theme state (load before any widget is created) ───────────────
        settings = self._load_settings()
        self.dark_mode: bool = settings.get("dark_mode", False)
        self.language = settings.get("language", config.DEFAULT_LANGUAGE)
        self.tr = locales.get_translator(self.language)
        self.T: dict = config.get_theme(self.dark_mode)
        self._apply_ttk_styles()
        self.root.configure(bg=self.T["bg"])

        # history tree item id -> HistoryEntry
        self._entries_by_iid = {}

        self.create_widgets()
        self.root.bind('<Key>', self.on_key_press)
        self.refresh_history()
        self.update_display()

    # ── Settings persistence ─────────────────────────────────────────────
    def _load_settings(self):
        try:
            with open(config.SETTINGS_PATH, "r") as f:
                return json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable settings file: {e}")
            return {}

    def _save_settings(self, data):
        existing = self._load_settings()
        existing.update(data)
        try:
            os.makedirs(os.path.dirname(config.SETTINGS_PATH), exist_ok=True)
            with open(config.SETTINGS_PATH, "w") as f:
                json.dump(existing, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save settings: {e}")

    # ── Theme helpers ──────────────────────────────────────────────────────────
    def _apply_ttk_styles(self):
        """Configure ttk widget styles for the active palette."""
        T = self.T
        style = ttk.Style()
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass
        style.configure("Treeview", background=T["tree_bg"],
                        fieldbackground=T["tree_bg"], foreground=T["tree_fg"],
                        rowheight=22, font=config.LABEL_FONT)
        style.map("Treeview",
                  background=[("selected", T["accent"])],
                  foreground=[("selected", "#FFFFFF")])
        style.configure("TCombobox", fieldbackground=T["entry_bg"],
                        background=T["bg_dark"], foreground=T["entry_fg"],
                        arrowcolor=T["accent"])
        style.map("TCombobox",
                  fieldbackground=[("readonly", T["entry_bg"])],
                  foreground=[("readonly", T["entry_fg"])])
        style.configure("Vertical.TScrollbar",
                        background=T["shadow_dark"], troughcolor=T["bg"],
                        borderwidth=0, relief="flat", width=8, arrowsize=0)

    def apply_theme(self):
        """Refresh T, re-style ttk, then destroy+rebuild all widgets."""
        self.tr = locales.get_translator(self.language)
        self.T = config.get_theme(self.dark_mode)
        self._apply_ttk_styles()
        self.root.configure(bg=self.T["bg"])
        for w in self.root.winfo_children():
            w.destroy()
        self.create_widgets()
        self.refresh_history()
        self.update_display()

    def _toggle_dark_mode(self):
        """Persist dark_mode setting and apply theme immediately."""
        self.dark_mode = bool(self.dark_var.get())
        self._save_settings({"dark_mode": self.dark_mode})
        self.apply_theme()

    def _change_language(self, event=None):
        """Persist language setting and apply immediately."""
        self.language = self.language_var.get()
        self._save_settings({"language": self.language})
        self.apply_theme()

    # ── Inline toast (fire-and-forget notices) ──────────────────────────────
    def _show_toast(self, msg, kind="success", duration=2500):
        """Show an inline toast banner near the top of the window.
        kind: 'success' | 'error' | 'warning'
        """
        T = self.T
        colours = {
            "success": T["success"],
            "error":   T["danger"],
            "warning": T["warning"],
        }
        icons = {"success": "✓", "error": "✗", "warning": "⚠"}
        bg = colours.get(kind, T["success"])
        toast = tk.Frame(self.root, bg=bg)
        toast.place(relx=0.05, y=45, relwidth=0.9, height=40)
        toast.lift()
        tk.Label(toast, text=f"  {icons.get(kind, '')}  {msg}",
                 font=(config.LABEL_FONT[0], 10, "bold"),
                 bg=bg, fg="#FFFFFF", anchor="w").pack(side=tk.LEFT, fill=tk.X, expand=True)
        tk.Button(toast, text="✕", font=(config.LABEL_FONT[0], 9),
                  bg=bg, fg="#FFFFFF", relief=tk.FLAT, bd=0,
                  command=toast.destroy, cursor="hand2",
                  activebackground=bg).pack(side=tk.RIGHT, padx=4)
        self.root.after(duration, lambda: toast.destroy() if toast.winfo_exists() else None)

    def show_error(self, message):
        """Report a calculation error and reset the display."""
        self._show_toast(f"{self.tr('Calculation error')}: {message}", kind="error", duration=3500)
        self.calculator.clear()
        self.update_display()

    # ── Widgets ──────────────────────────────────────────────────────────────
    def create_widgets(self):
        """Create main UI components"""
        T = self.T

        # Top bar: title, language, dark mode
        top_frame = tk.Frame(self.root, bg=T["hdr_bg"], height=40)
        top_frame.pack(fill=tk.X, padx=2, pady=2)
        tk.Label(top_frame, text=self.tr(config.APP_NAME),
                 font=(config.LABEL_FONT[0], 13, "bold"),
                 bg=T["hdr_bg"], fg=T["accent"]).pack(side=tk.LEFT, padx=8, pady=6)

        self.dark_var = tk.IntVar(value=1 if self.dark_mode else 0)
        tk.Checkbutton(top_frame, text=self.tr("Dark mode"), variable=self.dark_var,
                       command=self._toggle_dark_mode,
                       bg=T["hdr_bg"], fg=T["text"], selectcolor=T["bg_dark"],
                       activebackground=T["hdr_bg"], font=config.LABEL_FONT,
                       ).pack(side=tk.RIGHT, padx=4)
        self.language_var = tk.StringVar(value=self.language)
        language_box = ttk.Combobox(top_frame, textvariable=self.language_var,
                                    values=config.LANGUAGES, state="readonly", width=4)
        language_box.pack(side=tk.RIGHT, padx=4)
        language_box.bind("<<ComboboxSelected>>", self._change_language)

        # History list: one parent row per day, calculations beneath it
        history_frame = tk.Frame(self.root, bg=T["bg"])
        history_frame.pack(fill=tk.BOTH, expand=True, padx=8, pady=(4, 2))
        self.history_tree = ttk.Treeview(history_frame, columns=("time", "memo"),
                                         show="tree", height=config.HISTORY_HEIGHT,
                                         selectmode="browse")
        self.history_tree.column("#0", width=190, anchor=tk.W)
        self.history_tree.column("time", width=70, anchor=tk.W, stretch=False)
        self.history_tree.column("memo", width=110, anchor=tk.W)
        self.history_tree.tag_configure("group", background=T["tree_group"],
                                        foreground=T["subtext"],
                                        font=(config.LABEL_FONT[0], 10, "bold"))
        self.history_tree.tag_configure("memo", foreground=T["memo_fg"])
        scrollbar = ttk.Scrollbar(history_frame, orient=tk.VERTICAL,
                                  command=self.history_tree.yview)
        self.history_tree.configure(yscrollcommand=scrollbar.set)
        self.history_tree.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        scrollbar.pack(side=tk.RIGHT, fill=tk.Y)

        # Right-click menu stands in for the swipe actions
        self.history_menu = tk.Menu(self.root, tearoff=0)
        self.history_menu.add_command(label=self.tr("Delete"),
                                      command=lambda: self._on_history_action("delete"))
        self.history_menu.add_command(label=self.tr("Memo"),
                                      command=lambda: self._on_history_action("memo"))
        self.history_menu.add_command(label=self.tr("Copy"),
                                      command=lambda: self._on_history_action("copy"))
        self.history_tree.bind("<Button-3>", self._show_history_menu)
        self.history_tree.bind("<Button-2>", self._show_history_menu)
        self.history_tree.bind("<Double-1>", lambda e: self._on_history_action("memo"))

        # Display
        self.display = tk.Label(self.root, text="0", font=config.DISPLAY_FONT,
                                bg=T["display_bg"], fg=T["display_fg"],
                                anchor=tk.E, padx=12)
        self.display.pack(fill=tk.X, padx=8, pady=(2, 6))

        # Keypad
        keypad = tk.Frame(self.root, bg=T["bg"])
        keypad.pack(fill=tk.X, padx=8, pady=(0, 8))
        for row in KEYPAD:
            row_frame = tk.Frame(keypad, bg=T["bg"])
            row_frame.pack(fill=tk.X, pady=3)
            for col, button in enumerate(row):
                weight = 2 if button == "0" else 1
                row_frame.grid_columnconfigure(col, weight=weight, uniform="key")
                self._key_button(row_frame, button).grid(row=0, column=col,
                                                         sticky="nsew", padx=3)

    def _key_button(self, parent, button):
        T = self.T
        if button in ("C", "(", ")", "⌫"):
            bg, fg = T["func_bg"], T["func_fg"]
        elif button == ".":
            bg, fg = T["point_bg"], T["point_fg"]
        elif button in OPERATORS or button == "=":
            bg, fg = T["operator_bg"], T["operator_fg"]
        else:
            bg, fg = T["digit_bg"], T["digit_fg"]
        font = config.SMALL_BUTTON_FONT if button in ("(", ")") else config.BUTTON_FONT
        return tk.Button(
            parent, text=button, font=font,
            bg=bg, fg=fg, activebackground=T["shadow_dark"], activeforeground=fg,
            relief=tk.FLAT, bd=0, cursor="hand2", height=2,
            command=lambda b=button: self.handle_button_press(b),
        )

    # ── Calculator logic ─────────────────────────────────────────────────────
    def handle_button_press(self, button):
        """Handle keypad buttons"""
        if button == "=":
            self.calculate()
        else:
            self.calculator.press(button)
            self.update_display()

    def on_key_press(self, event):
        """Handle keyboard input"""
        if self._memo_overlay_open():
            return
        button = key_to_button(event.char, event.keysym)
        if button:
            self.handle_button_press(button)

    def calculate(self):
        try:
            expression, result = self.calculator.calculate()
        except InvalidExpression as e:
            self.show_error(self.tr(str(e)))
            return
        self.update_display()
        if self.history_manager is None:
            return
        try:
            self.history_manager.add_calculation(expression, result)
        except PersistenceFailure as e:
            logger.error(f"Failed to record calculation {expression!r}: {e}")
            self._show_toast(self.tr("Could not save history"), kind="error")
        self.refresh_history()

    def update_display(self):
        self.display.config(text=self.calculator.get_expression())

    # ── History list ─────────────────────────────────────────────────────────
    def refresh_history(self):
        """Re-query the store and rebuild the grouped list"""
        tree = self.history_tree
        tree.delete(*tree.get_children())
        self._entries_by_iid = {}
        if self.history_manager is None:
            tree.insert("", tk.END, text=self.tr("History unavailable"), tags=("group",))
            return
        try:
            groups = self.history_manager.get_grouped_history()
        except PersistenceFailure as e:
            logger.error(f"Failed to load history: {e}")
            groups = []
        if not groups:
            tree.insert("", tk.END, text=self.tr("No history yet"), tags=("group",))
            return
        for group in groups:
            parent = tree.insert("", tk.END, text=group.formatted_date(self.language),
                                 open=True, tags=("group",))
            for entry in group.entries:
                iid = tree.insert(parent, tk.END, text=entry.description,
                                  values=(entry.formatted_time, entry.memo),
                                  tags=("memo",) if entry.memo else ())
                self._entries_by_iid[iid] = entry

    def _selected_entry(self):
        selection = self.history_tree.selection()
        if not selection:
            return None
        return self._entries_by_iid.get(selection[0])

    def _show_history_menu(self, event):
        iid = self.history_tree.identify_row(event.y)
        if iid not in self._entries_by_iid:
            return
        self.history_tree.selection_set(iid)
        try:
            self.history_menu.tk_popup(event.x_root, event.y_root)
        finally:
            self.history_menu.grab_release()

    def _on_history_action(self, action):
        entry = self._selected_entry()
        if entry is None:
            return
        if action == "delete":
            self.delete_history_entry(entry)
        elif action == "memo":
            self.show_memo_editor(entry)
        elif action == "copy":
            self.copy_to_clipboard(entry.full_description(self.tr))

    def delete_history_entry(self, entry):
        try:
            self.history_manager.delete_entry(entry.id)
        except PersistenceFailure as e:
            logger.error(f"Failed to delete history entry {entry.id}: {e}")
            self._show_toast(str(e), kind="error")
        self.refresh_history()

    def copy_to_clipboard(self, text):
        self.root.clipboard_clear()
        self.root.clipboard_append(text)
        self._show_toast(self.tr("Copied"))

    # ── Memo editor overlay ──────────────────────────────────────────────────
    def _memo_overlay_open(self):
        overlay = getattr(self, "_memo_overlay", None)
        return overlay is not None and overlay.winfo_exists()

    def show_memo_editor(self, entry):
        """Full-window sheet for editing one entry's memo"""
        T = self.T
        ov = tk.Frame(self.root, bg=T["bg"])
        ov.place(x=0, y=0, relwidth=1, relheight=1)
        ov.lift()
        self._memo_overlay = ov

        hdr = tk.Frame(ov, bg=T["hdr_bg"], height=36)
        hdr.pack(fill=tk.X)
        hdr.pack_propagate(False)

        memo_var = tk.StringVar(value=entry.memo)

        def _close(event=None):
            ov.destroy()
            self._memo_overlay = None
            return "break"

        def _save(event=None):
            saved = self.history_manager.update_memo(entry.id, memo_var.get())
            _close()
            if saved:
                self._show_toast(self.tr("Memo saved"))
            else:
                self._show_toast(self.tr("Failed to save memo"), kind="warning")
            self.refresh_history()
            return "break"

        tk.Button(hdr, text=self.tr("Cancel"), font=config.LABEL_FONT,
                  bg=T["hdr_bg"], fg=T["subtext"], relief=tk.FLAT, bd=0,
                  cursor="hand2", command=_close).pack(side=tk.LEFT, padx=8)
        tk.Button(hdr, text=self.tr("Save"), font=(config.LABEL_FONT[0], config.LABEL_FONT[1], "bold"),
                  bg=T["hdr_bg"], fg=T["accent"], relief=tk.FLAT, bd=0,
                  cursor="hand2", command=_save).pack(side=tk.RIGHT, padx=8)
        tk.Label(hdr, text=self.tr("Memo"), font=(config.LABEL_FONT[0], 12, "bold"),
                 bg=T["hdr_bg"], fg=T["text"]).place(relx=0.5, rely=0.5, anchor=tk.CENTER)

        body = tk.Frame(ov, bg=T["bg"])
        body.pack(fill=tk.BOTH, expand=True, padx=16, pady=16)
        tk.Label(body, text=entry.description, font=config.LABEL_FONT,
                 bg=T["bg"], fg=T["subtext"], anchor=tk.W).pack(fill=tk.X)
        tk.Label(body, text=self.tr("Enter a memo"), font=config.LABEL_FONT,
                 bg=T["bg"], fg=T["text"], anchor=tk.W).pack(fill=tk.X, pady=(12, 2))
        memo_entry = tk.Entry(body, textvariable=memo_var, font=config.LABEL_FONT,
                              bg=T["entry_bg"], fg=T["entry_fg"],
                              insertbackground=T["entry_fg"], relief=tk.FLAT)
        memo_entry.pack(fill=tk.X, ipady=6)
        memo_entry.focus_set()
        memo_entry.bind("<Return>", _save)
        memo_entry.bind("<Escape>", _close)
