import argparse
import os
import threading
import tkinter as tk
from tkinter import filedialog, messagebox, ttk

from prickly.core import constants as app_constants
from prickly.core.domain_impl.infra import runtime_log_service
from prickly.core.domain_impl.infra import runtime_paths_service
from prickly.core.domain_impl.infra.settings_service import load_settings, save_settings
from prickly.core.domain_impl.io.document_io_service import load_document, save_document
from prickly.core.domain_impl.param.hash_resolver_service import (
    STATUS_HASH,
    STATUS_INVALID_HEX,
    STATUS_LABEL_EXISTS,
    STATUS_LABEL_NOT_EXISTS,
    STATUS_LABELS_UNAVAILABLE,
)
from prickly.core.domain_impl.param.label_corpus_service import (
    LabelCorpus,
    default_label_paths,
    load_label_corpus,
)
from prickly.core.domain_impl.param.param_engine_core import (
    MODE_FILTER_EDIT,
    RESPONSE_DOCUMENT_EDITED,
    RESPONSE_REQUEST_EXIT,
    ParamEngine,
)
from prickly.core.editor_state import EditorState
from prickly.core.exceptions import EXPECTED_ERRORS
from prickly.core.input_events import (
    KEY_BACKSPACE,
    KEY_BACKTAB,
    KEY_DOWN,
    KEY_ENTER,
    KEY_ESC,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_TAB,
    KEY_UP,
    MOD_ALT,
    MOD_CONTROL,
    MOD_NONE,
    MOD_SHIFT,
    MOUSE_CLICK,
    MOUSE_SCROLL_DOWN,
    MOUSE_SCROLL_UP,
    KeyEvent,
    MouseEvent,
)
import logging
_LOG = logging.getLogger("prickly.editor")


# Tk keysyms that map onto named engine keys.
TK_KEYSYMS = {
    "Up": KEY_UP,
    "Down": KEY_DOWN,
    "Left": KEY_LEFT,
    "Right": KEY_RIGHT,
    "Return": KEY_ENTER,
    "KP_Enter": KEY_ENTER,
    "Escape": KEY_ESC,
    "BackSpace": KEY_BACKSPACE,
    "Tab": KEY_TAB,
    "ISO_Left_Tab": KEY_BACKTAB,
}
TK_STATE_SHIFT = 0x0001
TK_STATE_CONTROL = 0x0004
TK_STATE_ALT = 0x0008 | 0x20000

RESOLUTION_TEXT = {
    STATUS_HASH: "raw hash",
    STATUS_LABEL_EXISTS: "known label",
    STATUS_LABEL_NOT_EXISTS: "unknown label, hash derived from text",
    STATUS_LABELS_UNAVAILABLE: "labels not loaded yet, hash derived from text",
    STATUS_INVALID_HEX: "invalid hash",
}
LABEL_POLL_MS = 100


def translate_key(keysym, char, state):
    modifiers = MOD_NONE
    if state & TK_STATE_SHIFT:
        modifiers |= MOD_SHIFT
    if state & TK_STATE_CONTROL:
        modifiers |= MOD_CONTROL
    if state & TK_STATE_ALT:
        modifiers |= MOD_ALT
    code = TK_KEYSYMS.get(keysym)
    if code == KEY_TAB and modifiers & MOD_SHIFT:
        code = KEY_BACKTAB
    if code is not None:
        return KeyEvent(code, modifiers)
    if char and len(char) == 1 and char.isprintable():
        # Shift is already folded into the character.
        return KeyEvent(char, modifiers & ~MOD_SHIFT)
    if modifiers & (MOD_CONTROL | MOD_ALT) and len(keysym) == 1:
        return KeyEvent(keysym.lower(), modifiers)
    return None


class ParamEditor:
    def __init__(self, root, corpus, settings, settings_file, path=None):
        self.root = root
        self.corpus = corpus
        self.settings = settings
        self.settings_file = settings_file
        self.state = EditorState.from_settings(settings)
        self.engine = ParamEngine(corpus, settings.autocomplete_limit)

        self.breadcrumb_var = tk.StringVar(value="")
        self.filter_var = tk.StringVar(value="")
        self.detail_var = tk.StringVar(value="")
        self.status = None
        self._build_ui()
        self._update_title()
        self.set_status(app_constants.STATUS_EMPTY)
        self.root.protocol("WM_DELETE_WINDOW", self.request_exit)
        self.root.after(LABEL_POLL_MS, self._poll_labels)
        if path:
            self.load_file(path)

    def _build_ui(self):
        self.root.geometry("900x600")
        frame = ttk.Frame(self.root, padding=6)
        frame.pack(fill="both", expand=True)
        ttk.Label(frame, textvariable=self.breadcrumb_var, anchor="w").pack(fill="x")
        ttk.Label(frame, textvariable=self.filter_var, anchor="w").pack(fill="x")

        body = ttk.Frame(frame)
        body.pack(fill="both", expand=True, pady=(4, 4))
        self.tree = ttk.Treeview(body, columns=("name", "type", "value"), show="headings", selectmode="browse")
        for column, title, width in (("name", "Name", 320), ("type", "Type", 80), ("value", "Value", 420)):
            self.tree.heading(column, text=title)
            self.tree.column(column, width=width, anchor="w", stretch=column != "type")
        scroll = ttk.Scrollbar(body, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscrollcommand=scroll.set)
        self.tree.pack(side="left", fill="both", expand=True)
        scroll.pack(side="right", fill="y")

        ttk.Label(frame, textvariable=self.detail_var, anchor="w", justify="left").pack(fill="x")
        self.status = ttk.Label(frame, anchor="w")
        self.status.pack(fill="x")

        # Widget-level bindings so Treeview class bindings never run.
        self.tree.bind("<KeyPress>", self._on_key)
        self.tree.bind("<Button-1>", self._on_click)
        self.tree.bind("<MouseWheel>", self._on_wheel)
        self.tree.bind("<Button-4>", lambda _e: self._dispatch(MouseEvent(MOUSE_SCROLL_UP)))
        self.tree.bind("<Button-5>", lambda _e: self._dispatch(MouseEvent(MOUSE_SCROLL_DOWN)))
        self.tree.focus_set()

    def set_status(self, msg):
        self.state.document.status = msg
        if self.status is not None:
            self.status.config(text=msg)

    def _update_title(self):
        title = app_constants.APP_TITLE
        if self.state.document.path:
            marker = "*" if self.engine.edited else ""
            title = f"{title} - {marker}{os.path.basename(self.state.document.path)}"
        self.root.title(f"{title} - v{app_constants.APP_VERSION}")

    # --- input -------------------------------------------------------------

    def _on_key(self, event):
        key_event = translate_key(event.keysym, event.char, event.state)
        if key_event is None:
            return "break"
        if key_event.has(MOD_CONTROL) and self.engine.mode != MODE_FILTER_EDIT:
            match key_event.code:
                case "o":
                    self.open_file()
                    return "break"
                case "s":
                    if key_event.has(MOD_SHIFT):
                        self.save_file_as()
                    else:
                        self.save_file()
                    return "break"
        self._dispatch(key_event)
        return "break"

    def _on_click(self, event):
        iid = self.tree.identify_row(event.y)
        if iid:
            self._dispatch(MouseEvent(MOUSE_CLICK, int(iid)))
        self.tree.focus_set()
        return "break"

    def _on_wheel(self, event):
        kind = MOUSE_SCROLL_UP if event.delta > 0 else MOUSE_SCROLL_DOWN
        return self._dispatch(MouseEvent(kind))

    def _dispatch(self, event):
        response = self.engine.handle_input(event)
        if response == RESPONSE_REQUEST_EXIT:
            self.request_exit()
            return "break"
        if response == RESPONSE_DOCUMENT_EDITED:
            self.set_status(app_constants.STATUS_EDITED)
            self._update_title()
        self.refresh_view()
        return "break"

    # --- rendering ---------------------------------------------------------

    def refresh_view(self):
        self.tree.delete(*self.tree.get_children())
        if not self.engine.is_loaded():
            self.breadcrumb_var.set("")
            self.filter_var.set("")
            self.detail_var.set("")
            return
        level = self.engine.active_level()
        edit = level.edit
        for position, row in enumerate(level.rows):
            value = row.display_value
            if edit is not None and edit.source_index == row.source_index:
                value = f"> {edit.buffer}"
            self.tree.insert("", "end", iid=str(position), values=(row.display_name, row.type_tag, value))
        if level.selection is not None:
            iid = str(level.selection)
            self.tree.selection_set(iid)
            self.tree.focus(iid)
            self.tree.see(iid)
        self.breadcrumb_var.set(" > ".join(["root"] + self.engine.breadcrumb()))
        self.filter_var.set(self._filter_text(level))
        self.detail_var.set(self._detail_text(level))

    def _filter_text(self, level):
        if self.engine.mode == MODE_FILTER_EDIT:
            filter_input = self.engine.filter_input
            text = f"Filter: /{filter_input.value}"
            if filter_input.error:
                text += f"  ({filter_input.error})"
            return text
        if level.filter_text:
            return f"Filter: /{level.filter_text}  ({len(level.rows)} shown)"
        return ""

    def _detail_text(self, level):
        edit = level.edit
        if edit is None:
            return ""
        lines = []
        if edit.parse_error:
            lines.append(f"Error: {edit.parse_error}")
        resolution = edit.resolution(self.corpus)
        if resolution is not None:
            status_text = RESOLUTION_TEXT.get(resolution.status, resolution.status)
            if resolution.hash is not None:
                status_text = f"{status_text}: {resolution.hash.to_hex()}"
            elif resolution.error:
                status_text = f"{status_text}: {resolution.error}"
            lines.append(status_text)
        candidates = edit.candidates
        if candidates is not None and candidates.matches:
            shown = []
            for idx, label in enumerate(candidates.matches[:8]):
                shown.append(f"[{label}]" if idx == candidates.cursor else label)
            lines.append("Matches: " + "  ".join(shown))
        return "\n".join(lines)

    def _poll_labels(self):
        if not self.corpus.is_populated():
            self.root.after(LABEL_POLL_MS, self._poll_labels)
            return
        if self.engine.is_loaded():
            self.engine.active_level().refresh_rows()
            self.refresh_view()
        if not self.engine.is_loaded():
            self.set_status(f"{app_constants.STATUS_EMPTY} ({len(self.corpus)} labels)")

    # --- files -------------------------------------------------------------

    def _confirm_discard(self, title):
        if not self.engine.edited:
            return True
        return messagebox.askyesno(title, "There are unsaved changes. Discard them?")

    def open_file(self):
        if not self._confirm_discard("Open File"):
            return
        path = filedialog.askopenfilename(
            title="Open File",
            initialdir=self.state.dialogs.open_dir or None,
            filetypes=list(app_constants.DOCUMENT_FILETYPES),
        )
        if path:
            self.load_file(path)

    def load_file(self, path):
        try:
            document = load_document(path)
        except EXPECTED_ERRORS as exc:
            _LOG.warning("load failed for %s: %s", path, exc)
            messagebox.showerror("Load failed", str(exc))
            return
        self.engine.load(document)
        self.state.remember_open(path)
        self._persist_settings()
        self._update_title()
        self.refresh_view()
        self.set_status(app_constants.STATUS_LOADED)

    def save_file(self):
        if not self.engine.is_loaded():
            return
        if not self.state.document.path:
            self.save_file_as()
            return
        self._write_document(self.state.document.path)

    def save_file_as(self):
        if not self.engine.is_loaded():
            return
        initialfile = os.path.basename(self.state.document.path) if self.state.document.path else None
        path = filedialog.asksaveasfilename(
            title="Save File",
            initialdir=self.state.dialogs.save_dir or None,
            initialfile=initialfile,
            defaultextension=".json",
            filetypes=list(app_constants.DOCUMENT_FILETYPES),
        )
        if path:
            self._write_document(path)

    def _write_document(self, path):
        try:
            save_document(path, self.engine.current_document())
        except EXPECTED_ERRORS as exc:
            _LOG.warning("save failed for %s: %s", path, exc)
            messagebox.showerror("Save failed", str(exc))
            return
        self.engine.mark_saved()
        self.state.remember_save(path)
        self._persist_settings()
        self._update_title()
        self.set_status(app_constants.STATUS_SAVED)

    def _persist_settings(self):
        save_settings(self.settings_file, self.state.apply_to(self.settings))

    def request_exit(self):
        if not self._confirm_discard("Exit"):
            return
        self._persist_settings()
        self.root.destroy()


def build_arg_parser():
    parser = argparse.ArgumentParser(prog="prickly-editor", description=app_constants.APP_TITLE)
    parser.add_argument("file", nargs="?", default=None, help="param document to open (.json or .json.gz)")
    parser.add_argument("--labels", default=None, help=f"label file to use instead of {app_constants.LABELS_FILENAME}")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="diagnostics log level",
    )
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    runtime_dir = runtime_paths_service.runtime_data_dir(create=True)
    runtime_log_service.configure_logging(
        runtime_paths_service.diag_log_path(runtime_dir),
        level=args.log_level,
    )
    settings_file = runtime_paths_service.settings_path(runtime_dir)
    settings = load_settings(settings_file)
    corpus = LabelCorpus()
    label_paths = default_label_paths(args.labels, settings.labels_path)
    loader = threading.Thread(
        target=load_label_corpus,
        args=(corpus, label_paths),
        name="prickly-labels",
        daemon=True,
    )
    loader.start()
    root = tk.Tk()
    ParamEditor(root, corpus, settings, settings_file, path=args.file)
    root.mainloop()


if __name__ == "__main__":
    main()
