"""Event handling for one interactive session.

``DiffSession`` owns the ``AppState``, the token cache and the data source.
Each key or mouse token is applied to completion; afterwards the flattened
tree is rebuilt, the tree cursor is relocated by path and the content scroll
is clamped, so the renderer always sees consistent state.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Protocol

from ..diff_model import FileDiff, visible_files
from ..errors import LazydiffError
from ..file_tree import build_file_tree, display_names, flatten_tree, index_of_file_ref
from ..git import (
    Commit,
    Worktree,
    next_context_lines,
    set_all_selected,
    toggle_commit,
)
from ..highlight import LineHighlighter
from ..navigation import (
    clamp_content,
    cursor_path,
    ensure_cursor_visible,
    jump_to_file,
    move_cursor,
    relocate_cursor,
    scroll_content,
    scroll_tree,
    set_cursor,
    toggle_folder_state,
)
from ..virtual_lines import (
    clamp_max_scroll,
    file_at,
    file_row_count,
    next_file_offset,
    prev_file_offset,
    scroll_offset_of,
    total_rows,
)
from .config import clamp_sidebar_width
from .keys import KeyComboBinding, KeyComboRegistry
from .state import HEADER_ROWS, AppState, Focus, PopupKind, PopupState

logger = logging.getLogger(__name__)

WHEEL_STEP = 3
SIDEBAR_RESIZE_STEP = 2


class DataSource(Protocol):
    repo_root: Path
    base: str

    def branch(self) -> str | None: ...

    def commits(self) -> list[Commit]: ...

    def diffs(self, commits: list[Commit], context_lines: int) -> list[FileDiff]: ...

    def worktrees(self) -> list[Worktree]: ...

    def switch_to(self, path: Path) -> DataSource: ...


def _parse_mouse(key: str) -> tuple[str, int, int] | None:
    """Split ``NAME:col:row`` into ``(NAME, col0, row0)`` with 0-based coords."""
    name, _, rest = key.partition(":")
    col_s, _, row_s = rest.partition(":")
    try:
        return name, int(col_s) - 1, int(row_s) - 1
    except ValueError:
        return None


class DiffSession:
    def __init__(self, state: AppState, source: DataSource, highlighter: LineHighlighter) -> None:
        self.state = state
        self.source = source
        self.highlighter = highlighter
        self._normal_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("q", "CTRL_C"), lambda _count: True),
            KeyComboBinding(("ESC",), lambda _count: True),
            KeyComboBinding(("TAB",), self._toggle_focus),
            KeyComboBinding(("j", "DOWN"), lambda count: self._move(count or 1)),
            KeyComboBinding(("k", "UP"), lambda count: self._move(-(count or 1))),
            KeyComboBinding(("g", "HOME"), self._go_top),
            KeyComboBinding(("G", "END"), self._go_bottom),
            KeyComboBinding(("CTRL_D",), lambda count: self._scroll_half_page(count or 1)),
            KeyComboBinding(("CTRL_U",), lambda count: self._scroll_half_page(-(count or 1))),
            KeyComboBinding(("PAGE_DOWN", "CTRL_F"), lambda count: self._scroll_page(count or 1)),
            KeyComboBinding(("PAGE_UP", "CTRL_B"), lambda count: self._scroll_page(-(count or 1))),
            KeyComboBinding(("n",), lambda count: self.jump_files(count or 1)),
            KeyComboBinding(("N",), lambda count: self.jump_files(-(count or 1))),
            KeyComboBinding((" ",), self._toggle_at_focus),
            KeyComboBinding(("ENTER",), self._activate),
            KeyComboBinding(("z",), lambda _count: self.toggle_all_files()),
            KeyComboBinding(("h",), lambda _count: self.toggle_hidden()),
            KeyComboBinding(("x",), lambda _count: self.cycle_context_lines()),
            KeyComboBinding(("u",), lambda _count: self.cycle_mode()),
            KeyComboBinding(("c",), lambda _count: self.open_popup(PopupKind.COMMITS)),
            KeyComboBinding(("w",), lambda _count: self.open_popup(PopupKind.WORKTREE_SWITCHER)),
            KeyComboBinding(("W",), lambda _count: self.open_popup(PopupKind.WORKTREE_LIST)),
            KeyComboBinding(("?",), lambda _count: self.open_popup(PopupKind.HELP)),
            KeyComboBinding(("<",), lambda count: self.resize_sidebar(-SIDEBAR_RESIZE_STEP * (count or 1))),
            KeyComboBinding((">",), lambda count: self.resize_sidebar(SIDEBAR_RESIZE_STEP * (count or 1))),
            KeyComboBinding(("CTRL_L",), lambda _count: self._redraw()),
        )

    # Derived quantities --------------------------------------------------

    def total_rows(self) -> int:
        return total_rows(self.state.files, self.state.mode)

    def max_content_scroll(self) -> int:
        return clamp_max_scroll(self.total_rows(), self.state.body_height)

    def cursor_node_path(self) -> str | None:
        return cursor_path(self.state.nav, self.state.tree_rows)

    def current_file_index(self) -> int | None:
        """Index of the file whose rows are at the top of the content pane."""
        located = file_at(self.state.files, self.state.mode, self.state.nav.content_scroll)
        return located[0] if located is not None else None

    # Loading and rebuilding ----------------------------------------------

    def load(self) -> None:
        """Load branch, commits, worktrees and diffs from the data source."""
        state = self.state
        state.repo_root = self.source.repo_root
        state.base_branch = self.source.base
        state.branch = self.source.branch()
        try:
            state.commits = self.source.commits()
            state.worktrees = self.source.worktrees()
        except LazydiffError as exc:
            logger.warning("loading repository data failed: %s", exc)
            state.error_message = str(exc)
            return
        self.reload_diffs()

    def reload_diffs(self) -> bool:
        """Fetch diffs for the current selection; keep old data on failure."""
        state = self.state
        try:
            files = self.source.diffs(state.commits, state.context_lines)
        except LazydiffError as exc:
            logger.warning("diff reload failed: %s", exc)
            state.error_message = str(exc)
            state.dirty = True
            return False
        self.highlighter.clear()
        anchor = self._content_anchor()
        state.source_files = files
        state.error_message = ""
        self.rebuild(anchor=anchor)
        return True

    def _content_anchor(self) -> tuple[str, int] | None:
        state = self.state
        located = file_at(state.files, state.mode, state.nav.content_scroll)
        if located is None:
            return None
        index, local = located
        return state.files[index].path, local

    def _restore_anchor(self, anchor: tuple[str, int] | None) -> None:
        state = self.state
        if anchor is None:
            return
        path, local = anchor
        for index, item in enumerate(state.files):
            if item.path == path:
                offset = scroll_offset_of(state.files, state.mode, index)
                local = min(local, file_row_count(item, state.mode) - 1)
                state.nav = replace(state.nav, content_scroll=offset + max(0, local))
                return

    def rebuild(self, anchor: tuple[str, int] | None = None, cursor_to: str | None = None) -> None:
        """Rebuild visible snapshots and the tree from source data plus side tables."""
        state = self.state
        keep_path = cursor_to if cursor_to is not None else self.cursor_node_path()
        state.files = visible_files(state.source_files, state.show_hidden, state.collapsed_files)
        state.tree_nodes = build_file_tree(state.files, state.nav.expanded_folders)
        state.tree_rows = flatten_tree(state.tree_nodes)
        state.display_names = display_names(item.path for item in state.files)
        state.nav = relocate_cursor(state.nav, state.tree_rows, keep_path, state.body_height)
        self._restore_anchor(anchor)
        state.nav = clamp_content(state.nav, self.max_content_scroll())
        state.dirty = True

    def resize(self, width: int, height: int) -> None:
        state = self.state
        if (width, height) == (state.width, state.height):
            return
        state.width = max(1, width)
        state.height = max(1, height)
        state.sidebar_width = min(state.sidebar_width, max(1, state.width - 2))
        state.nav = ensure_cursor_visible(state.nav, len(state.tree_rows), state.body_height)
        state.nav = clamp_content(state.nav, self.max_content_scroll())
        state.dirty = True

    # Tree and content actions --------------------------------------------

    def select_node(self, index: int) -> None:
        """Move the cursor to ``index``; files scroll the content to their header."""
        state = self.state
        state.nav = set_cursor(state.nav, index, len(state.tree_rows), state.body_height)
        if not state.tree_rows:
            return
        node = state.tree_rows[state.nav.cursor]
        if node.file_ref is not None:
            self.scroll_to_file(node.file_ref)
        state.dirty = True

    def scroll_to_file(self, file_index: int) -> None:
        state = self.state
        offset = scroll_offset_of(state.files, state.mode, file_index)
        state.nav = jump_to_file(state.nav, offset, self.max_content_scroll())
        state.dirty = True

    def toggle_folder(self, path: str) -> None:
        self.state.nav = toggle_folder_state(self.state.nav, path)
        self.rebuild(cursor_to=path)

    def toggle_file(self, path: str) -> None:
        """Flip one file's collapse flag and keep its header at the top."""
        state = self.state
        if path in state.collapsed_files:
            state.collapsed_files.discard(path)
        else:
            state.collapsed_files.add(path)
        self.rebuild()
        for index, item in enumerate(state.files):
            if item.path == path:
                self.scroll_to_file(index)
                break

    def toggle_node(self, index: int | None = None) -> None:
        state = self.state
        index = state.nav.cursor if index is None else index
        if not 0 <= index < len(state.tree_rows):
            return
        node = state.tree_rows[index]
        if node.is_folder:
            self.toggle_folder(node.path)
        else:
            self.toggle_file(node.path)

    def toggle_current_file(self) -> None:
        index = self.current_file_index()
        if index is not None:
            self.toggle_file(self.state.files[index].path)

    def toggle_all_files(self) -> None:
        """Collapse every visible file, or expand all if they already are."""
        state = self.state
        paths = {item.path for item in state.files}
        if paths and paths <= state.collapsed_files:
            state.collapsed_files -= paths
        else:
            state.collapsed_files |= paths
        anchor = self._content_anchor()
        self.rebuild(anchor=(anchor[0], 0) if anchor is not None else None)

    def toggle_hidden(self) -> None:
        state = self.state
        anchor = self._content_anchor()
        state.show_hidden = not state.show_hidden
        self.rebuild(anchor=anchor)

    def cycle_context_lines(self) -> None:
        self.state.context_lines = next_context_lines(self.state.context_lines)
        self.reload_diffs()

    def cycle_mode(self) -> None:
        state = self.state
        anchor = self._content_anchor()
        state.mode = state.mode.next()
        self.rebuild(anchor=anchor)

    def resize_sidebar(self, delta: int) -> None:
        state = self.state
        width = clamp_sidebar_width(state.sidebar_width + delta)
        state.sidebar_width = min(width, max(1, state.width - 2))
        state.dirty = True

    def jump_files(self, step: int) -> None:
        """Move the content pane ``step`` file boundaries forward or back."""
        state = self.state
        scroll = state.nav.content_scroll
        for _ in range(abs(step)):
            if step > 0:
                target = next_file_offset(state.files, state.mode, scroll)
                if target is None:
                    break
            else:
                target = prev_file_offset(state.files, state.mode, scroll)
            scroll = target
        state.nav = jump_to_file(state.nav, scroll, self.max_content_scroll())
        located = file_at(state.files, state.mode, scroll)
        if located is not None:
            tree_index = index_of_file_ref(state.tree_rows, located[0])
            if tree_index is not None:
                state.nav = set_cursor(state.nav, tree_index, len(state.tree_rows), state.body_height)
        state.dirty = True

    # Popups ----------------------------------------------------------------

    def open_popup(self, kind: PopupKind) -> None:
        state = self.state
        selected = 0
        if kind in {PopupKind.WORKTREE_SWITCHER, PopupKind.WORKTREE_LIST}:
            selected = next((i for i, item in enumerate(state.worktrees) if item.is_current), 0)
        state.popup = PopupState(kind, selected=selected)
        state.dirty = True

    def close_popup(self) -> None:
        self.state.popup = None
        self.state.dirty = True

    def filtered_worktrees(self) -> list[Worktree]:
        state = self.state
        query = state.popup.query.lower() if state.popup is not None else ""
        if not query:
            return list(state.worktrees)
        return [
            item
            for item in state.worktrees
            if query in str(item.path).lower() or query in (item.branch or "").lower()
        ]

    def switch_worktree(self, worktree: Worktree) -> None:
        state = self.state
        try:
            source = self.source.switch_to(worktree.path)
        except LazydiffError as exc:
            logger.warning("switching to %s failed: %s", worktree.path, exc)
            state.error_message = str(exc)
            return
        self.source = source
        state.collapsed_files.clear()
        state.source_files = []
        state.files = []
        state.nav = replace(state.nav, cursor=0, scroll=0, content_scroll=0)
        self.load()
        self.rebuild()

    def _popup_move(self, delta: int, size: int) -> None:
        popup = self.state.popup
        assert popup is not None
        popup.selected = max(0, min(popup.selected + delta, size - 1)) if size else 0

    def _handle_commit_popup_key(self, key: str) -> None:
        state = self.state
        popup = state.popup
        assert popup is not None
        if key in {"j", "DOWN"}:
            self._popup_move(1, len(state.commits))
        elif key in {"k", "UP"}:
            self._popup_move(-1, len(state.commits))
        elif key == " ":
            state.commits = toggle_commit(state.commits, popup.selected)
            self.reload_diffs()
        elif key == "a":
            state.commits = set_all_selected(state.commits, True)
            self.reload_diffs()
        elif key == "n":
            state.commits = set_all_selected(state.commits, False)
            self.reload_diffs()
        elif key in {"ENTER", "ESC", "q", "c"}:
            self.close_popup()

    def _handle_worktree_switcher_key(self, key: str) -> None:
        popup = self.state.popup
        assert popup is not None
        matches = self.filtered_worktrees()
        if key == "DOWN":
            self._popup_move(1, len(matches))
        elif key == "UP":
            self._popup_move(-1, len(matches))
        elif key == "ESC":
            self.close_popup()
        elif key == "ENTER":
            self.close_popup()
            if 0 <= popup.selected < len(matches):
                self.switch_worktree(matches[popup.selected])
        elif key == "BACKSPACE":
            popup.query = popup.query[:-1]
            popup.selected = 0
        elif len(key) == 1 and key.isprintable():
            popup.query += key
            popup.selected = 0

    def _handle_worktree_list_key(self, key: str) -> None:
        state = self.state
        popup = state.popup
        assert popup is not None
        if key in {"j", "DOWN"}:
            self._popup_move(1, len(state.worktrees))
        elif key in {"k", "UP"}:
            self._popup_move(-1, len(state.worktrees))
        elif key == "ENTER":
            self.close_popup()
            if 0 <= popup.selected < len(state.worktrees):
                self.switch_worktree(state.worktrees[popup.selected])
        elif key in {"ESC", "q", "W"}:
            self.close_popup()

    def _handle_popup_key(self, key: str) -> bool:
        state = self.state
        popup = state.popup
        assert popup is not None
        if key == "CTRL_C":
            return True
        if popup.kind is PopupKind.HELP:
            self.close_popup()
        elif popup.kind is PopupKind.COMMITS:
            self._handle_commit_popup_key(key)
        elif popup.kind is PopupKind.WORKTREE_SWITCHER:
            self._handle_worktree_switcher_key(key)
        else:
            self._handle_worktree_list_key(key)
        state.dirty = True
        return False

    # Key and mouse dispatch ----------------------------------------------

    def _toggle_focus(self, _count: int | None) -> None:
        state = self.state
        state.focus = Focus.CONTENT if state.focus is Focus.SIDEBAR else Focus.SIDEBAR
        state.dirty = True

    def _move(self, delta: int) -> None:
        state = self.state
        if state.focus is Focus.SIDEBAR:
            state.nav = move_cursor(state.nav, delta, len(state.tree_rows), state.body_height)
        else:
            state.nav = scroll_content(state.nav, delta, self.max_content_scroll())
        state.dirty = True

    def _go_top(self, _count: int | None) -> None:
        state = self.state
        if state.focus is Focus.SIDEBAR:
            state.nav = set_cursor(state.nav, 0, len(state.tree_rows), state.body_height)
        else:
            state.nav = jump_to_file(state.nav, 0, self.max_content_scroll())
        state.dirty = True

    def _go_bottom(self, count: int | None) -> None:
        """``G`` goes to the end; ``NG`` goes to 1-based row N."""
        state = self.state
        if state.focus is Focus.SIDEBAR:
            target = count - 1 if count else len(state.tree_rows) - 1
            state.nav = set_cursor(state.nav, target, len(state.tree_rows), state.body_height)
        else:
            max_scroll = self.max_content_scroll()
            target = count - 1 if count else max_scroll
            state.nav = jump_to_file(state.nav, target, max_scroll)
        state.dirty = True

    def _scroll_half_page(self, pages: int) -> None:
        state = self.state
        step = max(1, state.body_height // 2)
        if state.focus is Focus.SIDEBAR:
            state.nav = scroll_tree(state.nav, step * pages, len(state.tree_rows), state.body_height)
        else:
            state.nav = scroll_content(state.nav, step * pages, self.max_content_scroll())
        state.dirty = True

    def _scroll_page(self, pages: int) -> None:
        state = self.state
        state.nav = scroll_content(state.nav, state.body_height * pages, self.max_content_scroll())
        state.dirty = True

    def _toggle_at_focus(self, _count: int | None) -> None:
        if self.state.focus is Focus.SIDEBAR:
            self.toggle_node()
        else:
            self.toggle_current_file()

    def _activate(self, _count: int | None) -> None:
        state = self.state
        if state.focus is Focus.SIDEBAR and state.tree_rows:
            node = state.tree_rows[state.nav.cursor]
            if node.is_folder:
                if not node.expanded:
                    self.toggle_folder(node.path)
            else:
                self.select_node(state.nav.cursor)
                state.focus = Focus.CONTENT
        else:
            self.toggle_current_file()

    def _redraw(self) -> None:
        self.state.dirty = True

    def handle_mouse(self, key: str) -> None:
        parsed = _parse_mouse(key)
        if parsed is None:
            return
        name, col, row = parsed
        state = self.state
        body_row = row - HEADER_ROWS
        in_sidebar = col < state.sidebar_width
        if name in {"MOUSE_WHEEL_UP", "MOUSE_WHEEL_DOWN"}:
            delta = -WHEEL_STEP if name == "MOUSE_WHEEL_UP" else WHEEL_STEP
            if in_sidebar:
                state.nav = scroll_tree(state.nav, delta, len(state.tree_rows), state.body_height)
            else:
                state.nav = scroll_content(state.nav, delta, self.max_content_scroll())
            state.dirty = True
            return
        if name != "MOUSE_LEFT_UP" or not 0 <= body_row < state.body_height:
            return
        if in_sidebar:
            state.focus = Focus.SIDEBAR
            index = state.nav.scroll + body_row
            if index < len(state.tree_rows):
                if state.tree_rows[index].is_folder:
                    state.nav = set_cursor(state.nav, index, len(state.tree_rows), state.body_height)
                    self.toggle_folder(state.tree_rows[index].path)
                else:
                    self.select_node(index)
        elif col > state.sidebar_width:
            state.focus = Focus.CONTENT
        state.dirty = True

    def handle_key(self, key: str) -> bool:
        """Apply one key token; return ``True`` when the session should end."""
        state = self.state
        if not key:
            return False
        if key.startswith("MOUSE"):
            if state.popup is None:
                self.handle_mouse(key)
            return False
        if state.popup is not None:
            return self._handle_popup_key(key)

        if key.isdigit() and len(key) == 1 and (key != "0" or state.count_buffer):
            state.count_buffer += key
            return False
        count = int(state.count_buffer) if state.count_buffer else None
        state.count_buffer = ""
        result = self._normal_keys.dispatch(key, count)
        return result is True
