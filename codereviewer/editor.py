"""Code editor model: text, caret, line gutter, highlighting and scroll sync.

The editor pairs an editable surface with a highlighted overlay and a line
number gutter. The overlay and the gutter follow the editable surface's
scroll position for as long as the editor is mounted.
"""

from typing import Callable, List, Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.lexers.special import TextLexer
from pygments.util import ClassNotFound

from codereviewer.language import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, detect_language
from codereviewer.models import EditorState

TAB_INSERT = "  "

ScrollListener = Callable[["ScrollSurface"], None]


class ScrollSurface:
    """A scrollable region that notifies listeners when it scrolls."""

    def __init__(self, name: str):
        self.name = name
        self.scroll_top = 0
        self.scroll_left = 0
        self._listeners: List[ScrollListener] = []

    def add_scroll_listener(self, listener: ScrollListener):
        self._listeners.append(listener)

    def remove_scroll_listener(self, listener: ScrollListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def scroll_to(self, top: Optional[int] = None, left: Optional[int] = None):
        """Scroll to the given offsets and fire a scroll event.

        Offsets are clamped at zero; an omitted offset keeps its current value.
        """
        if top is not None:
            self.scroll_top = max(0, int(top))
        if left is not None:
            self.scroll_left = max(0, int(left))
        for listener in list(self._listeners):
            listener(self)


class ScrollSubscription:
    """Handle for a registered scroll listener.

    Can be used as a context manager; the listener is removed on exit,
    including when the body raises.
    """

    def __init__(self, surface: ScrollSurface, listener: ScrollListener):
        self._surface = surface
        self._listener = listener
        self._active = True
        surface.add_scroll_listener(listener)

    @property
    def active(self) -> bool:
        return self._active

    def dispose(self):
        if not self._active:
            return
        self._surface.remove_scroll_listener(self._listener)
        self._active = False

    def __enter__(self) -> "ScrollSubscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()


class CodeEditor:
    """Editable code buffer with derived language and line numbers."""

    def __init__(self, text: str = "", language: str = DEFAULT_LANGUAGE):
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")
        self.language = language
        self.text = ""
        self.selection_start = 0
        self.selection_end = 0
        self.textarea = ScrollSurface("textarea")
        self.overlay = ScrollSurface("overlay")
        self.gutter = ScrollSurface("gutter")
        self._line_numbers: List[int] = [1]
        self._subscription: Optional[ScrollSubscription] = None
        self.set_text(text)

    # Text and caret

    def set_text(self, text: str):
        """Replace the buffer, re-detect the language and refresh the gutter."""
        self.text = text
        self.language = detect_language(text, self.language)
        self.selection_start = min(self.selection_start, len(text))
        self.selection_end = min(self.selection_end, len(text))
        self._refresh_line_numbers()

    def set_selection(self, start: int, end: Optional[int] = None):
        """Set the caret (``end`` omitted) or the selected range."""
        end = start if end is None else end
        start, end = sorted((start, end))
        self.selection_start = max(0, min(start, len(self.text)))
        self.selection_end = max(0, min(end, len(self.text)))

    @property
    def cursor_offset(self) -> int:
        return self.selection_end

    def set_language(self, language: str):
        """Override the detected language."""
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")
        self.language = language
        self._refresh_line_numbers()

    def handle_key_down(self, key: str, selection_start: Optional[int] = None,
                        selection_end: Optional[int] = None) -> bool:
        """Handle a key press on the editable surface.

        Tab replaces the selection with two spaces and puts the caret right
        after them.

        Returns:
            True if the key was handled and its default action must be suppressed
        """
        if key != "Tab":
            return False

        if selection_start is not None:
            self.set_selection(selection_start, selection_end)
        start, end = self.selection_start, self.selection_end

        self.set_text(self.text[:start] + TAB_INSERT + self.text[end:])
        caret = start + len(TAB_INSERT)
        self.set_selection(caret)
        return True

    # Line gutter

    def _refresh_line_numbers(self):
        self._line_numbers = list(range(1, self.text.count("\n") + 2))

    @property
    def line_numbers(self) -> List[int]:
        return list(self._line_numbers)

    # Scroll sync

    def _sync_scroll(self, source: ScrollSurface):
        for target in (self.overlay, self.gutter):
            target.scroll_top = source.scroll_top
            target.scroll_left = source.scroll_left

    def mount(self) -> ScrollSubscription:
        """Start mirroring the editable surface's scroll onto the overlay and gutter."""
        if self._subscription is not None and self._subscription.active:
            return self._subscription
        self._subscription = ScrollSubscription(self.textarea, self._sync_scroll)
        return self._subscription

    def unmount(self):
        """Stop mirroring scroll events."""
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None

    @property
    def mounted(self) -> bool:
        return self._subscription is not None and self._subscription.active

    # Rendering

    def highlighted_html(self) -> str:
        """Render the buffer as highlighted HTML for the overlay."""
        try:
            lexer = get_lexer_by_name(self.language, stripnl=False, ensurenl=False)
        except ClassNotFound:
            lexer = TextLexer(stripnl=False, ensurenl=False)
        formatter = HtmlFormatter(nowrap=True)
        return highlight(self.text, lexer, formatter)

    def state(self) -> EditorState:
        return EditorState(
            text=self.text,
            detected_language=self.language,
            cursor_offset=self.cursor_offset,
            line_numbers=self.line_numbers,
        )
