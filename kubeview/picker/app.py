"""Prompt-toolkit picker with rapidfuzz filtering and key-bound accepts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Set

from prompt_toolkit.application import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.input.defaults import create_input
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.containers import ConditionalContainer
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.layout.processors import BeforeInput
from prompt_toolkit.output.defaults import create_output
from prompt_toolkit.styles import Style
from rapidfuzz import fuzz, process, utils

from ..actions.registry import TOGGLE_ALL_TRIGGER, TOGGLE_PREVIEW_TRIGGER
from ..utils.logging import get_logger
from .items import PickerItem

LOGGER = get_logger("kubeview.picker")

DEFAULT_SCORE_CUTOFF = 60.0
DEFAULT_HEIGHT_PERCENT = 30
MIN_HEIGHT = 6

_NAMED_KEYS = {
    "": ("enter",),
    "enter": ("enter",),
    "esc": ("escape",),
    "tab": ("tab",),
    "btab": ("s-tab",),
    "up": ("up",),
    "down": ("down",),
}

PICKER_STYLE = Style.from_dict(
    {
        "prompt": "ansicyan bold",
        "header": "ansibrightblack",
        "info": "ansiyellow",
        "cursor": "reverse",
        "marked": "ansigreen",
    }
)


def to_key_sequence(trigger: str) -> tuple[str, ...]:
    """Translate a trigger such as ``ctrl-y`` into prompt_toolkit keys."""

    if trigger in _NAMED_KEYS:
        return _NAMED_KEYS[trigger]
    if trigger.startswith("ctrl-"):
        return (f"c-{trigger[5:]}",)
    if trigger.startswith("alt-"):
        return ("escape", trigger[4:])
    return (trigger,)


def filter_items(
    items: Sequence[PickerItem],
    query: str,
    *,
    score_cutoff: float = DEFAULT_SCORE_CUTOFF,
) -> List[PickerItem]:
    """Return the rows matching every query term, in listing order.

    Terms made only of punctuation have nothing to score and are ignored.
    """

    terms = [term for term in query.split() if utils.default_process(term)]
    if not terms:
        return list(items)
    texts = [item.text for item in items]
    keep: Optional[Set[int]] = None
    for term in terms:
        matches = process.extract(
            term,
            texts,
            scorer=fuzz.partial_ratio,
            processor=utils.default_process,
            limit=None,
            score_cutoff=score_cutoff,
        )
        indexes = {index for _, _, index in matches}
        keep = indexes if keep is None else keep & indexes
    return [items[index] for index in sorted(keep or ())]


@dataclass(slots=True)
class PickerOptions:
    """Presentation settings for a single picker run."""

    prompt: str = "> "
    header: Optional[str] = None
    accept_keys: Sequence[str] = ("",)
    query: str = ""
    height_percent: int = DEFAULT_HEIGHT_PERCENT
    show_preview: bool = False
    score_cutoff: float = DEFAULT_SCORE_CUTOFF


@dataclass(slots=True)
class PickerResult:
    """Rows chosen by the user and the key that accepted them."""

    selected: List[PickerItem] = field(default_factory=list)
    accept_key: Optional[str] = None

    @property
    def aborted(self) -> bool:
        return self.accept_key is None


class PickerState:
    """UI-independent cursor, filter and multi-select state."""

    def __init__(
        self,
        items: Iterable[PickerItem],
        *,
        query: str = "",
        score_cutoff: float = DEFAULT_SCORE_CUTOFF,
        show_preview: bool = False,
    ) -> None:
        self.items: List[PickerItem] = list(items)
        self.score_cutoff = score_cutoff
        self.show_preview = show_preview
        self.marked: Set[int] = set()
        self.cursor = 0
        self.offset = 0
        self.query = ""
        self.visible: List[PickerItem] = list(self.items)
        self.set_query(query)

    # ------------------------------------------------------------------
    # Filtering & navigation
    # ------------------------------------------------------------------
    def set_query(self, query: str) -> None:
        self.query = query
        self.visible = filter_items(
            self.items, query, score_cutoff=self.score_cutoff
        )
        self.cursor = 0
        self.offset = 0

    @property
    def current(self) -> Optional[PickerItem]:
        if not self.visible:
            return None
        return self.visible[self.cursor]

    def move(self, delta: int) -> None:
        if not self.visible:
            return
        self.cursor = (self.cursor + delta) % len(self.visible)

    def toggle(self, advance: int = 1) -> None:
        item = self.current
        if item is None:
            return
        if item.index in self.marked:
            self.marked.discard(item.index)
        else:
            self.marked.add(item.index)
        self.move(advance)

    def toggle_all(self) -> None:
        for item in self.visible:
            if item.index in self.marked:
                self.marked.discard(item.index)
            else:
                self.marked.add(item.index)

    def toggle_preview(self) -> None:
        self.show_preview = not self.show_preview

    def selection(self) -> List[PickerItem]:
        """Marked rows in listing order, else the row under the cursor."""

        if self.marked:
            return [item for item in self.items if item.index in self.marked]
        current = self.current
        return [current] if current is not None else []

    def viewport(self, size: int) -> List[tuple[int, PickerItem]]:
        """Return the ``size`` visible rows around the cursor."""

        size = max(1, size)
        if self.cursor < self.offset:
            self.offset = self.cursor
        elif self.cursor >= self.offset + size:
            self.offset = self.cursor - size + 1
        window = self.visible[self.offset : self.offset + size]
        return list(enumerate(window, start=self.offset))


class Picker:
    """Runs the interactive selector once and reports the outcome."""

    def __init__(
        self,
        *,
        application_factory: Callable[..., Application] = Application,
    ) -> None:
        self._application_factory = application_factory

    def run(self, items: Sequence[PickerItem], options: PickerOptions) -> PickerResult:
        state = PickerState(
            items,
            query=options.query,
            score_cutoff=options.score_cutoff,
            show_preview=options.show_preview,
        )
        output = create_output(always_prefer_tty=True)
        rows = output.get_size().rows
        height = max(MIN_HEIGHT, rows * options.height_percent // 100)
        app = self._application_factory(
            layout=self.build_layout(state, options, height),
            key_bindings=self.build_key_bindings(state, options.accept_keys),
            style=PICKER_STYLE,
            full_screen=False,
            erase_when_done=True,
            input=create_input(always_prefer_tty=True),
            output=output,
        )
        result = app.run()
        if result is None:
            return PickerResult()
        LOGGER.debug(
            "Picker accepted %d row(s) with %r",
            len(result.selected),
            result.accept_key,
        )
        return result

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    def build_key_bindings(
        self,
        state: PickerState,
        accept_keys: Iterable[str],
    ) -> KeyBindings:
        bindings = KeyBindings()

        for trigger in accept_keys:
            bindings.add(*to_key_sequence(trigger))(
                self._accept_handler(state, trigger)
            )

        @bindings.add("c-c")
        @bindings.add("escape")
        def _(event) -> None:
            event.app.exit(result=PickerResult())

        @bindings.add("up")
        def _(event) -> None:
            state.move(-1)

        @bindings.add("down")
        def _(event) -> None:
            state.move(1)

        @bindings.add("tab")
        def _(event) -> None:
            state.toggle(1)

        @bindings.add("s-tab")
        def _(event) -> None:
            state.toggle(-1)

        @bindings.add(*to_key_sequence(TOGGLE_ALL_TRIGGER))
        def _(event) -> None:
            state.toggle_all()

        @bindings.add(*to_key_sequence(TOGGLE_PREVIEW_TRIGGER))
        def _(event) -> None:
            state.toggle_preview()

        return bindings

    @staticmethod
    def _accept_handler(state: PickerState, trigger: str):
        def handler(event) -> None:
            event.app.exit(
                result=PickerResult(selected=state.selection(), accept_key=trigger)
            )

        return handler

    def build_layout(
        self,
        state: PickerState,
        options: PickerOptions,
        height: int,
    ) -> Layout:
        buffer = Buffer(
            document=Document(options.query, len(options.query)),
            multiline=False,
            on_text_changed=lambda buf: state.set_query(buf.text),
        )
        prompt_window = Window(
            BufferControl(
                buffer,
                input_processors=[BeforeInput(options.prompt, style="class:prompt")],
            ),
            height=1,
        )
        info_window = Window(
            FormattedTextControl(
                lambda: [
                    ("class:info", f"  {len(state.visible)}/{len(state.items)}"),
                    ("class:header", f"  {options.header}" if options.header else ""),
                ]
            ),
            height=1,
        )
        list_rows = max(1, height - 2)
        list_window = Window(
            FormattedTextControl(lambda: self._render_rows(state, list_rows)),
            wrap_lines=False,
        )
        preview_window = ConditionalContainer(
            Window(
                FormattedTextControl(
                    lambda: ANSI(state.current.preview() if state.current else "")
                ),
                width=Dimension(weight=1),
            ),
            filter=Condition(lambda: state.show_preview),
        )
        root = HSplit(
            [
                prompt_window,
                info_window,
                VSplit([list_window, preview_window]),
            ],
            height=Dimension.exact(height),
        )
        return Layout(root, focused_element=prompt_window)

    @staticmethod
    def _render_rows(state: PickerState, size: int):
        fragments = []
        for position, item in state.viewport(size):
            pointer = ">" if position == state.cursor else " "
            mark = "*" if item.index in state.marked else " "
            style = "class:cursor" if position == state.cursor else ""
            if item.index in state.marked:
                style = f"{style} class:marked".strip()
            fragments.append((style, f"{pointer}{mark} {item.text}\n"))
        return fragments


__all__ = [
    "Picker",
    "PickerOptions",
    "PickerResult",
    "PickerState",
    "filter_items",
    "to_key_sequence",
    "DEFAULT_SCORE_CUTOFF",
]
