"""Interactive terminal interface for crafting and running prompts."""

from __future__ import annotations

import base64
import io
import os
import queue
import shutil
import sys
import threading
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

from rich.color import ColorSystem
from rich.console import Console
from rich.markdown import Markdown
from rich.style import Style
from rich.text import Text

from . import prompt
from .models import (
    DEFAULT_MODEL_TEMPERATURE,
    ChatCreator,
    GenerateContentConfig,
    ModelOption,
    get_model_options,
)

try:
    import termios
    import tty
except ImportError:  # pragma: no cover - not available on Windows
    termios = None
    tty = None

try:
    import msvcrt
except ImportError:  # pragma: no cover - only available on Windows
    msvcrt = None

APP_NAME = "Prompt Maker"
TEXT_INPUT_CHAR_LIMIT = 2000
HORIZONTAL_PADDING = 2
HEADER_PADDING = 1
INITIAL_VIEWPORT_WIDTH = 130
INITIAL_VIEWPORT_HEIGHT = 36
COPY_STATUS_DURATION = 2.0
PLACEHOLDER_ROUGH_PROMPT = "Enter your rough prompt here..."
PLACEHOLDER_NEW_PROMPT = "Press Enter to start a new prompt."
PLACEHOLDER_RESUBMIT = "Press 'r' to resubmit, or type a new prompt."
THINKING_TEXT_CRAFTING = "Crafting prompt..."
THINKING_TEXT_GETTING_ANSWER = "Getting a response..."
INITIAL_INSTRUCTION_TEXT = "Enter a rough prompt for Lyra to improve."
ERROR_TEXT = "Error: "
GOODBYE_TEXT = "Goodbye!\n"
LIST_HORIZONTAL_PADDING = 2
MODEL_LIST_HEIGHT = 14
LIST_TITLE = "Select a Gemini Model"
DEFAULT_WORD_WRAP = 80


class PromptEmptyError(Exception):
    """Raised when an empty prompt is submitted."""

    def __init__(self, message: str = "prompt cannot be empty") -> None:
        super().__init__(message)


class ClipboardWriteError(Exception):
    """Raised when text cannot be copied to the clipboard."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"failed to write to clipboard: {cause}")


class ViewState(Enum):
    """The screen the interface is currently showing."""

    SELECTING_MODEL = auto()
    READY = auto()
    BUSY = auto()
    RESULT = auto()
    ERROR = auto()


@dataclass(frozen=True)
class KeyMsg:
    """A key press. Typed characters use the key name "runes"."""

    key: str
    runes: str = ""

    def __str__(self) -> str:
        return self.runes if self.key == "runes" else self.key


@dataclass(frozen=True)
class WindowSizeMsg:
    """The terminal was resized."""

    width: int
    height: int


@dataclass(frozen=True)
class AIResponseMsg:
    """The model answered."""

    response: str


@dataclass(frozen=True)
class ErrMsg:
    """An operation failed."""

    err: BaseException

    def __str__(self) -> str:
        return str(self.err)


class StatusMessage(str):
    """A short-lived message for the status bar."""


@dataclass(frozen=True)
class ClearStatusMsg:
    """Clears the status bar message."""


@dataclass(frozen=True)
class _Quit:
    pass


@dataclass(frozen=True)
class _SpinnerTick:
    pass


Cmd = Callable[[], Optional[object]]


def _quit() -> _Quit:
    return _Quit()


def _clear_status_later() -> ClearStatusMsg:
    time.sleep(COPY_STATUS_DURATION)
    return ClearStatusMsg()


def _pad(text: str, vertical: int = 0, horizontal: int = 0) -> str:
    side = " " * horizontal
    lines = [side + line + side for line in text.split("\n")]
    blank = [""] * vertical
    return "\n".join(blank + lines + blank)


def _width(text: str) -> int:
    return max((Text.from_ansi(line).cell_len for line in text.split("\n")), default=0)


def _height(text: str) -> int:
    return text.count("\n") + 1


class _TextInput:
    """A single-line editable field."""

    prompt = "> "

    def __init__(self, placeholder: str, char_limit: int) -> None:
        self.placeholder = placeholder
        self.char_limit = char_limit
        self.width = 0
        self._value = ""
        self.cursor = 0

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, text: str) -> None:
        self._value = text[: self.char_limit] if self.char_limit > 0 else text
        self.cursor = len(self._value)

    def reset(self) -> None:
        self.value = ""

    def update(self, msg: object) -> Optional[Cmd]:
        if not isinstance(msg, KeyMsg):
            return None
        key, text, pos = msg.key, self._value, self.cursor
        if key == "runes":
            room = self.char_limit - len(text) if self.char_limit > 0 else len(msg.runes)
            inserted = msg.runes[: max(room, 0)]
            self._value = text[:pos] + inserted + text[pos:]
            self.cursor = pos + len(inserted)
        elif key == "backspace" and pos > 0:
            self._value = text[: pos - 1] + text[pos:]
            self.cursor = pos - 1
        elif key == "delete" and pos < len(text):
            self._value = text[:pos] + text[pos + 1 :]
        elif key == "left":
            self.cursor = max(0, pos - 1)
        elif key == "right":
            self.cursor = min(len(text), pos + 1)
        elif key in ("home", "ctrl+a"):
            self.cursor = 0
        elif key in ("end", "ctrl+e"):
            self.cursor = len(text)
        return None

    def view(self, paint: Callable[[str, str], str]) -> str:
        if not self._value:
            return self.prompt + paint(self.placeholder, "color(240)")
        text, cursor = self._value, self.cursor
        available = self.width - len(self.prompt)
        if available > 0 and len(text) >= available:
            start = max(0, cursor - available + 1)
            text = text[start : start + available]
            cursor -= start
        under = text[cursor] if cursor < len(text) else " "
        return self.prompt + text[:cursor] + paint(under, "reverse") + text[cursor + 1 :]


class _Viewport:
    """A scrollable window over multi-line content."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.y_offset = 0
        self._lines: list[str] = []

    def set_content(self, content: str) -> None:
        self._lines = content.split("\n") if content else []
        self.y_offset = min(self.y_offset, self._max_offset())

    def goto_top(self) -> None:
        self.y_offset = 0

    def _max_offset(self) -> int:
        return max(0, len(self._lines) - max(self.height, 1))

    def update(self, msg: object) -> Optional[Cmd]:
        if not isinstance(msg, KeyMsg):
            return None
        page = max(self.height, 1)
        steps = {"up": -1, "down": 1, "pgup": -page, "pgdown": page}
        if msg.key in steps:
            self.y_offset = min(max(0, self.y_offset + steps[msg.key]), self._max_offset())
        return None

    def view(self) -> str:
        if not self._lines or self.height <= 0:
            return ""
        return "\n".join(self._lines[self.y_offset : self.y_offset + self.height])


class _Spinner:
    """An animated busy indicator."""

    frames = ("⣾ ", "⣽ ", "⣻ ", "⢿ ", "⡿ ", "⣟ ", "⣯ ", "⣷ ")
    interval = 0.1

    def __init__(self) -> None:
        self.frame = 0

    def tick(self) -> _SpinnerTick:
        return _SpinnerTick()

    def _tick_later(self) -> _SpinnerTick:
        time.sleep(self.interval)
        return _SpinnerTick()

    def update(self, msg: object) -> Optional[Cmd]:
        if not isinstance(msg, _SpinnerTick):
            return None
        self.frame = (self.frame + 1) % len(self.frames)
        return self._tick_later

    def view(self) -> str:
        return self.frames[self.frame]


class _ModelList:
    """The model chooser shown at start-up."""

    def __init__(self, items: list[ModelOption], width: int, height: int) -> None:
        self.items = items
        self.width = width
        self.height = height
        self.index = 0

    def selected_item(self) -> Optional[ModelOption]:
        return self.items[self.index] if self.items else None

    def update(self, msg: object) -> list[Cmd]:
        if not isinstance(msg, KeyMsg) or not self.items:
            return []
        key = str(msg)
        last = len(self.items) - 1
        if key in ("up", "k"):
            self.index = max(0, self.index - 1)
        elif key in ("down", "j"):
            self.index = min(last, self.index + 1)
        elif key in ("home", "g"):
            self.index = 0
        elif key in ("end", "G"):
            self.index = last
        elif key == "q":
            return [_quit]
        return []

    def view(self, paint: Callable[[str, str], str]) -> str:
        pad = " " * LIST_HORIZONTAL_PADDING
        lines = [paint(f" {LIST_TITLE} ", "color(230) on color(62)"), ""]
        for number, option in enumerate(self.items, start=1):
            entry = f"{number}. {option.name} ({option.desc})"
            if number - 1 == self.index:
                lines.append(pad + paint("> " + entry, "color(208)"))
            else:
                lines.append(pad + entry)
        lines.extend(["", paint("↑/k up • ↓/j down • enter select • q quit", "color(241)")])
        return "\n".join(lines)


class TUIModel:
    """State and behaviour of the interactive interface."""

    def __init__(self, chat_creator: ChatCreator, version: str, *, color: bool = False) -> None:
        self.chat_creator = chat_creator
        self.app_version = version
        self.color = color
        self.state = ViewState.SELECTING_MODEL
        self.model_list = _ModelList(get_model_options(), INITIAL_VIEWPORT_WIDTH, MODEL_LIST_HEIGHT)
        self.text_input = _TextInput(PLACEHOLDER_ROUGH_PROMPT, TEXT_INPUT_CHAR_LIMIT)
        self.spinner = _Spinner()
        self.viewport = _Viewport(INITIAL_VIEWPORT_WIDTH, INITIAL_VIEWPORT_HEIGHT)
        self.selected_model = ""
        self.quitting = False
        self.is_prompt_crafted = False
        self.crafted_prompt = ""
        self.busy_text = ""
        self.error_message = ""
        self.status_message = ""
        self.raw_viewport_content = ""
        self.width = 0
        self.height = 0
        self._wrap_width = DEFAULT_WORD_WRAP

    # --- rendering helpers ---

    def _paint(self, text: str, style: str) -> str:
        if not self.color or not style:
            return text
        return Style.parse(style).render(text, color_system=ColorSystem.EIGHT_BIT)

    def _render_markdown(self, text: str) -> str:
        try:
            buffer = io.StringIO()
            console = Console(
                file=buffer,
                width=max(self._wrap_width, 10),
                force_terminal=self.color,
                color_system="256" if self.color else None,
                highlight=False,
            )
            console.print(Markdown(text))
        except Exception:
            return text
        return "\n".join(line.rstrip() for line in buffer.getvalue().splitlines())

    # --- update ---

    def init(self) -> list[Cmd]:
        """Return the commands to run when the interface starts."""
        return []

    def update(self, msg: object) -> list[Cmd]:
        """Apply a message and return the commands it triggers."""
        if isinstance(msg, WindowSizeMsg):
            return self._handle_window_size(msg)
        if isinstance(msg, KeyMsg) and msg.key in ("ctrl+c", "esc"):
            self.quitting = True
            return [_quit]
        if self.state is ViewState.SELECTING_MODEL:
            return self._update_model_selection(msg)
        return self._update_main(msg)

    def _update_model_selection(self, msg: object) -> list[Cmd]:
        if isinstance(msg, KeyMsg) and msg.key == "enter":
            option = self.model_list.selected_item()
            if option is not None:
                self.selected_model = option.name
                self.state = ViewState.READY
            return []
        return self.model_list.update(msg)

    def _update_main(self, msg: object) -> list[Cmd]:
        if isinstance(msg, AIResponseMsg):
            return self._handle_ai_response(msg)
        if isinstance(msg, ErrMsg):
            return self._handle_error(msg)
        if isinstance(msg, StatusMessage):
            self.status_message = str(msg)
            return [_clear_status_later]
        if isinstance(msg, ClearStatusMsg):
            self.status_message = ""
            return []
        if isinstance(msg, KeyMsg):
            return self._handle_key(msg)
        return self._update_components(msg)

    def _handle_window_size(self, msg: WindowSizeMsg) -> list[Cmd]:
        self.width = msg.width
        self.height = msg.height
        self.model_list.width = msg.width
        self._wrap_width = self.width - HORIZONTAL_PADDING * 2
        if self.raw_viewport_content:
            self.viewport.set_content(self._render_markdown(self.raw_viewport_content))
        return []

    def _handle_ai_response(self, msg: AIResponseMsg) -> list[Cmd]:
        rendered = self._render_markdown(msg.response)
        self.raw_viewport_content = msg.response
        self.viewport.set_content(rendered)
        self.text_input.reset()
        if not self.is_prompt_crafted:
            self.is_prompt_crafted = True
            self.crafted_prompt = msg.response
            self.text_input.placeholder = PLACEHOLDER_RESUBMIT
            self.state = ViewState.READY
        else:
            self.is_prompt_crafted = False
            self.crafted_prompt = ""
            self.text_input.placeholder = PLACEHOLDER_NEW_PROMPT
            self.state = ViewState.RESULT
        self.viewport.goto_top()
        return []

    def _handle_error(self, msg: ErrMsg) -> list[Cmd]:
        self.state = ViewState.ERROR
        self.error_message = str(msg.err)
        self.raw_viewport_content = ERROR_TEXT + self.error_message
        self.viewport.set_content(self.raw_viewport_content)
        return []

    def _handle_key(self, msg: KeyMsg) -> list[Cmd]:
        crafted_ready = self.is_prompt_crafted and self.state is ViewState.READY
        key = str(msg)
        if (self.state is ViewState.RESULT or crafted_ready) and key == "c":
            return [copy_to_clipboard_cmd(self.raw_viewport_content)]
        if crafted_ready and key == "r":
            self.state = ViewState.BUSY
            self.busy_text = THINKING_TEXT_GETTING_ANSWER
            return [self.spinner.tick, send_prompt_cmd(self, self.crafted_prompt, False)]
        if msg.key == "enter":
            if self.state is ViewState.READY:
                self.state = ViewState.BUSY
                self.busy_text = THINKING_TEXT_CRAFTING
                user_input = self.text_input.value
                return [self.spinner.tick, send_prompt_cmd(self, user_input, not self.is_prompt_crafted)]
            if self.state in (ViewState.RESULT, ViewState.ERROR):
                self.state = ViewState.READY
                self.is_prompt_crafted = False
                self.crafted_prompt = ""
                self.text_input.reset()
                self.text_input.placeholder = PLACEHOLDER_ROUGH_PROMPT
                self.raw_viewport_content = ""
                self.viewport.set_content("")
                return []
        return self._update_components(msg)

    def _update_components(self, msg: object) -> list[Cmd]:
        cmds = [self.text_input.update(msg), self.viewport.update(msg)]
        if self.state is ViewState.BUSY:
            cmds.append(self.spinner.update(msg))
        return [cmd for cmd in cmds if cmd is not None]

    # --- view ---

    def view(self) -> str:
        """Render the current screen as text."""
        if self.quitting:
            return GOODBYE_TEXT
        if self.width == 0:
            return "Initializing..."
        if self.state is ViewState.SELECTING_MODEL:
            return _pad(self.model_list.view(self._paint), horizontal=HORIZONTAL_PADDING)

        header = self._header_view()
        footer = self._footer_view()
        self.viewport.height = max(0, self.height - _height(header) - _height(footer))
        self.viewport.width = self.width
        self.text_input.width = self.width - HORIZONTAL_PADDING * 2

        main = _pad(self._main_content_view(), horizontal=HORIZONTAL_PADDING)
        return "\n".join((header, main, footer))

    def _header_view(self) -> str:
        left = (
            self._paint(APP_NAME, "bold color(35)")
            + " "
            + self._paint(f"({self.app_version})", "color(39)")
        )
        right = self._paint("Model: " + self.selected_model, "color(208)")
        space = max(0, self.width - _width(left) - _width(right) - HEADER_PADDING * 2)
        return _pad(left + " " * space + right, horizontal=HEADER_PADDING)

    def _main_content_view(self) -> str:
        if self.state is ViewState.BUSY:
            return self._paint(self.spinner.view(), "color(205)") + self.busy_text
        if self.state is ViewState.READY:
            return self.viewport.view() or INITIAL_INSTRUCTION_TEXT
        if self.state in (ViewState.RESULT, ViewState.ERROR):
            return self.viewport.view()
        return ""

    def _footer_view(self) -> str:
        parts = ["\n"]
        if self.state is not ViewState.RESULT:
            parts.append(_pad(self.text_input.view(self._paint), 1, HORIZONTAL_PADDING))
            parts.append("\n")
        parts.append(self._status_bar_view())
        return "".join(parts)

    def _status_bar_view(self) -> str:
        if self.status_message:
            return _pad(self.status_message, horizontal=HORIZONTAL_PADDING)
        help_text = "esc: quit"
        if self.is_prompt_crafted and self.state is ViewState.READY:
            resubmit = self._paint("r: resubmit", "bold color(35)")
            help_text = f"{resubmit} | c: copy | {help_text}"
        elif self.state is ViewState.RESULT:
            help_text = "c: copy | " + help_text
        return _pad(self._paint(help_text, "color(241)"), horizontal=HORIZONTAL_PADDING)


def _write_clipboard(content: str) -> None:
    out = sys.stdout
    if not out.isatty():
        raise OSError("no terminal available for clipboard access")
    encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")
    out.write(f"\x1b]52;c;{encoded}\x07")
    out.flush()


def copy_to_clipboard_cmd(content: str) -> Cmd:
    """Return a command that copies the content to the terminal clipboard."""

    def cmd() -> object:
        try:
            _write_clipboard(content)
        except OSError as err:
            return ErrMsg(ClipboardWriteError(err))
        return StatusMessage("Copied!")

    return cmd


def send_prompt_cmd(model: TUIModel, user_prompt: str, use_lyra: bool) -> Cmd:
    """Return a command that sends the prompt to the selected model."""

    def cmd() -> object:
        if not user_prompt:
            return ErrMsg(PromptEmptyError())
        config = GenerateContentConfig(temperature=DEFAULT_MODEL_TEMPERATURE)
        try:
            session = model.chat_creator.create(model.selected_model, config, None)
            action = prompt.generate if use_lyra else prompt.execute
            return AIResponseMsg(action(session, user_prompt))
        except Exception as err:
            return ErrMsg(err)

    return cmd


# --- terminal driver ---

_SEQUENCES = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1b[5~": "pgup",
    "\x1b[6~": "pgdown",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[3~": "delete",
}

_CONTROLS = {
    "\x03": "ctrl+c",
    "\r": "enter",
    "\n": "enter",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x01": "ctrl+a",
    "\x05": "ctrl+e",
    "\t": "tab",
    "\x1b": "esc",
}

_WINDOWS_KEYS = {
    "H": "up",
    "P": "down",
    "K": "left",
    "M": "right",
    "I": "pgup",
    "Q": "pgdown",
    "G": "home",
    "O": "end",
    "S": "delete",
}


def _decode_keys(data: str) -> list[KeyMsg]:
    keys: list[KeyMsg] = []
    runes: list[str] = []

    def flush() -> None:
        if runes:
            keys.append(KeyMsg("runes", "".join(runes)))
            runes.clear()

    pos = 0
    while pos < len(data):
        seq = next((s for s in _SEQUENCES if data.startswith(s, pos)), None)
        if seq is not None:
            flush()
            keys.append(KeyMsg(_SEQUENCES[seq]))
            pos += len(seq)
            continue
        ch = data[pos]
        if data.startswith("\x1b[", pos):
            end = pos + 2
            while end < len(data) and not "@" <= data[end] <= "~":
                end += 1
            pos = end + 1
            continue
        if ch in _CONTROLS:
            flush()
            keys.append(KeyMsg(_CONTROLS[ch]))
        elif ch.isprintable():
            runes.append(ch)
        pos += 1
    flush()
    return keys


class _Terminal:
    """Raw-mode, alternate-screen access to the controlling terminal."""

    def __init__(self) -> None:
        self._fd = -1
        self._saved = None

    def __enter__(self) -> "_Terminal":
        if not sys.stdin.isatty() or not sys.stdout.isatty():
            raise OSError("a terminal is required to run the interactive interface")
        if termios is not None:
            self._fd = sys.stdin.fileno()
            self._saved = termios.tcgetattr(self._fd)
            tty.setraw(self._fd)
        self._write("\x1b[?1049h\x1b[?25l")
        return self

    def __exit__(self, *exc: object) -> None:
        self._write("\x1b[?25h\x1b[?1049l")
        if self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)

    @staticmethod
    def _write(text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    def draw(self, view: str) -> None:
        self._write("\x1b[H\x1b[2J" + view.replace("\n", "\r\n"))

    def read_keys(self) -> list[KeyMsg]:
        if termios is not None:
            data = os.read(self._fd, 1024)
            if not data:
                raise EOFError
            return _decode_keys(data.decode("utf-8", "replace"))
        ch = msvcrt.getwch()
        if ch in ("\x00", "\xe0"):
            name = _WINDOWS_KEYS.get(msvcrt.getwch())
            return [KeyMsg(name)] if name else []
        return _decode_keys(ch)


def _pump_keys(term: _Terminal, events: "queue.Queue[object]") -> None:
    try:
        while True:
            for key in term.read_keys():
                events.put(key)
    except (OSError, EOFError):
        events.put(_Quit())


def _deliver(cmd: Cmd, events: "queue.Queue[object]") -> None:
    msg = cmd()
    if msg is not None:
        events.put(msg)


def run(chat_creator: ChatCreator, version: str) -> None:
    """Run the interactive interface until the user quits."""
    model = TUIModel(chat_creator, version, color=True)
    events: "queue.Queue[object]" = queue.Queue()

    def dispatch(cmds: list[Cmd]) -> None:
        for cmd in cmds:
            threading.Thread(target=_deliver, args=(cmd, events), daemon=True).start()

    with _Terminal() as term:
        threading.Thread(target=_pump_keys, args=(term, events), daemon=True).start()
        dispatch(model.init())
        term.draw(model.view())
        size = None
        while True:
            current = shutil.get_terminal_size()
            if current != size:
                size = current
                events.put(WindowSizeMsg(current.columns, current.lines))
            try:
                msg = events.get(timeout=0.25)
            except queue.Empty:
                continue
            if isinstance(msg, _Quit):
                break
            dispatch(model.update(msg))
            term.draw(model.view())

    if model.quitting:
        sys.stdout.write(model.view())
        sys.stdout.flush()