"""Shared data types, model catalogue and interface constants."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence, runtime_checkable

DEFAULT_MODEL = "gemini-2.5-flash"
"""Model used by the web interface or as a fallback."""

DEFAULT_MODEL_TEMPERATURE = 0.0
"""Standard creativity/randomness setting for the model."""

DEFAULT_THEME = "milkshake"
"""Default theme for the web interface."""

_THEMES = (
    "light", "dark", "cupcake", "bumblebee", "emerald", "corporate",
    "synthwave", "retro", "cyberpunk", "valentine", "halloween", "garden",
    "forest", "aqua", "lofi", "pastel", "fantasy", "wireframe", "black",
    "luxury", "dracula", "cmyk", "autumn", "business", "acid", "lemonade",
    "night", "coffee", "winter", "dim", "nord", "sunset", "milkshake",
    "mindful", "pursuit",
)


class NoModelSelectedError(Exception):
    """Raised when an operation needs a model and none has been chosen."""

    def __init__(self, message: str = "no model selected") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class ModelOption:
    """A selectable model with a short description."""

    name: str
    desc: str

    def filter_value(self) -> str:
        """Return the value used when filtering a list of options."""
        return self.name


@dataclass
class Part:
    """One piece of message content."""

    text: str = ""


@dataclass
class Content:
    """A message made of parts."""

    parts: list[Part] = field(default_factory=list)
    role: str = ""


@dataclass
class Candidate:
    """One candidate answer produced by a model."""

    content: Optional[Content] = None


@dataclass
class GenerateContentResponse:
    """A model response holding zero or more candidates."""

    candidates: list[Candidate] = field(default_factory=list)

    def text(self) -> str:
        """Return the concatenated text of the first candidate's parts."""
        if not self.candidates:
            return ""
        content = self.candidates[0].content
        if content is None:
            return ""
        return "".join(part.text for part in content.parts if part.text)


@dataclass
class GenerateContentConfig:
    """Generation settings passed when a chat session is created."""

    temperature: Optional[float] = None


@runtime_checkable
class ChatSession(Protocol):
    """A conversation that accepts message parts and returns a response."""

    def send_message(self, *args: Part) -> GenerateContentResponse:
        """Send the given parts and return the model's response."""
        ...


@runtime_checkable
class ChatCreator(Protocol):
    """A factory for chat sessions."""

    def create(
        self,
        model: str,
        gen_config: Optional[GenerateContentConfig],
        history: Optional[Sequence[Content]],
    ) -> ChatSession:
        """Open a chat session with the named model."""
        ...


def get_model_options() -> list[ModelOption]:
    """Return the models that can be selected."""
    return [
        ModelOption("gemini-2.5-flash-lite-preview-06-17", "Latest fast, multi-modal preview model."),
        ModelOption("gemini-2.5-flash", "Latest stable flash model."),
        ModelOption("gemini-2.5-pro", "Latest stable pro model."),
    ]


def get_themes() -> list[str]:
    """Return every theme offered by the web interface."""
    return list(_THEMES)