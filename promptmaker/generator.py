"""Prompt generators that pick a model for every request."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from . import prompt
from .models import DEFAULT_MODEL_TEMPERATURE, ChatCreator, ChatSession, GenerateContentConfig


@runtime_checkable
class PromptGenerator(Protocol):
    """Crafts and executes prompts with a named model."""

    def generate(self, model_name: str, user_input: str) -> str:
        """Return an optimised prompt for the user's input."""
        ...

    def execute(self, model_name: str, user_input: str) -> str:
        """Return the model's answer to the input."""
        ...


class ChatPromptGenerator:
    """A prompt generator that opens a fresh chat session for each request."""

    def __init__(self, creator: ChatCreator) -> None:
        self._creator = creator

    def _session(self, model_name: str) -> ChatSession:
        config = GenerateContentConfig(temperature=DEFAULT_MODEL_TEMPERATURE)
        return self._creator.create(model_name, config, None)

    def generate(self, model_name: str, user_input: str) -> str:
        """Return an optimised prompt for the user's input."""
        return prompt.generate(self._session(model_name), user_input)

    def execute(self, model_name: str, user_input: str) -> str:
        """Return the model's answer to the input."""
        return prompt.execute(self._session(model_name), user_input)