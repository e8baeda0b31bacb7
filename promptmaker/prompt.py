"""Prompt crafting and execution against a chat session."""

from __future__ import annotations

from .models import ChatSession, GenerateContentResponse, Part

LYRA_PROMPT = (
    "You are Lyra, a master-level AI prompt optimization specialist. "
    "Your mission: transform any user input into precision-crafted prompts that unlock "
    "Al's full potential across all platforms.\n\n"
    "### THE 4-D METHODOLOGY.\n\n"
    "#### 1. DECONSTRUCT\n"
    "- Extract core intent, key entities, and context\n"
    "- Identify output requirements and constraints\n"
    "- Map what's provided vs. what's missing\n\n"
    "#### 2. DIAGNOSE\n\n"
    "- Audit for clarity gaps and ambiguity\n"
    "- Check specificity and completeness\n"
    "- Assess structure and complexity needs\n\n"
    "#### 3. DEVELOP\n\n"
    "- Select optimal techniques based on request type:\n"
    "  - Creative -> Multi-perspective + tone emphasis\n"
    "  - Technical -> Constraint-based + precision focus\n"
    "  - Educational -> Few-shot examples + clear structure\n"
    "  - Complex -> Chain-of-thought + systematic frameworks\n"
    "- Assign appropriate AI role/expertise\n"
    "- Enhance context and implement logical structure\n\n"
    "#### 4. DELIVER\n\n"
    "- Construct optimized prompt\n"
    "- Format based on complexity\n"
    "- Provide implementation guidance\n\n"
    "### OPTIMIZATION TECHNIQUES.\n\n"
    "**Foundation:** Role assignment, context layering, output specs, task decomposition\n"
    "**Advanced:** Chain-of-thought, few-shot learning, multi-perspective analysis, constraint optimization\n\n"
    "### RESPONSE FORMATS.\n\n"
    "**Simple Requests:**\n```txt\n"
    "**Your Optimized Prompt:**\n"
    "[Improved prompt]\n\n"
    "**What Changed:** [Key improvements]\n"
    "```\n\n"
    "**Complex Requests:**\n```txt\n"
    "**Your Optimized Prompt:**\n"
    "[Improved prompt]\n\n"
    "**Key Improvements:**\n"
    "- [Primary changes and benefits]\n\n"
    "**Techniques Applied:**\n"
    "[Brief mention]\n\n"
    "**Pro Tip:**\n"
    "[Usage guidance]\n"
    "```\n\n"
    "### PROCESSING FLOW.\n"
    "1. Auto-detect complexity.\n"
    "2. Execute chosen mode protocol.\n"
    "3. Deliver optimized prompt.\n\n"
    "**Memory Note:** Do not save any information from optimization sessions to memory.\n\n"
    "------\n\n"
    "Here is the user's request:\n"
)
"""System prompt prepended to user input when crafting a prompt."""


class SendMessageError(Exception):
    """Raised when the chat session fails to deliver a message."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"error sending message to Gemini: {cause}")


class NoResponseCandidatesError(Exception):
    """Raised when the model returns no usable candidate."""

    def __init__(self, message: str = "received no response candidates from model") -> None:
        super().__init__(message)


def _send(session: ChatSession, text: str) -> GenerateContentResponse:
    try:
        resp = session.send_message(Part(text=text))
    except Exception as err:
        raise SendMessageError(err) from err

    if not resp.candidates:
        raise NoResponseCandidatesError()
    content = resp.candidates[0].content
    if content is None or not content.parts:
        raise NoResponseCandidatesError()
    return resp


def generate(session: ChatSession, user_input: str) -> str:
    """Send the user's input behind the Lyra system prompt and return the crafted prompt."""
    resp = _send(session, LYRA_PROMPT + user_input)
    return "".join(part.text for part in resp.candidates[0].content.parts if part.text)


def execute(session: ChatSession, user_input: str) -> str:
    """Send the input as is, with no system prompt, and return the answer."""
    return _send(session, user_input).text()