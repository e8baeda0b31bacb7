import pytest

from promptmaker.generator import ChatPromptGenerator
from promptmaker.models import (
    DEFAULT_MODEL_TEMPERATURE,
    Candidate,
    Content,
    GenerateContentResponse,
    Part,
)
from promptmaker.prompt import LYRA_PROMPT, NoResponseCandidatesError


class FakeSession:
    def __init__(self, reply):
        self.reply = reply
        self.sent = []

    def send_message(self, *args):
        self.sent.append(args[0].text)
        return GenerateContentResponse(
            candidates=[Candidate(Content(parts=[Part(self.reply)]))]
        )


class FakeCreator:
    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []
        self.sessions = []

    def create(self, model, gen_config, history):
        self.calls.append((model, gen_config, history))
        if self.error is not None:
            raise self.error
        session = FakeSession(self.reply)
        self.sessions.append(session)
        return session


def test_generate_uses_named_model_and_lyra_prompt():
    creator = FakeCreator(reply="crafted")
    gen = ChatPromptGenerator(creator)

    assert gen.generate("gemini-2.5-pro", "make it better") == "crafted"
    model, config, history = creator.calls[0]
    assert model == "gemini-2.5-pro"
    assert config.temperature == DEFAULT_MODEL_TEMPERATURE
    assert history is None
    assert creator.sessions[0].sent == [LYRA_PROMPT + "make it better"]


def test_execute_sends_input_unchanged():
    creator = FakeCreator(reply="final answer")
    gen = ChatPromptGenerator(creator)

    assert gen.execute("gemini-2.5-flash", "the crafted prompt") == "final answer"
    assert creator.calls[0][0] == "gemini-2.5-flash"
    assert creator.sessions[0].sent == ["the crafted prompt"]


def test_each_request_opens_new_session():
    creator = FakeCreator(reply="r")
    gen = ChatPromptGenerator(creator)
    gen.generate("a", "x")
    gen.execute("b", "y")
    assert [call[0] for call in creator.calls] == ["a", "b"]
    assert len(creator.sessions) == 2


@pytest.mark.parametrize("method", ["generate", "execute"])
def test_creator_error_propagates(method):
    error = ConnectionError("no connection")
    gen = ChatPromptGenerator(FakeCreator(error=error))
    with pytest.raises(ConnectionError) as info:
        getattr(gen, method)("m", "input")
    assert info.value is error


def test_empty_reply_parts_raise():
    class EmptyCreator:
        def create(self, model, gen_config, history):
            class Session:
                def send_message(self, *args):
                    return GenerateContentResponse()

            return Session()

    with pytest.raises(NoResponseCandidatesError):
        ChatPromptGenerator(EmptyCreator()).generate("m", "input")