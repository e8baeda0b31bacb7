import pytest

from promptmaker.models import (
    DEFAULT_MODEL,
    DEFAULT_THEME,
    Candidate,
    Content,
    GenerateContentResponse,
    ModelOption,
    NoModelSelectedError,
    Part,
    get_model_options,
    get_themes,
)


def test_model_options_names_in_order():
    names = [opt.name for opt in get_model_options()]
    assert names == [
        "gemini-2.5-flash-lite-preview-06-17",
        "gemini-2.5-flash",
        "gemini-2.5-pro",
    ]


def test_default_model_is_an_option():
    assert DEFAULT_MODEL in {opt.name for opt in get_model_options()}


def test_model_options_have_descriptions():
    assert all(opt.desc for opt in get_model_options())


def test_model_options_returns_fresh_list():
    first = get_model_options()
    first.clear()
    assert len(get_model_options()) == 3


def test_filter_value_is_name():
    opt = ModelOption("some-model", "Some description.")
    assert opt.filter_value() == "some-model"


def test_themes_contain_default_and_are_unique():
    themes = get_themes()
    assert DEFAULT_THEME in themes
    assert len(themes) == len(set(themes))
    assert themes[0] == "light"
    assert themes[-1] == "pursuit"


def test_no_model_selected_message():
    assert str(NoModelSelectedError()) == "no model selected"


def test_response_text_concatenates_first_candidate():
    resp = GenerateContentResponse(
        candidates=[
            Candidate(Content(parts=[Part("alpha "), Part(""), Part("beta")])),
            Candidate(Content(parts=[Part("ignored")])),
        ]
    )
    assert resp.text() == "alpha beta"


@pytest.mark.parametrize(
    "resp",
    [
        GenerateContentResponse(),
        GenerateContentResponse(candidates=[Candidate(None)]),
        GenerateContentResponse(candidates=[Candidate(Content())]),
    ],
)
def test_response_text_empty(resp):
    assert resp.text() == ""