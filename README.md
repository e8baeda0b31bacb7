# promptmaker

Turn a rough idea into a well-structured prompt. Then send that prompt to a
model to get the final answer.

The first step is *crafting*. It wraps your input in the "Lyra" optimisation
instructions and asks the model to rewrite it. The second step is *executing*.
It sends a prompt to the model unchanged. A terminal interface ties the two
steps together: you pick a model, type a rough prompt and read the crafted
version. Then press `r` to resubmit it or `c` to copy it.

## Installation

Install the package with its single dependency, `rich`. Add the `test` extra
if you want to run the test suite with pytest.

## Models and themes

```python
from promptmaker.models import DEFAULT_MODEL, get_model_options, get_themes

for option in get_model_options():
    print(option.filter_value(), "-", option.desc)

print(DEFAULT_MODEL)   # "gemini-2.5-flash"
print(get_themes())    # theme names, DEFAULT_THEME is "milkshake"
```

## Crafting and executing prompts

Model access goes through two protocols in `promptmaker.models`:

- `ChatSession.send_message(*parts)` takes `Part` objects and returns a
  `GenerateContentResponse`. That response holds `Candidate`s, and each
  `Candidate` holds a `Content` of `Part`s.
- `ChatCreator.create(model, gen_config, history)` returns a `ChatSession`.

Implement these for your model client. Then use `promptmaker.prompt`:

```python
from promptmaker.prompt import LYRA_PROMPT, generate, execute

crafted = generate(session, "convert a function to a class")
answer = execute(session, crafted)
```

`generate` sends `LYRA_PROMPT` followed by your input. It returns the joined
text of the first candidate's parts. `execute` sends the input as it is.

Both functions raise the same errors:

- `SendMessageError` if the session raises an exception.
- `NoResponseCandidatesError` if the response has no candidate, or if the
  first candidate has no content or no parts.

`promptmaker.generator.ChatPromptGenerator` wraps a `ChatCreator`. For each
request it opens a new session with the model you name, using
`GenerateContentConfig(temperature=0.0)`:

```python
from promptmaker.generator import ChatPromptGenerator

generator = ChatPromptGenerator(creator)
crafted = generator.generate("gemini-2.5-flash", "make it a poem")
answer = generator.execute("gemini-2.5-flash", crafted)
```

## Terminal interface

`promptmaker.tui.run(chat_creator, version)` starts the interactive interface
in the current terminal. It uses the alternate screen and runs until you quit.
If standard input or output is not a terminal, it raises `OSError`.

When the interface starts, you choose a model. Move with `up`/`k` and
`down`/`j`, or jump with `home`/`g` and `end`/`G`. Press `enter` to select a
model, or `q` to quit.

After that, these keys apply:

| Key               | Effect                                                         |
|-------------------|----------------------------------------------------------------|
| `enter`           | submit the prompt, or start again after an answer or error     |
| `r`               | send the crafted prompt to the model for a final answer        |
| `c`               | copy the crafted prompt or the answer                          |
| `up` / `down`     | scroll the output                                              |
| `pgup` / `pgdown` | scroll the output by a page                                    |
| `esc` / `ctrl+c`  | quit                                                           |

Copying works through the terminal's OSC 52 clipboard sequence. If no terminal
is available, the error is shown on screen as a `ClipboardWriteError`.
Submitting an empty prompt shows a `PromptEmptyError`.

All interface logic is in `TUIModel(chat_creator, version, color=False)`. You
drive it with messages such as `KeyMsg`, `WindowSizeMsg`, `AIResponseMsg`,
`ErrMsg` and `StatusMessage`. `update(msg)` returns a list of commands. Each
command is a callable that returns the next message. `view()` returns the
screen as text. Because of this, you can test the interface without a
terminal:

```python
from promptmaker.tui import KeyMsg, TUIModel, ViewState, WindowSizeMsg

ui = TUIModel(creator, "1.0")
ui.update(WindowSizeMsg(100, 30))
ui.update(KeyMsg("enter"))              # picks the highlighted model
assert ui.state is ViewState.READY
ui.update(KeyMsg("runes", "make it a poem"))
for cmd in ui.update(KeyMsg("enter")):
    msg = cmd()
    if msg is not None:
        ui.update(msg)
```

## What the package does not do

- It has no client for any model provider. You supply the `ChatCreator` and
  `ChatSession`.
- It does not read API keys or any other configuration.
- It installs no command-line program. To start the interface, call
  `promptmaker.tui.run` from your own code.
- It includes no web server. `get_themes` and `DEFAULT_THEME` are plain data.