from __future__ import annotations

import base64
from dataclasses import dataclass
from types import SimpleNamespace

import pytest

from manualgen.generation.config import GenerationSettings, ManualConfig, ReplacementRule
from manualgen.generation.openrouter import GenerationRequestError, OpenRouterUnitProcessor
from manualgen.markup.blocks import KeypadTable, extract_blocks
from manualgen.segmentation.models import Unit


def _response(text: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@dataclass
class _HttpError(Exception):
    status_code: int
    detail: str

    def __str__(self) -> str:
        return self.detail


class _FakeCompletionsAPI:
    def __init__(self, responses: list[object]) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, object]] = []

    def create(self, *, model: str, messages: list[dict[str, object]]) -> object:
        self.calls.append({"model": model, "messages": messages})
        if not self._responses:
            raise RuntimeError("No fake response configured")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class _FakeClient:
    def __init__(self, responses: list[object]) -> None:
        self.chat = SimpleNamespace(completions=_FakeCompletionsAPI(responses))


def _settings() -> GenerationSettings:
    return GenerationSettings(api_key="sk-or-v1-test", model="google/gemini-2.5-flash")


def _unit() -> Unit:
    return Unit(index=0, name="manual_Part_1_Pages_1-10.pdf", page_start=0, page_end=10, payload=b"%PDF-1.7 fake")


def test_processor_sends_pdf_part_and_prompt() -> None:
    client = _FakeClient([_response("# Manual\n\nBody")])
    processor = OpenRouterUnitProcessor(_settings(), ManualConfig(), client=client)

    text = processor(_unit())

    assert text == "# Manual\n\nBody"
    call = client.chat.completions.calls[0]
    assert call["model"] == "google/gemini-2.5-flash"
    content = call["messages"][0]["content"]
    file_part, text_part = content
    assert file_part["type"] == "file"
    assert file_part["file"]["filename"] == "manual_Part_1_Pages_1-10.pdf"
    encoded = file_part["file"]["file_data"].removeprefix("data:application/pdf;base64,")
    assert base64.b64decode(encoded) == b"%PDF-1.7 fake"
    assert text_part == {"type": "text", "text": processor.prompt}


def test_processor_applies_replacement_rules_to_output() -> None:
    config = ManualConfig(replacements=(ReplacementRule("intec", "elift"),))
    client = _FakeClient([_response("The intec MLC board")])

    text = OpenRouterUnitProcessor(_settings(), config, client=client)(_unit())

    assert text == "The elift MLC board"


def test_processor_replacements_keep_keypad_block_valid() -> None:
    config = ManualConfig(replacements=(ReplacementRule("function", "Funktion"), ReplacementRule("note", "Hinweis")))
    client = _FakeClient(
        [
            _response(
                "Each function is listed below.\n\n"
                "```json:keypad\n"
                '[{"inputSequence": "F1", "function": "Reset", "note": "hold 3s"}]\n'
                "```"
            )
        ]
    )

    text = OpenRouterUnitProcessor(_settings(), config, client=client)(_unit())
    (block,) = extract_blocks(text)

    assert text.startswith("Each Funktion is listed below.")
    assert isinstance(block, KeypadTable)
    assert block.rows[0].function == "Reset"
    assert block.rows[0].note == "hold 3s"


def test_processor_retries_on_transient_error_then_succeeds() -> None:
    delays: list[float] = []
    client = _FakeClient([_HttpError(status_code=429, detail="rate limited"), _response("ok")])
    processor = OpenRouterUnitProcessor(
        _settings(),
        ManualConfig(),
        client=client,
        max_retries=2,
        retry_base_seconds=0.5,
        sleep=delays.append,
    )

    assert processor(_unit()) == "ok"
    assert delays == [0.5]
    assert len(client.chat.completions.calls) == 2


def test_processor_does_not_retry_client_errors() -> None:
    delays: list[float] = []
    client = _FakeClient([_HttpError(status_code=400, detail="bad request")])
    processor = OpenRouterUnitProcessor(_settings(), ManualConfig(), client=client, sleep=delays.append)

    with pytest.raises(GenerationRequestError, match="bad request"):
        processor(_unit())

    assert delays == []


def test_processor_raises_after_exhausting_retries() -> None:
    delays: list[float] = []
    client = _FakeClient(
        [
            _HttpError(status_code=503, detail="unavailable"),
            _HttpError(status_code=503, detail="still unavailable"),
        ]
    )
    processor = OpenRouterUnitProcessor(
        _settings(),
        ManualConfig(),
        client=client,
        max_retries=1,
        retry_base_seconds=0.1,
        sleep=delays.append,
    )

    with pytest.raises(GenerationRequestError, match="after 2 attempt"):
        processor(_unit())

    assert delays == [0.1]


def test_processor_rejects_empty_response() -> None:
    client = _FakeClient([_response("   ")])
    processor = OpenRouterUnitProcessor(_settings(), ManualConfig(), client=client)

    with pytest.raises(GenerationRequestError, match="empty text"):
        processor(_unit())


def test_processor_validates_retry_settings() -> None:
    with pytest.raises(ValueError, match="max_retries"):
        OpenRouterUnitProcessor(_settings(), ManualConfig(), client=_FakeClient([]), max_retries=-1)
