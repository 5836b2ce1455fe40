"""Tests for the tool response envelope."""

import json

import pytest

from substrate.exceptions import EnvelopeFormatError
from substrate.schema import JsonPayload, TextPayload, ToolResponse


def envelope(text, is_error=False):
    return {"isError": is_error, "content": [{"type": "text", "text": text}]}


class TestToEnvelope:

    def test_text(self):
        assert ToolResponse.text("hi").to_envelope() == envelope("hi")

    def test_json_travels_as_text(self):
        wire = ToolResponse.structured({"a": [1, 2]}).to_envelope()

        assert wire["isError"] is False
        assert json.loads(wire["content"][0]["text"]) == {"a": [1, 2]}

    def test_error(self):
        assert ToolResponse.error("nope").to_envelope() == envelope("nope", is_error=True)


class TestFromEnvelope:

    def test_text(self):
        response = ToolResponse.from_envelope(envelope("hi"))

        assert response.is_error is False
        assert response.content == TextPayload(text="hi")

    def test_json_object_and_array(self):
        obj = ToolResponse.from_envelope(envelope('{"k": "v"}'))
        arr = ToolResponse.from_envelope(envelope("[1, 2]"))

        assert obj.content == JsonPayload(data={"k": "v"})
        assert arr.content == JsonPayload(data=[1, 2])

    @pytest.mark.parametrize("text", ["42", '"quoted"', "true", "null"])
    def test_json_scalars_stay_text(self, text):
        response = ToolResponse.from_envelope(envelope(text))

        assert response.content == TextPayload(text=text)

    def test_error_uses_first_text(self):
        response = ToolResponse.from_envelope(envelope("it broke", is_error=True))

        assert response.is_error
        assert response.message == "it broke"

    def test_error_without_text(self):
        response = ToolResponse.from_envelope({"isError": True, "content": [{"type": "text"}]})

        assert response.message == "Unknown error"

    @pytest.mark.parametrize("data", [
        {},
        [],
        "text",
        {"isError": False},
        {"content": [{"type": "text", "text": "x"}]},
        {"isError": False, "content": []},
        {"isError": False, "content": "x"},
        {"isError": False, "content": ["x"]},
        {"isError": False, "content": [{"type": "text"}]},
    ])
    def test_malformed(self, data):
        with pytest.raises(EnvelopeFormatError) as exc_info:
            ToolResponse.from_envelope(data)

        assert exc_info.value.message == "Invalid tool response format."


def test_to_text_content_pretty_prints_json():
    content = ToolResponse.structured({"a": 1}).to_text_content()

    assert len(content) == 1
    assert content[0].type == "text"
    assert content[0].text == '{\n  "a": 1\n}'
