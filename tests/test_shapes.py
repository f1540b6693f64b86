from __future__ import annotations

import json

import pytest

from cfchat.llm.shapes import ResponsesShape, RunShape, build_messages_json, get_shape

HISTORY = [
    '{"role":"user","content":"first"}',
    '{"role":"assistant","content":"reply"}',
]


@pytest.mark.parametrize("shape", [ResponsesShape(), RunShape()], ids=["responses", "run"])
def test_messages_array_is_history_plus_new_message(shape) -> None:
    request = shape.build_request(
        history=HISTORY, message='say "hi"\n', model="@cf/x/y", account_id="acct"
    )
    body = json.loads(request.body)
    messages = body["input"] if shape.name == "responses" else body["messages"]
    assert len(messages) == len(HISTORY) + 1
    assert messages[-1] == {"role": "user", "content": 'say "hi"\n'}
    assert request.user_line == '{"role":"user","content":"say \\"hi\\"\\n"}'


def test_empty_history_gives_single_element_array() -> None:
    request = RunShape().build_request(history=[], message="hi", model="m", account_id="a")
    assert json.loads(request.body)["messages"] == [{"role": "user", "content": "hi"}]


def test_history_lines_are_embedded_verbatim() -> None:
    odd = '{"content":"spaced" ,  "role":"user"}'
    request = ResponsesShape().build_request(history=[odd], message="x", model="m", account_id="a")
    assert odd in request.body


def test_responses_request_layout() -> None:
    request = ResponsesShape().build_request(
        history=[], message="hi", model="@cf/openai/gpt-oss-120b", account_id="acct"
    )
    assert request.url == "https://api.cloudflare.com/client/v4/accounts/acct/ai/v1/responses"
    assert request.body == (
        '{"model":"@cf/openai/gpt-oss-120b",'
        '"input":[{"role":"user","content":"hi"}],'
        '"temperature":0.7}'
    )


def test_run_request_layout() -> None:
    request = RunShape().build_request(
        history=[],
        message="hi",
        model="@cf/meta/llama-4-scout-17b-16e-instruct",
        account_id="acct",
        base_url="http://localhost:8787/",
    )
    assert request.url == (
        "http://localhost:8787/accounts/acct/ai/run/@cf/meta/llama-4-scout-17b-16e-instruct"
    )
    assert request.body == (
        '{"messages":[{"role":"user","content":"hi"}],"temperature":0.7,"stream":true}'
    )


def test_build_messages_json_joins_without_reencoding() -> None:
    assert build_messages_json([]) == "[]"
    assert build_messages_json(["{}", '{"a":1}']) == '[{},{"a":1}]'


def test_responses_extraction_only_uses_message_items() -> None:
    payload = {"output": [{"type": "message", "content": [{"text": "Hi"}]}, {"type": "other"}]}
    assert ResponsesShape().extract_stream_text(payload) == "Hi"


def test_responses_extraction_concatenates_in_order() -> None:
    payload = {
        "output": [
            {"type": "reasoning", "content": [{"text": "hidden"}]},
            {"type": "message", "content": [{"text": "a"}, {"annotations": []}, {"text": "b"}]},
            {"type": "message", "content": [{"text": "c"}]},
        ]
    }
    assert ResponsesShape().extract_final_text(payload) == "abc"


@pytest.mark.parametrize(
    "payload",
    [{}, {"output": None}, {"output": "x"}, {"output": [{"type": "message"}]}, {"output": [1, None]}],
)
def test_responses_extraction_tolerates_odd_shapes(payload) -> None:
    assert ResponsesShape().extract_stream_text(payload) == ""


def test_run_stream_extraction() -> None:
    shape = RunShape()
    assert shape.extract_stream_text({"response": "Hello"}) == "Hello"
    assert shape.extract_stream_text({"response": 42}) == ""
    assert shape.extract_stream_text({"p": "abc"}) == ""


def test_run_final_extraction_prefers_result_wrapper() -> None:
    shape = RunShape()
    assert shape.extract_final_text({"result": {"response": "wrapped"}, "response": "flat"}) == "wrapped"
    assert shape.extract_final_text({"result": {}, "response": "flat"}) == "flat"
    assert shape.extract_final_text({"response": "flat"}) == "flat"
    assert shape.extract_final_text({"result": {"response": ""}, "response": "flat"}) == ""
    assert shape.extract_final_text({"response": 7}) == ""
    assert shape.extract_final_text(["not", "an", "object"]) == ""


def test_get_shape() -> None:
    assert get_shape("run").name == "run"
    assert get_shape("responses").command == "osschat"
    with pytest.raises(ValueError):
        get_shape("chat")
