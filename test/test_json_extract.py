import pytest

from llm.json_extract import extract_json_object, find_first_object_span
from task_synthesis.errors import MalformedResponse


def test_extra_text_around_json():
    out = extract_json_object(
        'Sure! Here is the result: {"intent":"create_task","confidence":0.9} Thanks.'
    )
    assert out == {"intent": "create_task", "confidence": 0.9}


def test_markdown_fence():
    out = extract_json_object('```json\n{"a": {"b": 1}}\n```')
    assert out == {"a": {"b": 1}}


def test_braces_inside_strings_do_not_end_the_span():
    text = '{"title": "fix } and { in parser", "tags": ["a}"]} trailing }'
    out = extract_json_object(text)
    assert out["title"] == "fix } and { in parser"
    assert out["tags"] == ["a}"]


def test_escaped_quote_inside_string():
    out = extract_json_object(r'{"title": "say \"hi\" }", "n": 1}')
    assert out == {"title": 'say "hi" }', "n": 1}


def test_only_first_object_is_used():
    out = extract_json_object('{"first": 1} and then {"second": 2}')
    assert out == {"first": 1}


def test_first_object_invalid_is_malformed_even_if_second_is_valid():
    with pytest.raises(MalformedResponse):
        extract_json_object("{not json} {\"ok\": true}")


def test_invalid_output():
    with pytest.raises(MalformedResponse):
        extract_json_object("INVALID OUTPUT")


def test_unclosed_object():
    assert find_first_object_span('{"a": 1') is None
    with pytest.raises(MalformedResponse):
        extract_json_object('{"a": 1')


def test_hebrew_content():
    out = extract_json_object('תשובה: {"title": "קנה חלב"}')
    assert out["title"] == "קנה חלב"


def test_nesting_too_deep_is_malformed():
    depth = 100_000
    with pytest.raises(MalformedResponse):
        extract_json_object('{"a":' * depth + "1" + "}" * depth)
