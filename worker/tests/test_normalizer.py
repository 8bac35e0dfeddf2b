import json

import pytest

from broker_notes.services.normalizer import ParseError, extract_analysis, strip_code_fence


def test_plain_json_parses_directly():
    raw = '{"summary": "Call went well", "followUpItems": ["Send contract", "Book review"]}'
    result = extract_analysis(raw)
    assert result.summary == "Call went well"
    assert result.follow_up_items == ["Send contract", "Book review"]


def test_fenced_json_with_language_tag():
    raw = '```json\n{"summary":"Call went well","followUpItems":["Send contract"]}\n```'
    result = extract_analysis(raw)
    assert result.summary == "Call went well"
    assert result.follow_up_items == ["Send contract"]


@pytest.mark.parametrize("fence_open", ["```\n", "```json\n", "```JSON\n", "  ```json\n"])
def test_fenced_matches_unwrapped(fence_open):
    payload = {"summary": "Renewal discussed.", "followUpItems": ["Email quote"]}
    body = json.dumps(payload)
    assert extract_analysis(fence_open + body + "\n```\n") == extract_analysis(body)


def test_fence_without_closing_marker():
    result = extract_analysis('```json\n{"summary": "ok", "followUpItems": []}')
    assert result.summary == "ok"


def test_missing_follow_up_items_is_empty():
    result = extract_analysis('{"summary": "Short call"}')
    assert result.summary == "Short call"
    assert result.follow_up_items == []


def test_null_follow_up_items_is_empty():
    assert extract_analysis('{"summary": "x", "followUpItems": null}').follow_up_items == []


@pytest.mark.parametrize(
    "raw",
    [
        'Sure! {"summary":"ok"}',
        "{'summary': 'single quotes'}",
        '{"summary": "truncated", "followUpItems": ["a"',
        "",
        "not json at all",
        '["a", "b"]',
        '{"summary": "x", "followUpItems": "call back"}',
    ],
)
def test_unparseable_output_raises(raw):
    with pytest.raises(ParseError):
        extract_analysis(raw)


def test_strip_code_fence_leaves_plain_text_alone():
    assert strip_code_fence('  {"a": 1}  ') == '{"a": 1}'


def test_null_summary_is_empty():
    result = extract_analysis('{"summary": null, "followUpItems": ["Call back"]}')
    assert result.summary == ""
    assert result.follow_up_items == ["Call back"]
