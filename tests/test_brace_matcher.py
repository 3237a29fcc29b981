import pytest

from trailerflow.utils.brace_matcher import find_object_around, match_braces


@pytest.mark.parametrize(
    "obj",
    [
        "{}",
        '{"a": 1}',
        '{"a": {"b": {"c": [1, 2, {"d": null}]}}}',
        "{{}{{}}}",
    ],
)
def test_match_braces_returns_embedded_span(obj):
    prefix = "<script>var x = 1; foo("
    text = f"{prefix}{obj}); trailing }} text {{"
    assert match_braces(text, len(prefix)) == obj


def test_match_braces_starts_at_first_brace_after_start():
    text = 'junk {"first": 1} more {"second": 2}'
    assert match_braces(text, 0) == '{"first": 1}'
    assert match_braces(text, text.index("more")) == '{"second": 2}'


def test_match_braces_without_opening_brace():
    assert match_braces("no objects here", 0) is None
    assert match_braces('{"a": 1} tail', 3) is None


@pytest.mark.parametrize("text", ['{"a": {"b": 1}', "{{{}}", "{"])
def test_match_braces_unbalanced(text):
    assert match_braces(text, 0) is None


def test_match_braces_skips_braces_inside_strings():
    obj = '{"title": "a } b { c", "quote": "say \\"}\\""}'
    assert match_braces(obj + "}", 0) == obj


def test_match_braces_plain_counting_when_not_string_aware():
    text = '{"title": "}"}'
    assert match_braces(text, 0, string_aware=False) == '{"title": "}'


def test_find_object_around_uses_nearest_brace_before_anchor():
    html = '<script>state = {"videos": {"videoLegacyEncodings": [{"definition": "720p"}]}};</script>'
    assert find_object_around(html, "videoLegacyEncodings") == (
        '{"videoLegacyEncodings": [{"definition": "720p"}]}'
    )


def test_find_object_around_searches_forward_within_window():
    html = 'videoLegacyEncodings = {"definition": "480p"}'
    assert find_object_around(html, "videoLegacyEncodings") == '{"definition": "480p"}'


def test_find_object_around_missing_anchor():
    assert find_object_around('{"a": 1}', "videoLegacyEncodings") is None
    assert find_object_around("videoLegacyEncodings without objects", "videoLegacyEncodings") is None
