from __future__ import annotations

import pytest

from logindesk.core.records.codec import RecordParseError, decode_record, encode_record


def test_pipe_inside_field_is_escaped():
    assert encode_record(["a|b", "c"]) == "a\\|b|c"


def test_fields_with_pipes_round_trip():
    fields = ["bob", "p|w|", "USER", "|why?", "blue|green"]
    assert decode_record(encode_record(fields)) == fields


def test_empty_fields_are_preserved():
    assert decode_record("a||c|") == ["a", "", "c", ""]
    assert encode_record(["", None, "x"]) == "||x"


def test_backslash_not_before_pipe_is_literal():
    assert decode_record("C:\\dir\\n|x") == ["C:\\dir\\n", "x"]
    assert encode_record(["a\\b"]) == "a\\b"


def test_too_few_fields_is_a_parse_failure():
    with pytest.raises(RecordParseError):
        decode_record("only|three|fields", expected=5)


def test_extra_fields_are_kept():
    assert decode_record("a|b|c|d|e|f", expected=5) == ["a", "b", "c", "d", "e", "f"]


def test_trailing_newline_ignored():
    assert decode_record("a|b\n") == ["a", "b"]
