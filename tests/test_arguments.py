import shlex

import pytest

from authop.arguments import encode, encode_with_delimiter, parse, shell_escape


def test_parse_accepts_strings_and_string_lists():
    raw = {"audit-log-path": ["/var/log/oauth-server/audit.log"], "audit-log-format": "json"}
    assert parse(raw) == {
        "audit-log-path": ["/var/log/oauth-server/audit.log"],
        "audit-log-format": ["json"],
    }


def test_parse_empty_list():
    assert parse({"flag": []}) == {"flag": []}


@pytest.mark.parametrize("bad", [1, None, {"a": "b"}, ["ok", 3]])
def test_parse_rejects_other_values(bad):
    with pytest.raises(ValueError, match=r"expected \[\]string or string"):
        parse({"flag": bad})


def test_shell_escape_empty():
    assert shell_escape("") == "''"


@pytest.mark.parametrize("value", ["simple", "/var/run/file.yaml", "a=b,c:d", "x@y%z+1"])
def test_shell_escape_leaves_safe_strings(value):
    assert shell_escape(value) == value


@pytest.mark.parametrize(
    "value", ["with space", "it's", "$HOME", "a;b", "tab\there", "quote\"d", "'", "é"]
)
def test_shell_escape_round_trip(value):
    escaped = shell_escape(value)
    assert escaped != value
    assert shlex.split(escaped) == [value]


def test_encode_pinned_example():
    args = {"b": ["2"], "a": ["1", "x y"]}
    assert encode(args) == "--a=1 \\\n--a='x y' \\\n--b=2"


def test_encode_uses_line_continuation_delimiter():
    args = {"z": ["last"], "m": ["mid", "it's"]}
    assert encode(args) == encode_with_delimiter(args, " \\\n")


def test_encode_empty():
    assert encode({}) == ""
    assert encode_with_delimiter({"k": []}, " ") == ""


def test_encode_round_trips_through_shell():
    args = {"policy": ["/etc/a b.yaml"], "alpha": ["x", "it's"], "mid": [""]}
    tokens = shlex.split(encode_with_delimiter(args, " "))
    assert all(t.startswith("--") for t in tokens)
    pairs = [tuple(t[2:].split("=", 1)) for t in tokens]
    assert pairs == [(k, v) for k in sorted(args) for v in args[k]]