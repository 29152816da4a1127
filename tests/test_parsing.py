import json

import pytest

from restman.models import Response
from restman.parsing import (
    build_url,
    format_body,
    format_headers,
    last_path_segment,
    parse_cookies,
    parse_headers,
    parse_params,
    parse_variables,
    response_lines,
    split_url,
)


def test_parse_headers_skips_malformed_lines() -> None:
    text = "Content-Type: application/json\nX-Bad\n\n   \n: no-key\nAccept:  */* "
    assert parse_headers(text) == {"Content-Type": "application/json", "Accept": "*/*"}


def test_parse_headers_keeps_colons_in_value() -> None:
    assert parse_headers("Referer: http://example.com:8080/a") == {"Referer": "http://example.com:8080/a"}


def test_parse_headers_last_duplicate_wins() -> None:
    assert parse_headers("X-A: 1\nX-A: 2") == {"X-A": "2"}


def test_parse_params_keeps_duplicates_in_order() -> None:
    assert parse_params("a=1\nb=x=y\nnoequals\na=2") == [("a", "1"), ("b", "x=y"), ("a", "2")]


def test_parse_variables() -> None:
    assert parse_variables("BASE_URL=http://localhost\n# comment\nEMPTY=") == {
        "BASE_URL": "http://localhost",
        "EMPTY": "",
    }


@pytest.mark.parametrize(
    ("url", "params", "expected"),
    [
        ("http://h/users", [], "http://h/users"),
        ("http://h/users", [("id", "5")], "http://h/users?id=5"),
        ("http://h/users?a=1", [("id", "5")], "http://h/users?a=1&id=5"),
        ("http://h/search", [("q", "a b&c")], "http://h/search?q=a+b%26c"),
    ],
)
def test_build_url(url: str, params, expected: str) -> None:
    assert build_url(url, params) == expected


def test_split_url() -> None:
    assert split_url("http://h/users?id=5&tag=&q=a+b#frag") == ("http://h/users", "id=5\ntag=\nq=a b")
    assert split_url("http://h/users") == ("http://h/users", "")


def test_format_headers_round_trip() -> None:
    headers = {"Content-Type": "application/json", "Accept": "*/*"}
    assert parse_headers(format_headers(headers)) == headers


def test_last_path_segment() -> None:
    assert last_path_segment("https://api.example.com/users/42") == "42"
    assert last_path_segment("https://api.example.com/") == ""


def test_parse_cookies_splits_merged_header() -> None:
    headers = {"set-cookie": "session=abc; Path=/; HttpOnly, theme=dark; Expires=Wed, 21 Oct 2026 07:28:00 GMT"}

    cookies = parse_cookies(headers)

    assert [(c.name, c.value) for c in cookies] == [("session", "abc"), ("theme", "dark")]
    assert cookies[0].attributes == "Path=/; HttpOnly"
    assert cookies[1].attributes == "Expires=Wed, 21 Oct 2026 07:28:00 GMT"


def test_format_body_reindents_minified_json() -> None:
    payload = {"id": 1, "title": "a reasonably long title", "tags": ["x", "y"]}
    body = json.dumps(payload, separators=(",", ":"))
    assert len(body) > 50

    formatted = format_body(body, {"Content-Type": "application/json; charset=utf-8"})

    assert formatted == json.dumps(payload, indent=2)


def test_format_body_leaves_short_or_non_json_alone() -> None:
    assert format_body('{"a":1}', {"content-type": "application/json"}) == '{"a":1}'
    long_text = "x" * 80
    assert format_body(long_text, {"content-type": "text/plain"}) == long_text
    assert format_body(long_text, {"content-type": "application/json"}) == long_text


def test_response_lines_per_tab() -> None:
    response = Response(
        status=200,
        status_text="OK",
        headers={"content-type": "text/plain", "set-cookie": "a=1"},
        body="line1\nline2",
        time=5,
    )

    assert response_lines(response, "body") == ["line1", "line2"]
    assert response_lines(response, "headers") == ["content-type: text/plain", "set-cookie: a=1"]
    assert response_lines(response, "cookies") == ["a = 1"]
    assert response_lines(None, "body") == []


def test_response_lines_without_cookies() -> None:
    response = Response(status=204, status_text="No Content")
    assert response_lines(response, "cookies") == ["No cookies set"]
