import json
import re
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple
from urllib.parse import parse_qsl, urlencode

from .models import Response


_COOKIE_SPLIT = re.compile(r",(?=\s*[a-zA-Z0-9_-]+=)")


class Cookie(NamedTuple):
    name: str
    value: str
    attributes: str


def _split_lines(text: Optional[str], separator: str) -> List[Tuple[str, str]]:
    pairs: List[Tuple[str, str]] = []
    for line in (text or "").split("\n"):
        line = line.strip()
        if not line or separator not in line:
            continue
        key, _, value = line.partition(separator)
        key = key.strip()
        if key:
            pairs.append((key, value.strip()))
    return pairs


def parse_headers(text: Optional[str]) -> Dict[str, str]:
    """``Key: value`` per line; a repeated key keeps the last value."""
    return dict(_split_lines(text, ":"))


def parse_params(text: Optional[str]) -> List[Tuple[str, str]]:
    """``key=value`` per line; repeated keys are all kept, in order."""
    return _split_lines(text, "=")


def parse_variables(text: Optional[str]) -> Dict[str, str]:
    return dict(_split_lines(text, "="))


def build_url(url: str, params: Sequence[Tuple[str, str]]) -> str:
    query = urlencode(list(params))
    if not query:
        return url
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}{query}"


def format_headers(headers: Dict[str, str]) -> str:
    return "\n".join(f"{k}: {v}" for k, v in headers.items())


def format_pairs(pairs: Sequence[Tuple[str, str]]) -> str:
    return "\n".join(f"{k}={v}" for k, v in pairs)


def split_url(url: str) -> Tuple[str, str]:
    """Split a full URL into the base part and ``key=value`` param lines."""
    base, sep, query = url.partition("?")
    if not sep:
        return url, ""
    query = query.split("#", 1)[0]
    return base, format_pairs(parse_qsl(query, keep_blank_values=True))


def last_path_segment(url: str) -> str:
    return url.split("/")[-1]


def parse_cookies(headers: Dict[str, str]) -> List[Cookie]:
    cookies: List[Cookie] = []
    for key, value in headers.items():
        if key.lower() != "set-cookie":
            continue
        for raw in _COOKIE_SPLIT.split(value):
            name_value, *attrs = raw.strip().split(";")
            name, _, val = name_value.partition("=")
            cookies.append(Cookie(name.strip(), val.strip(), "; ".join(a.strip() for a in attrs).strip()))
    return cookies


def _content_type(headers: Dict[str, str]) -> str:
    for key, value in headers.items():
        if key.lower() == "content-type":
            return value
    return ""


def format_body(body: str, headers: Dict[str, str]) -> str:
    content_type = _content_type(headers)
    if "application/json" not in content_type and "application/vnd.api+json" not in content_type:
        return body
    # re-indent minified payloads only
    if "\n" in body or len(body) <= 50:
        return body
    try:
        return json.dumps(json.loads(body), indent=2, ensure_ascii=False)
    except ValueError:
        return body


def response_lines(response: Optional[Response], tab: str) -> List[str]:
    if response is None:
        return []
    if tab == "body":
        return format_body(response.body, response.headers).split("\n")
    if tab == "headers":
        return [f"{k}: {v}" for k, v in response.headers.items()]

    cookies = parse_cookies(response.headers)
    if not cookies:
        return ["No cookies set"]
    lines: List[str] = []
    for cookie in cookies:
        lines.append(f"{cookie.name} = {cookie.value}")
        if cookie.attributes:
            lines.append(f"  {cookie.attributes}")
    return lines
