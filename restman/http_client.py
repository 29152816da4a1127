import json
import logging
import time
from typing import Optional

import httpx

from . import USER_AGENT
from .models import RequestOptions, Response

logger = logging.getLogger("restman.http_client")

BODY_METHODS = ("POST", "PUT", "PATCH")

BINARY_CONTENT_TYPES = (
    "image/",
    "video/",
    "audio/",
    "application/octet-stream",
    "application/pdf",
    "application/zip",
    "application/x-",
    "font/",
)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class HTTPClient:
    """Executes one request at a time and never raises.

    Transport failures come back as a ``Response`` with status 0 and the
    error message as the body.
    """

    def __init__(self, timeout: float = 30.0, follow_redirects: bool = True,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self._transport = transport

    async def send_request(self, options: RequestOptions) -> Response:
        start = time.monotonic()
        method = options.method.upper()

        headers = dict(options.headers)
        if not any(k.lower() == "user-agent" for k in headers):
            headers = {"User-Agent": USER_AGENT, **headers}

        content = options.body if options.body and method in BODY_METHODS else None

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=self.follow_redirects,
                transport=self._transport,
            ) as client:
                r = await client.request(method=method, url=options.url, headers=headers, content=content)
                body = self._read_body(r)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            duration_ms = _elapsed_ms(start)
            logger.warning("%s %s failed after %dms: %r", method, options.url, duration_ms, e)
            return Response(
                status=0,
                status_text="Error",
                headers={},
                body=str(e) or e.__class__.__name__,
                time=duration_ms,
            )

        duration_ms = _elapsed_ms(start)
        logger.info("%s %s -> %d in %dms", method, options.url, r.status_code, duration_ms)
        return Response(
            status=r.status_code,
            status_text=r.reason_phrase,
            headers=dict(r.headers),
            body=body,
            time=duration_ms,
        )

    @staticmethod
    def _read_body(r: httpx.Response) -> str:
        content_type = r.headers.get("content-type", "") or ""
        lowered = content_type.lower()

        if any(t in lowered for t in BINARY_CONTENT_TYPES):
            size_kb = len(r.content) / 1024
            return f"(binary content - {content_type} - {size_kb:.1f} KB)"

        if "application/json" in lowered:
            try:
                return json.dumps(r.json(), indent=2, ensure_ascii=False)
            except ValueError:
                return r.text

        return r.text
