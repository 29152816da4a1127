import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from .environments import active_variables
from .http_client import HTTPClient
from .models import HistoryEntry, RequestOptions, Response, SavedRequest
from .parsing import (
    build_url,
    format_headers,
    last_path_segment,
    parse_headers,
    parse_params,
    split_url,
)
from .state import AppState, Effect, ToastKind
from .storage import DEFAULT_HISTORY_LIMIT, HistoryStore
from .variables import substitute, substitute_in_map

logger = logging.getLogger("restman.composer")


def build_request(method: str, url: str, headers_text: str, params_text: str, body_text: str,
                  variables: Dict[str, str]) -> RequestOptions:
    final_url = substitute(url, variables)

    params = [(k, substitute(v, variables)) for k, v in parse_params(params_text)]
    final_url = build_url(final_url, params)

    headers = substitute_in_map(parse_headers(headers_text), variables)
    body = substitute(body_text, variables) if body_text else None

    return RequestOptions(method=method, url=final_url, headers=headers, body=body)


class RequestComposer:
    """Turns the editor state into a request, sends it and records history."""

    def __init__(self, client: HTTPClient, history_store: Optional[HistoryStore] = None,
                 history_limit: int = DEFAULT_HISTORY_LIMIT):
        self.client = client
        self.history_store = history_store
        self.history_limit = history_limit

    async def send(self, state: AppState, on_change: Optional[Callable[[], None]] = None) -> Optional[Response]:
        """Send the composed request.

        ``on_change`` is called once the loading state is set, before awaiting
        the transport. Only the most recent send updates the visible response;
        an older one still lands in history.
        """
        if not state.url:
            state.show_toast("URL is required", ToastKind.ERROR)
            return None

        options = build_request(
            state.method,
            state.url,
            state.headers_text,
            state.params_text,
            state.body_text,
            active_variables(state.environments),
        )

        state.send_sequence += 1
        sequence = state.send_sequence
        state.loading = True
        state.show_toast("Sending request...", ToastKind.LOADING)
        logger.info("Sending #%d %s %s", sequence, options.method, options.url)
        if on_change is not None:
            on_change()

        response = await self.client.send_request(options)

        self._record(state, options, response)

        if sequence != state.send_sequence:
            logger.info("Discarding response of superseded send #%d", sequence)
            return response

        state.loading = False
        state.response = response
        state.response_scroll = 0
        kind = ToastKind.ERROR if response.is_transport_error else ToastKind.SUCCESS
        state.show_toast(f"{response.status} {response.status_text} ({response.time}ms)", kind)
        return response

    def _record(self, state: AppState, options: RequestOptions, response: Response) -> None:
        entry = HistoryEntry(
            id=state.next_history_id(),
            timestamp=datetime.now(timezone.utc),
            request=options,
            status=response.status,
            status_text=response.status_text,
            time=response.time,
        )
        state.history = [*state.history, entry][-self.history_limit:]
        if self.history_store is not None:
            self.history_store.save(state.history)


def default_save_name(state: AppState) -> str:
    return f"{state.method} {last_path_segment(state.url) or 'request'}"


def save_current_request(state: AppState, name: str) -> Optional[SavedRequest]:
    """Store the raw request (placeholders kept) under ``name``."""
    name = name.strip()
    if not name:
        state.show_toast("Name is required", ToastKind.ERROR)
        return None
    if not state.url:
        state.show_toast("URL is required", ToastKind.ERROR)
        return None

    saved = SavedRequest(
        id=state.next_saved_request_id(),
        name=name,
        timestamp=datetime.now(timezone.utc),
        request=RequestOptions(
            method=state.method,
            url=build_url(state.url, parse_params(state.params_text)),
            headers=parse_headers(state.headers_text),
            body=state.body_text or None,
        ),
    )
    state.saved_requests = [*state.saved_requests, saved]
    state.request_effect(Effect.SAVE_SAVED_REQUESTS)
    state.show_toast(f'Saved "{name}"', ToastKind.SUCCESS)
    return saved


def load_request(state: AppState, request: RequestOptions) -> None:
    state.method = request.method
    state.url, state.params_text = split_url(request.url)
    state.headers_text = format_headers(request.headers)
    state.body_text = request.body or ""
