"""
Textual front-end

The app is a thin view over ``NavigationController``: every key is
translated to a ``KeyPress`` and dispatched, the queued effects are run, and
the screen is re-rendered from the state.
"""

import logging
from typing import Optional

from rich.markup import escape
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Static

from .composer import RequestComposer
from .config import Settings
from .http_client import HTTPClient
from .keys import KeyPress
from .navigation import NavigationController
from .render import (
    render_environment,
    render_instructions,
    render_method,
    render_modal,
    render_request,
    render_response,
    render_title,
    render_url,
)
from .state import AppState, Effect, ToastKind
from .storage import EnvironmentStore, HistoryStore, SavedRequestStore

logger = logging.getLogger("restman.tui")

TOAST_SEVERITY = {
    ToastKind.LOADING: "information",
    ToastKind.SUCCESS: "information",
    ToastKind.ERROR: "error",
}

# a loading toast stays up until the response toast replaces it
LOADING_TOAST_TIMEOUT = 600.0


class RestmanApp(App):
    """RestMan terminal REST client."""

    TITLE = "RestMan"
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        layers: base overlay;
        padding: 0 1;
    }

    #title {
        height: 1;
    }

    #request-line {
        height: auto;
    }

    #method {
        width: 14;
    }

    #url {
        width: 1fr;
    }

    #request {
        height: auto;
        min-height: 8;
    }

    #response {
        height: 1fr;
    }

    #instructions {
        height: 1;
        dock: bottom;
    }

    #modal {
        layer: overlay;
        width: 100%;
        height: 100%;
        content-align: center middle;
        background: $background 70%;
        display: none;
    }
    """

    def __init__(
        self,
        settings: Settings,
        environment_store: EnvironmentStore,
        history_store: HistoryStore,
        saved_request_store: SavedRequestStore,
        client: Optional[HTTPClient] = None,
    ):
        super().__init__()
        self.settings = settings
        self.environment_store = environment_store
        self.history_store = history_store
        self.saved_request_store = saved_request_store
        self.controller = NavigationController(AppState())
        self.composer = RequestComposer(
            client or HTTPClient(timeout=settings.request_timeout_sec, follow_redirects=settings.follow_redirects),
            history_store=history_store,
            history_limit=settings.history_limit,
        )

    @property
    def state(self) -> AppState:
        return self.controller.state

    def compose(self) -> ComposeResult:
        yield Static(id="title")
        yield Static(id="environment")
        with Horizontal(id="request-line"):
            yield Static(id="method")
            yield Static(id="url")
        yield Static(id="request")
        yield Static(id="response")
        yield Static(id="instructions")
        yield Static(id="modal")

    def on_mount(self) -> None:
        state = self.state
        state.environments = self.environment_store.load()
        state.history = self.history_store.load()
        state.saved_requests = self.saved_request_store.load()
        logger.info(
            "Loaded %d environments, %d history entries, %d saved requests",
            len(state.environments.environments), len(state.history), len(state.saved_requests),
        )
        self.refresh_view()

    def on_key(self, event: events.Key) -> None:
        if self.controller.dispatch(KeyPress.from_event(event)):
            event.prevent_default()
            event.stop()
        self.run_effects()
        self.refresh_view()

    def run_effects(self) -> None:
        for effect in self.controller.drain_effects():
            logger.debug("Running effect %s", effect.value)
            if effect is Effect.SEND:
                self.run_worker(self._send(), group="send", exit_on_error=False)
            elif effect is Effect.EXIT:
                self.exit()
            elif effect is Effect.SAVE_ENVIRONMENTS:
                self.environment_store.save(self.state.environments)
            elif effect is Effect.SAVE_SAVED_REQUESTS:
                self.saved_request_store.save(self.state.saved_requests)

    async def _send(self) -> None:
        await self.composer.send(self.state, on_change=self.refresh_view)
        self.run_effects()
        self.refresh_view()

    def refresh_view(self) -> None:
        state = self.state
        self.query_one("#title", Static).update(render_title())
        self.query_one("#environment", Static).update(render_environment(state))
        self.query_one("#method", Static).update(render_method(state))
        self.query_one("#url", Static).update(render_url(state))
        self.query_one("#request", Static).update(render_request(state))
        self.query_one("#response", Static).update(render_response(state))
        self.query_one("#instructions", Static).update(render_instructions(state))

        modal = self.query_one("#modal", Static)
        modal.display = state.modal is not None
        modal.update(render_modal(state.modal))

        self._show_toast()

    def _show_toast(self) -> None:
        toast = self.state.toast
        if toast is None:
            return
        self.state.toast = None
        timeout = LOADING_TOAST_TIMEOUT if toast.kind is ToastKind.LOADING else self.settings.toast_timeout_sec
        self.clear_notifications()
        self.notify(escape(toast.message), severity=TOAST_SEVERITY[toast.kind], timeout=timeout)
