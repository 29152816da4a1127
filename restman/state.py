"""
Application state

One explicit struct holds everything the navigation controller, the modals
and the composer read and write. Views only render it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from .models import EnvironmentsConfig, HistoryEntry, Response, SavedRequest

if TYPE_CHECKING:
    from .modals import Modal


class FocusField(str, Enum):
    ENVIRONMENT = "environment"
    METHOD = "method"
    URL = "url"
    REQUEST = "request"
    RESPONSE = "response"


FIELD_ORDER = [
    FocusField.ENVIRONMENT,
    FocusField.METHOD,
    FocusField.URL,
    FocusField.REQUEST,
    FocusField.RESPONSE,
]


class RequestTab(str, Enum):
    HEADERS = "headers"
    PARAMS = "params"
    BODY = "body"


class ResponseTab(str, Enum):
    BODY = "body"
    HEADERS = "headers"
    COOKIES = "cookies"


REQUEST_TABS = list(RequestTab)
RESPONSE_TABS = list(ResponseTab)


class ModalKind(str, Enum):
    EXIT_CONFIRM = "exit-confirm"
    ENVIRONMENT_SELECTOR = "environment-selector"
    ENVIRONMENTS_MANAGER = "environments-manager"
    ENVIRONMENT_EDITOR = "environment-editor"
    METHOD_SELECTOR = "method-selector"
    SAVE_REQUEST = "save-request"
    HISTORY_VIEWER = "history-viewer"
    SAVED_REQUESTS_VIEWER = "saved-requests-viewer"
    RESPONSE_VIEWER = "response-viewer"
    HELP = "help"


class Effect(str, Enum):
    """Side effects the front-end performs on behalf of the controller."""

    SEND = "send"
    EXIT = "exit"
    SAVE_ENVIRONMENTS = "save-environments"
    SAVE_SAVED_REQUESTS = "save-saved-requests"


class ToastKind(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Toast:
    message: str
    kind: ToastKind


HTTP_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]

DEFAULT_URL = "https://jsonplaceholder.typicode.com/posts/1"
DEFAULT_HEADERS = "Content-Type: application/json\nAccept: application/json"


@dataclass
class AppState:
    # Request being composed
    method: str = "GET"
    url: str = DEFAULT_URL
    headers_text: str = DEFAULT_HEADERS
    params_text: str = ""
    body_text: str = ""

    # Last response
    response: Optional[Response] = None
    response_scroll: int = 0
    loading: bool = False
    send_sequence: int = 0
    """Incremented on every send; only the latest send updates ``response``"""

    # Navigation
    focused_field: FocusField = FocusField.URL
    edit_mode: Optional[FocusField] = None
    """None = navigation mode, otherwise always equal to ``focused_field``"""

    modal: Optional["Modal"] = None
    request_tab: RequestTab = RequestTab.HEADERS
    response_tab: ResponseTab = ResponseTab.BODY

    toast: Optional[Toast] = None
    """Pending notification, consumed by the front-end"""

    effects: List[Effect] = field(default_factory=list)

    # Persisted collections
    environments: EnvironmentsConfig = field(
        default_factory=lambda: EnvironmentsConfig(active_environment_id=None, environments=[])
    )
    history: List[HistoryEntry] = field(default_factory=list)
    saved_requests: List[SavedRequest] = field(default_factory=list)

    @property
    def active_modal(self) -> Optional[ModalKind]:
        return self.modal.kind if self.modal is not None else None

    def show_toast(self, message: str, kind: ToastKind = ToastKind.SUCCESS) -> None:
        self.toast = Toast(message, kind)

    def request_effect(self, effect: Effect) -> None:
        self.effects.append(effect)

    def request_text(self, tab: Optional[RequestTab] = None) -> str:
        tab = tab or self.request_tab
        if tab is RequestTab.HEADERS:
            return self.headers_text
        if tab is RequestTab.PARAMS:
            return self.params_text
        return self.body_text

    def set_request_text(self, text: str, tab: Optional[RequestTab] = None) -> None:
        tab = tab or self.request_tab
        if tab is RequestTab.HEADERS:
            self.headers_text = text
        elif tab is RequestTab.PARAMS:
            self.params_text = text
        else:
            self.body_text = text

    def next_history_id(self) -> int:
        return max((entry.id for entry in self.history), default=0) + 1

    def next_saved_request_id(self) -> int:
        return max((entry.id for entry in self.saved_requests), default=0) + 1
