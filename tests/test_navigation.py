import pytest

from restman.environments import default_environments
from restman.keys import KeyPress
from restman.models import Response
from restman.navigation import NavigationController
from restman.state import (
    AppState,
    Effect,
    FocusField,
    ModalKind,
    RequestTab,
    ResponseTab,
    ToastKind,
)


def press(controller: NavigationController, *keys) -> None:
    for key in keys:
        if isinstance(key, str) and len(key) == 1:
            key = KeyPress.char(key)
        elif isinstance(key, str):
            key = KeyPress(key)
        controller.dispatch(key)


@pytest.fixture
def controller() -> NavigationController:
    state = AppState(environments=default_environments())
    return NavigationController(state)


def test_initial_focus_is_url(controller: NavigationController) -> None:
    assert controller.state.focused_field is FocusField.URL
    assert controller.state.edit_mode is None
    assert controller.state.modal is None


def test_up_down_cycle_focus(controller: NavigationController) -> None:
    press(controller, "up", "up")
    assert controller.state.focused_field is FocusField.ENVIRONMENT
    press(controller, "up")
    assert controller.state.focused_field is FocusField.RESPONSE
    press(controller, "down")
    assert controller.state.focused_field is FocusField.ENVIRONMENT


@pytest.mark.parametrize(
    ("digit", "field"),
    [("0", FocusField.ENVIRONMENT), ("1", FocusField.METHOD), ("2", FocusField.URL),
     ("3", FocusField.REQUEST), ("4", FocusField.RESPONSE)],
)
def test_digits_jump_to_fields(controller: NavigationController, digit: str, field: FocusField) -> None:
    press(controller, digit)
    assert controller.state.focused_field is field


def test_tab_walks_request_sub_tabs_before_leaving(controller: NavigationController) -> None:
    state = controller.state
    press(controller, "tab")
    assert state.focused_field is FocusField.REQUEST
    assert state.request_tab is RequestTab.HEADERS

    press(controller, "tab")
    assert state.request_tab is RequestTab.PARAMS
    press(controller, "tab")
    assert state.request_tab is RequestTab.BODY

    press(controller, "tab")
    assert state.focused_field is FocusField.RESPONSE
    assert state.response_tab is ResponseTab.BODY


def test_shift_tab_at_first_sub_tab_leaves_panel(controller: NavigationController) -> None:
    press(controller, "3", "shift+tab")
    assert controller.state.focused_field is FocusField.URL


def test_entering_request_resets_sub_tab(controller: NavigationController) -> None:
    state = controller.state
    press(controller, "3", "right", "right")
    assert state.request_tab is RequestTab.BODY

    press(controller, "up", "down")
    assert state.request_tab is RequestTab.HEADERS


def test_left_right_wrap_sub_tabs(controller: NavigationController) -> None:
    state = controller.state
    press(controller, "4", "left")
    assert state.response_tab is ResponseTab.COOKIES
    press(controller, "right")
    assert state.response_tab is ResponseTab.BODY


def test_left_right_ignored_outside_tabbed_panels(controller: NavigationController) -> None:
    assert not controller.dispatch(KeyPress("left"))
    assert controller.state.focused_field is FocusField.URL


def test_edit_mode_captures_keys(controller: NavigationController) -> None:
    state = controller.state
    state.url = "http://h"
    press(controller, "e")
    assert state.edit_mode is FocusField.URL

    press(controller, "/", "q", "3", "backspace", "enter")
    assert state.url == "http://h/q"
    assert state.modal is None
    assert state.effects == []
    assert state.focused_field is FocusField.URL

    press(controller, "escape")
    assert state.edit_mode is None
    assert state.modal is None


def test_edit_request_body_is_multiline(controller: NavigationController) -> None:
    state = controller.state
    press(controller, "3", "right", "right", "e", "{", "enter", "}", "escape")
    assert state.body_text == "{\n}"
    assert state.headers_text.startswith("Content-Type")


def test_edit_response_scrolls(controller: NavigationController) -> None:
    state = controller.state
    state.response = Response(status=200, status_text="OK", body="\n".join(str(i) for i in range(40)))
    press(controller, "4", "e", "down", "down")
    assert state.edit_mode is FocusField.RESPONSE
    assert state.response_scroll == 2
    press(controller, "G")
    assert state.response_scroll == 40 - 18


def test_e_opens_selectors(controller: NavigationController) -> None:
    press(controller, "1", "e")
    assert controller.state.active_modal is ModalKind.METHOD_SELECTOR
    assert controller.state.edit_mode is None

    press(controller, "escape", "0", "e")
    assert controller.state.active_modal is ModalKind.ENVIRONMENT_SELECTOR


def test_enter_and_ctrl_s_request_send(controller: NavigationController) -> None:
    press(controller, "enter", "ctrl+s")
    assert controller.drain_effects() == [Effect.SEND, Effect.SEND]
    assert controller.state.effects == []


def test_ctrl_c_exits_immediately(controller: NavigationController) -> None:
    press(controller, "ctrl+c")
    assert controller.drain_effects() == [Effect.EXIT]


def test_escape_and_q_ask_for_confirmation(controller: NavigationController) -> None:
    press(controller, "q")
    assert controller.state.active_modal is ModalKind.EXIT_CONFIRM
    press(controller, "enter")
    assert controller.state.modal is None
    assert controller.drain_effects() == []

    press(controller, "escape", "y")
    assert controller.drain_effects() == [Effect.EXIT]


def test_modal_is_exclusive(controller: NavigationController) -> None:
    press(controller, "/")
    assert controller.state.active_modal is ModalKind.HELP

    press(controller, "h", "enter", "down", "e")
    assert controller.state.active_modal is ModalKind.HELP
    assert controller.state.focused_field is FocusField.URL
    assert controller.drain_effects() == []

    press(controller, "/")
    assert controller.state.modal is None


@pytest.mark.parametrize(
    ("key", "kind"),
    [("v", ModalKind.ENVIRONMENTS_MANAGER), ("h", ModalKind.HISTORY_VIEWER),
     ("l", ModalKind.SAVED_REQUESTS_VIEWER), ("s", ModalKind.SAVE_REQUEST)],
)
def test_command_keys_open_modals(controller: NavigationController, key: str, kind: ModalKind) -> None:
    press(controller, key)
    assert controller.state.active_modal is kind


def test_save_without_url_shows_error(controller: NavigationController) -> None:
    controller.state.url = ""
    press(controller, "s")
    assert controller.state.modal is None
    assert controller.state.toast.message == "URL is required"
    assert controller.state.toast.kind is ToastKind.ERROR


def test_space_opens_response_viewer_only_with_response(controller: NavigationController) -> None:
    press(controller, "4", "space")
    assert controller.state.modal is None

    controller.state.response = Response(status=200, status_text="OK", body="x")
    press(controller, " ")
    assert controller.state.active_modal is ModalKind.RESPONSE_VIEWER


def test_ctrl_c_is_ignored_while_editing(controller: NavigationController) -> None:
    state = controller.state
    press(controller, "e", "ctrl+c")

    assert state.edit_mode is FocusField.URL
    assert controller.drain_effects() == []

    press(controller, "escape", "ctrl+c")
    assert controller.drain_effects() == [Effect.EXIT]
