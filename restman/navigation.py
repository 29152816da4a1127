"""
Keyboard navigation for RestMan

Every key goes through one dispatcher. Exactly one of three handlers owns
a key, depending on the state: the open modal, the field in edit mode, or
plain navigation with its global commands.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .editor import edit_text, scroll
from .keys import KeyPress
from .modals import (
    CLOSE,
    STAY,
    EnvironmentSelectorModal,
    EnvironmentsManagerModal,
    ExitConfirmModal,
    HelpModal,
    HistoryViewerModal,
    MethodSelectorModal,
    Modal,
    ResponseViewerModal,
    SavedRequestsViewerModal,
    SaveRequestModal,
)
from .parsing import response_lines
from .state import (
    FIELD_ORDER,
    REQUEST_TABS,
    RESPONSE_TABS,
    AppState,
    Effect,
    FocusField,
    RequestTab,
    ResponseTab,
    ToastKind,
)

logger = logging.getLogger("restman.navigation")

DIGIT_FIELDS = {str(i): f for i, f in enumerate(FIELD_ORDER)}


class KeyHandler(ABC):
    """One dispatch context. ``can_handle`` conditions are mutually exclusive."""

    @abstractmethod
    def can_handle(self, key: KeyPress, controller: "NavigationController") -> bool:
        pass

    @abstractmethod
    def handle(self, key: KeyPress, controller: "NavigationController") -> bool:
        """Returns True if the key was consumed."""
        pass


class ModalKeyHandler(KeyHandler):
    """An open modal receives every key."""

    def can_handle(self, key: KeyPress, controller: "NavigationController") -> bool:
        return controller.state.modal is not None

    def handle(self, key: KeyPress, controller: "NavigationController") -> bool:
        state = controller.state
        outcome = state.modal.handle(key)
        if outcome is CLOSE:
            logger.debug("Closing modal %s", state.modal.kind.value)
            state.modal = None
        elif outcome is not STAY:
            logger.debug("Replacing modal %s with %s", state.modal.kind.value, outcome.kind.value)
            state.modal = outcome
        return True


class EditModeHandler(KeyHandler):
    """Escape leaves edit mode; everything else goes to the field editor."""

    def can_handle(self, key: KeyPress, controller: "NavigationController") -> bool:
        state = controller.state
        return state.modal is None and state.edit_mode is not None

    def handle(self, key: KeyPress, controller: "NavigationController") -> bool:
        state = controller.state
        if key.key == "escape":
            state.edit_mode = None
            return True

        if state.edit_mode is FocusField.URL:
            state.url, _ = edit_text(state.url, key)
        elif state.edit_mode is FocusField.REQUEST:
            text, changed = edit_text(state.request_text(), key, multiline=True)
            if changed:
                state.set_request_text(text)
        elif state.edit_mode is FocusField.RESPONSE:
            total = len(response_lines(state.response, state.response_tab.value))
            moved = scroll(state.response_scroll, key, total)
            if moved is not None:
                state.response_scroll = moved
        return True


class GlobalCommandHandler(KeyHandler):
    """Single-key commands available in navigation mode."""

    def can_handle(self, key: KeyPress, controller: "NavigationController") -> bool:
        state = controller.state
        return state.modal is None and state.edit_mode is None

    def handle(self, key: KeyPress, controller: "NavigationController") -> bool:
        state = controller.state

        if key.key == "ctrl+c":
            state.request_effect(Effect.EXIT)
            return True
        if key.key in ("enter", "ctrl+s"):
            state.request_effect(Effect.SEND)
            return True
        if key.key == "escape" or key.is_char("q"):
            controller.open_modal(ExitConfirmModal(state))
            return True
        if key.is_char("/"):
            controller.open_modal(HelpModal(state))
            return True
        if key.key == "space" or key.is_char(" "):
            if state.focused_field is FocusField.RESPONSE and state.response is not None:
                controller.open_modal(ResponseViewerModal(state))
                return True
            return False
        if key.is_char("v"):
            controller.open_modal(EnvironmentsManagerModal(state))
            return True
        if key.is_char("s"):
            if not state.url:
                state.show_toast("URL is required", ToastKind.ERROR)
            else:
                controller.open_modal(SaveRequestModal(state))
            return True
        if key.is_char("h"):
            controller.open_modal(HistoryViewerModal(state))
            return True
        if key.is_char("l"):
            controller.open_modal(SavedRequestsViewerModal(state))
            return True
        if key.is_char("e"):
            if state.focused_field is FocusField.ENVIRONMENT:
                controller.open_modal(EnvironmentSelectorModal(state))
            elif state.focused_field is FocusField.METHOD:
                controller.open_modal(MethodSelectorModal(state))
            else:
                state.edit_mode = state.focused_field
            return True
        return False


class FocusNavigationHandler(KeyHandler):
    """Focus cycling, sub-tab cycling and direct jumps."""

    def can_handle(self, key: KeyPress, controller: "NavigationController") -> bool:
        state = controller.state
        return state.modal is None and state.edit_mode is None

    def handle(self, key: KeyPress, controller: "NavigationController") -> bool:
        state = controller.state

        if key.key in ("tab", "shift+tab"):
            step = -1 if key.key == "shift+tab" else 1
            if not controller.step_sub_tab(step, wrap=False):
                controller.move_focus(step)
            return True
        if key.key == "up":
            controller.move_focus(-1)
            return True
        if key.key == "down":
            controller.move_focus(1)
            return True
        if key.key in ("left", "right"):
            if state.focused_field not in (FocusField.REQUEST, FocusField.RESPONSE):
                return False
            controller.step_sub_tab(-1 if key.key == "left" else 1, wrap=True)
            return True
        if not key.is_ctrl and key.character in DIGIT_FIELDS:
            controller.focus(DIGIT_FIELDS[key.character])
            return True
        return False


class KeyboardDispatcher:
    """Checks handlers in order until one consumes the key."""

    def __init__(self):
        self.handlers: List[KeyHandler] = [
            ModalKeyHandler(),
            EditModeHandler(),
            GlobalCommandHandler(),
            FocusNavigationHandler(),
        ]

    def dispatch(self, key: KeyPress, controller: "NavigationController") -> bool:
        for handler in self.handlers:
            if handler.can_handle(key, controller) and handler.handle(key, controller):
                return True
        return False


class NavigationController:
    """Owns the application state and is the single entry point for keys."""

    def __init__(self, state: Optional[AppState] = None, dispatcher: Optional[KeyboardDispatcher] = None):
        self.state = state if state is not None else AppState()
        self.dispatcher = dispatcher or KeyboardDispatcher()

    def dispatch(self, key: KeyPress) -> bool:
        handled = self.dispatcher.dispatch(key, self)
        logger.debug("key=%r handled=%s focus=%s edit=%s modal=%s", key.key, handled,
                     self.state.focused_field.value,
                     self.state.edit_mode.value if self.state.edit_mode else None,
                     self.state.active_modal.value if self.state.active_modal else None)
        return handled

    def drain_effects(self) -> List[Effect]:
        effects, self.state.effects = self.state.effects, []
        return effects

    def open_modal(self, modal: Modal) -> None:
        self.state.edit_mode = None
        self.state.modal = modal

    def focus(self, field: FocusField) -> None:
        state = self.state
        if field is not state.focused_field:
            if field is FocusField.REQUEST:
                state.request_tab = RequestTab.HEADERS
            elif field is FocusField.RESPONSE:
                state.response_tab = ResponseTab.BODY
                state.response_scroll = 0
        state.focused_field = field
        state.edit_mode = None

    def move_focus(self, step: int) -> None:
        index = FIELD_ORDER.index(self.state.focused_field)
        self.focus(FIELD_ORDER[(index + step) % len(FIELD_ORDER)])

    def step_sub_tab(self, step: int, wrap: bool) -> bool:
        """Move the focused panel's sub-tab; False when at the edge without wrap."""
        state = self.state
        if state.focused_field is FocusField.REQUEST:
            tabs, current = REQUEST_TABS, state.request_tab
        elif state.focused_field is FocusField.RESPONSE:
            tabs, current = RESPONSE_TABS, state.response_tab
        else:
            return False

        index = tabs.index(current) + step
        if not 0 <= index < len(tabs):
            if not wrap:
                return False
            index %= len(tabs)

        if state.focused_field is FocusField.REQUEST:
            state.request_tab = tabs[index]
        else:
            state.response_tab = tabs[index]
            state.response_scroll = 0
        return True
