"""
Modal handlers

A modal owns every key while it is open. ``handle`` returns ``STAY`` to keep
it open, ``CLOSE`` to close it, or another modal to replace it.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Union

from .composer import default_save_name, load_request, save_current_request
from .editor import PAGE_SIZE, edit_text, move_selection, scroll
from .environments import add_environment, delete_environment, set_active_environment, update_environment
from .keys import KeyPress
from .models import Environment, HistoryEntry, SavedRequest
from .parsing import format_pairs, parse_variables
from .state import HTTP_METHODS, AppState, Effect, ModalKind, ToastKind


class ModalResult(Enum):
    STAY = "stay"
    CLOSE = "close"


STAY = ModalResult.STAY
CLOSE = ModalResult.CLOSE

Outcome = Union[ModalResult, "Modal"]


class Modal(ABC):
    kind: ModalKind

    def __init__(self, state: AppState):
        self.state = state

    @abstractmethod
    def handle(self, key: KeyPress) -> Outcome:
        pass


class ExitConfirmModal(Modal):
    kind = ModalKind.EXIT_CONFIRM

    def __init__(self, state: AppState):
        super().__init__(state)
        self.confirm_selected = False

    def handle(self, key: KeyPress) -> Outcome:
        if key.key == "left":
            self.confirm_selected = True
            return STAY
        if key.key == "right":
            self.confirm_selected = False
            return STAY
        if key.key == "enter":
            return self._confirm() if self.confirm_selected else CLOSE
        if key.is_char("y", "Y"):
            return self._confirm()
        if key.is_char("n", "N") or key.key == "escape":
            return CLOSE
        return STAY

    def _confirm(self) -> Outcome:
        self.state.request_effect(Effect.EXIT)
        return CLOSE


class HelpModal(Modal):
    kind = ModalKind.HELP

    def handle(self, key: KeyPress) -> Outcome:
        if key.key == "escape" or key.is_char("/"):
            return CLOSE
        return STAY


class MethodSelectorModal(Modal):
    kind = ModalKind.METHOD_SELECTOR

    def __init__(self, state: AppState):
        super().__init__(state)
        self.methods = list(HTTP_METHODS)
        self.selected = self.methods.index(state.method) if state.method in self.methods else 0

    def handle(self, key: KeyPress) -> Outcome:
        if key.key == "escape":
            return CLOSE
        if key.key == "enter":
            self.state.method = self.methods[self.selected]
            return CLOSE
        if key.key in ("up", "down"):
            self.selected = move_selection(self.selected, key, len(self.methods), wrap=True)
            return STAY
        # jump by first letter
        char = key.printable
        if char:
            for index, method in enumerate(self.methods):
                if method.startswith(char.upper()):
                    self.selected = index
                    break
        return STAY


class _EnvironmentListModal(Modal):
    def __init__(self, state: AppState):
        super().__init__(state)
        ids = [env.id for env in self.environments]
        active = state.environments.active_environment_id
        self.selected = ids.index(active) if active in ids else 0

    @property
    def environments(self) -> List[Environment]:
        return self.state.environments.environments

    @property
    def selected_environment(self) -> Optional[Environment]:
        if 0 <= self.selected < len(self.environments):
            return self.environments[self.selected]
        return None

    def _activate(self) -> None:
        env = self.selected_environment
        if env is not None:
            self.state.environments = set_active_environment(self.state.environments, env.id)
            self.state.request_effect(Effect.SAVE_ENVIRONMENTS)


class EnvironmentSelectorModal(_EnvironmentListModal):
    kind = ModalKind.ENVIRONMENT_SELECTOR

    def handle(self, key: KeyPress) -> Outcome:
        if key.key == "escape":
            return CLOSE
        if key.key == "enter":
            self._activate()
            return CLOSE
        if key.key in ("up", "down"):
            moved = move_selection(self.selected, key, len(self.environments), wrap=True)
            if moved is not None:
                self.selected = moved
        return STAY


class EnvironmentsManagerModal(_EnvironmentListModal):
    kind = ModalKind.ENVIRONMENTS_MANAGER

    def __init__(self, state: AppState, selected_id: Optional[int] = None):
        super().__init__(state)
        ids = [env.id for env in self.environments]
        if selected_id in ids:
            self.selected = ids.index(selected_id)

    def handle(self, key: KeyPress) -> Outcome:
        if key.key == "escape":
            return CLOSE
        if key.key in ("up", "down"):
            moved = move_selection(self.selected, key, len(self.environments))
            if moved is not None:
                self.selected = moved
            return STAY
        if key.key == "enter":
            self._activate()
            return CLOSE
        if key.is_char("n"):
            return EnvironmentEditorModal(self.state)
        if key.is_char("e"):
            env = self.selected_environment
            return EnvironmentEditorModal(self.state, env) if env is not None else STAY
        if key.is_char("D"):
            self._delete_selected()
        return STAY

    def _delete_selected(self) -> None:
        env = self.selected_environment
        # the last environment cannot be deleted from here
        if env is None or len(self.environments) <= 1:
            return
        self.state.environments = delete_environment(self.state.environments, env.id)
        self.state.request_effect(Effect.SAVE_ENVIRONMENTS)
        self.state.show_toast(f'Deleted environment "{env.name}"', ToastKind.SUCCESS)
        self.selected = min(self.selected, len(self.environments) - 1)


class EnvironmentEditorModal(Modal):
    kind = ModalKind.ENVIRONMENT_EDITOR

    NAME = "name"
    VARIABLES = "variables"

    def __init__(self, state: AppState, environment: Optional[Environment] = None):
        super().__init__(state)
        self.environment_id = environment.id if environment else None
        self.name = environment.name if environment else ""
        self.variables_text = format_pairs(list(environment.variables.items())) if environment else ""
        self.field = self.NAME

    def handle(self, key: KeyPress) -> Outcome:
        if key.key == "escape":
            return EnvironmentsManagerModal(self.state, self.environment_id)
        if key.key in ("tab", "shift+tab"):
            self.field = self.VARIABLES if self.field == self.NAME else self.NAME
            return STAY
        if key.key == "ctrl+s":
            return self._save()
        if self.field == self.NAME:
            self.name, _ = edit_text(self.name, key)
        else:
            self.variables_text, _ = edit_text(self.variables_text, key, multiline=True)
        return STAY

    def _save(self) -> Outcome:
        name = self.name.strip()
        if not name:
            self.state.show_toast("Environment name is required", ToastKind.ERROR)
            return STAY
        variables = parse_variables(self.variables_text)
        config = self.state.environments
        if self.environment_id is None:
            config = add_environment(config, name, variables)
            selected_id = config.environments[-1].id
        else:
            config = update_environment(config, self.environment_id, name, variables)
            selected_id = self.environment_id
        self.state.environments = config
        self.state.request_effect(Effect.SAVE_ENVIRONMENTS)
        return EnvironmentsManagerModal(self.state, selected_id)


class SaveRequestModal(Modal):
    kind = ModalKind.SAVE_REQUEST

    def __init__(self, state: AppState):
        super().__init__(state)
        self.name = default_save_name(state)

    def handle(self, key: KeyPress) -> Outcome:
        if key.key == "escape":
            return CLOSE
        if key.key == "enter":
            return CLOSE if save_current_request(self.state, self.name) else STAY
        self.name, _ = edit_text(self.name, key)
        return STAY


class _ListViewerModal(Modal):
    """Cursor plus a ``PAGE_SIZE`` window over a list of entries."""

    def __init__(self, state: AppState):
        super().__init__(state)
        self.selected = 0
        self.offset = 0

    @property
    def entries(self) -> list:
        raise NotImplementedError

    def _move(self, key: KeyPress) -> bool:
        moved = move_selection(self.selected, key, len(self.entries))
        if moved is None:
            return False
        self.selected = moved
        if self.selected < self.offset:
            self.offset = self.selected
        elif self.selected >= self.offset + PAGE_SIZE:
            self.offset = self.selected - PAGE_SIZE + 1
        return True

    def _load_selected(self) -> Outcome:
        entries = self.entries
        if entries:
            load_request(self.state, entries[self.selected].request)
        return CLOSE


class HistoryViewerModal(_ListViewerModal):
    kind = ModalKind.HISTORY_VIEWER

    def __init__(self, state: AppState):
        super().__init__(state)
        # sends completing while open must not shift the cursor
        self._entries = list(reversed(state.history))

    @property
    def entries(self) -> List[HistoryEntry]:
        """Newest first, as of opening."""
        return self._entries

    def handle(self, key: KeyPress) -> Outcome:
        if key.key == "escape":
            return CLOSE
        if key.key == "enter":
            return self._load_selected()
        self._move(key)
        return STAY


class SavedRequestsViewerModal(_ListViewerModal):
    kind = ModalKind.SAVED_REQUESTS_VIEWER

    def __init__(self, state: AppState):
        super().__init__(state)
        self.confirm_delete = False

    @property
    def entries(self) -> List[SavedRequest]:
        return self.state.saved_requests

    @property
    def selected_entry(self) -> Optional[SavedRequest]:
        entries = self.entries
        return entries[self.selected] if 0 <= self.selected < len(entries) else None

    def handle(self, key: KeyPress) -> Outcome:
        if self.confirm_delete:
            if key.is_char("y", "Y"):
                self._delete_selected()
                self.confirm_delete = False
            elif key.is_char("n", "N") or key.key == "escape":
                self.confirm_delete = False
            return STAY

        if key.key == "escape":
            return CLOSE
        if key.key == "enter":
            return self._load_selected()
        if key.key == "delete" or key.is_char("d"):
            self.confirm_delete = self.selected_entry is not None
            return STAY
        self._move(key)
        return STAY

    def _delete_selected(self) -> None:
        removed = self.selected_entry
        if removed is None:
            return
        self.state.saved_requests = [e for e in self.entries if e.id != removed.id]
        self.state.request_effect(Effect.SAVE_SAVED_REQUESTS)
        self.state.show_toast(f'Deleted "{removed.name}"', ToastKind.SUCCESS)
        last = len(self.state.saved_requests) - 1
        self.selected = max(0, min(self.selected, last))
        self.offset = max(0, min(self.offset, last - PAGE_SIZE + 1, self.selected))


class ResponseViewerModal(Modal):
    kind = ModalKind.RESPONSE_VIEWER

    def __init__(self, state: AppState):
        super().__init__(state)
        self.offset = 0

    @property
    def lines(self) -> List[str]:
        response = self.state.response
        return response.body.split("\n") if response is not None else []

    def handle(self, key: KeyPress) -> Outcome:
        if key.key in ("escape", "space") or key.is_char(" "):
            return CLOSE
        moved = scroll(self.offset, key, len(self.lines))
        if moved is not None:
            self.offset = moved
        return STAY
