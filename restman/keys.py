from typing import Any, NamedTuple, Optional


class KeyPress(NamedTuple):
    """A logical key press.

    ``key`` uses Textual key names ("enter", "escape", "tab", "shift+tab",
    "up", "ctrl+c", "a", "D", ...). ``character`` is the printable text the key
    produced, if any.
    """

    key: str
    character: Optional[str] = None

    @classmethod
    def from_event(cls, event: Any) -> "KeyPress":
        return cls(event.key, event.character)

    @classmethod
    def char(cls, character: str) -> "KeyPress":
        names = {" ": "space", "/": "slash"}
        return cls(names.get(character, character), character)

    @property
    def is_ctrl(self) -> bool:
        return self.key.startswith("ctrl+")

    @property
    def printable(self) -> Optional[str]:
        if self.is_ctrl or not self.character or len(self.character) != 1:
            return None
        return self.character if self.character.isprintable() else None

    def is_char(self, *characters: str) -> bool:
        return not self.is_ctrl and self.character in characters
