from typing import Optional, Tuple

from .keys import KeyPress

PAGE_SIZE = 18


def edit_text(text: str, key: KeyPress, multiline: bool = False) -> Tuple[str, bool]:
    """Apply one key to ``text``; returns the new text and whether it changed."""
    if key.key == "backspace":
        return text[:-1], bool(text)
    if key.key == "enter":
        if multiline:
            return text + "\n", True
        return text, False
    if key.key == "space":
        return text + " ", True
    char = key.printable
    if char is None:
        return text, False
    return text + char, True


def scroll(offset: int, key: KeyPress, total: int, visible: int = PAGE_SIZE) -> Optional[int]:
    """New scroll offset for ``key``, or None when the key does not scroll."""
    bottom = max(0, total - visible)
    if key.key == "up":
        return max(0, offset - 1)
    if key.key == "down":
        return min(bottom, offset + 1)
    if key.key == "pageup":
        return max(0, offset - visible)
    if key.key == "pagedown":
        return min(bottom, offset + visible)
    if key.is_char("g"):
        return 0
    if key.is_char("G"):
        return bottom
    return None


def move_selection(index: int, key: KeyPress, count: int, wrap: bool = False,
                   page: int = PAGE_SIZE) -> Optional[int]:
    """New list cursor for ``key``, or None when the key does not move it."""
    if count <= 0:
        return None
    last = count - 1
    if key.key == "up":
        if wrap:
            return index - 1 if index > 0 else last
        return max(0, index - 1)
    if key.key == "down":
        if wrap:
            return index + 1 if index < last else 0
        return min(last, index + 1)
    if key.key == "pageup":
        return max(0, index - page)
    if key.key == "pagedown":
        return min(last, index + page)
    if key.is_char("g"):
        return 0
    if key.is_char("G"):
        return last
    return None
