import re
from typing import Dict, List, Mapping, Optional


# First "}}" after the opening "{{" closes the placeholder, so "{{A and {{B}}"
# is one match.
_VAR_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def substitute(text: Optional[str], variables: Mapping[str, str]) -> Optional[str]:
    """Replace ``{{NAME}}`` placeholders with values from ``variables``.

    Unknown names and empty values leave the placeholder untouched. Replaced
    values are never scanned again.
    """
    if not text:
        return text

    def _replace(match: "re.Match[str]") -> str:
        value = variables.get(match.group(1).strip())
        if isinstance(value, str) and value:
            return value
        return match.group(0)

    return _VAR_PATTERN.sub(_replace, text)


def substitute_in_map(mapping: Mapping[str, str], variables: Mapping[str, str]) -> Dict[str, str]:
    return {k: substitute(v, variables) for k, v in mapping.items()}


def find_variable_names(text: Optional[str]) -> List[str]:
    if not text:
        return []
    names: Dict[str, None] = {}
    for match in _VAR_PATTERN.finditer(text):
        names.setdefault(match.group(1).strip(), None)
    return list(names)


def contains_variable(text: Optional[str]) -> bool:
    if not text:
        return False
    return _VAR_PATTERN.search(text) is not None
