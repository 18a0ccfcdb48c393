from __future__ import annotations

from .models import SelectorState


def convert_selector_state_into_css_selector(state: SelectorState, depth: int | None = None) -> str:
    levels = state.levels if depth is None else state.levels[: max(1, depth)]

    parts: list[str] = []
    previous_index: int | None = None
    for index in range(len(levels) - 1, -1, -1):
        bucket = levels[index]
        if not bucket and index != 0:
            continue
        compound = compound_selector(bucket)
        if previous_index is None:
            parts.append(compound)
        elif previous_index - index == 1:
            parts.append(f" > {compound}")
        else:
            # skipped ancestors become a descendant combinator
            parts.append(f" {compound}")
        previous_index = index
    return "".join(parts)


def compound_selector(fragments: list[str]) -> str:
    if not fragments:
        return "*"
    type_selectors = [item for item in fragments if _is_type_selector(item)]
    rest = [item for item in fragments if not _is_type_selector(item)]
    return "".join(type_selectors[:1] + rest)


def _is_type_selector(fragment: str) -> bool:
    return fragment == "*" or fragment[:1].isalpha()


def escape_css_identifier(value: str) -> str:
    escaped: list[str] = []
    length = len(value)
    for index, char in enumerate(value):
        code = ord(char)
        if code == 0:
            escaped.append("\ufffd")
        elif 0x1 <= code <= 0x1F or code == 0x7F:
            escaped.append(f"\\{code:x} ")
        elif index == 0 and char.isdigit() and char.isascii():
            escaped.append(f"\\{code:x} ")
        elif index == 1 and char.isdigit() and char.isascii() and value[0] == "-":
            escaped.append(f"\\{code:x} ")
        elif index == 0 and char == "-" and length == 1:
            escaped.append("\\-")
        elif index == 1 and char == "-" and value[0] == "-":
            # cssselect does not accept custom-property style "--" idents
            escaped.append("\\-")
        elif code >= 0x80 or char in ("-", "_") or (char.isascii() and char.isalnum()):
            escaped.append(char)
        else:
            escaped.append(f"\\{char}")
    return "".join(escaped)


def escape_css_string(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\a ")
        .replace("\r", "\\d ")
    )
