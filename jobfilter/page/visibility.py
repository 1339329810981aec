"""The one page write the filter performs: the card's inline ``display``.

Hiding sets ``display: none``; showing removes the inline ``display``
declaration so the page's own stylesheet decides again. Every other inline
declaration is left exactly as written, including values that contain
``;`` inside ``url(...)`` or quotes and custom properties with mixed case.
"""

from typing import List, Optional, Tuple

from bs4.element import Tag

_HIDDEN = "none"


def _split_declarations(style: str) -> List[str]:
    """Split on ``;`` outside parentheses and quoted strings. Segments keep their whitespace."""
    segments = []
    start = 0
    depth = 0
    quote = None
    escaped = False
    for index, char in enumerate(style):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")" and depth:
            depth -= 1
        elif char == ";" and depth == 0:
            segments.append(style[start:index])
            start = index + 1
    segments.append(style[start:])
    return segments


def _display_of(segment: str) -> Optional[str]:
    """Value of ``segment`` when it is a display declaration, else None."""
    name, sep, value = segment.partition(":")
    if not sep or name.strip().lower() != "display":
        return None
    return value.split("!", 1)[0].strip()


def _strip_display(style: str) -> Tuple[str, bool]:
    """``style`` without its display declarations, and whether any were removed."""
    segments = _split_declarations(style)
    kept = [segment for segment in segments if _display_of(segment) is None]
    if len(kept) == len(segments):
        return style, False
    return ";".join(kept).strip(), True


def display_value(element: Tag) -> Optional[str]:
    """Inline display value of ``element`` (None when not set). The last declaration wins."""
    value = None
    for segment in _split_declarations(element.get("style") or ""):
        found = _display_of(segment)
        if found is not None:
            value = found
    return value


def is_hidden(element: Tag) -> bool:
    return display_value(element) == _HIDDEN


def hide(element: Tag) -> None:
    """Set ``display: none`` on ``element``."""
    if is_hidden(element):
        return
    rest, _ = _strip_display(element.get("style") or "")
    rest = rest.rstrip()
    if not rest:
        element["style"] = f"display: {_HIDDEN}"
    elif rest.endswith(";"):
        element["style"] = f"{rest} display: {_HIDDEN}"
    else:
        element["style"] = f"{rest}; display: {_HIDDEN}"


def show(element: Tag) -> None:
    """Remove the inline display declaration, restoring the default."""
    rest, removed = _strip_display(element.get("style") or "")
    if not removed:
        return
    if rest.strip(" ;"):
        element["style"] = rest
    else:
        element.attrs.pop("style", None)


def set_visible(element: Tag, visible: bool) -> None:
    if visible:
        show(element)
    else:
        hide(element)
