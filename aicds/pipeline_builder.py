"""Builder for textual media pipeline descriptions joined with `` ! ``."""

from __future__ import annotations

from typing import Any

_PLACEHOLDER = "{}"


def _substitute(template: str, args: tuple[Any, ...]) -> str:
    parts: list[str] = []
    rest = template
    for arg in args:
        pos = rest.find(_PLACEHOLDER)
        if pos < 0:
            break
        parts.append(rest[:pos])
        parts.append(str(arg))
        rest = rest[pos + len(_PLACEHOLDER):]
    parts.append(rest)
    return "".join(parts)


class PipelineBuilder:
    """Accumulates pipeline elements into one description string."""

    def __init__(self) -> None:
        self._description = ""

    def add_element(self, element: str, *args: Any) -> PipelineBuilder:
        """Append an element; with arguments, fill successive ``{}`` placeholders."""
        if args:
            element = _substitute(element, args)
        if self._description:
            self._description += " ! "
        self._description += element
        return self

    def build(self) -> str:
        return self._description

    def clear(self) -> None:
        self._description = ""