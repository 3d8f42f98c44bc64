"""``$1`` / ``${name}`` template expansion shared by the routing rules."""

from __future__ import annotations

import re

_TEMPLATE_REF = re.compile(r"\$(?:\$|\{(\w+)\}|(\w+))")


def expand_template(match: re.Match[str], template: str) -> str:
    """Expand group references in ``template`` against a regex match.

    ``$$`` is a literal dollar. Groups that did not take part in the match
    expand to ''.

    Raises:
        ValueError: The template references a group the pattern lacks.
    """

    def replace(ref: re.Match[str]) -> str:
        if ref.group(0) == "$$":
            return "$"
        name = ref.group(1) or ref.group(2)
        group: int | str = int(name) if name.isdigit() else name
        try:
            value = match.group(group)
        except IndexError:
            raise ValueError(
                f"template '{template}' references unknown group '{name}'"
            ) from None
        return value or ""

    return _TEMPLATE_REF.sub(replace, template)
