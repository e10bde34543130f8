"""Search filter templates.

A template is an LDAP filter with exactly one ``%s`` placeholder, e.g.
``(uid=%s)`` or ``(&(objectClass=posixGroup)(memberUid=%s))``. Values are
escaped before substitution so a username cannot change the filter's shape.
"""

from __future__ import annotations

from ldap3.utils.conv import escape_filter_chars

PLACEHOLDER = "%s"


class FilterTemplate:
    __slots__ = ("_template",)

    def __init__(self, template: str) -> None:
        if isinstance(template, FilterTemplate):
            template = template.template
        if not isinstance(template, str):
            raise ValueError("filter template must be a string")
        template = template.strip()
        count = template.count(PLACEHOLDER)
        if count != 1:
            raise ValueError(f"filter template needs exactly one '{PLACEHOLDER}' placeholder, found {count}: {template!r}")
        _check_parentheses(template)
        self._template = template

    @property
    def template(self) -> str:
        return self._template

    def render(self, value: str) -> str:
        """Return the filter with ``value`` escaped and substituted."""
        before, after = self._template.split(PLACEHOLDER)
        return f"{before}{escape_filter_chars(value)}{after}"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FilterTemplate):
            return self._template == other._template
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._template)

    def __repr__(self) -> str:
        return f"FilterTemplate({self._template!r})"

    def __str__(self) -> str:
        return self._template


def _check_parentheses(template: str) -> None:
    if not (template.startswith("(") and template.endswith(")")):
        raise ValueError(f"filter template must be enclosed in parentheses: {template!r}")
    depth = 0
    for char in template:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                break
    if depth != 0:
        raise ValueError(f"unbalanced parentheses in filter template: {template!r}")
