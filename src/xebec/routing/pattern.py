"""Path templates compiled to anchored regular expressions.

A template is a literal path with ``:name`` segments::

    "/user/:id"            -> ^/user/([^/]+)$      params ("id",)
    "/org/:org/repo/:repo" -> two captures, in template order
    "*"                    -> matches any path, no captures

Every other regex metacharacter in the template is escaped, so ``.``,
``+``, ``(`` and friends match literally.
"""

import re
from dataclasses import dataclass

from xebec.errors import ConfigurationError

WILDCARD = "*"

# A parameter marker: colon followed by an ASCII identifier
_PARAM = re.compile(r":([A-Za-z0-9_]+)")

# One dynamic segment: one or more non-slash characters
_SEGMENT = "([^/]+)"


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A compiled path template.

    ``regex`` is matched against the whole path (never a prefix).
    ``param_names`` are in template order, aligned with regex groups.
    """

    template: str
    regex: re.Pattern[str]
    param_names: tuple[str, ...] = ()

    @property
    def is_wildcard(self) -> bool:
        return self.template == WILDCARD

    def match(self, path: str) -> dict[str, str] | None:
        """Return captured parameters if *path* matches, else ``None``."""
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        return dict(zip(self.param_names, m.groups(), strict=True))


def compile_pattern(template: str) -> CompiledPattern:
    """Compile a path template into a ``CompiledPattern``.

    Raises:
        ConfigurationError: If the template is empty, does not start with
            ``/``, repeats a parameter name, or uses ``*`` anywhere but as
            the whole template.
    """
    if template == WILDCARD:
        return CompiledPattern(template, re.compile(r".*", re.DOTALL))

    if not template.startswith("/"):
        msg = f"Route pattern {template!r} must start with '/' (or be exactly '*')."
        raise ConfigurationError(msg)

    if WILDCARD in template:
        msg = (
            f"Route pattern {template!r} embeds '*'. The wildcard is only valid "
            "as the whole pattern; use ':name' for a dynamic segment."
        )
        raise ConfigurationError(msg)

    names: list[str] = []
    parts: list[str] = []
    pos = 0
    for m in _PARAM.finditer(template):
        name = m.group(1)
        if name in names:
            msg = f"Route pattern {template!r} repeats parameter ':{name}'."
            raise ConfigurationError(msg)
        names.append(name)
        parts.append(re.escape(template[pos : m.start()]))
        parts.append(_SEGMENT)
        pos = m.end()
    parts.append(re.escape(template[pos:]))

    return CompiledPattern(template, re.compile("".join(parts)), tuple(names))
