"""Parameter type annotations written in docstrings.

Untyped constructor parameters may still document their type. Four styles
are recognised, checked in this order for every parameter:

- ``:type name: Type``
- ``:param Type name: description``
- ``name (Type): description`` (Google style ``Args:`` entries)
- ``@param Type $name`` (phpDoc style)
"""

import re
from typing import Dict, Optional

_TYPE = r"(?P<type>\\?[A-Za-z_][\w.\\]*)"

_PATTERNS = (
    re.compile(r":type\s+(?P<name>\w+)\s*:\s*" + _TYPE),
    re.compile(r":param\s+" + _TYPE + r"\s+(?P<name>\w+)\s*:"),
    re.compile(r"^\s*(?P<name>\w+)\s*\(" + _TYPE + r"(?:\s*,\s*optional)?\)\s*:", re.MULTILINE),
    re.compile(r"@param[\t ]+" + _TYPE + r"[\t ]+\$?(?P<name>\w+)"),
)


def _normalize(type_name: str) -> str:
    return type_name.strip("\\").replace("\\", ".")


def parse_parameter_types(docstring: Optional[str]) -> Dict[str, str]:
    """Map parameter names to the type names documented for them.

    Args:
        docstring: Raw docstring, may be None.

    Returns:
        Parameter name -> documented type name. The first documented type
        wins when a parameter is annotated more than once.

    Example:
        >>> parse_parameter_types(":param app.mail.Transport transport: outbound transport")
        {'transport': 'app.mail.Transport'}
    """
    if not docstring:
        return {}

    found: Dict[str, str] = {}
    for pattern in _PATTERNS:
        for match in pattern.finditer(docstring):
            found.setdefault(match.group("name"), _normalize(match.group("type")))
    return found
