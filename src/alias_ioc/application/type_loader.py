"""Loading classes from dotted names."""

import importlib
from typing import Type


def load_type(type_name: str) -> Type:
    """Import and return the object named by a dotted path.

    The longest importable module prefix is imported and the remaining
    segments are looked up as attributes, so nested classes such as
    ``package.module.Outer.Inner`` load as well.

    Args:
        type_name: Dotted path, e.g. ``"app.mail.SmtpMailer"``.

    Returns:
        The object found at the path (not necessarily a class).

    Raises:
        ImportError: If no module prefix of the path can be imported or an
            attribute along the path is missing.
    """
    parts = type_name.lstrip(".").split(".")
    if len(parts) < 2 or not all(parts):
        raise ImportError(f"'{type_name}' is not a dotted path to a class")

    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            obj = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # only keep searching when the missing module is the one tried
            if exc.name and module_name != exc.name and not module_name.startswith(exc.name + "."):
                raise
            continue

        for attribute in parts[split:]:
            try:
                obj = getattr(obj, attribute)
            except AttributeError as exc:
                raise ImportError(f"'{module_name}' has no attribute path '{'.'.join(parts[split:])}'") from exc
        return obj

    raise ImportError(f"No module found for '{type_name}'")
