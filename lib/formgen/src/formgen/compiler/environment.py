"""Jinja2 environment for formgen templates."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).parent / "templates"


def py_literal(value: object) -> str:
    """Render a value as a Python literal.

    Args:
        value: A string, number, bool or None.

    Returns:
        Source text that evaluates back to ``value``.
    """
    return repr(value)


def get_formgen_jinja_env() -> Environment:
    """Create the Jinja2 Environment used to emit Python source.

    Returns:
        Configured Jinja2 Environment.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )

    env.filters["py"] = py_literal

    return env
