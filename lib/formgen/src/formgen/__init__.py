"""formgen - generates form metadata and action dispatchers for Python modules.

Usage:
    import formgen
    module = formgen.load_module("page_actions.py")
    app.add_route("/", module.actions_handler, methods=["POST"])
"""

from formgen.config import ScopeConfig, load_config_file, merge_config, parse_scope_config
from formgen.errors import GenerationError
from formgen.loader import generate, load_module, load_source, resolve_config

__all__ = [
    "GenerationError",
    "ScopeConfig",
    "generate",
    "load_config_file",
    "load_module",
    "load_source",
    "merge_config",
    "parse_scope_config",
    "resolve_config",
]
