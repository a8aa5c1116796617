"""Generate-and-import helpers.

`generate` is the whole pipeline from source text to augmented source text.
`load_source` and `load_module` additionally execute the result as a regular
module, which is how applications use an actions module without a build
step.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Mapping, Union

from formgen.ast.extractor import Extraction, Extractor
from formgen.compiler.compiler import Compiler
from formgen.compiler.renderer import Renderer
from formgen.config import ScopeConfig, load_config_file, merge_config, parse_scope_config

log = logging.getLogger(__name__)

Config = Union[ScopeConfig, Mapping[str, Any], None]


def resolve_config(
    extraction: Extraction, config: Config = None, *, filename: str = "<unknown>"
) -> ScopeConfig:
    """Validated configuration of an extracted module.

    A `ScopeConfig` replaces the module's own ``__actions__`` literal; a
    mapping is merged over it.
    """
    if isinstance(config, ScopeConfig):
        return config
    if config is not None and isinstance(extraction.config, (dict, type(None))):
        raw = merge_config(extraction.config or {}, dict(config))
        return parse_scope_config(raw, filename=filename)
    return parse_scope_config(
        extraction.config, filename=filename, node=extraction.config_node
    )


def generate(
    source: str,
    *,
    filename: str = "<unknown>",
    config: Config = None,
) -> str:
    """Generate the augmented module for ``source``.

    Args:
        source: Python source of the actions module.
        filename: Name used in diagnostics and in the generated header.
        config: A validated `ScopeConfig` replaces the module's own
            ``__actions__`` literal; a mapping is merged over it.

    Returns:
        Source text of the augmented module.

    Raises:
        GenerationError: if the module or its configuration is invalid.
    """
    extraction = Extractor(filename).extract(source)
    scope = resolve_config(extraction, config, filename=filename)

    generated = Compiler(filename).compile(extraction, scope)
    return Renderer().render(generated)


def load_source(
    source: str,
    module_name: str,
    *,
    filename: str | None = None,
    config: Config = None,
) -> ModuleType:
    """Generate ``source`` and import the result as ``module_name``.

    The module is registered in `sys.modules` before it is executed, so
    pydantic can resolve the annotations of the decode models.
    """
    filename = filename or f"<{module_name}>"
    code = compile(generate(source, filename=filename, config=config), filename, "exec")

    module = ModuleType(module_name)
    module.__file__ = filename
    sys.modules[module_name] = module
    try:
        exec(code, module.__dict__)
    except BaseException:
        del sys.modules[module_name]
        raise

    log.debug("Loaded generated module %s from %s", module_name, filename)
    return module


def load_module(
    path: str | Path,
    *,
    module_name: str | None = None,
    config: Config = None,
    config_path: str | Path | None = None,
) -> ModuleType:
    """Generate and import the actions module at ``path``.

    Args:
        path: Path to the actions module.
        module_name: Name to register, defaults to the file stem.
        config: Configuration override, as for `generate`.
        config_path: YAML file merged over the module's ``__actions__``.
    """
    path = Path(path)

    if config_path is not None:
        overrides = load_config_file(Path(config_path))
        if config is not None and not isinstance(config, ScopeConfig):
            overrides = merge_config(overrides, dict(config))
        config = config if isinstance(config, ScopeConfig) else overrides

    return load_source(
        path.read_text(),
        module_name or path.stem,
        filename=str(path),
        config=config,
    )
