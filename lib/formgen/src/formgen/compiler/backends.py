"""Host framework backends.

A backend is the adapter surface of one host framework: which template
wraps the shared dispatch core, what the template imports, and which
context arguments the host supplies directly. Everything else, from key
resolution to the not-found fallback, is shared.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from formgen.ast.spec import Action, ActionRegistry
from formgen.config import MicrodotConfig, StarletteConfig
from formgen.compiler.spec import LOCAL_PREFIX
from formgen.errors import PathParameterArityError

COMMON_IMPORTS = ["import formactions as _formactions"]


class Backend(ABC):
    """Base class for host framework backends."""

    name: str = ""
    template: str = ""
    imports: List[str] = []

    def __init__(self, config: Any):
        self.config = config

    @property
    def handler(self) -> str:
        return self.config.handler

    def validate(self, registry: ActionRegistry, filename: str) -> None:
        """Reject actions this host cannot call."""

    def bindings(self, action: Action) -> Dict[str, str]:
        """Context arguments filled by the host, as ``ident -> expression``."""
        return {}

    def module_names(self) -> List[str]:
        """Module-level names the rendered dispatcher defines."""
        return [self.handler]

    @abstractmethod
    def variables(self) -> Dict[str, Any]:
        """Template variables specific to this host."""


class StarletteBackend(Backend):
    """Variant A: a single ``async def`` handler function."""

    name = "starlette"
    template = "starlette.py.j2"
    imports = [
        "from formactions.hosts import starlette as _starlette_host",
        "from starlette.requests import Request as _StarletteRequest",
        "from starlette.responses import Response as _StarletteResponse",
    ]

    config: StarletteConfig

    def variables(self) -> Dict[str, Any]:
        return {}


class MicrodotBackend(Backend):
    """Variant B: a stateless handler class threading path parameters."""

    name = "microdot"
    template = "microdot.py.j2"
    imports = [
        "import typing as _typing",
        "from formactions.hosts import microdot as _microdot_host",
        "from microdot import Request as _MicrodotRequest",
        "from microdot import Response as _MicrodotResponse",
    ]

    config: MicrodotConfig

    @property
    def path_parameter_names(self) -> List[str]:
        count = len(self.config.path_parameters)
        return [f"{LOCAL_PREFIX}path_parameter_{i}" for i in range(count)]

    def validate(self, registry: ActionRegistry, filename: str) -> None:
        arity = len(self.config.path_parameters)
        for action in registry:
            if len(action.bound_context) < arity:
                raise PathParameterArityError(
                    f"action '{action.ident}' must accept {arity} path "
                    f"parameter(s) as its leading context arguments",
                    filename=filename,
                    lineno=action.lineno,
                    col_offset=action.col_offset,
                )

    def bindings(self, action: Action) -> Dict[str, str]:
        return {
            argument.ident: name
            for argument, name in zip(action.bound_context, self.path_parameter_names)
        }

    @property
    def state_var(self) -> str:
        return f"_{self.handler}State"

    def module_names(self) -> List[str]:
        return [self.handler, self.state_var]

    def variables(self) -> Dict[str, Any]:
        types = self.config.path_parameters
        return {
            "state_var": self.state_var,
            "path_parameter_names": self.path_parameter_names,
            "path_parameters_type": f"tuple[{', '.join(types) if types else '()'}]",
        }


BACKENDS: Dict[str, type[Backend]] = {
    "starlette": StarletteBackend,
    "microdot": MicrodotBackend,
}


def get_backend(name: str, config: Any) -> Backend:
    """Create the backend registered under ``name``."""
    if name not in BACKENDS:
        raise ValueError(f"Unknown backend: {name}")
    return BACKENDS[name](config)
