"""Extractor - turns an actions module into an ActionRegistry.

Scans the top-level declarations of a module, picks out the functions
marked with ``@action``, classifies their parameters into form fields and
context arguments, and strips every marker so the remaining module can be
emitted unchanged.
"""

from __future__ import annotations

import ast
import copy
import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple, Union

import pydantic

from formgen.ast.spec import (
    Action,
    ActionRegistry,
    ContextArgument,
    FormField,
    ParameterKind,
)
from formgen.errors import (
    ConfigurationError,
    DuplicateActionError,
    DuplicateFieldNameError,
    GenerationError,
    InvalidFormParameterPattern,
    SelfParameterError,
)

log = logging.getLogger(__name__)

ACTION_MARKER = "action"
FORM_MARKER = "form"
CONFIG_NAME = "__actions__"

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]


@dataclass
class Extraction:
    """Result of extracting one module."""

    module: ast.Module
    registry: ActionRegistry
    config: Optional[Any] = None
    config_node: Optional[ast.AST] = None


def _marker_name(node: ast.expr) -> Optional[str]:
    """Name of a decorator or annotation marker: ``x``, ``x()`` or ``a.x()``."""
    target = node.func if isinstance(node, ast.Call) else node
    if isinstance(target, ast.Name):
        return target.id
    if isinstance(target, ast.Attribute):
        return target.attr
    return None


def _is_annotated(node: ast.expr) -> bool:
    return isinstance(node, ast.Subscript) and _marker_name(node.value) == "Annotated"


def _bound_names(node: ast.stmt) -> Iterator[str]:
    """Module-level names a top-level statement binds."""
    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
        yield node.name
    elif isinstance(node, (ast.Import, ast.ImportFrom)):
        for alias in node.names:
            if alias.name != "*":
                yield alias.asname or alias.name.split(".")[0]
    else:
        if isinstance(node, ast.Assign):
            targets = list(node.targets)
        elif isinstance(node, (ast.AnnAssign, ast.AugAssign)):
            targets = [node.target]
        else:
            return
        while targets:
            target = targets.pop()
            if isinstance(target, ast.Name):
                yield target.id
            elif isinstance(target, (ast.Tuple, ast.List)):
                targets.extend(target.elts)
            elif isinstance(target, ast.Starred):
                targets.append(target.value)


def _shadows_model_attribute(ident: str) -> bool:
    """Whether a field name clashes with the pydantic model namespace."""
    return ident.startswith("model_") or hasattr(pydantic.BaseModel, ident)


class Extractor:
    """Extracts actions from module source."""

    def __init__(self, filename: str = "<unknown>"):
        self.filename = filename

    def extract(self, source: Union[str, ast.Module]) -> Extraction:
        """Extract the actions of a module.

        Args:
            source: Module source text, or an already parsed module. A parsed
                module is copied, never modified.

        Returns:
            The marker-free module, its actions and its raw configuration.

        Raises:
            GenerationError: on the first invalid declaration.
        """
        module = self._parse(source)

        body: List[ast.stmt] = []
        actions: List[Action] = []
        seen: dict[str, Action] = {}
        config: Optional[Any] = None
        config_node: Optional[ast.AST] = None

        for node in module.body:
            if self._is_config(node):
                if config_node is not None:
                    raise ConfigurationError.at(
                        node, f"{CONFIG_NAME} is assigned more than once", self.filename
                    )
                config, config_node = self._read_config(node), node
                continue

            action = None
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                action = self._extract_action(node)
                if action is not None:
                    if action.ident in seen:
                        raise DuplicateActionError.at(
                            node,
                            f"action '{action.ident}' is already defined "
                            f"on line {seen[action.ident].lineno}",
                            self.filename,
                        )
                    seen[action.ident] = action
                    actions.append(action)

            if action is None:
                for name in _bound_names(node):
                    if name in seen:
                        raise DuplicateActionError.at(
                            node,
                            f"'{name}' rebinds the action defined "
                            f"on line {seen[name].lineno}",
                            self.filename,
                        )

            body.append(node)

        module.body = body
        log.debug("Extracted %d action(s) from %s", len(actions), self.filename)

        return Extraction(
            module=module,
            registry=ActionRegistry(tuple(actions)),
            config=config,
            config_node=config_node,
        )

    def _parse(self, source: Union[str, ast.Module]) -> ast.Module:
        if isinstance(source, ast.Module):
            return copy.deepcopy(source)

        try:
            return ast.parse(source, filename=self.filename)
        except SyntaxError as exc:
            raise GenerationError(
                f"invalid syntax: {exc.msg}",
                filename=self.filename,
                lineno=exc.lineno,
                col_offset=(exc.offset - 1) if exc.offset else None,
            ) from exc

    # -------------------------------------------------------------------------
    # Scope configuration
    # -------------------------------------------------------------------------

    def _is_config(self, node: ast.stmt) -> bool:
        if isinstance(node, ast.Assign):
            return any(
                isinstance(t, ast.Name) and t.id == CONFIG_NAME for t in node.targets
            )
        if isinstance(node, ast.AnnAssign):
            return isinstance(node.target, ast.Name) and node.target.id == CONFIG_NAME
        return False

    def _read_config(self, node: Union[ast.Assign, ast.AnnAssign]) -> Any:
        if node.value is None:
            raise ConfigurationError.at(
                node, f"{CONFIG_NAME} must be assigned a value", self.filename
            )
        try:
            return ast.literal_eval(node.value)
        except (ValueError, SyntaxError) as exc:
            raise ConfigurationError.at(
                node, f"{CONFIG_NAME} must be a literal mapping", self.filename
            ) from exc

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def _extract_action(self, fn: FunctionNode) -> Optional[Action]:
        marker = self._take_action_marker(fn)
        if marker is None:
            return None

        form: List[FormField] = []
        context: List[ContextArgument] = []
        external_names: dict[str, ast.arg] = {}

        for index, (arg, kind, default) in enumerate(self._parameters(fn)):
            if index == 0 and kind is ParameterKind.POSITIONAL and arg.arg == "self":
                raise SelfParameterError.at(arg, '"self" is not allowed', self.filename)

            annotation, form_marker = self._take_form_marker(arg)

            if form_marker is None:
                context.append(
                    ContextArgument(
                        ident=f"arg_{index}" if kind is ParameterKind.VARIADIC else arg.arg,
                        position=index,
                        kind=kind,
                        annotation=ast.unparse(annotation) if annotation else None,
                    )
                )
                continue

            if kind is ParameterKind.VARIADIC:
                raise InvalidFormParameterPattern.at(
                    arg,
                    "parameters marked with form() must be plain named parameters",
                    self.filename,
                )
            if arg.arg.startswith("_"):
                # Neither NamedTuple nor pydantic fields may start with "_".
                raise InvalidFormParameterPattern.at(
                    arg,
                    f"form parameter '{arg.arg}' must not start with an underscore",
                    self.filename,
                )
            if _shadows_model_attribute(arg.arg):
                raise InvalidFormParameterPattern.at(
                    arg,
                    f"form parameter '{arg.arg}' clashes with "
                    "a pydantic model attribute",
                    self.filename,
                )

            field = FormField(
                ident=arg.arg,
                annotation=ast.unparse(annotation),
                position=index,
                kind=kind,
                rename=self._read_rename(form_marker),
                default=ast.unparse(default) if default is not None else None,
            )

            if field.external_name in external_names:
                raise DuplicateFieldNameError.at(
                    arg,
                    f"form field name '{field.external_name}' is used twice "
                    f"in action '{fn.name}'",
                    self.filename,
                )
            external_names[field.external_name] = arg
            form.append(field)

        return Action(
            ident=fn.name,
            form=tuple(form),
            context=tuple(context),
            is_async=isinstance(fn, ast.AsyncFunctionDef),
            lineno=fn.lineno,
            col_offset=fn.col_offset,
        )

    def _take_action_marker(self, fn: FunctionNode) -> Optional[ast.expr]:
        """Remove the ``@action`` decorator from ``fn`` and return it."""
        for decorator in fn.decorator_list:
            if _marker_name(decorator) != ACTION_MARKER:
                continue
            if isinstance(decorator, ast.Call) and (decorator.args or decorator.keywords):
                raise ConfigurationError.at(
                    decorator, "@action does not take any arguments", self.filename
                )
            fn.decorator_list.remove(decorator)
            return decorator
        return None

    def _parameters(
        self, fn: FunctionNode
    ) -> List[Tuple[ast.arg, ParameterKind, Optional[ast.expr]]]:
        """Every parameter of ``fn`` in declaration order with its default."""
        args = fn.args
        positional = [*args.posonlyargs, *args.args]
        defaults: List[Optional[ast.expr]] = [None] * (
            len(positional) - len(args.defaults)
        ) + list(args.defaults)

        params: List[Tuple[ast.arg, ParameterKind, Optional[ast.expr]]] = [
            (arg, ParameterKind.POSITIONAL, default)
            for arg, default in zip(positional, defaults)
        ]
        if args.vararg is not None:
            params.append((args.vararg, ParameterKind.VARIADIC, None))
        params.extend(
            (arg, ParameterKind.KEYWORD, default)
            for arg, default in zip(args.kwonlyargs, args.kw_defaults)
        )
        if args.kwarg is not None:
            params.append((args.kwarg, ParameterKind.VARIADIC, None))
        return params

    def _take_form_marker(
        self, arg: ast.arg
    ) -> Tuple[Optional[ast.expr], Optional[ast.expr]]:
        """Strip a ``form`` marker out of ``Annotated[T, ...]``.

        Returns the remaining annotation and the marker, if any. The
        annotation of ``arg`` is rewritten in place.
        """
        annotation = arg.annotation
        if annotation is not None and _marker_name(annotation) == FORM_MARKER:
            raise ConfigurationError.at(
                annotation,
                f"form() must be wrapped as Annotated[<type>, form()] on '{arg.arg}'",
                self.filename,
            )
        if annotation is None or not _is_annotated(annotation):
            return annotation, None

        assert isinstance(annotation, ast.Subscript)
        if not isinstance(annotation.slice, ast.Tuple):
            return annotation, None

        base, *metadata = annotation.slice.elts
        markers = [item for item in metadata if _marker_name(item) == FORM_MARKER]
        if not markers:
            return annotation, None
        if len(markers) > 1:
            raise ConfigurationError.at(
                markers[1], "form() is given more than once", self.filename
            )

        rest = [item for item in metadata if item is not markers[0]]
        if rest:
            annotation.slice.elts = [base, *rest]
            stripped: ast.expr = annotation
        else:
            stripped = base

        arg.annotation = stripped
        return base, markers[0]

    def _read_rename(self, marker: ast.expr) -> Optional[str]:
        if not isinstance(marker, ast.Call):
            return None

        if marker.args:
            raise ConfigurationError.at(
                marker, "form() only accepts the 'rename' keyword", self.filename
            )

        rename: Optional[str] = None
        for keyword in marker.keywords:
            if keyword.arg != "rename":
                raise ConfigurationError.at(
                    keyword,
                    f"unrecognized form() option '{keyword.arg}'",
                    self.filename,
                )
            value = keyword.value
            if not isinstance(value, ast.Constant) or not isinstance(
                value.value, (str, type(None))
            ):
                raise ConfigurationError.at(
                    value, "form(rename=...) must be a string literal", self.filename
                )
            rename = value.value

        return rename
