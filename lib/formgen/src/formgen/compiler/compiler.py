"""Compiler - transforms extracted actions into GeneratedScope IR."""

import logging
from typing import Dict, List, Optional, Set

from formgen.ast.extractor import Extraction
from formgen.ast.spec import Action, ActionRegistry, ContextArgument, ParameterKind
from formgen.compiler.backends import COMMON_IMPORTS, Backend, get_backend
from formgen.compiler.descriptor import METADATA_IMPORTS, build_descriptors
from formgen.compiler.environment import get_formgen_jinja_env
from formgen.compiler.spec import (
    Branch,
    ContextSlot,
    Dispatcher,
    FormDescriptor,
    LOCAL_PREFIX,
    GeneratedScope,
)
from formgen.config import ScopeConfig
from formgen.errors import ReservedNameError

log = logging.getLogger(__name__)


class Compiler:
    """Compiles an Extraction into GeneratedScope IR."""

    def __init__(self, filename: str = "<unknown>"):
        """Initialize the compiler.

        Args:
            filename: Name of the source module, used in diagnostics.
        """
        self.filename = filename
        self.env = get_formgen_jinja_env()

    def compile(self, extraction: Extraction, config: ScopeConfig) -> GeneratedScope:
        """Compile the actions of one module.

        Algorithm:
        1. Build and render one FormDescriptor per action (metadata + decoder)
        2. For every requested backend, validate the actions against it
        3. Build one match branch per action, in declaration order
        4. Render the backend template around the shared dispatch core

        Args:
            extraction: Output of the Extractor.
            config: Validated scope configuration.

        Returns:
            GeneratedScope IR ready for rendering to text.
        """
        descriptors = build_descriptors(extraction.registry, self.env)

        dispatchers = []
        generated_names = {
            name for d in descriptors for name in (d.metadata_class, d.decoder_class)
        }
        for name, backend_config in config.backends.items():
            backend = get_backend(name, backend_config)
            backend.validate(extraction.registry, self.filename)
            generated_names.update(backend.module_names())
            dispatchers.append(self._compile_backend(backend, descriptors, config.state))

        imports: List[str] = list(COMMON_IMPORTS) if dispatchers else []
        for line in [*METADATA_IMPORTS, *(i for d in dispatchers for i in d.imports)]:
            if line not in imports:
                imports.append(line)

        generated_names.update(line.rsplit(" as ", 1)[-1] for line in imports)
        self._check_names(extraction.registry, generated_names)

        log.debug(
            "Compiled %d action(s) for %d backend(s) in %s",
            len(descriptors),
            len(dispatchers),
            self.filename,
        )

        return GeneratedScope(
            declarations=extraction.module,
            source_name=self.filename,
            imports=imports,
            descriptors=descriptors,
            dispatchers=dispatchers,
        )

    def _compile_backend(
        self,
        backend: Backend,
        descriptors: List[FormDescriptor],
        state: Optional[str],
    ) -> Dispatcher:
        """Render the dispatcher of one backend."""
        branches = [
            self._compile_branch(descriptor, backend.bindings(descriptor.action))
            for descriptor in descriptors
        ]

        template = self.env.get_template(backend.template)
        source = template.render(
            handler=backend.handler,
            state=state,
            branches=branches,
            **backend.variables(),
        )

        return Dispatcher(
            backend=backend.name,
            handler=backend.handler,
            source=source,
            imports=list(backend.imports),
        )

    def _compile_branch(
        self, descriptor: FormDescriptor, bindings: Dict[str, str]
    ) -> Branch:
        """Build the match branch of one action.

        Form fields come from the decoded model; context arguments are either
        bound by the host (``bindings``) or resolved at request time, in
        declaration order.
        """
        action = descriptor.action
        values: Dict[int, str] = {
            field.position: f"{LOCAL_PREFIX}form_data.{field.ident}"
            for field in action.form
        }

        slots: List[ContextSlot] = []
        for argument in action.bound_context:
            if argument.ident in bindings:
                values[argument.position] = bindings[argument.ident]
                continue
            slot = self._context_slot(argument)
            values[argument.position] = slot.local
            slots.append(slot)

        return Branch(
            route_match=descriptor.route_match,
            decoder=descriptor.decoder_class,
            call=self._call(action, values),
            is_async=action.is_async,
            context=slots,
        )

    def _context_slot(self, argument: ContextArgument) -> ContextSlot:
        return ContextSlot(
            local=f"{LOCAL_PREFIX}context_{argument.ident}",
            name=argument.ident,
            annotation=argument.annotation or "None",
        )

    def _call(self, action: Action, values: Dict[int, str]) -> str:
        """Call expression binding every parameter the way it is declared.

        Variadic parameters receive nothing.
        """
        arguments = []
        for parameter in action.parameters:
            if parameter.kind is ParameterKind.VARIADIC:
                continue
            value = values[parameter.position]
            if parameter.kind is ParameterKind.KEYWORD:
                arguments.append(f"{parameter.ident}={value}")
            else:
                arguments.append(value)
        return f"{action.ident}({', '.join(arguments)})"

    def _check_names(self, registry: ActionRegistry, generated_names: Set[str]) -> None:
        """Reject actions the generated code would shadow or misread.

        Locals of the dispatchers all start with ``LOCAL_PREFIX``; the other
        generated names live at module level next to the actions.
        """
        for action in registry:
            if action.ident.startswith(LOCAL_PREFIX):
                reason = f"names starting with {LOCAL_PREFIX!r} are reserved"
            elif action.ident in generated_names:
                reason = "the name is defined by the generated code"
            else:
                continue
            raise ReservedNameError(
                f"action '{action.ident}' cannot be dispatched: {reason}",
                filename=self.filename,
                lineno=action.lineno,
                col_offset=action.col_offset,
            )
