"""Renderer - turns GeneratedScope IR into module source text."""

import ast
import logging
from typing import List

from formgen.compiler.spec import GENERATED_HEADER, GENERATED_SECTION, GeneratedScope
from formgen.errors import GenerationError

log = logging.getLogger(__name__)


class Renderer:
    """Renders the rewritten actions module.

    The original declarations come first, markers stripped, followed by one
    generated section holding the imports, the per-action metadata and the
    dispatchers.
    """

    def render(self, scope: GeneratedScope) -> str:
        blocks: List[str] = [
            GENERATED_HEADER.format(source=scope.source_name).rstrip("\n"),
        ]

        declarations = ast.unparse(scope.declarations)
        if declarations:
            blocks.append(declarations)

        if scope.descriptors or scope.dispatchers:
            blocks.append(GENERATED_SECTION + "\n" + "\n".join(scope.imports))
            blocks.extend(d.source.strip("\n") for d in scope.descriptors)
            blocks.extend(d.source.strip("\n") for d in scope.dispatchers)

        source = "\n\n\n".join(blocks) + "\n"
        self._verify(source, scope.source_name)

        log.debug("Rendered %d line(s) for %s", source.count("\n"), scope.source_name)
        return source

    def _verify(self, source: str, filename: str) -> None:
        try:
            ast.parse(source, filename=filename)
        except SyntaxError as exc:
            raise GenerationError(
                f"generated code is not valid Python: {exc.msg}",
                filename=filename,
                lineno=exc.lineno,
            ) from exc
