"""Tests for the module renderer."""

import ast
import textwrap

import pytest

from formgen.ast import Extractor
from formgen.compiler import Compiler, Dispatcher, GeneratedScope, Renderer
from formgen.compiler.spec import GENERATED_SECTION
from formgen.config import parse_scope_config
from formgen.errors import GenerationError

PAGE = textwrap.dedent(
    '''
    """Counter page."""

    from typing import Annotated

    from formactions import action, form

    __actions__ = {"starlette": True, "microdot": True}


    @action
    async def add_value(value: Annotated[int, form()], request):
        return value
    '''
)


def render(source=PAGE):
    extraction = Extractor("page.py").extract(source)
    config = parse_scope_config(extraction.config)
    return Renderer().render(Compiler("page.py").compile(extraction, config))


def test_header_and_order():
    text = render()

    assert text.startswith("# This module was generated by formgen from page.py.\n")
    declarations = text.index("async def add_value(value: int, request):")
    section = text.index(GENERATED_SECTION)
    metadata = text.index("class _Form_add_value(_typing.NamedTuple):")
    starlette = text.index("async def actions_handler(")
    microdot = text.index("class ActionsHandler(")

    assert declarations < section < metadata < starlette < microdot


def test_output_is_valid_python():
    module = ast.parse(render())
    assert ast.get_docstring(module) == "Counter page."


def test_imports_follow_the_section_marker():
    text = render()
    section = text.index(GENERATED_SECTION)
    assert text.index("import formactions as _formactions") > section


def test_module_without_actions_is_unchanged():
    text = render("x = 1\n")
    assert GENERATED_SECTION not in text
    assert text.endswith("x = 1\n")


def test_invalid_output_is_rejected():
    scope = GeneratedScope(
        declarations=ast.parse("x = 1"),
        source_name="page.py",
        dispatchers=[Dispatcher(backend="broken", handler="h", source="def h(:\n")],
    )
    with pytest.raises(GenerationError, match="not valid Python"):
        Renderer().render(scope)
