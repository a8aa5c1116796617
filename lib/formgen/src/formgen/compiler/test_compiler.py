"""Tests for the compiler module."""

import textwrap

import pytest

from formgen.ast import Extractor
from formgen.compiler import Compiler
from formgen.compiler.descriptor import METADATA_IMPORTS
from formgen.config import parse_scope_config
from formgen.errors import PathParameterArityError, ReservedNameError

PAGE = """
from typing import Annotated

from formactions import action, form


class AppState:
    pass


@action
async def add_value(state: AppState, value: Annotated[int, form(rename="v")]):
    return value


@action
def total(state: AppState):
    return 0


@action
async def search(query: Annotated[str, form()], *args, request, **kwargs):
    return query
"""


def compile_page(config, source=PAGE):
    extraction = Extractor("page.py").extract(textwrap.dedent(source))
    return Compiler("page.py").compile(extraction, parse_scope_config(config))


def dispatcher(scope, backend):
    (found,) = [d for d in scope.dispatchers if d.backend == backend]
    return found


def test_descriptors_in_declaration_order():
    scope = compile_page({})

    assert [d.action.ident for d in scope.descriptors] == [
        "add_value",
        "total",
        "search",
    ]
    assert scope.descriptors[0].metadata_class == "_Form_add_value"
    assert scope.descriptors[0].decoder_class == "_FormData_add_value"


def test_metadata_and_decoder_share_field_names():
    """The name a page reads from FORM is the alias the decoder accepts."""
    source = compile_page({}).descriptors[0].source

    assert "value_name: str" in source
    assert "value: int = _pydantic.Field(alias='v')" in source
    assert "add_value.FORM = _Form_add_value(" in source
    assert "action='?/add_value'" in source
    assert "value_name='v'" in source
    assert "add_value.FormData = _FormData_add_value" in source


def test_action_without_fields_gets_empty_decoder():
    source = compile_page({}).descriptors[1].source
    assert "class _FormData_total(_pydantic.BaseModel):\n    pass" in source


def test_without_backends_only_metadata_is_emitted():
    scope = compile_page({})

    assert scope.dispatchers == []
    assert scope.imports == METADATA_IMPORTS


class TestStarletteDispatcher:
    def test_handler_function(self):
        scope = compile_page({"state": "AppState", "starlette": True})
        source = dispatcher(scope, "starlette").source

        assert "async def actions_handler(_fa_request: _StarletteRequest)" in source
        assert "_fa_state = _starlette_host.extract_state(_fa_request, AppState)" in source
        assert "match _fa_key:" in source

    def test_branches_follow_declaration_order(self):
        source = dispatcher(compile_page({"starlette": True}), "starlette").source

        positions = [
            source.index(f"case '/{name}':") for name in ("add_value", "total", "search")
        ]
        assert positions == sorted(positions)
        assert source.index("case _:") > positions[-1]

    def test_calls(self):
        source = dispatcher(compile_page({"starlette": True}), "starlette").source

        assert "_fa_result = await add_value(_fa_context_state, _fa_form_data.value)" in source
        assert "_fa_result = total(_fa_context_state)" in source
        assert (
            "_fa_result = await search(_fa_form_data.query, request=_fa_context_request)"
            in source
        )

    def test_context_resolution(self):
        source = dispatcher(compile_page({"starlette": True}), "starlette").source

        assert (
            "_fa_context_state = await _starlette_host.context("
            "AppState, 'state', _fa_request, _fa_state)" in source
        )
        assert (
            "_fa_context_request = await _starlette_host.context("
            "None, 'request', _fa_request, _fa_state)" in source
        )

    def test_without_state(self):
        source = dispatcher(compile_page({"starlette": True}), "starlette").source
        assert "_fa_state = None" in source

    def test_custom_handler_name(self):
        scope = compile_page({"starlette": {"handler": "handle_form"}})
        assert dispatcher(scope, "starlette").handler == "handle_form"
        assert "async def handle_form(" in dispatcher(scope, "starlette").source

    def test_imports(self):
        scope = compile_page({"starlette": True})

        assert scope.imports[0] == "import formactions as _formactions"
        assert "from formactions.hosts import starlette as _starlette_host" in scope.imports
        assert len(scope.imports) == len(set(scope.imports))


class TestMicrodotDispatcher:
    def test_generic_without_state(self):
        source = dispatcher(compile_page({"microdot": True}), "microdot").source

        assert "_ActionsHandlerState = _typing.TypeVar('_ActionsHandlerState')" in source
        assert "class ActionsHandler(_typing.Generic[_ActionsHandlerState]):" in source
        assert "_fa_state: _ActionsHandlerState," in source
        assert "_fa_path_parameters: tuple[()]," in source
        assert "= _fa_path_parameters" not in source

    def test_state_type(self):
        scope = compile_page({"state": "AppState", "microdot": True})
        source = dispatcher(scope, "microdot").source

        assert "class ActionsHandler:" in source
        assert "_fa_state: AppState," in source
        assert "_fa_state = _microdot_host.extract_state(_fa_request, AppState)" in source

    def test_path_parameters_bind_leading_context(self):
        source = textwrap.dedent(
            """
            @action
            async def post(board_id, page, text: Annotated[str, form()], request):
                pass
            """
        )
        scope = compile_page(
            {"microdot": {"path_parameters": ["int", "str"]}}, source=source
        )
        code = dispatcher(scope, "microdot").source

        assert "_fa_path_parameters: tuple[int, str]," in code
        assert "(_fa_path_parameter_0, _fa_path_parameter_1,) = _fa_path_parameters" in code
        assert (
            "_fa_result = await post(_fa_path_parameter_0, _fa_path_parameter_1, "
            "_fa_form_data.text, _fa_context_request)" in code
        )
        assert "'board_id', _fa_request, _fa_state" not in code

    def test_too_few_context_arguments(self):
        with pytest.raises(PathParameterArityError, match="'add_value' must accept 2"):
            compile_page({"microdot": {"path_parameters": ["int", "int"]}})

    def test_both_backends(self):
        scope = compile_page({"starlette": True, "microdot": True})

        assert [d.backend for d in scope.dispatchers] == ["starlette", "microdot"]
        assert scope.imports.count("import typing as _typing") == 1


def test_empty_scope_dispatches_nothing():
    scope = compile_page({"starlette": True, "microdot": True}, source="")

    assert scope.descriptors == []
    for found in scope.dispatchers:
        assert "case _:" in found.source
        assert "case '/" not in found.source


class TestReservedNames:
    def test_dispatcher_local_names_are_allowed(self):
        source = textwrap.dedent(
            """
            @action
            async def result(key: Annotated[int, form()], state, request):
                return key
            """
        )
        scope = compile_page({"starlette": True, "microdot": True}, source=source)

        for found in scope.dispatchers:
            assert "_fa_result = await result(_fa_form_data.key" in found.source

    def test_prefixed_action_is_rejected(self):
        source = "@action\nasync def _fa_key():\n    pass\n"
        with pytest.raises(ReservedNameError, match="'_fa_' are reserved") as exc:
            compile_page({}, source=source)
        assert exc.value.lineno == 2

    @pytest.mark.parametrize(
        "config, name",
        [
            ({"starlette": True}, "actions_handler"),
            ({"microdot": True}, "ActionsHandler"),
            ({"microdot": True}, "_ActionsHandlerState"),
            ({"starlette": True}, "_starlette_host"),
            ({}, "_pydantic"),
        ],
    )
    def test_generated_module_names_are_rejected(self, config, name):
        source = f"@action\nasync def {name}():\n    pass\n"
        with pytest.raises(ReservedNameError, match="defined by the generated code"):
            compile_page(config, source=source)

    def test_generated_class_names_are_rejected(self):
        source = textwrap.dedent(
            """
            @action
            async def ping():
                pass


            @action
            async def _Form_ping():
                pass
            """
        )
        with pytest.raises(ReservedNameError, match="'_Form_ping'"):
            compile_page({}, source=source)
