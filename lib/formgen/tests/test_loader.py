"""Tests for the generate-and-import helpers."""

import sys
import textwrap

import pytest

import formgen
from formgen import ScopeConfig
from formgen.errors import ConfigurationError, SelfParameterError

SOURCE = textwrap.dedent(
    """
    from typing import Annotated

    from formactions import action, form

    __actions__ = {"starlette": True}


    @action
    async def greet(name: Annotated[str, form()]):
        return "hello " + name
    """
)


def test_generate_is_deterministic():
    assert formgen.generate(SOURCE, filename="page.py") == formgen.generate(
        SOURCE, filename="page.py"
    )


def test_mapping_config_is_merged():
    text = formgen.generate(SOURCE, config={"microdot": True})

    assert "async def actions_handler(" in text
    assert "class ActionsHandler(" in text


def test_scope_config_replaces_literal():
    text = formgen.generate(SOURCE, config=ScopeConfig())

    assert "actions_handler" not in text
    assert "greet.FORM = _Form_greet(" in text


def test_invalid_literal_is_located():
    source = "x = 1\n__actions__ = {'flask': True}\n"
    with pytest.raises(ConfigurationError) as exc:
        formgen.generate(source, filename="page.py")
    assert exc.value.lineno == 2


def test_errors_abort_generation():
    source = textwrap.dedent(
        """
        @action
        def method(self):
            pass
        """
    )
    with pytest.raises(SelfParameterError):
        formgen.generate(source)


def test_load_source_registers_module():
    module = formgen.load_source(SOURCE, "loader_greet_actions")

    assert sys.modules["loader_greet_actions"] is module
    assert module.greet.FORM.name_name == "name"
    assert callable(module.actions_handler)


def test_failed_load_is_not_registered():
    source = SOURCE + "\nraise RuntimeError('boom')\n"
    with pytest.raises(RuntimeError, match="boom"):
        formgen.load_source(source, "loader_broken_actions")
    assert "loader_broken_actions" not in sys.modules


def test_load_module_with_config_file(tmp_path):
    path = tmp_path / "board.py"
    path.write_text(SOURCE)
    config = tmp_path / "actions.yaml"
    config.write_text("starlette: false\nmicrodot: true\n")

    module = formgen.load_module(path, module_name="loader_board", config_path=config)

    assert module.__file__ == str(path)
    assert hasattr(module, "ActionsHandler")
    assert not hasattr(module, "actions_handler")
