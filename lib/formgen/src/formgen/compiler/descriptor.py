"""Form descriptor builder.

The metadata record and the decode model of an action are rendered by the
same template from the same `FormDescriptor`, so the field names a page
reads from ``<action>.FORM`` are exactly the ones the decoder accepts.
"""

from __future__ import annotations

from typing import List

from jinja2 import Environment

from formgen.ast.spec import Action, ActionRegistry
from formgen.compiler.spec import FormDescriptor

METADATA_TEMPLATE = "metadata.py.j2"

METADATA_IMPORTS = [
    "import typing as _typing",
    "import pydantic as _pydantic",
]


def build_descriptor(action: Action) -> FormDescriptor:
    return FormDescriptor(
        action=action,
        metadata_class=f"_Form_{action.ident}",
        decoder_class=f"_FormData_{action.ident}",
    )


def build_descriptors(registry: ActionRegistry, env: Environment) -> List[FormDescriptor]:
    """Build and render the descriptor of every action, in registry order."""
    template = env.get_template(METADATA_TEMPLATE)
    descriptors = []
    for action in registry:
        descriptor = build_descriptor(action)
        descriptor.source = template.render(descriptor=descriptor)
        descriptors.append(descriptor)
    return descriptors
