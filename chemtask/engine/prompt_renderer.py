"""
Prompt renderer: fill a prompt template's question text from slot values.
"""

from __future__ import annotations

from chemtask.core.errors import UnknownIdentifierError
from chemtask.core.types import SlotValues
from chemtask.engine.slot_resolver import resolve_slots
from chemtask.ontology.models import OntologyData


def render_prompt(prompt_template_id: str, slot_values: SlotValues, ontology: OntologyData) -> str:
    """
    Render the question text of a prompt template.

    Tokens with no resolved slot are left in the text as ``{name}``.

    Raises:
        UnknownIdentifierError: No prompt template with this id
    """
    template = ontology.i18n.prompt_templates.get(prompt_template_id)
    if template is None:
        raise UnknownIdentifierError(f'Prompt template "{prompt_template_id}" not found')

    resolved = resolve_slots(template.slots, slot_values, ontology)
    question = template.question
    for key, value in resolved.items():
        question = question.replace(f"{{{key}}}", value)
    return question
