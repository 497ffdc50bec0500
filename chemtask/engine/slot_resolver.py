"""
Slot resolver: turn raw slot values into display strings.

Resolution runs in two passes:

1. Pass-through: every slot value is copied as text (lists joined with ", ")
2. Directives from the prompt template override individual slots:
   - ``"lookup:properties.<id>.<path>"`` navigates a property definition
   - ``"morph:<domain>.<key>.<field>"`` reads a grammatical form
   - a mapping is a static table keyed by the slot's raw value

``{slot}`` tokens inside directives are interpolated first. A directive
that does not resolve to a string leaves the pass-through value in place.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from chemtask.core.types import SlotValues, stringify
from chemtask.ontology.models import OntologyData

TOKEN_RE = re.compile(r"\{([A-Za-z0-9_]+)\}")

LOOKUP_PREFIX = "lookup:"
MORPH_PREFIX = "morph:"


def interpolate(template: str, values: Mapping[str, Any]) -> str:
    """Replace ``{name}`` tokens with values; unknown tokens stay as written."""

    def substitute(match: re.Match) -> str:
        key = match.group(1)
        return stringify(values[key]) if key in values else match.group(0)

    return TOKEN_RE.sub(substitute, template)


def navigate_path(obj: Any, path: str) -> str | None:
    """Follow a dotted path through nested mappings. Only string leaves count."""
    current = obj
    for segment in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(segment)
    return current if isinstance(current, str) else None


def resolve_lookup(directive: str, values: SlotValues, ontology: OntologyData) -> str | None:
    parts = interpolate(directive[len(LOOKUP_PREFIX) :], values).split(".")
    collection = parts[0]
    item_key = parts[1] if len(parts) > 1 else ""
    path = ".".join(parts[2:])

    # Only property definitions are wired
    if collection != "properties":
        return None
    prop = ontology.find_property(item_key)
    if prop is None:
        return None
    return navigate_path(prop.model_dump(), path)


def resolve_morph(directive: str, values: SlotValues, ontology: OntologyData) -> str | None:
    morphology = ontology.i18n.morphology
    if not morphology:
        return None
    parts = interpolate(directive[len(MORPH_PREFIX) :], values).split(".")
    if len(parts) < 3:
        return None
    domain, key, field = parts[0], parts[1], parts[2]
    form = morphology.get(domain, {}).get(key, {}).get(field)
    return form if isinstance(form, str) else None


def resolve_slots(
    prompt_slots: Mapping[str, str | Mapping[str, str]],
    values: SlotValues,
    ontology: OntologyData,
) -> dict[str, str]:
    """
    Resolve display strings for every slot.

    Args:
        prompt_slots: Directive per slot name from the prompt template
        values: Raw slot values from the generator (and solver)
        ontology: Source for property lookups and morphology

    Returns:
        Slot name to display string
    """
    result: dict[str, str] = {}
    for key, value in values.items():
        if isinstance(value, list):
            result[key] = ", ".join(stringify(v) for v in value)
        else:
            result[key] = stringify(value)

    for slot_name, spec in prompt_slots.items():
        if isinstance(spec, str):
            resolved = None
            if spec.startswith(LOOKUP_PREFIX):
                resolved = resolve_lookup(spec, values, ontology)
            elif spec.startswith(MORPH_PREFIX):
                resolved = resolve_morph(spec, values, ontology)
            if resolved is not None:
                result[slot_name] = resolved
        elif isinstance(spec, Mapping):
            map_key = stringify(values.get(slot_name, ""))
            if map_key in spec:
                result[slot_name] = spec[map_key]

    return result
