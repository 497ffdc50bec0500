"""
Template registry.

Indexes task templates by id, exam tag, and competency. The registry is
immutable after construction.
"""

from __future__ import annotations

from collections.abc import Iterable

from chemtask.core.templates import TaskTemplate


class TemplateRegistry:
    """Read-only lookup over a fixed set of task templates."""

    def __init__(self, templates: Iterable[TaskTemplate]):
        self._templates: tuple[TaskTemplate, ...] = tuple(templates)
        self._by_id: dict[str, TaskTemplate] = {t.template_id: t for t in self._templates}

    def __len__(self) -> int:
        return len(self._templates)

    def get_by_id(self, template_id: str) -> TaskTemplate | None:
        return self._by_id.get(template_id)

    def get_by_exam_tag(self, tag: str) -> list[TaskTemplate]:
        return [t for t in self._templates if tag in t.exam_tags]

    def get_by_competency(self, competency_id: str) -> list[TaskTemplate]:
        return [t for t in self._templates if competency_id in t.competency_hint]

    def all(self) -> list[TaskTemplate]:
        """All templates, as a new list."""
        return list(self._templates)
