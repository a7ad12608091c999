"""
Page composer: pure transformations over a PageDocument.

Every operation returns a new document; persisting it is a separate
step (see ``storefront.application.cms.save_page``).
"""
import uuid
from dataclasses import replace
from typing import Any, Callable, Mapping

from .invariants.exceptions import InvariantViolation, SectionNotFound, UnknownSectionType
from .page import PageDocument, PageSection, sorted_sections
from .sections.registry import get_schema
from .theme import THEME_KEYS


def _new_id() -> str:
    return str(uuid.uuid4())


def _require(page: PageDocument, section_id: str) -> PageSection:
    section = page.find(section_id)
    if section is None:
        raise SectionNotFound(f"Section {section_id} not found on page")
    return section


def add_section(page: PageDocument, section_type, *, id_factory: Callable[[], str] = _new_id) -> PageDocument:
    schema = get_schema(section_type)
    if schema is None:
        raise UnknownSectionType(f"Invalid section type: {section_type}")

    next_order = max((s.order for s in page.sections), default=0) + 1
    section = PageSection(
        id=id_factory(),
        type=schema.type.value,
        order=next_order,
        settings=schema.defaults(),
    )
    return page.with_sections(page.sections + (section,))


def update_section(page: PageDocument, section_id: str, partial: Mapping[str, Any]) -> PageDocument:
    if not isinstance(partial, Mapping):
        raise InvariantViolation("Section settings update must be an object")

    current = _require(page, section_id)
    merged = {**current.settings, **partial}
    return _swap_in(page, replace(current, settings=merged))


def delete_section(page: PageDocument, section_id: str) -> PageDocument:
    _require(page, section_id)
    return page.with_sections(s for s in page.sections if s.id != section_id)


def can_move_up(page: PageDocument, section_id: str) -> bool:
    ordered = sorted_sections(page.sections)
    return bool(ordered) and ordered[0].id != section_id


def can_move_down(page: PageDocument, section_id: str) -> bool:
    ordered = sorted_sections(page.sections)
    return bool(ordered) and ordered[-1].id != section_id


def move_up(page: PageDocument, section_id: str) -> PageDocument:
    return _move(page, section_id, -1)


def move_down(page: PageDocument, section_id: str) -> PageDocument:
    return _move(page, section_id, 1)


def _move(page: PageDocument, section_id: str, step: int) -> PageDocument:
    _require(page, section_id)
    if _has_duplicate_orders(page):
        page = compact_orders(page)

    ordered = sorted_sections(page.sections)
    index = next(i for i, s in enumerate(ordered) if s.id == section_id)
    target = index + step
    if target < 0 or target >= len(ordered):
        return page

    current, neighbour = ordered[index], ordered[target]
    page = _swap_in(page, replace(current, order=neighbour.order))
    return _swap_in(page, replace(neighbour, order=current.order))


def duplicate_section(page: PageDocument, section_id: str, *, id_factory: Callable[[], str] = _new_id) -> PageDocument:
    _require(page, section_id)
    if _has_duplicate_orders(page):
        page = compact_orders(page)

    source = _require(page, section_id)
    clone = PageSection(
        id=id_factory(),
        type=source.type,
        order=source.order + 1,
        settings=dict(source.settings),
    )

    sections = []
    for section in page.sections:
        if section.id != source.id and section.order > source.order:
            section = replace(section, order=section.order + 1)
        sections.append(section)
        if section.id == source.id:
            sections.append(clone)
    return page.with_sections(sections)


def compact_orders(page: PageDocument) -> PageDocument:
    """Renumber orders 1..N following the current rendering order."""
    renumbered = {
        s.id: index for index, s in enumerate(sorted_sections(page.sections), start=1)
    }
    return page.with_sections(replace(s, order=renumbered[s.id]) for s in page.sections)


def update_theme(page: PageDocument, partial: Mapping[str, Any]) -> PageDocument:
    if not isinstance(partial, Mapping):
        raise InvariantViolation("Theme update must be an object")

    merged = dict(page.theme)
    merged.update({k: v for k, v in partial.items() if k in THEME_KEYS})
    return replace(page, theme=merged)


def _swap_in(page: PageDocument, updated: PageSection) -> PageDocument:
    return page.with_sections(updated if s.id == updated.id else s for s in page.sections)


def _has_duplicate_orders(page: PageDocument) -> bool:
    orders = [s.order for s in page.sections]
    return len(orders) != len(set(orders))
