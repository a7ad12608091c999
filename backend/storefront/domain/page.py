from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple


@dataclass(frozen=True)
class PageSection:
    id: str
    type: str
    order: int
    settings: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "order": self.order,
            "settings": dict(self.settings),
        }


@dataclass(frozen=True)
class PageDocument:
    """In-memory page as edited by the composer and read by the renderer."""

    id: Optional[str]
    title: str
    slug: str
    sections: Tuple[PageSection, ...] = ()
    theme: Mapping[str, Any] = field(default_factory=dict)
    is_published: bool = False
    is_active: bool = True

    def with_sections(self, sections: Iterable[PageSection]) -> "PageDocument":
        return replace(self, sections=tuple(sections))

    def find(self, section_id: str) -> Optional[PageSection]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "theme": dict(self.theme),
            "is_published": self.is_published,
            "is_active": self.is_active,
            "sections": [s.to_dict() for s in sorted_sections(self.sections)],
        }


def sorted_sections(sections: Iterable[PageSection]) -> Tuple[PageSection, ...]:
    """Ascending ``order``; ties keep their original list position."""
    return tuple(sorted(sections, key=lambda s: s.order))
