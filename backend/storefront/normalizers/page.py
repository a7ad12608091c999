from storefront.domain.page import PageDocument, sorted_sections
from storefront.domain.theme import resolve_theme
from .section import normalize_section, to_section


def to_document(page) -> PageDocument:
    """Build the composer's document from a LandingPage row."""
    return PageDocument(
        id=page.id,
        title=page.title,
        slug=page.slug,
        sections=tuple(to_section(s) for s in page.sections),
        theme=dict(page.theme or {}),
        is_published=bool(page.is_published),
        is_active=bool(page.is_active),
    )


def normalize_page(page: PageDocument, admin=False, updated_at=None):
    data = {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "theme": resolve_theme(page.theme).to_dict(),
        "sections": [normalize_section(s) for s in sorted_sections(page.sections)],
    }

    if admin:
        data["theme_overrides"] = dict(page.theme)
        data["is_published"] = page.is_published
        data["is_active"] = page.is_active
        data["updated_at"] = updated_at.isoformat() if updated_at else None

    return data
