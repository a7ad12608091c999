import uuid
from typing import Optional
from storefront.extensions import db
from storefront.models.page import LandingPage
from storefront.models.section import LandingSection
from storefront.utils.audit import log_action
from storefront.utils.transaction import transactional
from .create_page import slug_taken
from .load_page import get_page_model


def copy_slug(slug: str) -> str:
    n = 1
    while slug_taken(f"{slug}-copy-{n}"):
        n += 1
    return f"{slug}-copy-{n}"


def duplicate_page(
    *,
    page_id: str,
    actor_id: Optional[str],
) -> LandingPage:
    """Copy a page and all its sections into a new unpublished page."""
    source = get_page_model(page_id)

    page = LandingPage()
    page.title = f"{source.title} (Copy)"
    page.slug = copy_slug(source.slug)
    page.theme = dict(source.theme or {})
    page.is_published = False
    page.is_active = True

    for section in sorted(source.sections, key=lambda s: s.order):
        clone = LandingSection()
        clone.id = str(uuid.uuid4())
        clone.type = section.type
        clone.order = section.order
        clone.settings = dict(section.settings or {})
        page.sections.append(clone)

    with transactional():
        db.session.add(page)
        db.session.flush()

        log_action(
            action="page.duplicate",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload={"source_id": source.id, "slug": page.slug},
        )

    return page
