from typing import Callable, Optional
from sqlalchemy.exc import IntegrityError
from storefront.extensions import db
from storefront.models.base import local_time_now
from storefront.models.page import LandingPage
from storefront.models.section import LandingSection
from storefront.domain.invariants.exceptions import SlugConflict
from storefront.domain.invariants.page import assert_page
from storefront.domain.page import PageDocument
from storefront.normalizers.page import to_document
from storefront.utils.audit import log_action
from storefront.utils.transaction import transactional
from .create_page import slug_taken
from .load_page import get_page_model


def save_page(
    *,
    page_id: str,
    actor_id: Optional[str],
    document: PageDocument,
    action: str = "page.update",
) -> PageDocument:
    """
    Persist a composer document onto the page row and its sections.

    Sections missing from the document are deleted, known ids are
    updated in place and new ids are inserted.
    """
    page = get_page_model(page_id)

    assert_page(document, publish=page.is_published)

    if document.slug != page.slug and slug_taken(document.slug, exclude_id=page.id):
        raise SlugConflict(f"A page with slug {document.slug!r} already exists")

    changed_fields: list[str] = []

    try:
        with transactional():
            for field in ("title", "slug"):
                value = getattr(document, field)
                if getattr(page, field) != value:
                    setattr(page, field, value)
                    changed_fields.append(field)

            theme = dict(document.theme)
            if (page.theme or {}) != theme:
                page.theme = theme
                changed_fields.append("theme")

            if _sync_sections(page, document):
                changed_fields.append("sections")

            if changed_fields:
                page.updated_at = local_time_now()
                log_action(
                    action=action,
                    entity_type="page",
                    entity_id=page.id,
                    actor_id=actor_id,
                    payload={"fields": changed_fields},
                )
    except IntegrityError as exc:
        raise SlugConflict(f"A page with slug {document.slug!r} already exists") from exc

    db.session.refresh(page)
    return to_document(page)


def edit_page(
    *,
    page_id: str,
    actor_id: Optional[str],
    action: str,
    edit: Callable[[PageDocument], PageDocument],
) -> PageDocument:
    """Load, apply one composer operation, save."""
    document = to_document(get_page_model(page_id))
    return save_page(
        page_id=page_id,
        actor_id=actor_id,
        document=edit(document),
        action=action,
    )


def _sync_sections(page: LandingPage, document: PageDocument) -> bool:
    existing = {section.id: section for section in page.sections}
    wanted = {section.id for section in document.sections}
    changed = False

    for section_id, row in existing.items():
        if section_id not in wanted:
            page.sections.remove(row)
            changed = True

    for section in document.sections:
        row = existing.get(section.id)
        if row is None:
            row = LandingSection()
            row.id = section.id
            page.sections.append(row)
            changed = True

        settings = dict(section.settings)
        if row.type != section.type or row.order != section.order or row.settings != settings:
            row.type = section.type
            row.order = section.order
            row.settings = settings
            changed = True

    return changed
