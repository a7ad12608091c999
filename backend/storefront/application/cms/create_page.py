from typing import Any, Dict, Optional
from sqlalchemy.exc import IntegrityError
from storefront.extensions import db
from storefront.models.page import LandingPage
from storefront.domain.invariants.exceptions import InvariantViolation, SlugConflict
from storefront.domain.invariants.page import assert_page
from storefront.normalizers.page import to_document
from storefront.utils.audit import log_action
from storefront.utils.transaction import transactional


def slug_taken(slug: str, exclude_id: Optional[str] = None) -> bool:
    query = LandingPage.query.filter_by(slug=slug)
    if exclude_id:
        query = query.filter(LandingPage.id != exclude_id)
    return db.session.query(query.exists()).scalar()


def create_page(
    *,
    actor_id: Optional[str],
    data: Dict[str, Any],
) -> LandingPage:
    """
    Create a new landing page, unpublished and without sections.

    Edge cases handled:
    - Missing required fields
    - Duplicate slug
    - Invariant violations
    """

    title: str | None = data.get("title")
    slug: str | None = data.get("slug")

    if not title or not slug:
        raise InvariantViolation("Both title and slug are required")

    if slug_taken(slug):
        raise SlugConflict(f"A page with slug {slug!r} already exists")

    page = LandingPage()
    page.title = title
    page.slug = slug
    page.theme = data.get("theme") or {}
    page.is_published = False
    page.is_active = True
    try:
        with transactional():
            db.session.add(page)
            db.session.flush()  # ensures page.id is available

            assert_page(to_document(page))

            log_action(
                action="page.create",
                entity_type="page",
                entity_id=page.id,
                actor_id=actor_id,
                payload={
                    "title": page.title,
                    "slug": page.slug,
                },
            )

        return page

    except IntegrityError as exc:
        raise SlugConflict(f"A page with slug {slug!r} already exists") from exc
