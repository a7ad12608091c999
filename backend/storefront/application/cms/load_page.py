from storefront.domain.invariants.exceptions import PageNotFound
from storefront.domain.page import PageDocument
from storefront.extensions import db
from storefront.models.page import LandingPage
from storefront.normalizers.page import to_document


def get_page_model(page_id: str) -> LandingPage:
    page = db.session.get(LandingPage, page_id)
    if page is None:
        raise PageNotFound(f"Page not found: {page_id}")
    return page


def get_published_page(slug: str) -> PageDocument:
    """Visitor read: only published and active pages are visible."""
    page = LandingPage.query.filter_by(
        slug=slug,
        is_published=True,
        is_active=True,
    ).first()

    if page is None:
        raise PageNotFound(f"No published page for slug: {slug}")
    return to_document(page)
