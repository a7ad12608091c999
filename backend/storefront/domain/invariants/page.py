import re

from storefront.domain.page import PageDocument
from .exceptions import InvariantViolation

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def assert_slug(slug: str) -> None:
    if not slug or not SLUG_PATTERN.match(slug):
        raise InvariantViolation(
            f"Slug must be lowercase letters, digits and single hyphens: {slug!r}"
        )


def assert_page(page: PageDocument, publish: bool = False) -> None:
    if not page.title or not page.title.strip():
        raise InvariantViolation("Page title is required.")

    assert_slug(page.slug)

    if publish and not page.sections:
        raise InvariantViolation("Cannot publish page without sections.")

    ids = [section.id for section in page.sections]
    if len(ids) != len(set(ids)):
        raise InvariantViolation(f"Section ids must be unique within a page: {ids}")

    for section in page.sections:
        if isinstance(section.order, bool) or not isinstance(section.order, int):
            raise InvariantViolation(
                f"Section {section.id} has a non-integer order: {section.order!r}"
            )
