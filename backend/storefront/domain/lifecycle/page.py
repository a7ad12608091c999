from typing import Dict, Set

from storefront.domain.invariants.exceptions import IllegalTransition

# Explicit allowed state transitions
ALLOWED_PAGE_TRANSITIONS: Dict[str, Set[str]] = {
    "draft": {"published"},
    "published": {"draft"},
}


def page_status(is_published: bool) -> str:
    return "published" if is_published else "draft"


def assert_page_transition(*, from_status: str, to_status: str) -> None:
    """
    Guards page lifecycle transitions.
    Single source of truth for publish/unpublish.
    """
    allowed = ALLOWED_PAGE_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise IllegalTransition(
            f"Illegal page transition: {from_status} -> {to_status}"
        )
