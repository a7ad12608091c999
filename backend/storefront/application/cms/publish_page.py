# storefront/application/cms/publish_page.py
from typing import Dict, Optional
from storefront.domain.invariants.page import assert_page
from storefront.domain.lifecycle.page import assert_page_transition
from storefront.normalizers.page import to_document
from storefront.utils.audit import log_action
from storefront.utils.transaction import transactional
from .load_page import get_page_model


def publish_page(
    *,
    page_id: str,
    actor_id: Optional[str],
) -> Dict[str, str]:
    """
    Make a page visible to visitors.

    Responsibilities:
    - lifecycle transition enforcement
    - publish invariants (a page needs at least one section)
    - audit logging
    """
    page = get_page_model(page_id)

    with transactional():
        assert_page_transition(from_status=page.status, to_status="published")

        assert_page(to_document(page), publish=True)

        page.is_published = True

        log_action(
            action="page.publish",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload={"slug": page.slug},
        )

    return {"page_id": page.id, "status": page.status}
