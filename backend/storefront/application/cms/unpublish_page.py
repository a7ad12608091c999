# storefront/application/cms/unpublish_page.py
from typing import Dict, Optional
from storefront.domain.lifecycle.page import assert_page_transition
from storefront.utils.audit import log_action
from storefront.utils.transaction import transactional
from .load_page import get_page_model


def unpublish_page(
    *,
    page_id: str,
    actor_id: Optional[str],
) -> Dict[str, str]:
    """Take a page offline; its sections are kept as-is."""
    page = get_page_model(page_id)

    with transactional():
        assert_page_transition(from_status=page.status, to_status="draft")

        page.is_published = False

        log_action(
            action="page.unpublish",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload={},
        )

    return {"page_id": page.id, "status": page.status}
