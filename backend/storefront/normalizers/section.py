from storefront.domain.page import PageSection


def to_section(section) -> PageSection:
    return PageSection(
        id=section.id,
        type=section.type,
        order=section.order if section.order is not None else 0,
        settings=dict(section.settings or {}),
    )


def normalize_section(section: PageSection) -> dict:
    return {
        "id": section.id,
        "type": section.type,
        "order": section.order,
        "settings": dict(section.settings),
    }
