"""Tests for the section schema registry and settings coercion."""
import logging

from storefront.domain.sections.fields import FieldKind
from storefront.domain.sections.registry import (
    REGISTRY,
    SectionType,
    build_settings,
    default_settings,
    describe_registry,
    get_schema,
)


def test_every_section_type_is_registered():
    assert set(REGISTRY) == set(SectionType)
    for section_type in SectionType:
        schema = REGISTRY[section_type]
        assert schema.label
        assert schema.build(None) == schema.settings_cls()


def test_defaults_are_fresh_copies():
    first = default_settings("faq")
    first["items"].append({"question": "q", "answer": "a"})
    assert default_settings("faq")["items"] == []


def test_missing_and_unknown_keys_fall_back_to_defaults():
    settings = build_settings("hero-product", {"title": "Glow", "confetti": True})
    assert settings.title == "Glow"
    assert settings.button_text == "Buy Now"
    assert not hasattr(settings, "confetti")


def test_ill_typed_values_fall_back_to_defaults():
    settings = build_settings(
        SectionType.IMAGE_GALLERY,
        {"images": "not-a-list", "columns": "four", "aspect_ratio": "circle", "gap": None},
    )
    assert settings.images == []
    assert settings.columns == 3
    assert settings.aspect_ratio == "square"
    assert settings.gap == "16px"


def test_numeric_strings_and_text_numbers_are_accepted():
    gallery = build_settings("image-gallery", {"columns": "2"})
    hero = build_settings("hero-product", {"price": 1250})
    assert gallery.columns == 2
    assert hero.price == "1250"


def test_record_lists_keep_only_known_keys_of_mapping_items():
    settings = build_settings(
        "faq",
        {"items": [{"question": "Delivery?", "answer": "2 days", "extra": 1}, "junk", None]},
    )
    assert settings.items == [{"question": "Delivery?", "answer": "2 days"}]


def test_boolean_fields_require_real_booleans():
    settings = build_settings("checkout-form", {"free_delivery": "yes"})
    assert settings.free_delivery is False
    assert build_settings("checkout-form", {"free_delivery": True}).free_delivery is True


def test_non_mapping_bag_gives_defaults():
    assert build_settings("spacer", ["48px"]).height == "48px"


def test_unregistered_type_returns_none_and_logs(caplog):
    with caplog.at_level(logging.WARNING):
        assert build_settings("mystery-box", {}) is None
    assert "mystery-box" in caplog.text
    assert get_schema("mystery-box") is None


def test_aliases_share_settings():
    assert get_schema("faq").settings_cls is get_schema("faq-accordion").settings_cls
    assert get_schema("video").settings_cls is get_schema("youtube-video").settings_cls


def test_describe_registry_exposes_editor_fields():
    described = {entry["type"]: entry for entry in describe_registry()}
    assert len(described) == 22

    fields = {f["name"]: f for f in described["image-text"]["fields"]}
    assert fields["image"]["kind"] == FieldKind.IMAGE.value
    assert fields["image_position"]["choices"] == ["left", "right"]

    faq_fields = {f["name"]: f for f in described["faq"]["fields"]}
    assert faq_fields["items"]["kind"] == "record_list"
    assert faq_fields["items"]["record_keys"] == ["question", "answer"]


def test_number_settings_reject_non_finite_values():
    for raw in ("inf", "-Infinity", "nan", float("inf")):
        assert build_settings(SectionType.BENEFITS_GRID, {"columns": raw}).columns == 3
    assert build_settings(SectionType.BENEFITS_GRID, {"columns": "2.5"}).columns == 2.5
