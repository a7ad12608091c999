import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from . import settings as s
from .fields import FieldSpec, build, field_specs

logger = logging.getLogger(__name__)


class SectionType(str, Enum):
    HERO_PRODUCT = "hero-product"
    HERO_GRADIENT = "hero-gradient"
    PROBLEM_SECTION = "problem-section"
    BENEFITS_GRID = "benefits-grid"
    TRUST_BADGES = "trust-badges"
    GUARANTEE_SECTION = "guarantee-section"
    IMAGE_GALLERY = "image-gallery"
    FEATURE_BADGES = "feature-badges"
    TEXT_BLOCK = "text-block"
    PRODUCT_INFO = "product-info"
    CHECKOUT_FORM = "checkout-form"
    CTA_BANNER = "cta-banner"
    TESTIMONIALS = "testimonials"
    FAQ = "faq"
    FAQ_ACCORDION = "faq-accordion"
    IMAGE_TEXT = "image-text"
    VIDEO = "video"
    YOUTUBE_VIDEO = "youtube-video"
    COUNTDOWN = "countdown"
    DIVIDER = "divider"
    SPACER = "spacer"
    FINAL_CTA = "final-cta"


@dataclass(frozen=True)
class SectionSchema:
    type: SectionType
    label: str
    settings_cls: Type

    @property
    def fields(self) -> Tuple[FieldSpec, ...]:
        return field_specs(self.settings_cls)

    def defaults(self) -> Dict[str, Any]:
        return asdict(self.settings_cls())

    def build(self, bag: Optional[Mapping[str, Any]]):
        return build(self.settings_cls, bag)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "label": self.label,
            "defaults": self.defaults(),
            "fields": [spec.to_dict() for spec in self.fields],
        }


REGISTRY: Dict[SectionType, SectionSchema] = {}


def register(section_type: SectionType, label: str, settings_cls: Type) -> SectionSchema:
    schema = SectionSchema(type=section_type, label=label, settings_cls=settings_cls)
    REGISTRY[section_type] = schema
    return schema


register(SectionType.HERO_PRODUCT, "Hero Product", s.HeroProductSettings)
register(SectionType.HERO_GRADIENT, "Hero Gradient", s.HeroGradientSettings)
register(SectionType.PROBLEM_SECTION, "Problem Section", s.ProblemSectionSettings)
register(SectionType.BENEFITS_GRID, "Benefits Grid", s.BenefitsGridSettings)
register(SectionType.TRUST_BADGES, "Trust Badges", s.TrustBadgesSettings)
register(SectionType.GUARANTEE_SECTION, "Guarantee Section", s.GuaranteeSectionSettings)
register(SectionType.IMAGE_GALLERY, "Image Gallery", s.ImageGallerySettings)
register(SectionType.FEATURE_BADGES, "Feature Badges", s.FeatureBadgesSettings)
register(SectionType.TEXT_BLOCK, "Text Block", s.TextBlockSettings)
register(SectionType.PRODUCT_INFO, "Product Info", s.ProductInfoSettings)
register(SectionType.CHECKOUT_FORM, "Checkout Form", s.CheckoutFormSettings)
register(SectionType.CTA_BANNER, "CTA Banner", s.CtaBannerSettings)
register(SectionType.TESTIMONIALS, "Testimonials", s.TestimonialsSettings)
register(SectionType.FAQ, "FAQ", s.FaqSettings)
register(SectionType.FAQ_ACCORDION, "FAQ Accordion", s.FaqSettings)
register(SectionType.IMAGE_TEXT, "Image + Text", s.ImageTextSettings)
register(SectionType.VIDEO, "Video", s.VideoSettings)
register(SectionType.YOUTUBE_VIDEO, "YouTube Video", s.VideoSettings)
register(SectionType.COUNTDOWN, "Countdown", s.CountdownSettings)
register(SectionType.DIVIDER, "Divider", s.DividerSettings)
register(SectionType.SPACER, "Spacer", s.SpacerSettings)
register(SectionType.FINAL_CTA, "Final CTA", s.FinalCtaSettings)


def parse_section_type(value: Any) -> Optional[SectionType]:
    if isinstance(value, SectionType):
        return value
    try:
        return SectionType(value)
    except ValueError:
        return None


def get_schema(section_type: Any) -> Optional[SectionSchema]:
    parsed = parse_section_type(section_type)
    if parsed is None:
        return None
    return REGISTRY.get(parsed)


def build_settings(section_type: Any, bag: Optional[Mapping[str, Any]]):
    """
    Typed settings for a section, or None for an unregistered type.

    Never raises: callers render an unregistered type as nothing.
    """
    schema = get_schema(section_type)
    if schema is None:
        logger.warning("No schema registered for section type %r", section_type)
        return None
    return schema.build(bag)


def default_settings(section_type: Any) -> Dict[str, Any]:
    schema = get_schema(section_type)
    return schema.defaults() if schema else {}


def describe_registry() -> list:
    return [schema.to_dict() for schema in REGISTRY.values()]
