"""
Typed settings, one dataclass per section type.

Field helpers carry the editor metadata (kind, label, enum choices,
record keys); every field has a default so any settings bag resolves.
"""
from dataclasses import dataclass
from typing import List

from .fields import (
    choice,
    color,
    flag,
    image,
    images,
    long_text,
    moment,
    number,
    products,
    records,
    text,
    text_list,
)


@dataclass
class HeroProductSettings:
    images: List[str] = images(label="Product Images")
    title: str = text("Product Title")
    subtitle: str = long_text("")
    price: str = text("")
    original_price: str = text("", label="Original Price (optional)")
    button_text: str = text("Buy Now")
    button_link: str = text("#checkout")
    badges: List[dict] = records("text", "subtext", label="Feature Badges")
    background_color: str = color("#ffffff")
    text_color: str = color("#1f2937")
    layout: str = choice("left-image", "left-image", "right-image", "center")


@dataclass
class HeroGradientSettings:
    badge: str = text("")
    title: str = text("Your Headline")
    subtitle: str = text("")
    description: str = long_text("")
    features: List[dict] = records("icon", "text")
    button_text: str = text("Order Now")
    button_link: str = text("#checkout")
    hero_image: str = image()
    gradient_from: str = color("#b8860b")
    gradient_to: str = color("#d4a520")
    text_color: str = color("#ffffff")


@dataclass
class ProblemSectionSettings:
    title: str = text("Are you facing these problems?")
    problems: List[dict] = records("icon", "title")
    footer_text: str = text("")
    background_color: str = color("#ffffff")
    text_color: str = color("#1f2937")


@dataclass
class BenefitsGridSettings:
    title: str = text("Benefits")
    benefits: List[dict] = records("icon", "title", "description")
    columns: int = number(3)
    background_color: str = color("#f0fdf4")
    text_color: str = color("#1f2937")


@dataclass
class TrustBadgesSettings:
    title: str = text("Why trust us")
    badges: List[dict] = records("title", "description")
    check_color: str = color("#22c55e")
    background_color: str = color("#ffffff")
    text_color: str = color("#1f2937")


@dataclass
class GuaranteeSectionSettings:
    title: str = text("Our Guarantee")
    guarantees: List[dict] = records("icon", "title", "subtitle")
    button_text: str = text("")
    background_color: str = color("#f9fafb")
    accent_color: str = color("#22c55e")


@dataclass
class ImageGallerySettings:
    images: List[str] = images()
    columns: int = number(3)
    gap: str = text("16px")
    aspect_ratio: str = choice("square", "square", "portrait", "landscape", "auto")


@dataclass
class FeatureBadgesSettings:
    title: str = text("")
    badges: List[dict] = records("icon", "title", "description")
    columns: int = number(3)
    background_color: str = color("#ffffff")
    text_color: str = color("#1f2937")


@dataclass
class TextBlockSettings:
    content: str = long_text("")
    alignment: str = choice("center", "left", "center", "right")
    font_size: str = text("16px")
    background_color: str = color("transparent")
    text_color: str = color("#1f2937")
    padding: str = text("32px")


@dataclass
class ProductInfoSettings:
    title: str = text("")
    description: str = long_text("")
    product_ids: List[str] = products(label="Products")
    show_price: bool = flag(True)
    background_color: str = color("#ffffff")


@dataclass
class CheckoutFormSettings:
    title: str = text("Order Now")
    button_text: str = text("Confirm Order")
    product_ids: List[str] = products(label="Products")
    background_color: str = color("#ffffff")
    accent_color: str = color("#ef4444")
    free_delivery: bool = flag(False)
    free_delivery_message: str = text("")


@dataclass
class CtaBannerSettings:
    title: str = text("Limited time offer")
    subtitle: str = text("")
    button_text: str = text("Order Now")
    button_link: str = text("#checkout")
    background_color: str = color("#ef4444")
    text_color: str = color("#ffffff")


@dataclass
class TestimonialsSettings:
    title: str = text("What our customers say")
    items: List[dict] = records("name", "role", "content", "avatar")
    layout: str = choice("grid", "grid", "carousel")
    columns: int = number(3)


@dataclass
class FaqSettings:
    title: str = text("Frequently Asked Questions")
    items: List[dict] = records("question", "answer")
    background_color: str = color("#ffffff")
    text_color: str = color("#1f2937")


@dataclass
class ImageTextSettings:
    image: str = image()
    title: str = text("")
    description: str = long_text("")
    button_text: str = text("")
    button_link: str = text("")
    image_position: str = choice("left", "left", "right")
    background_color: str = color("#ffffff")


@dataclass
class VideoSettings:
    video_url: str = text("", label="Video URL")
    title: str = text("")
    autoplay: bool = flag(False)
    controls: bool = flag(True)
    loop: bool = flag(False)
    background_color: str = color("#ffffff")
    text_color: str = color("#1f2937")


@dataclass
class CountdownSettings:
    title: str = text("Offer ends in")
    end_date: str = moment(label="End Date")
    background_color: str = color("#1f2937")
    text_color: str = color("#ffffff")


@dataclass
class DividerSettings:
    style: str = choice("solid", "solid", "dashed", "dotted")
    color: str = color("#e5e7eb")
    thickness: str = text("1px")
    width: str = text("100%")


@dataclass
class SpacerSettings:
    height: str = text("48px")


@dataclass
class FinalCtaSettings:
    icon: str = text("")
    title: str = text("Order today")
    subtitle: str = text("")
    bullet_points: List[str] = text_list()
    button_text: str = text("Order Now")
    footer_text: str = text("")
    background_color: str = color("#fef3c7")
    text_color: str = color("#1f2937")
