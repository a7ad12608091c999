"""
Visitor-side page renderer.

``render`` turns a PageDocument plus theme into a tree of RenderNodes.
Each section type is drawn by one function registered with ``@renders``;
a function sees only its own section's typed settings and the shared
render context. A missing renderer or a failing one drops that section
and logs, the rest of the page still renders.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from dateutil.parser import isoparse

from storefront.utils.video_embed import get_embed_url, iframe_src
from .page import PageDocument, PageSection, sorted_sections
from .sections.registry import SectionType, build_settings, parse_section_type
from .theme import ThemeSettings, resolve_theme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderNode:
    kind: str
    props: Dict[str, Any] = field(default_factory=dict)
    children: Tuple["RenderNode", ...] = ()

    def to_dict(self) -> dict:
        data = {"kind": self.kind, "props": self.props}
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass(frozen=True)
class RenderContext:
    theme: ThemeSettings
    captures: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    now: Optional[datetime] = None


RenderFn = Callable[[PageSection, Any, RenderContext], RenderNode]

RENDERERS: Dict[SectionType, RenderFn] = {}


def renders(*section_types: SectionType):
    def decorator(fn: RenderFn) -> RenderFn:
        for section_type in section_types:
            RENDERERS[section_type] = fn
        return fn
    return decorator


def render(
    page: PageDocument,
    theme: Optional[ThemeSettings] = None,
    *,
    captures: Optional[Mapping[str, Mapping[str, Any]]] = None,
    now: Optional[datetime] = None,
) -> RenderNode:
    ctx = RenderContext(
        theme=theme or resolve_theme(page.theme),
        captures=captures or {},
        now=now,
    )

    children = []
    for section in sorted_sections(page.sections):
        node = render_section(section, ctx)
        if node is not None:
            children.append(node)

    return RenderNode(
        kind="page",
        props={
            "slug": page.slug,
            "title": page.title,
            "font_family": ctx.theme.font_family,
            "background_color": ctx.theme.background_color,
            "text_color": ctx.theme.text_color,
        },
        children=tuple(children),
    )


def render_section(section: PageSection, ctx: RenderContext) -> Optional[RenderNode]:
    section_type = parse_section_type(section.type)
    fn = RENDERERS.get(section_type) if section_type else None
    if fn is None:
        logger.warning("Skipping section %s: no renderer for type %r", section.id, section.type)
        return None

    settings = build_settings(section_type, section.settings)
    try:
        node = fn(section, settings, ctx)
    except Exception:
        logger.exception("Renderer for %r failed on section %s", section.type, section.id)
        return None

    node.props.setdefault("section_id", section.id)
    return node


def _node(section: PageSection, props: Dict[str, Any], children=()) -> RenderNode:
    return RenderNode(kind=section.type, props=props, children=tuple(children))


def _items(kind: str, records, keys=None):
    return tuple(
        RenderNode(kind=kind, props={k: r.get(k, "") for k in (keys or r.keys())})
        for r in records
    )


@renders(SectionType.HERO_PRODUCT)
def render_hero_product(section, settings, ctx):
    return _node(section, {
        "title": settings.title or "Product Title",
        "subtitle": settings.subtitle,
        "images": list(settings.images),
        "price": settings.price or "0",
        "original_price": settings.original_price or None,
        "button": {
            "text": settings.button_text or "Buy Now",
            "link": settings.button_link,
            "color": ctx.theme.primary_color,
            "radius": ctx.theme.border_radius,
        },
        "price_color": ctx.theme.accent_color,
        "layout": settings.layout,
        "background_color": settings.background_color,
        "text_color": settings.text_color,
    }, _items("badge", settings.badges))


@renders(SectionType.HERO_GRADIENT)
def render_hero_gradient(section, settings, ctx):
    return _node(section, {
        "badge": settings.badge or None,
        "title": settings.title,
        "subtitle": settings.subtitle,
        "description": settings.description,
        "image": settings.hero_image or None,
        "button": _button(settings.button_text, settings.button_link, ctx),
        "background": f"linear-gradient(135deg, {settings.gradient_from}, {settings.gradient_to})",
        "text_color": settings.text_color,
    }, _items("feature", settings.features))


@renders(SectionType.PROBLEM_SECTION)
def render_problem_section(section, settings, ctx):
    return _node(section, {
        "title": settings.title,
        "footer_text": settings.footer_text or None,
        "background_color": settings.background_color,
        "text_color": settings.text_color,
    }, _items("problem", settings.problems))


@renders(SectionType.BENEFITS_GRID)
def render_benefits_grid(section, settings, ctx):
    return _node(section, {
        "title": settings.title,
        "columns": _columns(settings.columns),
        "background_color": settings.background_color,
        "text_color": settings.text_color,
    }, _items("benefit", settings.benefits))


@renders(SectionType.TRUST_BADGES)
def render_trust_badges(section, settings, ctx):
    return _node(section, {
        "title": settings.title,
        "check_color": settings.check_color,
        "background_color": settings.background_color,
        "text_color": settings.text_color,
    }, _items("badge", settings.badges))


@renders(SectionType.GUARANTEE_SECTION)
def render_guarantee_section(section, settings, ctx):
    button = None
    if settings.button_text:
        button = {"text": settings.button_text, "color": settings.accent_color}
    return _node(section, {
        "title": settings.title,
        "button": button,
        "background_color": settings.background_color,
    }, _items("guarantee", settings.guarantees))


@renders(SectionType.IMAGE_GALLERY)
def render_image_gallery(section, settings, ctx):
    return _node(section, {
        "columns": _columns(settings.columns),
        "gap": settings.gap or "16px",
        "aspect_ratio": settings.aspect_ratio,
    }, tuple(RenderNode(kind="image", props={"src": src}) for src in settings.images))


@renders(SectionType.FEATURE_BADGES)
def render_feature_badges(section, settings, ctx):
    return _node(section, {
        "title": settings.title or None,
        "columns": _columns(settings.columns),
        "background_color": settings.background_color,
        "text_color": settings.text_color,
    }, _items("badge", settings.badges))


@renders(SectionType.TEXT_BLOCK)
def render_text_block(section, settings, ctx):
    return _node(section, {
        "content": settings.content,
        "alignment": settings.alignment,
        "font_size": settings.font_size,
        "padding": settings.padding,
        "background_color": settings.background_color or "transparent",
        "text_color": settings.text_color,
    })


@renders(SectionType.PRODUCT_INFO)
def render_product_info(section, settings, ctx):
    return _node(section, {
        "title": settings.title or None,
        "description": settings.description,
        "product_ids": list(settings.product_ids),
        "show_price": settings.show_price,
        "background_color": settings.background_color,
    })


@renders(SectionType.CHECKOUT_FORM)
def render_checkout_form(section, settings, ctx):
    capture = ctx.captures.get(section.id)
    return _node(section, {
        "anchor": "checkout",
        "title": settings.title,
        "product_ids": list(settings.product_ids),
        "free_delivery": settings.free_delivery,
        "free_delivery_message": settings.free_delivery_message or None,
        "button": {
            "text": settings.button_text,
            "color": settings.accent_color or ctx.theme.accent_color,
            "radius": ctx.theme.border_radius,
        },
        "background_color": settings.background_color,
        "capture": dict(capture) if capture else {"state": "idle"},
    })


@renders(SectionType.CTA_BANNER)
def render_cta_banner(section, settings, ctx):
    return _node(section, {
        "title": settings.title,
        "subtitle": settings.subtitle or None,
        "button": _button(settings.button_text, settings.button_link, ctx),
        "background_color": settings.background_color,
        "text_color": settings.text_color,
    })


@renders(SectionType.TESTIMONIALS)
def render_testimonials(section, settings, ctx):
    return _node(section, {
        "title": settings.title or None,
        "layout": settings.layout,
        "columns": _columns(settings.columns),
    }, _items("testimonial", settings.items))


@renders(SectionType.FAQ, SectionType.FAQ_ACCORDION)
def render_faq(section, settings, ctx):
    return _node(section, {
        "title": settings.title or None,
        "background_color": settings.background_color,
        "text_color": settings.text_color,
    }, _items("question", settings.items))


@renders(SectionType.IMAGE_TEXT)
def render_image_text(section, settings, ctx):
    return _node(section, {
        "image": settings.image or None,
        "image_position": settings.image_position,
        "title": settings.title,
        "description": settings.description,
        "button": _button(settings.button_text, settings.button_link, ctx),
        "background_color": settings.background_color,
    })


@renders(SectionType.VIDEO, SectionType.YOUTUBE_VIDEO)
def render_video(section, settings, ctx):
    src = iframe_src(settings.video_url)
    embed = src if src else get_embed_url(settings.video_url)
    return _node(section, {
        "title": settings.title or None,
        "embed_url": embed or None,
        "autoplay": settings.autoplay,
        "controls": settings.controls,
        "loop": settings.loop,
        "background_color": settings.background_color,
        "text_color": settings.text_color,
    })


@renders(SectionType.COUNTDOWN)
def render_countdown(section, settings, ctx):
    return _node(section, {
        "title": settings.title or None,
        "end_date": settings.end_date or None,
        "remaining": countdown_remaining(settings.end_date, ctx.now),
        "background_color": settings.background_color,
        "text_color": settings.text_color,
    })


@renders(SectionType.DIVIDER)
def render_divider(section, settings, ctx):
    return _node(section, {
        "style": settings.style,
        "color": settings.color,
        "thickness": settings.thickness,
        "width": settings.width,
    })


@renders(SectionType.SPACER)
def render_spacer(section, settings, ctx):
    return _node(section, {"height": settings.height})


@renders(SectionType.FINAL_CTA)
def render_final_cta(section, settings, ctx):
    return _node(section, {
        "icon": settings.icon or None,
        "title": settings.title,
        "subtitle": settings.subtitle or None,
        "bullet_points": list(settings.bullet_points),
        "button": _button(settings.button_text, "#checkout", ctx),
        "footer_text": settings.footer_text or None,
        "background_color": settings.background_color,
        "text_color": settings.text_color,
    })


def _button(text: str, link: str, ctx: RenderContext):
    if not text:
        return None
    return {
        "text": text,
        "link": link or None,
        "color": ctx.theme.primary_color,
        "radius": ctx.theme.border_radius,
    }


def _columns(value) -> int:
    try:
        columns = int(value)
    except (TypeError, ValueError, OverflowError):
        return 3
    return columns if columns > 0 else 3


def countdown_remaining(end_date: str, now: Optional[datetime] = None) -> Optional[Dict[str, int]]:
    """Days/hours/minutes/seconds until ``end_date``, floored at zero."""
    if not end_date:
        return None
    try:
        end = isoparse(end_date)
    except (ValueError, OverflowError):
        return None

    if end.tzinfo is None:
        end = end.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = max(0, int((end - now).total_seconds()))
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    return {"days": days, "hours": hours, "minutes": minutes, "seconds": seconds}
