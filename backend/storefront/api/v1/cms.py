# storefront/api/v1/cms.py
import uuid
from dataclasses import replace
from flask import request, jsonify
from flask_jwt_extended import jwt_required
from storefront.utils.decorators import roles_required
from storefront.utils.audit import current_actor
from storefront.utils.optimistic_lock import enforce_optimistic_lock
from storefront.application.cms.create_page import create_page
from storefront.application.cms.duplicate_page import duplicate_page
from storefront.application.cms.load_page import get_page_model, get_published_page
from storefront.application.cms.publish_page import publish_page
from storefront.application.cms.unpublish_page import unpublish_page
from storefront.application.cms.update_page import edit_page, save_page
from storefront.domain import composer
from storefront.domain.invariants.exceptions import InvariantViolation
from storefront.domain.page import PageSection
from storefront.domain.renderer import render
from storefront.domain.sections.registry import describe_registry
from storefront.normalizers.page import normalize_page, to_document
from . import v1_bp


def _admin_page(page_id):
    model = get_page_model(page_id)
    return normalize_page(to_document(model), admin=True, updated_at=model.updated_at)


# ------------------------
# Pages
# ------------------------

@v1_bp.route("/pages", methods=["POST"])
@jwt_required()
@roles_required("admin")
def create_page_view():
    data = request.get_json(silent=True) or {}
    page = create_page(actor_id=current_actor(), data=data)

    return jsonify({
        "id": page.id,
        "message": "Page created successfully"
    }), 201


@v1_bp.route("/pages/<page_id>", methods=["GET"])
@jwt_required()
@roles_required("admin")
def get_page_view(page_id):
    return jsonify(_admin_page(page_id))


@v1_bp.route("/pages/<page_id>", methods=["PUT"])
@jwt_required()
@roles_required("admin")
def save_page_view(page_id):
    model = get_page_model(page_id)

    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    enforce_optimistic_lock(model)

    data = request.get_json(silent=True) or {}
    document = to_document(model)

    for field in ("title", "slug"):
        if field in data:
            document = replace(document, **{field: data[field]})

    if "theme" in data:
        if not isinstance(data["theme"], dict):
            raise InvariantViolation("theme must be an object")
        document = composer.update_theme(replace(document, theme={}), data["theme"])

    if "sections" in data:
        document = document.with_sections(_parse_sections(data["sections"]))

    save_page(page_id=page_id, actor_id=current_actor(), document=document)
    return jsonify(_admin_page(page_id)), 200


def _parse_sections(items):
    if not isinstance(items, list):
        raise InvariantViolation("sections must be a list")

    sections = []
    for position, item in enumerate(items, start=1):
        if not isinstance(item, dict) or not item.get("type"):
            raise InvariantViolation("each section needs a type")
        settings = item.get("settings") or {}
        if not isinstance(settings, dict):
            raise InvariantViolation("section settings must be an object")
        sections.append(PageSection(
            id=item.get("id") or str(uuid.uuid4()),
            type=item["type"],
            order=item.get("order", position),
            settings=settings,
        ))
    return sections


@v1_bp.route("/pages/<page_id>/publish", methods=["POST"])
@jwt_required()
@roles_required("admin")
def publish_page_view(page_id):
    result = publish_page(page_id=page_id, actor_id=current_actor())
    return jsonify({"message": "Page published", **result}), 200


@v1_bp.route("/pages/<page_id>/unpublish", methods=["POST"])
@jwt_required()
@roles_required("admin")
def unpublish_page_view(page_id):
    result = unpublish_page(page_id=page_id, actor_id=current_actor())
    return jsonify({"message": "Page unpublished successfully", **result}), 200


@v1_bp.route("/pages/<page_id>/duplicate", methods=["POST"])
@jwt_required()
@roles_required("admin")
def duplicate_page_view(page_id):
    page = duplicate_page(page_id=page_id, actor_id=current_actor())
    return jsonify({"id": page.id, "slug": page.slug}), 201


# ------------------------
# Sections
# ------------------------

@v1_bp.route("/pages/<page_id>/sections", methods=["POST"])
@jwt_required()
@roles_required("admin")
def add_section_view(page_id):
    data = request.get_json(silent=True) or {}
    new_id = str(uuid.uuid4())

    edit_page(
        page_id=page_id,
        actor_id=current_actor(),
        action="section.create",
        edit=lambda doc: composer.add_section(doc, data.get("type"), id_factory=lambda: new_id),
    )
    return jsonify({"id": new_id, "page": _admin_page(page_id)}), 201


@v1_bp.route("/pages/<page_id>/sections/<section_id>", methods=["PATCH"])
@jwt_required()
@roles_required("admin")
def update_section_view(page_id, section_id):
    data = request.get_json(silent=True) or {}

    edit_page(
        page_id=page_id,
        actor_id=current_actor(),
        action="section.update",
        edit=lambda doc: composer.update_section(doc, section_id, data.get("settings", {})),
    )
    return jsonify(_admin_page(page_id)), 200


@v1_bp.route("/pages/<page_id>/sections/<section_id>", methods=["DELETE"])
@jwt_required()
@roles_required("admin")
def delete_section_view(page_id, section_id):
    edit_page(
        page_id=page_id,
        actor_id=current_actor(),
        action="section.delete",
        edit=lambda doc: composer.delete_section(doc, section_id),
    )
    return jsonify(_admin_page(page_id)), 200


@v1_bp.route("/pages/<page_id>/sections/<section_id>/move", methods=["POST"])
@jwt_required()
@roles_required("admin")
def move_section_view(page_id, section_id):
    data = request.get_json(silent=True) or {}
    moves = {"up": composer.move_up, "down": composer.move_down}
    move = moves.get(data.get("direction"))
    if move is None:
        raise InvariantViolation("direction must be 'up' or 'down'")

    edit_page(
        page_id=page_id,
        actor_id=current_actor(),
        action="section.reorder",
        edit=lambda doc: move(doc, section_id),
    )
    return jsonify(_admin_page(page_id)), 200


@v1_bp.route("/pages/<page_id>/sections/<section_id>/duplicate", methods=["POST"])
@jwt_required()
@roles_required("admin")
def duplicate_section_view(page_id, section_id):
    new_id = str(uuid.uuid4())

    edit_page(
        page_id=page_id,
        actor_id=current_actor(),
        action="section.duplicate",
        edit=lambda doc: composer.duplicate_section(doc, section_id, id_factory=lambda: new_id),
    )
    return jsonify({"id": new_id, "page": _admin_page(page_id)}), 201


@v1_bp.route("/sections/schema", methods=["GET"])
def section_schema_view():
    return jsonify(describe_registry())


# ------------------------
# Visitor
# ------------------------

@v1_bp.route("/lp/<slug>", methods=["GET"])
def landing_page_view(slug):
    document = get_published_page(slug)
    tree = render(document)

    return jsonify({
        "page": normalize_page(document),
        "tree": tree.to_dict(),
    })
