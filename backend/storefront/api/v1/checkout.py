from flask import current_app, jsonify, request
from flask_jwt_extended import jwt_required
from storefront.domain.invariants.exceptions import InvariantViolation
from storefront.domain.pricing import DEFAULT_ZONE, parse_zone, quote_order
from storefront.domain.risk import RISK_MESSAGES, RiskThresholds, classify_risk
from storefront.utils.decorators import roles_required
from . import v1_bp


@v1_bp.route("/checkout/quote", methods=["POST"])
def quote_view():
    data = request.get_json(silent=True) or {}

    items = data.get("items") or []
    if not isinstance(items, list):
        raise InvariantViolation("items must be a list")

    try:
        zone = parse_zone(data.get("zone") or DEFAULT_ZONE)
        lines = [
            (float(item.get("unit_price", 0)), int(item.get("quantity", 1)))
            for item in items
        ]
    except (AttributeError, TypeError, ValueError) as exc:
        raise InvariantViolation(str(exc)) from exc

    free_delivery = data.get("free_delivery", False)
    if not isinstance(free_delivery, bool):
        free_delivery = False

    quote = quote_order(
        lines,
        zone,
        discount=data.get("discount", 0),
        advance=data.get("advance", 0),
        free_delivery=free_delivery,
        delivery_charge=data.get("delivery_charge"),
    )
    return jsonify({"zone": zone.value, **quote.to_dict()})


@v1_bp.route("/admin/courier-history", methods=["POST"])
@jwt_required()
@roles_required("admin")
async def courier_history_view():
    data = request.get_json(silent=True) or {}
    phone = data.get("phone")
    if not phone:
        raise InvariantViolation("Phone number is required")

    service = current_app.extensions["courier_history"]
    record = await service.get_history(phone)
    band = classify_risk(record, RiskThresholds.from_config(current_app.config))

    return jsonify({
        "phone": record.phone if record else None,
        "record": record.to_dict() if record else None,
        "risk_band": band.value,
        "message": RISK_MESSAGES[band],
    })
