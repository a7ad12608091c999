from flask import jsonify
from werkzeug.exceptions import HTTPException
from storefront.domain.invariants.exceptions import (
    InvariantViolation,
    OrderValidationError,
)


def register_error_handlers(app):
    @app.errorhandler(OrderValidationError)
    def handle_order_validation(error):
        response = jsonify({
            "error": "OrderValidationError",
            "message": str(error),
            "fields": error.errors,
        })
        response.status_code = error.status_code
        return response

    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        response = jsonify({
            "error": type(error).__name__,
            "message": str(error)
        })
        response.status_code = error.status_code
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "error": error.name,
            "message": error.description,
        })
        response.status_code = error.code
        return response
