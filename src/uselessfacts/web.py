"""JSON HTTP API.

Public routes list facts and accept submissions; routes under /admin
need a logged-in admin session (a signed cookie).
"""

import logging
from functools import wraps

from flask import Flask, current_app, jsonify, request, session

from .activity_log import configure_logger
from .admin import AdminSession
from .config import FactsConfig, load_config
from .errors import NotAuthorized, NotFound, OperationFailed, ValidationError
from .models import CATEGORIES
from .services import Services, build_services

logger = logging.getLogger(__name__)

ADMIN_SESSION_KEY = "admin"


def _services() -> Services:
    return current_app.config["SERVICES"]


def _admin_session() -> AdminSession:
    return _services().admin_session(authenticated=bool(session.get(ADMIN_SESSION_KEY)))


def admin_required(f):
    """Reject the request with 401 unless an admin is logged in."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not session.get(ADMIN_SESSION_KEY):
            return jsonify({"error": "Authentication required"}), 401
        return f(*args, **kwargs)

    return decorated_function


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def create_app(
    config: FactsConfig | None = None,
    services: Services | None = None,
) -> Flask:
    """Create the Flask application.

    Args:
        config: Configuration to build services from. Loaded from disk and
            environment if None.
        services: Prebuilt services (used by tests); config is taken from it.
    """
    if services is None:
        config = config or load_config()
        activity = configure_logger(config.log_dir)
        activity.set_actor("web")
        services = build_services(config, activity=activity)

    app = Flask(__name__)
    app.secret_key = services.config.secret_key
    app.config["SERVICES"] = services

    @app.errorhandler(ValidationError)
    def handle_validation(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(NotAuthorized)
    def handle_not_authorized(e):
        return jsonify({"error": "Authentication required"}), 401

    @app.errorhandler(NotFound)
    def handle_not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(OperationFailed)
    def handle_operation_failed(e):
        logger.error("Storage operation failed on %s %s: %s", request.method, request.path, e)
        if services.activity is not None:
            services.activity.log_failure(f"{request.method} {request.path}", e)
        return jsonify({"error": "Operation failed, please try again later"}), 500

    @app.route("/facts", methods=["GET"])
    def list_facts():
        category = request.args.get("category")
        repository = _services().repository
        if category:
            facts = repository.list_published_by_category(category)
        else:
            facts = repository.list_published()
        return jsonify([f.to_dict() for f in facts])

    @app.route("/facts/submit", methods=["POST"])
    def submit_fact():
        body = _json_body()
        if not body.get("text") or not body.get("category") or not body.get("submittedBy"):
            return jsonify({"error": "Missing required fields"}), 400

        submission = _services().repository.submit(
            text=body["text"],
            category=body["category"],
            submitted_by=body["submittedBy"],
            source=body.get("source"),
        )
        return jsonify(submission.to_dict()), 201

    @app.route("/categories", methods=["GET"])
    def list_categories():
        return jsonify(CATEGORIES)

    @app.route("/admin/login", methods=["POST"])
    def admin_login():
        body = _json_body()
        admin = _services().admin_session()
        if not admin.login(str(body.get("password", ""))):
            session.pop(ADMIN_SESSION_KEY, None)
            return jsonify({"error": "Incorrect password"}), 401
        session[ADMIN_SESSION_KEY] = True
        return jsonify({"authenticated": True})

    @app.route("/admin/logout", methods=["POST"])
    def admin_logout():
        session.pop(ADMIN_SESSION_KEY, None)
        return jsonify({"authenticated": False})

    @app.route("/admin/password", methods=["POST"])
    @admin_required
    def admin_change_password():
        body = _json_body()
        _services().gate.change_password(
            str(body.get("newPassword", "")),
            str(body.get("confirmPassword", "")),
        )
        return jsonify({"changed": True})

    @app.route("/admin/pending", methods=["GET"])
    @admin_required
    def admin_pending():
        return jsonify([s.to_dict() for s in _services().repository.list_pending()])

    @app.route("/admin/pending/<submission_id>/approve", methods=["POST"])
    @admin_required
    def admin_approve(submission_id):
        fact = _services().workflow(_admin_session()).approve(submission_id)
        return jsonify(fact.to_dict())

    @app.route("/admin/pending/<submission_id>/reject", methods=["POST"])
    @admin_required
    def admin_reject(submission_id):
        _services().workflow(_admin_session()).reject(submission_id)
        return jsonify({"rejected": submission_id})

    @app.route("/admin/facts", methods=["POST"])
    @admin_required
    def admin_create_fact():
        body = _json_body()
        fact = _services().repository.create(
            text=body.get("text"),
            category=body.get("category"),
            source=body.get("source"),
            submitted_by=body.get("submittedBy"),
        )
        return jsonify(fact.to_dict()), 201

    @app.route("/admin/facts/<fact_id>", methods=["PATCH"])
    @admin_required
    def admin_update_fact(fact_id):
        body = _json_body()
        names = {"text": "text", "category": "category", "source": "source", "submittedBy": "submitted_by"}
        unknown = set(body) - set(names)
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        changes = {names[key]: value for key, value in body.items()}
        fact = _services().repository.update(fact_id, **changes)
        return jsonify(fact.to_dict())

    @app.route("/admin/facts/<fact_id>", methods=["DELETE"])
    @admin_required
    def admin_delete_fact(fact_id):
        _services().repository.delete(fact_id)
        return jsonify({"deleted": fact_id})

    return app
