"""
Onboarding Blueprint — consultant onboarding workflows over HTTP.

Endpoints:
  Templates:   GET  /templates, GET /templates/<template_id>
  Workflows:   GET/POST /workflows, GET /workflows/<id>
               GET  /consultants/<consultant_id>/workflow
               GET  /stats
               POST /workflows/<id>/welcome-message-sent
  Checklist:   POST  /workflows/<id>/checklist/<item_id>/complete
               PATCH /workflows/<id>/checklist/<item_id>
  Documents:   POST  /workflows/<id>/documents/<doc_id>/submit
               POST  /workflows/<id>/documents/<doc_id>/review
               PATCH /workflows/<id>/documents/<doc_id>
  Training:    POST  /workflows/<id>/training/<training_id>/start
               POST  /workflows/<id>/training/<training_id>/scores
               PATCH /workflows/<id>/training/<training_id>

Request shape is checked here (400). Services own the business rules:
NotFound → 404, InvalidTransitionError → 409, ValidationError → 422.
"""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request

from hr_onboarding.core.exceptions import InvalidTransitionError, ValidationError
from hr_onboarding.core.results import is_not_found
from hr_onboarding.models.onboarding import REVIEW_OUTCOMES, ConsultantType, WorkflowStatus
from hr_onboarding.services import (
    checklist_service,
    document_service,
    onboarding_service,
    template_service,
    training_service,
)
from hr_onboarding.utils.errors import E, api_error
from hr_onboarding.utils.helpers import check_patch, parse_date, parse_score, require_fields

logger = logging.getLogger(__name__)

onboarding_bp = Blueprint("onboarding", __name__, url_prefix="/api/v1/onboarding")

_WORKFLOW_STATUSES = {s.value for s in WorkflowStatus}
_CONSULTANT_TYPES = {t.value for t in ConsultantType}
_OUTCOMES = sorted(o.value for o in REVIEW_OUTCOMES)


# ── Error handlers ────────────────────────────────────────────────────────────


@onboarding_bp.errorhandler(InvalidTransitionError)
def _handle_transition(error: InvalidTransitionError):
    return api_error(E.CONFLICT_STATE, str(error), details=error.details)


@onboarding_bp.errorhandler(ValidationError)
def _handle_validation(error: ValidationError):
    return api_error(E.VALIDATION_RULE, str(error), details=error.details)


@onboarding_bp.errorhandler(Exception)
def _handle_unexpected(error: Exception):
    logger.exception("Unexpected error in onboarding_bp endpoint=%s", request.endpoint)
    return api_error(E.INTERNAL, "Internal server error")


# ── Helpers ───────────────────────────────────────────────────────────────────


def _json_body():
    """Return (data, err). Non-object bodies are rejected."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return None, api_error(E.VALIDATION_INVALID, "Request body must be a JSON object")
    return data, None


def _missing(data, *fields):
    missing = require_fields(data, *fields)
    if missing:
        return api_error(
            E.VALIDATION_REQUIRED,
            f"{', '.join(missing)} {'is' if len(missing) == 1 else 'are'} required",
            details={f: "required" for f in missing},
        )
    return None


def _patch_body():
    """Return (patch, err) for a PATCH request: a non-empty object with well-typed values."""
    data, err = _json_body()
    if err:
        return None, err
    if not data:
        return None, api_error(E.VALIDATION_REQUIRED, "Patch body must not be empty")
    errors = check_patch(data)
    if errors:
        return None, api_error(E.VALIDATION_INVALID, "Patch contains invalid values", details=errors)
    return data, None


def _respond(result, status=200):
    if is_not_found(result):
        return api_error(E.NOT_FOUND, str(result), details=result.to_dict())
    return jsonify(result.to_dict()), status


# ═════════════════════════════════════════════════════════════════════════════
# Templates
# ═════════════════════════════════════════════════════════════════════════════


@onboarding_bp.route("/templates", methods=["GET"])
def list_templates():
    """List catalog templates. Query: active_only=true|false."""
    active_only = request.args.get("active_only", "false").lower() in ("1", "true", "yes")
    templates = template_service.list_templates(active_only=active_only)
    return jsonify({
        "items": [t.to_dict(include_children=False) for t in templates],
        "total": len(templates),
    })


@onboarding_bp.route("/templates/<template_id>", methods=["GET"])
def get_template(template_id):
    return _respond(template_service.get_template(template_id))


# ═════════════════════════════════════════════════════════════════════════════
# Workflows
# ═════════════════════════════════════════════════════════════════════════════


@onboarding_bp.route("/workflows", methods=["POST"])
def create_workflow():
    """Instantiate a workflow from a template.

    Body: {template_id, consultant_id, consultant_name, start_date, created_by}
    start_date is YYYY-MM-DD (or DD.MM.YYYY).
    """
    data, err = _json_body()
    if err:
        return err
    err = _missing(data, "template_id", "consultant_id", "consultant_name", "start_date", "created_by")
    if err:
        return err
    start_date = parse_date(data["start_date"])
    if start_date is None:
        return api_error(
            E.VALIDATION_INVALID, "start_date must be a date (YYYY-MM-DD)",
            details={"start_date": data["start_date"]},
        )

    result = template_service.create_from_template(
        data["template_id"],
        str(data["consultant_id"]),
        str(data["consultant_name"]).strip(),
        start_date,
        data["created_by"],
    )
    return _respond(result, 201)


@onboarding_bp.route("/workflows", methods=["GET"])
def list_workflows():
    """List workflows. Query: status, consultant_type, consultant_id, include_children."""
    status = request.args.get("status")
    consultant_type = request.args.get("consultant_type")
    if status and status not in _WORKFLOW_STATUSES:
        return api_error(E.VALIDATION_INVALID, f"status must be one of: {sorted(_WORKFLOW_STATUSES)}")
    if consultant_type and consultant_type not in _CONSULTANT_TYPES:
        return api_error(
            E.VALIDATION_INVALID, f"consultant_type must be one of: {sorted(_CONSULTANT_TYPES)}",
        )
    include_children = request.args.get("include_children", "false").lower() in ("1", "true", "yes")

    workflows = onboarding_service.list_workflows(
        status=status or None,
        consultant_type=consultant_type or None,
        consultant_id=request.args.get("consultant_id") or None,
    )
    return jsonify({
        "items": [wf.to_dict(include_children=include_children) for wf in workflows],
        "total": len(workflows),
    })


@onboarding_bp.route("/workflows/<workflow_id>", methods=["GET"])
def get_workflow(workflow_id):
    return _respond(onboarding_service.get_workflow(workflow_id))


@onboarding_bp.route("/consultants/<consultant_id>/workflow", methods=["GET"])
def get_consultant_workflow(consultant_id):
    """Most recently created workflow of a consultant."""
    return _respond(onboarding_service.get_consultant_workflow(consultant_id))


@onboarding_bp.route("/stats", methods=["GET"])
def get_stats():
    """Summary counts. Query: today=YYYY-MM-DD (defaults to the server date)."""
    today = None
    if request.args.get("today"):
        today = parse_date(request.args["today"])
        if today is None:
            return api_error(E.VALIDATION_INVALID, "today must be a date (YYYY-MM-DD)")
    return jsonify(onboarding_service.get_onboarding_stats(today=today))


@onboarding_bp.route("/workflows/<workflow_id>/welcome-message-sent", methods=["POST"])
def mark_welcome_message_sent(workflow_id):
    return _respond(onboarding_service.mark_welcome_message_sent(workflow_id))


# ═════════════════════════════════════════════════════════════════════════════
# Checklist
# ═════════════════════════════════════════════════════════════════════════════


@onboarding_bp.route("/workflows/<workflow_id>/checklist/<item_id>/complete", methods=["POST"])
def complete_checklist_item(workflow_id, item_id):
    """Body: {completed_by}"""
    data, err = _json_body()
    if err:
        return err
    err = _missing(data, "completed_by")
    if err:
        return err
    return _respond(checklist_service.complete_item(workflow_id, item_id, data["completed_by"]))


@onboarding_bp.route("/workflows/<workflow_id>/checklist/<item_id>", methods=["PATCH"])
def update_checklist_item(workflow_id, item_id):
    data, err = _patch_body()
    if err:
        return err
    return _respond(checklist_service.update_item(workflow_id, item_id, data))


# ═════════════════════════════════════════════════════════════════════════════
# Documents
# ═════════════════════════════════════════════════════════════════════════════


@onboarding_bp.route("/workflows/<workflow_id>/documents/<document_id>/submit", methods=["POST"])
def submit_document(workflow_id, document_id):
    """Body: {file_url, file_name}"""
    data, err = _json_body()
    if err:
        return err
    err = _missing(data, "file_url", "file_name")
    if err:
        return err
    return _respond(document_service.submit(
        workflow_id, document_id, data["file_url"], data["file_name"],
    ))


@onboarding_bp.route("/workflows/<workflow_id>/documents/<document_id>/review", methods=["POST"])
def review_document(workflow_id, document_id):
    """Body: {outcome: approved|rejected|revision-required, reviewed_by, notes?}"""
    data, err = _json_body()
    if err:
        return err
    err = _missing(data, "outcome", "reviewed_by")
    if err:
        return err
    if data["outcome"] not in _OUTCOMES:
        return api_error(
            E.VALIDATION_INVALID, f"outcome must be one of: {', '.join(_OUTCOMES)}",
            details={"outcome": data["outcome"]},
        )
    return _respond(document_service.review(
        workflow_id, document_id, data["outcome"], data["reviewed_by"], data.get("notes"),
    ))


@onboarding_bp.route("/workflows/<workflow_id>/documents/<document_id>", methods=["PATCH"])
def update_document(workflow_id, document_id):
    data, err = _patch_body()
    if err:
        return err
    return _respond(document_service.update_document(workflow_id, document_id, data))


# ═════════════════════════════════════════════════════════════════════════════
# Training
# ═════════════════════════════════════════════════════════════════════════════


@onboarding_bp.route("/workflows/<workflow_id>/training/<training_id>/start", methods=["POST"])
def start_training(workflow_id, training_id):
    return _respond(training_service.start(workflow_id, training_id))


@onboarding_bp.route("/workflows/<workflow_id>/training/<training_id>/scores", methods=["POST"])
def record_training_score(workflow_id, training_id):
    """Body: {score} with 0 ≤ score ≤ 100"""
    data, err = _json_body()
    if err:
        return err
    err = _missing(data, "score")
    if err:
        return err
    score = parse_score(data["score"])
    if score is None:
        return api_error(
            E.VALIDATION_INVALID, "score must be a number between 0 and 100",
            details={"score": data["score"]},
        )
    return _respond(training_service.record_score(workflow_id, training_id, score))


@onboarding_bp.route("/workflows/<workflow_id>/training/<training_id>", methods=["PATCH"])
def update_training(workflow_id, training_id):
    data, err = _patch_body()
    if err:
        return err
    return _respond(training_service.update_training(workflow_id, training_id, data))
