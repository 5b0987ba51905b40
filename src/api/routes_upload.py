# src/api/routes_upload.py
from flask import Blueprint, request, jsonify

from src.domain.errors import InvalidQuizError
from src.services.quiz_service import upload_quiz
from qb_utils.logger_utils import logger
from qb_utils.validation import ERRORS

upload_bp = Blueprint("upload_bp", __name__)


@upload_bp.route("/", methods=["POST"], strict_slashes=False)
def upload_quiz_route():
    """
    Stores an uploaded quiz document.

    The body must be a JSON quiz. Responds with the {id, title} preview;
    invalid documents get a 400, storage failures a 500. Other methods are
    answered with a 405 by the app-level handler.
    """
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        logger.info("Rejected upload: body is not JSON")
        return jsonify({
            "error": ERRORS["invalid"],
            "details": [{"loc": [], "msg": "request body is not valid JSON"}],
        }), 400

    try:
        preview = upload_quiz(payload)
    except InvalidQuizError as e:
        logger.info(f"Rejected upload: {e}", extra={"details": e.details})
        return jsonify({"error": ERRORS["invalid"], "details": e.details}), 400
    except Exception as e:
        logger.error(f"Failed to store uploaded quiz: {e}", exc_info=True)
        return jsonify({"error": ERRORS["upload_failed"]}), 500

    return jsonify(preview.to_dict()), 200
