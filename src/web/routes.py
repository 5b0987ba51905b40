from flask import Blueprint, abort, render_template, request

from src.domain.errors import IncompleteAttemptError, QuizNotFoundError
from src.domain.models.attempt import QuizAttempt
from src.services.quiz_service import get_quiz, list_previews
from qb_utils.logger_utils import logger

quizzes_bp = Blueprint('quizzes', __name__)


def _load_quiz_or_404(quiz_id):
    try:
        return get_quiz(quiz_id)
    except QuizNotFoundError:
        abort(404)


@quizzes_bp.route('/')
def index():
    return render_template('index.html', quizzes=list_previews())


@quizzes_bp.route('/quizzes/<quiz_id>', methods=['GET'])
def quiz_detail(quiz_id):
    quiz = _load_quiz_or_404(quiz_id)
    return render_template(
        'quiz.html',
        quiz_id=quiz_id,
        quiz=quiz,
        attempt=QuizAttempt(quiz),
    )


@quizzes_bp.route('/quizzes/<quiz_id>', methods=['POST'])
def submit_quiz(quiz_id):
    """Form fallback for browsers without JavaScript. Nothing is stored."""
    quiz = _load_quiz_or_404(quiz_id)
    attempt = QuizAttempt.from_form(quiz, request.form)

    error = None
    try:
        attempt.submit()
    except IncompleteAttemptError as e:
        error = str(e)
        logger.info(f"Incomplete submission for quiz {quiz_id}")

    return render_template(
        'quiz.html',
        quiz_id=quiz_id,
        quiz=quiz,
        attempt=attempt,
        error=error,
    )
