import os
from flask import Flask, jsonify, render_template, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound

from src.infrastructure.config import settings
from src.infrastructure.repositories import FileQuizRepository
from qb_utils.logger_utils import configure_logging, logger
from qb_utils.validation import ERRORS

# Import Blueprints
from src.api.routes_upload import upload_bp
from src.web.routes import quizzes_bp


def _is_api_request():
    return request.path.startswith('/api/')


def create_app(test_config=None):
    """Application factory for Flask."""
    app = Flask(__name__, template_folder='ui/templates', static_folder='ui/static')

    # --- Core Configuration ---
    app.config.from_object(settings)
    if test_config:
        app.config.update(test_config)
    app.config['MAX_CONTENT_LENGTH'] = app.config['MAX_UPLOAD_BYTES']
    app.json.ensure_ascii = False

    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # --- Storage ---
    # Relative roots are anchored to the app directory, not the process cwd
    storage_root = os.path.join(app.root_path, app.config['STORAGE_ROOT'])
    app.extensions['quiz_repository'] = FileQuizRepository(
        storage_root,
        max_attempts=app.config['ID_ALLOCATION_ATTEMPTS'],
    )
    configure_logging(app.config['LOG_LEVEL'], storage_root)

    # --- Blueprints Registration ---
    app.register_blueprint(upload_bp, url_prefix='/api/upload')
    app.register_blueprint(quizzes_bp)

    # --- Request Hooks & Context Processors ---
    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['Content-Security-Policy'] = "default-src 'self'; script-src 'self'; style-src 'self'; connect-src 'self';"
        return response

    @app.context_processor
    def inject_global_vars():
        return dict(version=app.config['VERSION'])

    # --- Health Check ---
    @app.route('/health')
    def health_check():
        return jsonify({"status": "healthy"}), 200

    # --- Error Handling ---
    @app.errorhandler(NotFound)
    def handle_not_found(error):
        logger.warning(f"Not Found error for path: {request.path}")
        if _is_api_request():
            return jsonify({"error": ERRORS["not_found"]}), 404
        return render_template('404.html'), 404

    @app.errorhandler(MethodNotAllowed)
    def handle_method_not_allowed(error):
        logger.info(f"{request.method} not allowed for path: {request.path}")
        if _is_api_request():
            response = jsonify({"error": ERRORS["method"]})
            response.status_code = 405
            if error.valid_methods:
                response.headers['Allow'] = ', '.join(error.valid_methods)
            return response
        return error

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        if _is_api_request():
            message = ERRORS["too_large"] if error.code == 413 else error.name
            return jsonify({"error": message}), error.code
        return error

    @app.errorhandler(Exception)
    def handle_exception(error):
        logger.error(f"Unhandled exception for path {request.path}: {error}", exc_info=True)
        if _is_api_request():
            return jsonify({"error": ERRORS["server_error"]}), 500
        return render_template('500.html'), 500

    logger.info(f"Flask App created successfully in {app.config['FLASK_ENV']} mode.")
    return app

if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=int(os.environ.get("PORT", 5000)))
