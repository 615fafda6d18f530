from flask import jsonify
from cvhistory.domain.exceptions import VersioningError

def register_error_handlers(app):
    @app.errorhandler(VersioningError)
    def handle_versioning_error(error):
        response = jsonify({
            "error": error.code,
            "message": str(error)
        })
        response.status_code = error.status_code
        return response
