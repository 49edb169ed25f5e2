from flask import jsonify


class LoggenError(Exception):
    status_code = 400
    code = "error"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_response(self):
        body = {"error": self.message}
        if self.code != LoggenError.code:
            body["code"] = self.code
        return jsonify(body), self.status_code


class ValidationError(LoggenError):
    status_code = 400
    code = "validation_error"


class NotFound(LoggenError):
    status_code = 404
    code = "not_found"


class Conflict(LoggenError):
    status_code = 409
    code = "conflict"


class Unauthorized(LoggenError):
    status_code = 401
    code = "unauthorized"


class Forbidden(LoggenError):
    status_code = 403
    code = "forbidden"


def register_error_handlers(bp):
    """Render engine errors raised inside `bp` as JSON."""

    @bp.errorhandler(LoggenError)
    def _handle_loggen_error(err: LoggenError):
        return err.to_response()
