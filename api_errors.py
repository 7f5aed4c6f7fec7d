"""
Error type raised by the service layer and rendered by the API blueprint.
"""


class APIError(Exception):
    """Service-level failure that maps onto an HTTP status code."""

    def __init__(self, status_code, message, rationale=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.rationale = rationale

    def to_dict(self):
        body = {'error': self.message}
        if self.rationale:
            body['rationale'] = self.rationale
        return body

    @classmethod
    def bad_request(cls, message='Bad Request', rationale=None):
        return cls(400, message, rationale)

    @classmethod
    def not_authorized(cls, message='Not Authorized', rationale=None):
        return cls(401, message, rationale)

    @classmethod
    def forbidden(cls, message='Forbidden', rationale=None):
        return cls(403, message, rationale)

    @classmethod
    def not_found(cls, message='Not Found', rationale=None):
        return cls(404, message, rationale)

    @classmethod
    def conflict(cls, message='Conflict', rationale=None):
        return cls(409, message, rationale)

    @classmethod
    def internal(cls, message='Internal Server Error', rationale=None):
        return cls(500, message, rationale)

    def __repr__(self):
        return f'<APIError {self.status_code}: {self.message}>'
