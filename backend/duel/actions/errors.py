STATUS_CODES = {
    'BAD_REQUEST': 400,
    'UNAUTHORIZED': 401,
    'FORBIDDEN': 403,
    'NOT_FOUND': 404,
    'CONFLICT': 409,
}


class ActionError(Exception):
    """Raised by an action to abort with an error code and a user-facing message."""

    def __init__(self, code, message):
        if code not in STATUS_CODES:
            raise ValueError(f"Unknown action error code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def status_code(self):
        return STATUS_CODES[self.code]

    def to_dict(self):
        return {'error': self.message, 'code': self.code}
