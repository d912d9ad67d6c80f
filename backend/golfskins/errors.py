"""Error taxonomy for match operations.

Every failure a match operation can surface is one of these. The API layer
maps them to a status code and a stable ``kind`` string; nothing in the
services returns HTTP responses directly.
"""


class MatchError(Exception):
    kind = 'error'
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message, 'kind': self.kind}


class NotFound(MatchError):
    kind = 'not_found'
    status_code = 404


class Forbidden(MatchError):
    kind = 'forbidden'
    status_code = 403


class InvalidState(MatchError):
    kind = 'invalid_state'
    status_code = 409


class Conflict(MatchError):
    kind = 'conflict'
    status_code = 409


class Full(MatchError):
    kind = 'full'
    status_code = 409


class UpstreamUnavailable(MatchError):
    kind = 'upstream_unavailable'
    status_code = 502


class Invalid(MatchError):
    kind = 'invalid'
    status_code = 400
