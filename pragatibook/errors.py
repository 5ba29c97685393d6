"""Error taxonomy shared by services and the web layer.

Services raise these; ``web.app`` maps each class to one HTTP status.
Ownership mismatches are reported as :class:`NotFoundError` so callers cannot
tell a foreign record from a missing one.
"""


class PragatiBookError(Exception):
    status_code = 500


class ValidationError(PragatiBookError, ValueError):
    status_code = 400


class NotFoundError(PragatiBookError):
    status_code = 404


class InfrastructureError(PragatiBookError):
    """The store or the mail provider failed; the request cannot complete."""

    status_code = 500
