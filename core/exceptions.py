"""
Service-level exceptions.

The analytics engine itself never raises: bad coordinates are skipped and
empty input produces neutral defaults. Only the collaborators around it
(report fetching) can fail.
"""


class ReportSourceError(Exception):
    """
    Raised when reports cannot be fetched from the upstream store
    (transport failure, non-2xx response or an unparsable payload).
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
