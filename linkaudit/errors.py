"""Exceptions raised by LinkAudit.

Only two things can go wrong during an analysis: the input is not a usable
URL (fatal), or page text could not be fetched in full mode (recoverable,
the analyzer falls back to the heuristic title).
"""


class LinkAuditError(Exception):
    pass


class InvalidUrl(LinkAuditError, ValueError):
    def __init__(self, url: str, reason: str = "not an absolute URL"):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")


class ContentFetchFailed(LinkAuditError):
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not fetch content from {url}: {reason}")
