"""
Lookup errors
"""

from typing import Optional


class CymruError(Exception):
    """Base class for lookup failures; ``query`` is the DNS name asked"""

    def __init__(self, message: str, query: Optional[str] = None):
        super().__init__(message)
        self.query = query

    def __str__(self) -> str:
        message = super().__str__()
        if self.query:
            return f"{message} (query: {self.query})"
        return message


class NoResultsFound(CymruError):
    """Query answered but no usable records were parsed"""

    def __init__(self, query: Optional[str] = None):
        super().__init__("Query found no results", query)


class TransportError(CymruError):
    """DNS service could not be reached"""


class ResolutionError(CymruError):
    """DNS service answered with a protocol-level error"""
