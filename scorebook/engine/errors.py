"""
Scoring error taxonomy
"""


class ScoringError(Exception):
    """Base class for anything the scoring engine refuses to do"""


class InvalidEventError(ScoringError):
    """Malformed input, e.g. a wicket without a dismissed batsman"""


class IllegalStateError(ScoringError):
    """Well-formed input that the current innings state does not allow"""
