class CalhijriError(Exception):
    """Base error."""

class UnknownConventionError(CalhijriError, KeyError):
    """Raised when a prayer convention id is not one of the known conventions."""

class UnknownCriterionError(CalhijriError, KeyError):
    """Raised when a crescent criterion id is not registered."""

class ConjunctionDataError(CalhijriError, ValueError):
    """Raised when a conjunction table is malformed (non-numeric or not ascending)."""
