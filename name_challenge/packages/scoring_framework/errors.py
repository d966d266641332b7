"""
Exceptions raised while loading the inputs of a scoring run.

Per-case candidate failures are never raised; they are recorded on the
case outcome instead.
"""


class ScorerError(Exception):
    """Base class for fatal scorer errors."""


class DatasetFormatError(ScorerError, ValueError):
    """Dataset CSV is malformed or contains duplicate record ids."""


class SuiteValidationError(ScorerError, ValueError):
    """Suite document is malformed or does not match the requested dataset."""


class CandidateLoadError(ScorerError, ImportError):
    """Candidate module cannot be imported or has no search function."""
