"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class RecordSourceError(DomainException):
    """Record store returned an error or is unavailable"""

    pass


class InvalidAnalysisParamsError(DomainException):
    """Analysis tunables are outside their accepted range"""

    pass
