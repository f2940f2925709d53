"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class DataSourceError(DomainException):
    """Data store returned an error or is unavailable"""

    pass


class FacilityNotFoundError(DomainException):
    """Requested facility does not exist in the data store"""

    pass
