# piracy_viewer/services/errors.py


class IncidentServiceError(Exception):
    """Base class for everything the incident layer raises on purpose."""


class UnsupportedFilterError(IncidentServiceError):
    """The filter cannot be turned into a where clause (e.g. nothing set)."""


class UnknownFieldError(IncidentServiceError):
    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(f"Unknown incident field(s): {', '.join(self.fields)}")


class InvalidSourceError(IncidentServiceError):
    """The source URL does not point at a Google Sheet."""


class QueryExecutionError(IncidentServiceError):
    """The sheet endpoint could not be reached or rejected the query."""


class DataSourceError(IncidentServiceError):
    """The static data-source listing could not be loaded."""
