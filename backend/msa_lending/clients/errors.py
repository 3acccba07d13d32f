class DataSourceError(Exception):
    """Raised when a remote dataset cannot be fetched or decoded."""
