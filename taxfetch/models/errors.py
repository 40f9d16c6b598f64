"""Error classes for taxfetch."""

class TaxfetchError(Exception):
    """Base class for taxfetch exceptions."""
    pass

class ConfigError(TaxfetchError):
    """Raised when there's an issue with the run configuration."""
    pass

class TaxonomyError(TaxfetchError):
    """Raised when the taxonomy is corrupted or a taxon is missing from it."""
    pass

class BranchError(TaxfetchError):
    """Raised when a taxon cannot be resolved to a supported branch."""

    def __init__(self, message: str, lineage=None):
        super().__init__(message)
        self.lineage = list(lineage) if lineage else []

class InputError(TaxfetchError):
    """Raised when there's an issue with input files."""
    pass

class DownloadError(TaxfetchError):
    """Raised when a file transfer fails."""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url
