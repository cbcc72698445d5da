"""
Custom exception hierarchy for City Explorer.

Provides specific exception types for each subsystem,
enabling targeted error handling throughout the application.
"""


class CityExplorerError(Exception):
    """Base exception for all City Explorer errors."""

    def __init__(self, message: str = "", details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# --- Provider Exceptions ---


class ProviderError(CityExplorerError):
    """Base exception for remote data provider failures."""
    pass


class ProviderTimeoutError(ProviderError):
    """Raised when a provider call exceeds its timeout or the network fails."""
    pass


class ProviderResponseError(ProviderError):
    """Raised when a provider answers with a non-success status."""
    pass


class ProviderPayloadError(ProviderError):
    """Raised when a provider payload does not have the expected shape."""
    pass


# --- Store Exceptions ---


class StoreError(CityExplorerError):
    """Base exception for persistent store errors."""
    pass


class StoreConnectionError(StoreError):
    """Raised when the store connection fails."""
    pass


class NoLocationFound(CityExplorerError):
    """Raised when geocoding returns zero results for a search query."""

    def __init__(self, search_query: str):
        super().__init__(
            message=f"No location found for '{search_query}'",
            details={"search_query": search_query},
        )


# --- Validation Exceptions ---


class ValidationError(CityExplorerError):
    """Base exception for input validation errors."""
    pass


class InvalidQueryError(ValidationError):
    """Raised when a search query is empty or unusable."""

    def __init__(self, search_query: str | None):
        super().__init__(
            message="Search query must not be empty",
            details={"search_query": search_query},
        )


class UnknownCategoryError(ValidationError):
    """Raised when a category name is not registered."""

    def __init__(self, category: str):
        super().__init__(
            message=f"Unknown category '{category}'",
            details={"category": category},
        )
