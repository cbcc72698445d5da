"""Pipeline: category descriptors, fetcher, location resolver, orchestrator."""

from city_explorer.pipeline.categories import Category, CATEGORY_NAMES, build_categories
from city_explorer.pipeline.fetcher import CategoryFetcher
from city_explorer.pipeline.locations import LocationResolver
from city_explorer.pipeline.orchestrator import (
    CategoryOutcome,
    RequestOrchestrator,
    SearchResult,
)

__all__ = [
    "Category",
    "CATEGORY_NAMES",
    "build_categories",
    "CategoryFetcher",
    "LocationResolver",
    "CategoryOutcome",
    "RequestOrchestrator",
    "SearchResult",
]
