import json
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError as PydanticValidationError

from city_explorer.api.schemas import (
    BusinessReviewOut,
    CategoryOutcomeOut,
    EventOut,
    ErrorResponse,
    LocationOut,
    LocationQuery,
    MovieOut,
    SearchResponse,
    WeatherOut,
)
from city_explorer.exceptions import StoreConnectionError, ValidationError
from city_explorer.logging_config import get_logger
from city_explorer.pipeline import RequestOrchestrator
from city_explorer.pipeline.categories import EVENTS, MOVIES, WEATHER, YELP

logger = get_logger(__name__)

router = APIRouter()

LOCATION_FIELDS = ("id", "latitude", "longitude", "formatted_query", "search_query")

LOOKUP_ERRORS = {
    400: {"model": ErrorResponse, "description": "Missing or malformed query"},
    404: {"model": ErrorResponse, "description": "No location found"},
    500: {"model": ErrorResponse, "description": "Provider or store failure"},
}
CATEGORY_ERRORS = {code: LOOKUP_ERRORS[code] for code in (400, 500)}


def get_orchestrator(request: Request) -> RequestOrchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise StoreConnectionError("Orchestrator is offline; the store could not be initialised on startup.")
    return orchestrator


def location_query(request: Request) -> LocationQuery:
    """
    Read the resolved location from the query string.

    Accepts flat params (``id=1&latitude=…``), bracketed params as sent by
    browser clients (``data[id]=1&data[latitude]=…``), or a JSON object in
    ``data``.
    """
    params = request.query_params
    raw = {}
    if params.get("data", "").lstrip().startswith("{"):
        try:
            raw = json.loads(params["data"])
        except ValueError:
            raise ValidationError("Query parameter 'data' is not valid JSON") from None
    for name in LOCATION_FIELDS:
        value = params.get(name, params.get(f"data[{name}]"))
        if value is not None:
            raw[name] = value
    try:
        return LocationQuery(**raw)
    except PydanticValidationError as e:
        raise ValidationError(
            "A resolved location with id, latitude and longitude is required",
            details={"fields": [".".join(str(p) for p in err["loc"]) for err in e.errors()]},
        ) from None


@router.get("/location", response_model=LocationOut, responses=LOOKUP_ERRORS)
async def get_location(
    data: str = Query(..., description="Free-text place to resolve."),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
):
    """Resolve search text to a stored Location, geocoding it on first sight."""
    return await orchestrator.resolve_location(data)


@router.get("/weather", response_model=List[WeatherOut], responses=CATEGORY_ERRORS)
async def get_weather(
    location: LocationQuery = Depends(location_query),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.resolve_category(WEATHER, location)


@router.get("/events", response_model=List[EventOut], responses=CATEGORY_ERRORS)
async def get_events(
    location: LocationQuery = Depends(location_query),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.resolve_category(EVENTS, location)


@router.get("/movies", response_model=List[MovieOut], responses=CATEGORY_ERRORS)
async def get_movies(
    location: LocationQuery = Depends(location_query),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.resolve_category(MOVIES, location)


@router.get("/yelp", response_model=List[BusinessReviewOut], responses=CATEGORY_ERRORS)
async def get_yelp(
    location: LocationQuery = Depends(location_query),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.resolve_category(YELP, location)


@router.get("/search", response_model=SearchResponse, responses=LOOKUP_ERRORS)
async def search(
    data: str = Query(..., description="Free-text place to resolve."),
    categories: Optional[List[str]] = Query(None, description="Subset of categories; all when omitted."),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
):
    """
    Resolve the location and every requested category in one call.

    Each category reports its own success or failure; one failing provider
    does not fail the request.
    """
    result = await orchestrator.resolve_all(data, categories)
    return SearchResponse(
        location=LocationOut.model_validate(result.location),
        categories={
            name: CategoryOutcomeOut(ok=o.ok, data=o.data, error=o.error)
            for name, o in result.categories.items()
        },
    )
