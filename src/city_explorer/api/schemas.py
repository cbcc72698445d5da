from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional


class LocationQuery(BaseModel):
    """A previously resolved location, as sent back by the client."""
    id: int = Field(..., description="Store-assigned location id.")
    latitude: float
    longitude: float
    formatted_query: Optional[str] = None
    search_query: Optional[str] = None


class LocationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    search_query: str
    formatted_query: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class CachedRowOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    created_at: float
    location_id: int


class WeatherOut(CachedRowOut):
    forecast: Optional[str] = None
    time: Optional[str] = None


class EventOut(CachedRowOut):
    link: Optional[str] = None
    name: Optional[str] = None
    event_date: Optional[str] = None
    summary: Optional[str] = None


class MovieOut(CachedRowOut):
    title: Optional[str] = None
    overview: Optional[str] = None
    image_url: Optional[str] = None
    released_on: Optional[str] = None
    total_votes: Optional[int] = None
    average_votes: Optional[float] = None
    popularity: Optional[float] = None


class BusinessReviewOut(CachedRowOut):
    name: Optional[str] = None
    rating: Optional[float] = None
    price: Optional[str] = None
    url: Optional[str] = None
    image_url: Optional[str] = None


class CategoryOutcomeOut(BaseModel):
    ok: bool
    data: List[dict] = Field(default_factory=list)
    error: Optional[str] = None


class SearchResponse(BaseModel):
    """Location plus every requested category, each succeeding or failing on its own."""
    location: LocationOut
    categories: Dict[str, CategoryOutcomeOut]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "location": {
                    "id": 1,
                    "search_query": "98103",
                    "formatted_query": "Seattle, WA 98103, USA",
                    "latitude": 47.66,
                    "longitude": -122.35,
                },
                "categories": {
                    "weather": {"ok": True, "data": [{"forecast": "Light rain.", "time": "Mon Oct 19 2026"}]},
                    "movies": {"ok": False, "data": [], "error": "Sorry something went wrong"},
                },
            }
        }
    )


class ErrorResponse(BaseModel):
    status: int
    responseText: str
