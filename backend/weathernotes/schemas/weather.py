"""
WeatherNotes — Weather Snapshot Schema
=======================================

What:  Current conditions for a city, parsed from WeatherAPI.com `current.json`.
Why:   Templates get a flat, validated object instead of the raw upstream JSON.
When:  Built once per page render; never persisted or cached.

Upstream shape (abridged):
    {
        "location": {"name": "Paris", "region": "Ile-de-France", "country": "France",
                     "localtime": "2024-01-15 12:00"},
        "current": {"temp_c": 7.0, "temp_f": 44.6, "feelslike_c": 5.1,
                    "condition": {"text": "Partly cloudy", "icon": "//cdn.weatherapi.com/..."},
                    "humidity": 81, "wind_kph": 11.2}
    }
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

# Rendered in place of the widget whenever the lookup yields nothing
WEATHER_FALLBACK_MESSAGE = "No weather data found for your location."


class WeatherSnapshot(BaseModel):
    location: str = Field(description="Resolved city name")
    region: str = Field(default="")
    country: str = Field(default="")
    temp_c: float
    temp_f: Optional[float] = None
    feelslike_c: Optional[float] = None
    condition: str = Field(default="", description="Human-readable condition, e.g. 'Light rain'")
    icon_url: Optional[str] = None
    humidity: Optional[int] = None
    wind_kph: Optional[float] = None
    observed_at: Optional[str] = Field(default=None, description="Local time at the location")

    @classmethod
    def from_api(cls, payload: Dict[str, Any], city: str) -> "WeatherSnapshot":
        """
        Build a snapshot from a decoded `current.json` body.

        Raises:
            KeyError / TypeError / pydantic.ValidationError on a malformed body;
            WeatherService maps those to WeatherServiceError.
        """
        location = payload.get("location") or {}
        current = payload["current"]
        condition = current.get("condition") or {}
        icon = condition.get("icon")
        # The API returns protocol-relative icon URLs
        if icon and icon.startswith("//"):
            icon = "https:" + icon
        return cls(
            location=location.get("name") or city,
            region=location.get("region") or "",
            country=location.get("country") or "",
            temp_c=current["temp_c"],
            temp_f=current.get("temp_f"),
            feelslike_c=current.get("feelslike_c"),
            condition=condition.get("text") or "",
            icon_url=icon,
            humidity=current.get("humidity"),
            wind_kph=current.get("wind_kph"),
            observed_at=location.get("localtime"),
        )
