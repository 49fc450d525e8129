"""FastAPI server exposing weather, outfit and hazard endpoints for deployment."""

import os
from dataclasses import asdict

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from models.weather import ConditionCode, WeatherRecord
from outfit_app.app import WeatherOutfitApp
from outfit_app.errors import ConfigurationError
from outfit_app.logging_config import configure_logging

configure_logging()

weather_app = WeatherOutfitApp()
app = FastAPI(title="Taiwan Weather Outfit", version="0.1.0")


class WeatherRecordPayload(BaseModel):
    """Normalized weather observation submitted for an outfit decision."""

    location: str = Field(..., min_length=1, description="City identifier")
    temperature: float = Field(..., description="Air temperature in Celsius")
    feels_like: float | None = Field(None, description="Apparent temperature; defaults to temperature")
    condition_code: str = Field("Clear", description="Canonical condition code such as Rain or Clouds")
    condition_description: str = ""
    wind_speed: float = Field(0.0, ge=0, description="Wind speed in metres per second")

    def to_record(self) -> WeatherRecord:
        return WeatherRecord(
            location=self.location,
            temperature=self.temperature,
            feels_like=self.feels_like,
            condition_code=ConditionCode.parse(self.condition_code),
            condition_description=self.condition_description,
            wind_speed=self.wind_speed,
        )


class OutfitRequest(BaseModel):
    """Request payload for a one-off outfit decision."""

    weather: WeatherRecordPayload
    gender: str = "male"


@app.get("/healthz")
async def healthcheck() -> dict:
    """Lightweight readiness probe."""

    return {
        "status": "ok",
        "service": "weather-outfit",
        "environment": weather_app.config.environment or "local",
        "weather_provider": weather_app.weather_provider.name,
    }


@app.get("/cities")
async def list_cities() -> dict:
    return {"cities": weather_app.list_cities(), "default": weather_app.config.default_city}


@app.get("/weather/{city}")
def city_weather(city: str, gender: str | None = None) -> dict:
    """Current conditions, daily forecast and outfit for one city."""

    return weather_app.load_city(city, gender).to_dict()


@app.get("/forecast/{city}/daily")
def daily_forecast(city: str) -> dict:
    view = weather_app.load_city(city)
    return {
        "city": view.city,
        "days": [asdict(day) for day in view.daily],
        "is_placeholder": view.forecast_is_placeholder,
    }


@app.post("/outfit")
async def outfit(request: OutfitRequest) -> dict:
    """Classify a submitted observation and return the outfit and avatar media."""

    try:
        record = request.weather.to_record()
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return weather_app.outfit_for(record, request.gender).to_dict()


@app.get("/hazards")
def hazards(city: str | None = None) -> dict:
    """Typhoon and advisory bulletins; unavailable datasets come back empty."""

    try:
        snapshot = weather_app.load_hazards(city)
    except ConfigurationError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return snapshot.to_dict()


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=int(os.getenv("PORT", "8080")), reload=False)
