# smart_dashboard/weather/weather_router.py
# Mock weather: fixed base data, jittered with the app's random source.
from __future__ import annotations

import random
from datetime import timedelta

from fastapi import APIRouter, Request

from smart_dashboard.database import utcnow

router = APIRouter(prefix="/weather", tags=["weather"])

CURRENT = {
    "location": "San Francisco, CA",
    "temperature": 22,
    "condition": "Partly Cloudy",
    "humidity": 65,
    "windSpeed": 12,
    "pressure": 1013,
    "visibility": 10,
    "uvIndex": 6,
    "icon": "partly-cloudy",
}

FORECAST = [
    {"day": "Today", "high": 24, "low": 18, "condition": "Partly Cloudy", "icon": "partly-cloudy", "precipitation": 10},
    {"day": "Tomorrow", "high": 26, "low": 19, "condition": "Sunny", "icon": "sunny", "precipitation": 0},
    {"day": "Thursday", "high": 23, "low": 17, "condition": "Cloudy", "icon": "cloudy", "precipitation": 20},
    {"day": "Friday", "high": 21, "low": 15, "condition": "Rainy", "icon": "rainy", "precipitation": 80},
    {"day": "Saturday", "high": 25, "low": 18, "condition": "Sunny", "icon": "sunny", "precipitation": 5},
]

CONDITIONS = ["Sunny", "Partly Cloudy", "Cloudy", "Rainy"]


def _jitter(rng: random.Random, spread: float) -> float:
    return (rng.random() - 0.5) * spread


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _hourly_condition(hour: int) -> str:
    if hour % 4 == 0:
        return "Rainy"
    if hour % 3 == 0:
        return "Cloudy"
    return "Sunny"


@router.get("/current")
def get_current(request: Request):
    rng = request.app.state.rng
    now = utcnow()
    weather = {
        **CURRENT,
        "temperature": round(CURRENT["temperature"] + _jitter(rng, 4), 1),
        "humidity": round(_clamp(CURRENT["humidity"] + _jitter(rng, 20), 30, 90)),
        "windSpeed": round(_clamp(CURRENT["windSpeed"] + _jitter(rng, 8), 0, 100), 1),
        "lastUpdated": now.isoformat(),
    }
    return {"success": True, "weather": weather, "timestamp": now.isoformat()}


@router.get("/forecast")
def get_forecast(request: Request):
    rng = request.app.state.rng
    forecast = [
        {
            **day,
            "high": round(day["high"] + _jitter(rng, 4), 1),
            "low": round(day["low"] + _jitter(rng, 4), 1),
            "precipitation": round(_clamp(day["precipitation"] + _jitter(rng, 20), 0, 100)),
        }
        for day in FORECAST
    ]
    return {"success": True, "forecast": forecast, "timestamp": utcnow().isoformat()}


@router.get("/hourly")
def get_hourly(request: Request):
    rng = request.app.state.rng
    hourly = [
        {
            "time": f"{hour:02d}:00",
            "temperature": round(18 + rng.random() * 8, 1),
            "condition": _hourly_condition(hour),
            "precipitation": round(rng.random() * 100),
        }
        for hour in range(24)
    ]
    return {"success": True, "hourly": hourly, "timestamp": utcnow().isoformat()}


@router.get("/location/{city}")
def get_location(city: str, request: Request):
    rng = request.app.state.rng
    now = utcnow()
    weather = {
        **CURRENT,
        "location": city,
        "temperature": round(CURRENT["temperature"] + _jitter(rng, 10), 1),
        "condition": rng.choice(CONDITIONS),
        "lastUpdated": now.isoformat(),
    }
    return {"success": True, "weather": weather, "timestamp": now.isoformat()}


@router.get("/alerts")
def get_alerts():
    now = utcnow()
    alerts = [
        {
            "id": 1,
            "type": "warning",
            "title": "High UV Index Alert",
            "description": "UV index will reach dangerous levels between 11 AM and 3 PM. "
                           "Wear sunscreen and limit outdoor exposure.",
            "severity": "moderate",
            "expires": (now + timedelta(hours=6)).isoformat(),
        },
        {
            "id": 2,
            "type": "watch",
            "title": "Air Quality Advisory",
            "description": "Moderate air quality expected due to local wildfires. "
                           "Sensitive individuals should limit outdoor activities.",
            "severity": "minor",
            "expires": (now + timedelta(hours=12)).isoformat(),
        },
    ]
    return {"success": True, "alerts": alerts, "timestamp": now.isoformat()}
