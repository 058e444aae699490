"""
WeatherNotes — Health Check Schema
===================================
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for load balancer and uptime probes.
    """
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    weather: str = Field(description="Weather API key: configured, unconfigured")
    uptime_seconds: float = Field(description="Seconds since service started")
