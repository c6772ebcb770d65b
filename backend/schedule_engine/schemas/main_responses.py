"""Response models for endpoints defined directly on the application."""

from pydantic import ConfigDict, Field

from ._strict_base import StrictModel


class HealthResponse(StrictModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)
    """Response for health check endpoints."""

    status: str = Field(description="Health status")
    service: str = Field(description="Service name")
    version: str = Field(description="API version")
    environment: str = Field(description="Current environment")
    timezone: str = Field(description="Timezone calendars are evaluated in")
    timestamp: str = Field(description="Current server time (UTC)")
