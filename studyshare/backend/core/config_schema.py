"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
AppConfig validates every file against its schema at load time, so a missing
key or a typo in config/settings/ fails at startup with a readable error.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    DatabaseSchema     → database.yaml
    LoggingSchema      → logging.yaml
    FeaturesSchema     → features.yaml
    SecuritySchema     → security.yaml
    ServicesSchema     → services.yaml
"""

from pydantic import BaseModel, ConfigDict, model_validator


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    database: int
    external_api: int


class UploadsSchema(_StrictBase):
    directory: str
    url_prefix: str


class RatingsSchema(_StrictBase):
    min_value: float
    max_value: float

    @model_validator(mode="after")
    def _check_bounds(self) -> "RatingsSchema":
        if self.min_value > self.max_value:
            raise ValueError("ratings.min_value must not exceed ratings.max_value")
        return self


class ListingsSchema(_StrictBase):
    home_top_notes: int
    leaderboard_size: int
    report_size: int


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    public_base_url: str
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema
    uploads: UploadsSchema
    ratings: RatingsSchema
    listings: ListingsSchema


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    auth_google_enabled: bool
    playground_enabled: bool
    assistant_enabled: bool
    api_docs_enabled: bool


# =============================================================================
# security.yaml
# =============================================================================


class SessionTokenSchema(_StrictBase):
    algorithm: str
    expire_minutes: int
    audience: str


class CookiesSchema(_StrictBase):
    user_cookie: str
    admin_cookie: str
    oauth_state_cookie: str
    secure: bool
    same_site: str


class SecuritySchema(_StrictBase):
    session: SessionTokenSchema
    cookies: CookiesSchema


# =============================================================================
# services.yaml
# =============================================================================


class CircuitBreakerSchema(_StrictBase):
    fail_max: int
    timeout_duration: int


class Judge0Schema(_StrictBase):
    base_url: str
    circuit_breaker: CircuitBreakerSchema


class GeminiSchema(_StrictBase):
    base_url: str
    model: str
    circuit_breaker: CircuitBreakerSchema


class GoogleOAuthSchema(_StrictBase):
    authorize_url: str
    token_url: str
    userinfo_url: str
    scopes: list[str]


class ServicesSchema(_StrictBase):
    judge0: Judge0Schema
    gemini: GeminiSchema
    google_oauth: GoogleOAuthSchema
