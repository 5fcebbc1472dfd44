"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML settings file.
Used by AppConfig to validate configuration at load time. A user override
with a misspelled key or a wrong type fails with a ValidationError at
startup instead of a KeyError deep inside a command.

Each top-level class corresponds to one file in ostack/settings/:
    ApplicationSchema  → application.yaml
    LoggingSchema      → logging.yaml
    ViewsSchema        → views.yaml
    TuiSchema          → tui.yaml
"""

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class TimeoutsSchema(_StrictBase):
    connect: float
    read: float


class HttpSchema(_StrictBase):
    user_agent: str
    timeouts: TimeoutsSchema


class AuthSchema(_StrictBase):
    cache_dir: str
    expiration_offset_seconds: int


class ListingSchema(_StrictBase):
    max_items: int
    page_size: int | None = None


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    http: HttpSchema
    auth: AuthSchema
    listing: ListingSchema


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
# views.yaml
# =============================================================================


class ViewFieldSchema(_StrictBase):
    name: str
    width: int | None = None
    min_width: int | None = None
    max_width: int | None = None
    json_pointer: str | None = None


class ViewSchema(_StrictBase):
    default_fields: list[str] = Field(default_factory=list)
    fields: list[ViewFieldSchema] = Field(default_factory=list)
    wide: bool = False

    def get_field(self, name: str) -> ViewFieldSchema | None:
        """Return the field customization for a column, matched case-insensitively."""
        for field in self.fields:
            if field.name.lower() == name.lower():
                return field
        return None


class ViewsSchema(_StrictBase):
    views: dict[str, ViewSchema]
    hints: dict[str, list[str]] = Field(default_factory=dict)
    enable_hints: bool = True


# =============================================================================
# tui.yaml
# =============================================================================


class TuiModeSchema(_StrictBase):
    id: str
    title: str
    key: str
    view: str


class TuiSchema(_StrictBase):
    default_mode: str
    auto_refresh_seconds: int
    expiration_offset_seconds: int
    modes: list[TuiModeSchema]
