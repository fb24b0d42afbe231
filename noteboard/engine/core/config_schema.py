"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in board code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    LoggingSchema      → logging.yaml
    BoardSchema        → board.yaml
    PersistenceSchema  → persistence.yaml
    QuotesSchema       → quotes.yaml
"""

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool


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
# board.yaml
# =============================================================================


class LayoutSchema(_StrictBase):
    margin_left: float = Field(ge=0)
    margin_top: float = Field(ge=0)
    note_width: float = Field(gt=0)
    gap: float = Field(ge=0)


class NoteExtentSchema(_StrictBase):
    width: float = Field(gt=0)
    height: float = Field(gt=0)


class IndicatorSchema(_StrictBase):
    error_recovery_seconds: float = Field(ge=0)


class BoardSchema(_StrictBase):
    layout: LayoutSchema
    default_note_extent: NoteExtentSchema
    indicators: IndicatorSchema


# =============================================================================
# persistence.yaml
# =============================================================================


class PersistenceSchema(_StrictBase):
    autosave_interval_seconds: float = Field(gt=0)
    storage_path: str
    export_dir: str
    export_prefix: str


# =============================================================================
# quotes.yaml
# =============================================================================


class QuoteFieldsSchema(_StrictBase):
    text: str
    attribution: str


class QuoteRetrySchema(_StrictBase):
    max_attempts: int = Field(ge=1)
    backoff_multiplier: float
    backoff_max: float


class QuotesSchema(_StrictBase):
    url: str
    timeout_seconds: float = Field(gt=0)
    fields: QuoteFieldsSchema
    retry: QuoteRetrySchema
