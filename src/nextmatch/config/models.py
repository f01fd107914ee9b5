"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, nextmatch.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from nextmatch.domain.recurrence import MONTH_SEARCH_LIMIT, YEAR_SEARCH_LIMIT


class SearchConfig(BaseModel):
    """[search] section — scan windows for the bounded searches."""

    model_config = {"frozen": True}

    max_months_ahead: int = Field(default=MONTH_SEARCH_LIMIT, ge=1)
    max_years_ahead: int = Field(default=YEAR_SEARCH_LIMIT, ge=1)


class LoggingConfig(BaseModel):
    """[logging] section."""

    model_config = {"frozen": True}

    verbose: bool = False
    log_json: bool = False


class NextMatchConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    search: SearchConfig = Field(default_factory=SearchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
