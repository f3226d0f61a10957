"""Runtime configuration sourced from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ExceptionStrategy = Literal["to_http_not_found", "custom"]


class ConfigurationError(ValueError):
    """Raised when configuration validation fails.

    Inherits from ValueError since it describes invalid configuration
    values. Raised at application startup so that a misconfigured
    deployment fails fast.

    Example:
        try:
            settings.validate_config()
        except ConfigurationError as e:
            logger.error("Configuration validation failed: %s", e)
            raise SystemExit(1)
    """


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    app_name: str = "fastapi-pager"
    environment: str = "local"
    log_level: str = Field(default="debug", alias="LOG_LEVEL")

    # Logging configuration
    request_id_header: str = Field(
        default="x-request-id",
        alias="REQUEST_ID_HEADER",
        description="HTTP header name for request correlation ID",
    )
    include_request_context_in_logs: bool = Field(
        default=True,
        alias="INCLUDE_REQUEST_CONTEXT_IN_LOGS",
        description="Log request start and completion with the request ID",
    )

    # Pagination configuration
    pagination_page_size: int = Field(default=10, alias="PAGINATION_PAGE_SIZE")
    pagination_page_size_max: int = Field(default=200, alias="PAGINATION_PAGE_SIZE_MAX")
    pagination_page_class: str | None = Field(default=None, alias="PAGINATION_PAGE_CLASS")

    # Pager rendering configuration
    pager_default_view: str = Field(
        default="default",
        alias="PAGER_DEFAULT_VIEW",
        description="View used when a template does not name one",
    )
    pager_default_template: str = Field(
        default="pager/default.html",
        alias="PAGER_DEFAULT_TEMPLATE",
        description="Template rendered by the generic 'template' view",
    )
    pager_not_valid_max_per_page_strategy: ExceptionStrategy = Field(
        default="to_http_not_found",
        alias="PAGER_NOT_VALID_MAX_PER_PAGE_STRATEGY",
        description="How invalid page sizes are reported (to_http_not_found or custom)",
    )
    pager_not_valid_current_page_strategy: ExceptionStrategy = Field(
        default="custom",
        alias="PAGER_NOT_VALID_CURRENT_PAGE_STRATEGY",
        description="How invalid current pages are reported (to_http_not_found or custom)",
    )

    def validate_config(self) -> list[str]:
        """Validate cross-field configuration.

        Returns:
            List of non-fatal warnings

        Raises:
            ConfigurationError: If the configuration cannot work
        """
        errors: list[str] = []
        warnings: list[str] = []

        if not self.pager_default_view:
            errors.append("PAGER_DEFAULT_VIEW must not be empty")
        if self.pagination_page_size < 1:
            errors.append("PAGINATION_PAGE_SIZE must be at least 1")
        if self.pagination_page_size > self.pagination_page_size_max:
            errors.append(
                f"PAGINATION_PAGE_SIZE ({self.pagination_page_size}) exceeds "
                f"PAGINATION_PAGE_SIZE_MAX ({self.pagination_page_size_max})"
            )

        if errors:
            error_summary = "; ".join(errors)
            error_msg = f"Configuration errors: {error_summary}"
            raise ConfigurationError(error_msg)

        if (
            self.environment == "production"
            and self.pager_not_valid_max_per_page_strategy == "custom"
        ):
            warnings.append(
                "Invalid page sizes are not translated to 404 responses; "
                "make sure a custom NotValidMaxPerPageError handler is registered"
            )

        return warnings


settings = Settings()
