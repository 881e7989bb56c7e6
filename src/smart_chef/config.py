"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str

    ai_enabled: bool = False
    ai_provider: str = "gemini"
    ai_temperature: float = 0.0
    ai_max_output_tokens: int = 4096
    ai_timeout_seconds: float = 15
    gemini_project_id: str | None = None
    gemini_location: str = "us-central1"
    gemini_model: str = "gemini-2.5-pro"
    gemini_base_url: str | None = None
    gemini_access_token: str | None = None
    gemini_api_key: str | None = None
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"

    nutrition_use_real_api: bool = False
    nutrition_base_url: str = "https://trackapi.nutritionix.com/v2"
    nutrition_endpoint: str = "natural/nutrients"
    nutrition_app_id_header: str = "x-app-id"
    nutrition_app_id: str | None = None
    nutrition_api_key_header: str = "x-app-key"
    nutrition_api_key: str | None = None
    nutrition_bearer_token: str | None = None
    nutrition_timeout_seconds: float = 15
    nutrition_use_mock_fallback: bool = True
    demo_nutrition_base_url: str = "https://dummyjson.com"

    simple_scale_min: float = 0.5
    simple_scale_max: float = 1.5
    chef_scale_min: float = 0.6
    chef_scale_max: float = 1.4
    simple_add_complements: bool = False

    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_gemini_project_id(settings: Settings) -> str | None:
    """Return the configured Gemini project, falling back to GOOGLE_CLOUD_PROJECT."""
    if settings.gemini_project_id and settings.gemini_project_id.strip():
        return settings.gemini_project_id.strip()
    from_env = os.getenv("GOOGLE_CLOUD_PROJECT", "").strip()
    return from_env or None


def resolve_gemini_base_url(settings: Settings) -> str:
    """Return the Vertex AI base URL for the configured location."""
    if settings.gemini_base_url:
        return settings.gemini_base_url.rstrip("/")
    return f"https://{settings.gemini_location}-aiplatform.googleapis.com/v1"


def mode_warnings(settings: Settings) -> list[str]:
    """Describe missing integrations for the chef generation mode."""
    warnings: list[str] = []
    if not settings.nutrition_use_real_api:
        warnings.append(
            "Real nutrition API is not configured. "
            "Chef mode will fall back to simulated macros."
        )
    if not settings.ai_enabled:
        warnings.append(
            "AI integration is disabled. Chef mode will use template descriptions."
        )
    elif not _ai_credentials_available(settings):
        warnings.append(
            f"AI credentials for provider '{settings.ai_provider}' are missing."
        )
    return warnings


def _ai_credentials_available(settings: Settings) -> bool:
    if settings.ai_provider == "openai":
        return bool(settings.openai_api_key)
    has_token = bool(settings.gemini_access_token or settings.gemini_api_key)
    return has_token and resolve_gemini_project_id(settings) is not None
