from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chat_proxy.errors import StartupConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "chat-proxy"
    debug: bool = False
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: str = "*"

    # --- proveedor de completions ---
    provider: Literal["openai", "azure"] = "openai"

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    openai_base_url: Optional[str] = None

    azure_openai_endpoint: Optional[str] = None
    azure_openai_api_key: Optional[str] = None
    azure_openai_api_version: str = "2024-08-01-preview"
    azure_openai_deployment: Optional[str] = None

    # --- plantilla de prompt ---
    prompt_profile: str = "virtual-twin"
    system_prompt_file: Optional[Path] = None
    max_tokens: int = Field(200, ge=1)
    temperature: float = Field(0.8, ge=0, le=2)

    rate_limit_per_minute: int = Field(60, ge=1)

    @model_validator(mode="after")
    def _require_credentials(self) -> "Settings":
        if self.provider == "openai":
            if not self.openai_api_key:
                raise ValueError("OPENAI_API_KEY is not set")
        else:
            missing = [
                name.upper()
                for name in ("azure_openai_endpoint", "azure_openai_api_key", "azure_openai_deployment")
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(f"missing azure configuration: {', '.join(missing)}")
        return self

    @property
    def completion_model(self) -> str:
        # En Azure el "model" que recibe la API es el nombre del deployment
        if self.provider == "azure":
            return self.azure_openai_deployment or ""
        return self.openai_model

    @property
    def allow_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        # solo los mensajes: str(e) incluye los valores de entrada (claves)
        problems = "; ".join(
            ".".join(str(part) for part in err["loc"]) + ": " + err["msg"] if err["loc"] else err["msg"]
            for err in e.errors()
        )
        raise StartupConfigurationError(problems) from e
