"""Application configuration."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Environment variables will be loaded and validated using Pydantic.
    """

    app_name: str = "Glooscap"
    version: str = "0.1.0"
    api_prefix: str = "/api/v1"

    # CORS Settings
    cors_origins: list[str] = ["*"]  # Default to allow all in development
    cors_allow_credentials: bool = False

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # Dispatch Settings
    NAMESPACE: str = "glooscap-system"
    DISPATCH_MODE: str = "TektonJob"
    RUNNER_IMAGE: str = "glooscap-translation-runner:latest"
    VLLM_URL: str = ""
    FIELD_MANAGER: str = "glooscap-operator"
    JOB_TTL_SECONDS_AFTER_FINISHED: int = Field(default=3600, ge=0)
    RUNNER_CONFIG_MAP: str = "glooscap-config"
    RUNNER_SECRET_NAME: str = "glooscap-wiki-token"

    # Kubernetes API Settings (defaults match the in-cluster service account mount)
    KUBERNETES_API_URL: str = "https://kubernetes.default.svc"
    KUBERNETES_TOKEN_PATH: str = "/var/run/secrets/kubernetes.io/serviceaccount/token"
    KUBERNETES_CA_PATH: str = "/var/run/secrets/kubernetes.io/serviceaccount/ca.crt"
    KUBERNETES_TIMEOUT: float = Field(default=30.0, gt=0)

    # Wiki (Outline) Settings
    WIKI_BASE_URL: str | None = None
    WIKI_TOKEN: str | None = None
    WIKI_TIMEOUT: float = Field(default=15.0, gt=0)
    WIKI_INSECURE_SKIP_TLS_VERIFY: bool = False

    # Inference Settings
    INFERENCE_ADDRESS: str | None = None
    INFERENCE_TIMEOUT: float = Field(default=30.0, gt=0)
    INFERENCE_CLIENT_NAME: str = "glooscap"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",  # Allow extra fields in environment
    )

    @model_validator(mode="after")
    def validate_origins(self) -> "Settings":
        """Validate CORS origins."""
        if self.cors_origins == ["*"]:
            self.cors_origins = [
                "http://localhost",
                "http://localhost:8000",
                "http://localhost:3000",
            ]
        return self

    @model_validator(mode="after")
    def normalize_urls(self) -> "Settings":
        """Strip trailing slashes so paths can be joined safely."""
        if self.WIKI_BASE_URL:
            self.WIKI_BASE_URL = self.WIKI_BASE_URL.rstrip("/")
        self.KUBERNETES_API_URL = self.KUBERNETES_API_URL.rstrip("/")
        return self


# Create settings instance
settings = Settings()
