from typing import Literal, Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: SecretStr = Field(default=SecretStr("postgres"))
    database: str = "blogcast"
    schema_name: Optional[str] = None
    serverless: bool = Field(
        default=True,
        description="If true, disable connection pooling so serverless DBs can pause.",
    )

    @property
    def url(self) -> str:
        """Get database URL"""
        username = quote_plus(self.username)
        password = quote_plus(self.password.get_secret_value())
        return (
            "postgresql+asyncpg://"
            f"{username}:{password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class StoreConfig(BaseSettings):
    """Keyed pipeline state store configuration."""

    backend: Literal["memory", "database"] = "memory"

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class AwsConfig(BaseSettings):
    """Shared AWS credentials (optional, falls back to the default chain)."""

    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = "us-east-1"
    connect_timeout: float = Field(default=10.0, gt=0)
    read_timeout: float = Field(default=60.0, gt=0)
    bedrock_read_timeout: float = Field(default=300.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="AWS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class PollyConfig(BaseSettings):
    """Amazon Polly configuration."""

    region: str = "us-east-1"
    voice_id: str = "Joanna"
    engine: str = "neural"
    sample_rate: int = Field(default=16000, description="Polly PCM supports 8000 or 16000.")
    max_chars_per_request: int = Field(default=2800, ge=100, le=3000)

    model_config = SettingsConfigDict(
        env_prefix="POLLY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class BedrockConfig(BaseSettings):
    """Amazon Bedrock configuration."""

    region: str = Field(
        default="us-east-1",
        validation_alias="BEDROCK_REGION",
    )
    model_id: str = Field(
        default="amazon.nova-pro-v1:0",
        validation_alias="BEDROCK_MODEL_ID",
    )
    max_tokens: int = Field(
        default=2048,
        validation_alias="BEDROCK_MAX_TOKENS",
        ge=1,
        le=10000,
    )
    temperature: float = Field(
        default=0.7,
        validation_alias="BEDROCK_TEMPERATURE",
        ge=0.0,
        le=1.0,
    )
    top_p: float = Field(
        default=0.9,
        validation_alias="BEDROCK_TOP_P",
        ge=0.0,
        le=1.0,
    )
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="BEDROCK_API_KEY",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class GeminiConfig(BaseSettings):
    """Google Gemini configuration (search-grounded generation)."""

    api_key: SecretStr | None = None
    model: str = "gemini-2.5-pro"
    search_grounding: bool = True

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class PipelineConfig(BaseSettings):
    """Content generation pipeline tuning."""

    llm_provider: Literal["bedrock", "gemini"] = "bedrock"
    stage_workers: int = Field(default=2, ge=1, le=32)
    generation_max_tokens: int = Field(default=8192, ge=256)
    tts_max_attempts: int = Field(default=3, ge=1, le=10)
    tts_base_delay_seconds: float = Field(default=2.0, ge=0.0)
    transient_error_markers: list[str] = [
        "overloaded",
        "rate limit",
        "rate exceeded",
        "throttl",
        "too many requests",
        "503",
        "service unavailable",
    ]

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class MailConfig(BaseSettings):
    """SMTP configuration for article delivery."""

    host: Optional[str] = None
    port: int = 587
    username: Optional[str] = None
    password: SecretStr | None = None
    sender: Optional[str] = None
    use_tls: bool = True
    use_ssl: bool = False

    def is_configured(self) -> bool:
        return bool(self.host and self.sender)

    model_config = SettingsConfigDict(
        env_prefix="MAIL_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Blogcast Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/content_pipeline.log"

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # Keyed store
    store: StoreConfig = Field(default_factory=StoreConfig)

    # AWS
    aws: AwsConfig = Field(default_factory=AwsConfig)

    # Polly
    polly: PollyConfig = Field(default_factory=PollyConfig)

    # Bedrock
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)

    # Gemini
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)

    # Pipeline
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

    # Mail
    mail: MailConfig = Field(default_factory=MailConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
