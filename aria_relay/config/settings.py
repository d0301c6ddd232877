from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiConfig(BaseSettings):
    """Google Gemini transcription configuration."""

    api_key: Optional[SecretStr] = None
    model: str = "gemini-2.5-flash"
    timeout_seconds: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class ElevenLabsConfig(BaseSettings):
    """ElevenLabs synthesis configuration."""

    api_key: Optional[SecretStr] = None
    model_id: str = "eleven_multilingual_v2"
    output_format: str = "mp3_44100_128"

    model_config = SettingsConfigDict(
        env_prefix="ELEVENLABS_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class BedrockConfig(BaseSettings):
    """Amazon Bedrock configuration used by the persona rewriter."""

    region: str = Field(
        default="us-east-1",
        validation_alias="BEDROCK_REGION",
    )
    model_id: str = Field(
        default="meta.llama3-1-8b-instruct-v1:0",
        validation_alias="BEDROCK_MODEL_ID",
    )
    max_tokens: int = Field(
        default=300,
        validation_alias="BEDROCK_MAX_TOKENS",
        ge=1,
        le=4096,
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
    timeout_seconds: float = Field(
        default=12.0,
        validation_alias="BEDROCK_TIMEOUT_SECONDS",
        gt=0,
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


class AwsConfig(BaseSettings):
    """Static AWS credentials, when not provided by the environment chain."""

    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = "us-east-1"

    model_config = SettingsConfigDict(
        env_prefix="AWS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class RewriteConfig(BaseSettings):
    """Persona rewrite stage toggle."""

    enabled: bool = False

    model_config = SettingsConfigDict(
        env_prefix="REWRITE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class PipelineConfig(BaseSettings):
    """Response policies for the transform pipeline."""

    include_transcript_on_synthesis_failure: bool = Field(
        default=False,
        description="If true, a synthesis failure also returns the transcript.",
    )

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Aria Voice Relay"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/transform_pipeline.log"
    transcript_log_file: str = "logs/transcripts.log"

    # Speech-to-text
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)

    # Text-to-speech
    elevenlabs: ElevenLabsConfig = Field(default_factory=ElevenLabsConfig)

    # Persona rewrite
    aws: AwsConfig = Field(default_factory=AwsConfig)
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)
    rewrite: RewriteConfig = Field(default_factory=RewriteConfig)

    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

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
