import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()

KNOWN_PROVIDERS = ("openrouter", "gemini", "groq")


def _provider_order(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip().lower() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis (empty URL selects the in-memory store)
    redis_url: str = os.getenv("REDIS_URL", "")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Cache
    cache_ttl: int = int(os.getenv("CACHE_TTL", "86400"))  # 1 day default
    cache_namespace_prefix: str = os.getenv("CACHE_NAMESPACE_PREFIX", "generation")
    cache_warming_enabled: bool = os.getenv("CACHE_WARMING_ENABLED", "true").lower() == "true"

    # Deadlines (seconds)
    attempt_timeout: float = float(os.getenv("ATTEMPT_TIMEOUT", "30"))
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "90"))
    stream_parse_interval: float = float(os.getenv("STREAM_PARSE_INTERVAL", "0.5"))

    # Generation parameters
    max_tokens: int = int(os.getenv("MAX_TOKENS", "4000"))
    temperature: float = float(os.getenv("TEMPERATURE", "0.7"))

    # Providers
    openrouter_api_key: str | None = os.getenv("OPENROUTER_API_KEY")
    openrouter_model: str = os.getenv("OPENROUTER_MODEL", "meta-llama/llama-3.2-3b-instruct")
    openrouter_base_url: str = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    gemini_base_url: str = os.getenv(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )
    groq_api_key: str | None = os.getenv("GROQ_API_KEY")
    groq_model: str = os.getenv("GROQ_MODEL", "mixtral-8x7b-32768")
    groq_base_url: str = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")

    # Provider order per content type
    plan_provider_order: tuple[str, ...] = field(
        default_factory=lambda: _provider_order("PLAN_PROVIDER_ORDER", "gemini,openrouter,groq")
    )
    training_plan_provider_order: tuple[str, ...] = field(
        default_factory=lambda: _provider_order(
            "TRAINING_PLAN_PROVIDER_ORDER", "openrouter,gemini,groq"
        )
    )
    resume_provider_order: tuple[str, ...] = field(
        default_factory=lambda: _provider_order("RESUME_PROVIDER_ORDER", "gemini,openrouter,groq")
    )

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if self.attempt_timeout <= 0 or self.request_timeout <= 0:
            raise ValueError("ATTEMPT_TIMEOUT and REQUEST_TIMEOUT must be positive")

        if self.stream_parse_interval < 0:
            raise ValueError("STREAM_PARSE_INTERVAL must not be negative")

        for order in (
            self.plan_provider_order,
            self.training_plan_provider_order,
            self.resume_provider_order,
        ):
            unknown = [name for name in order if name not in KNOWN_PROVIDERS]
            if unknown:
                raise ValueError(
                    f"Unknown provider(s) {unknown}, expected any of {list(KNOWN_PROVIDERS)}"
                )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(url: str | None = None) -> redis.Redis:
    """Create an asyncio Redis client instance."""
    return redis.from_url(
        url or settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service process."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
