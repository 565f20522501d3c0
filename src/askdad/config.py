"""Configuration management for askdad.

Loads configuration from ~/.config/askdad/config.toml when present.
Priority chain: env vars > config file > built-in defaults.
Vendor credentials are read from the environment only.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONFIG_DIR = Path.home() / ".config" / "askdad"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = """\
# askdad configuration

[server]
# Bind address: "127.0.0.1" = localhost only, "0.0.0.0" = allow LAN access
host = "0.0.0.0"
port = 10000

# Public base URL used to build audioUrl callbacks, e.g. "https://askdad.example.com".
# Leave empty to derive it from the incoming request.
public_url = ""

[cache]
# How long a generated answer stays fetchable as audio
ttl_seconds = 600

# How often expired answers are swept from memory
sweep_interval_seconds = 60

[llm]
model = "gpt-4.1-mini"
timeout_seconds = 30.0

# Attempts to get a joke that is not in the caller's recent history
joke_attempts = 3

[speech]
model_id = "eleven_turbo_v2_5"
base_url = "https://api.elevenlabs.io/v1"

# Longest text sent for synthesis (keeps the stream snappy)
max_chars = 1600

# Insert "..." pauses between sentences and clauses
pacing = true

optimize_streaming_latency = 3
timeout_seconds = 60.0
connect_timeout_seconds = 10.0

[homework]
# Largest accepted imageBase64 payload, in encoded characters
max_image_bytes = 4194304

# API keys are read from environment variables, not this file:
#   OPENAI_API_KEY       - answer generation
#   ELEVENLABS_API_KEY   - speech synthesis
#   ELEVENLABS_VOICE_ID  - voice used for speech synthesis
"""


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server configuration."""

    host: str
    port: int
    public_url: str | None


@dataclass(frozen=True)
class CacheConfig:
    """Answer cache configuration."""

    ttl_seconds: int
    sweep_interval_seconds: float


@dataclass(frozen=True)
class LLMConfig:
    """Answer generation configuration."""

    model: str
    timeout_seconds: float
    joke_attempts: int


@dataclass(frozen=True)
class SpeechConfig:
    """Speech synthesis configuration."""

    model_id: str
    base_url: str
    max_chars: int
    pacing: bool
    optimize_streaming_latency: int
    timeout_seconds: float
    connect_timeout_seconds: float


@dataclass(frozen=True)
class HomeworkConfig:
    """Homework endpoint configuration."""

    max_image_bytes: int


@dataclass(frozen=True)
class Credentials:
    """Vendor credentials taken from the process environment."""

    openai_api_key: str | None
    elevenlabs_api_key: str | None
    elevenlabs_voice_id: str | None

    @classmethod
    def from_env(cls) -> "Credentials":
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            elevenlabs_api_key=os.getenv("ELEVENLABS_API_KEY") or None,
            elevenlabs_voice_id=os.getenv("ELEVENLABS_VOICE_ID") or None,
        )


@dataclass(frozen=True)
class AskDadConfig:
    """Top-level askdad configuration."""

    server: ServerConfig
    cache: CacheConfig
    llm: LLMConfig
    speech: SpeechConfig
    homework: HomeworkConfig
    credentials: Credentials


_cached_config: AskDadConfig | None = None


def generate_config(path: Path | None = None) -> Path:
    """Write the default config file (~/.config/askdad/config.toml)."""
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def _merged_sections(path: Path) -> dict[str, dict[str, Any]]:
    data = tomllib.loads(DEFAULT_CONFIG)
    if path.exists():
        with open(path, "rb") as f:
            user = tomllib.load(f)
        for section, values in user.items():
            if isinstance(values, dict):
                data.setdefault(section, {}).update(values)
    return data


def load_config(path: Path | None = None) -> AskDadConfig:
    """Load configuration with env var overrides.

    Args:
        path: Config file to read. When omitted the user config file is
            used and the result is cached for the life of the process.

    Returns:
        Loaded and validated AskDadConfig.

    Raises:
        ValueError: If a value is out of range or not a number.
    """
    global _cached_config
    if path is None and _cached_config is not None:
        return _cached_config

    data = _merged_sections(path or CONFIG_PATH)
    server = data["server"]
    cache = data["cache"]
    llm = data["llm"]
    speech = data["speech"]
    homework = data["homework"]

    port_str = os.getenv("ASKDAD_PORT") or os.getenv("PORT") or str(server["port"])
    public_url = os.getenv("ASKDAD_PUBLIC_URL", server.get("public_url", ""))

    config = AskDadConfig(
        server=ServerConfig(
            host=os.getenv("ASKDAD_HOST", server["host"]),
            port=int(port_str),
            public_url=public_url.rstrip("/") or None,
        ),
        cache=CacheConfig(
            ttl_seconds=int(os.getenv("ASKDAD_CACHE_TTL", cache["ttl_seconds"])),
            sweep_interval_seconds=float(
                os.getenv("ASKDAD_SWEEP_INTERVAL", cache["sweep_interval_seconds"])
            ),
        ),
        llm=LLMConfig(
            model=os.getenv("ASKDAD_LLM_MODEL", llm["model"]),
            timeout_seconds=float(llm["timeout_seconds"]),
            joke_attempts=int(llm["joke_attempts"]),
        ),
        speech=SpeechConfig(
            model_id=os.getenv("ASKDAD_SPEECH_MODEL", speech["model_id"]),
            base_url=speech["base_url"].rstrip("/"),
            max_chars=int(speech["max_chars"]),
            pacing=bool(speech["pacing"]),
            optimize_streaming_latency=int(speech["optimize_streaming_latency"]),
            timeout_seconds=float(speech["timeout_seconds"]),
            connect_timeout_seconds=float(speech["connect_timeout_seconds"]),
        ),
        homework=HomeworkConfig(
            max_image_bytes=int(homework["max_image_bytes"]),
        ),
        credentials=Credentials.from_env(),
    )
    _validate(config)

    if path is None:
        _cached_config = config
    return config


def _validate(config: AskDadConfig) -> None:
    if config.cache.ttl_seconds <= 0:
        raise ValueError("cache.ttl_seconds must be positive")
    if config.cache.sweep_interval_seconds <= 0:
        raise ValueError("cache.sweep_interval_seconds must be positive")
    if config.llm.joke_attempts < 1:
        raise ValueError("llm.joke_attempts must be at least 1")
    if config.speech.max_chars < 1:
        raise ValueError("speech.max_chars must be at least 1")
    if config.homework.max_image_bytes < 1:
        raise ValueError("homework.max_image_bytes must be at least 1")
