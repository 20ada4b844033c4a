"""
Layered configuration for ragent.

Values come from the packaged defaults.yaml, then an optional YAML or JSON
file, then RAGENT_* environment variables.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

logger = logging.getLogger(__name__)

_DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

# Parsed once per process
_defaults: dict[str, Any] | None = None


class ConfigurationError(Exception):
    """Raised when a mandatory provider is missing its configuration."""

    pass


def _load_defaults() -> dict[str, Any]:
    global _defaults

    if _defaults is not None:
        return _defaults

    if not _DEFAULTS_PATH.exists():
        logger.warning(f"Packaged defaults missing at {_DEFAULTS_PATH}, using built-in values")
        _defaults = {}
        return _defaults

    try:
        _defaults = yaml.safe_load(_DEFAULTS_PATH.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        logger.error(f"Cannot parse {_DEFAULTS_PATH}: {e}")
        _defaults = {}

    return _defaults


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Look up ``section.key`` in defaults.yaml, or return ``fallback``."""
    return _load_defaults().get(section, {}).get(key, fallback)


@dataclass
class ChatConfig:
    """Configuration for the chat-completion provider."""

    provider: str = field(default_factory=lambda: _get_default("chat", "provider", "openai"))
    api_key: str = field(default_factory=lambda: _get_default("chat", "api_key", ""))
    api_url: str = field(
        default_factory=lambda: _get_default(
            "chat", "api_url", "https://api.openai.com/v1/chat/completions"
        )
    )
    model: str = field(default_factory=lambda: _get_default("chat", "model", "gpt-4o-mini"))
    temperature: float = field(default_factory=lambda: _get_default("chat", "temperature", 0.7))
    max_tokens: int = field(default_factory=lambda: _get_default("chat", "max_tokens", 1000))
    timeout: Optional[float] = field(default_factory=lambda: _get_default("chat", "timeout", None))


@dataclass
class EmbeddingConfig:
    """Configuration for the embedding service."""

    provider: str = field(
        default_factory=lambda: _get_default("embedding", "provider", "openai")
    )
    api_key: str = field(default_factory=lambda: _get_default("embedding", "api_key", ""))
    api_url: str = field(
        default_factory=lambda: _get_default(
            "embedding", "api_url", "https://api.openai.com/v1/embeddings"
        )
    )
    model: str = field(
        default_factory=lambda: _get_default("embedding", "model", "text-embedding-3-small")
    )
    dimension: int = field(default_factory=lambda: _get_default("embedding", "dimension", 1536))
    batch_size: int = field(default_factory=lambda: _get_default("embedding", "batch_size", 100))
    timeout: Optional[float] = field(
        default_factory=lambda: _get_default("embedding", "timeout", None)
    )


@dataclass
class WeatherConfig:
    """Configuration for the optional weather provider."""

    api_key: str = field(default_factory=lambda: _get_default("weather", "api_key", ""))
    api_url: str = field(
        default_factory=lambda: _get_default(
            "weather", "api_url", "https://api.openweathermap.org/data/2.5/weather"
        )
    )
    timeout: Optional[float] = field(
        default_factory=lambda: _get_default("weather", "timeout", None)
    )


@dataclass
class IndexingConfig:
    """Configuration for document ingestion and the on-disk snapshot."""

    documents_dir: str = field(
        default_factory=lambda: _get_default("indexing", "documents_dir", "./")
    )
    snapshot_path: str = field(
        default_factory=lambda: _get_default("indexing", "snapshot_path", "./vector_store.json")
    )
    file_extensions: list[str] = field(
        default_factory=lambda: list(_get_default("indexing", "file_extensions", [".md"]))
    )
    recursive: bool = field(default_factory=lambda: _get_default("indexing", "recursive", False))
    chunk_size: int = field(default_factory=lambda: _get_default("indexing", "chunk_size", 1000))
    chunk_overlap: int = field(
        default_factory=lambda: _get_default("indexing", "chunk_overlap", 200)
    )
    change_detection: str = field(
        default_factory=lambda: _get_default("indexing", "change_detection", "hash_or_mtime")
    )


@dataclass
class MemoryConfig:
    """Configuration for per-session conversation memory."""

    max_messages: int = field(default_factory=lambda: _get_default("memory", "max_messages", 20))
    history_window: int = field(
        default_factory=lambda: _get_default("memory", "history_window", 4)
    )


@dataclass
class AgentConfig:
    """Configuration for the per-turn orchestration pipeline."""

    top_k: int = field(default_factory=lambda: _get_default("agent", "top_k", 3))


@dataclass
class ServerConfig:
    """Configuration for the HTTP server."""

    host: str = field(default_factory=lambda: _get_default("server", "host", "0.0.0.0"))
    port: int = field(default_factory=lambda: _get_default("server", "port", 3000))
    max_message_length: int = field(
        default_factory=lambda: _get_default("server", "max_message_length", 2000)
    )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "INFO"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes", "on")


# RAGENT_<SECTION>_<KEY> -> (section, key, converter)
ENV_OVERRIDES: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "RAGENT_CHAT_API_KEY": ("chat", "api_key", str),
    "RAGENT_CHAT_API_URL": ("chat", "api_url", str),
    "RAGENT_CHAT_MODEL": ("chat", "model", str),
    "RAGENT_CHAT_TEMPERATURE": ("chat", "temperature", float),
    "RAGENT_CHAT_MAX_TOKENS": ("chat", "max_tokens", int),
    "RAGENT_CHAT_TIMEOUT": ("chat", "timeout", float),
    "RAGENT_EMBEDDING_PROVIDER": ("embedding", "provider", str),
    "RAGENT_EMBEDDING_API_KEY": ("embedding", "api_key", str),
    "RAGENT_EMBEDDING_API_URL": ("embedding", "api_url", str),
    "RAGENT_EMBEDDING_MODEL": ("embedding", "model", str),
    "RAGENT_EMBEDDING_DIMENSION": ("embedding", "dimension", int),
    "RAGENT_EMBEDDING_BATCH_SIZE": ("embedding", "batch_size", int),
    "RAGENT_EMBEDDING_TIMEOUT": ("embedding", "timeout", float),
    "RAGENT_WEATHER_API_KEY": ("weather", "api_key", str),
    "RAGENT_WEATHER_API_URL": ("weather", "api_url", str),
    "RAGENT_WEATHER_TIMEOUT": ("weather", "timeout", float),
    "RAGENT_INDEXING_DOCUMENTS_DIR": ("indexing", "documents_dir", str),
    "RAGENT_INDEXING_SNAPSHOT_PATH": ("indexing", "snapshot_path", str),
    "RAGENT_INDEXING_RECURSIVE": ("indexing", "recursive", _parse_bool),
    "RAGENT_INDEXING_CHUNK_SIZE": ("indexing", "chunk_size", int),
    "RAGENT_INDEXING_CHUNK_OVERLAP": ("indexing", "chunk_overlap", int),
    "RAGENT_INDEXING_CHANGE_DETECTION": ("indexing", "change_detection", str),
    "RAGENT_MEMORY_MAX_MESSAGES": ("memory", "max_messages", int),
    "RAGENT_MEMORY_HISTORY_WINDOW": ("memory", "history_window", int),
    "RAGENT_AGENT_TOP_K": ("agent", "top_k", int),
    "RAGENT_SERVER_HOST": ("server", "host", str),
    "RAGENT_SERVER_PORT": ("server", "port", int),
    "RAGENT_SERVER_MAX_MESSAGE_LENGTH": ("server", "max_message_length", int),
    "RAGENT_LOGGING_LEVEL": ("logging", "level", str),
}

# Unprefixed names; a RAGENT_ variable for the same field takes precedence
PLAIN_ENV_OVERRIDES: dict[str, list[tuple[str, str, Callable[[str], Any]]]] = {
    "OPENAI_API_KEY": [("chat", "api_key", str), ("embedding", "api_key", str)],
    "WEATHER_API_KEY": [("weather", "api_key", str)],
    "PORT": [("server", "port", int)],
}

CHANGE_DETECTION_POLICIES = ("hash_or_mtime", "hash_only", "hash_and_mtime")


@dataclass
class RagentConfig:
    """Top-level configuration, one attribute per section."""

    chat: ChatConfig = field(default_factory=ChatConfig)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    weather: WeatherConfig = field(default_factory=WeatherConfig)
    indexing: IndexingConfig = field(default_factory=IndexingConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    agent: AgentConfig = field(default_factory=AgentConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "RagentConfig":
        """
        Read a ``.yaml``/``.yml`` or ``.json`` file.

        Sections missing from the file keep their defaults.

        Raises:
            FileNotFoundError: If ``path`` does not exist
            ValueError: If the suffix is not a supported format
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        text = path.read_text(encoding="utf-8")
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        elif path.suffix == ".json":
            data = json.loads(text) if text.strip() else {}
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "RagentConfig":
        config = cls()
        for name, section_type in _SECTION_TYPES.items():
            if name in data:
                setattr(config, name, section_type(**data[name]))
        return config

    def apply_env_overrides(self) -> "RagentConfig":
        """
        Overlay environment variables onto the loaded values.

        Every field listed in ENV_OVERRIDES can be set through its
        ``RAGENT_<SECTION>_<KEY>`` variable. OPENAI_API_KEY, WEATHER_API_KEY
        and PORT are read first, so the prefixed variables win.
        """
        for env_var, targets in PLAIN_ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value is None:
                continue
            for section, key, converter in targets:
                try:
                    setattr(getattr(self, section), key, converter(value))
                except ValueError:
                    logger.warning(f"Ignoring invalid value for {env_var}: {value!r}")

        for env_var, (section, key, converter) in ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value is not None:
                setattr(getattr(self, section), key, converter(value))

        return self

    def validate(self, chat: bool = True, embedding: bool = True) -> "RagentConfig":
        """
        Check that every provider that will be built has its credentials.

        Args:
            chat: Whether the chat provider will be built from this config
            embedding: Whether the embedding provider will be built from it

        Raises:
            ConfigurationError: If the chat API key is missing, the embedding
                API key is missing while the embedding provider is remote, or
                a policy/provider name is unknown.
        """
        if chat and not self.chat.api_key:
            raise ConfigurationError(
                "Chat API key is required (set RAGENT_CHAT_API_KEY or OPENAI_API_KEY)"
            )
        if embedding and self.embedding.provider not in ("openai", "local"):
            raise ConfigurationError(f"Unknown embedding provider: {self.embedding.provider}")
        if embedding and self.embedding.provider == "openai" and not self.embedding.api_key:
            raise ConfigurationError(
                "Embedding API key is required for the 'openai' embedding provider "
                "(set RAGENT_EMBEDDING_API_KEY or use RAGENT_EMBEDDING_PROVIDER=local)"
            )
        if self.indexing.change_detection not in CHANGE_DETECTION_POLICIES:
            raise ConfigurationError(
                f"Unknown change detection policy: {self.indexing.change_detection}"
            )
        return self

    def to_dict(self) -> dict:
        return asdict(self)

    def to_yaml(self) -> str:
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Write the configuration, choosing the format from the suffix.

        Raises:
            ValueError: If the suffix is not .yaml, .yml or .json
        """
        path = Path(path)
        if path.suffix in (".yaml", ".yml"):
            text = self.to_yaml()
        elif path.suffix == ".json":
            text = self.to_json()
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")


_SECTION_TYPES: dict[str, type] = {
    "chat": ChatConfig,
    "embedding": EmbeddingConfig,
    "weather": WeatherConfig,
    "indexing": IndexingConfig,
    "memory": MemoryConfig,
    "agent": AgentConfig,
    "server": ServerConfig,
    "logging": LoggingConfig,
}


def load_config(config_path: Optional[Path | str] = None, apply_env: bool = True) -> RagentConfig:
    """
    Build the effective configuration.

    Args:
        config_path: YAML/JSON file to read; defaults only when None
        apply_env: Whether RAGENT_* and the plain variables are applied
    """
    config = RagentConfig.from_file(config_path) if config_path else RagentConfig()
    if apply_env:
        config.apply_env_overrides()
    return config


def configure_logging(config: LoggingConfig) -> None:
    """Apply the configured level and format to the root logger."""
    level = getattr(logging, config.level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=config.format, force=True)
