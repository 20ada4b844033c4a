"""
Property-based tests for RagentConfig round-trip serialization, plus
environment overrides and validation.
"""

import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ragent.core.config import (
    AgentConfig,
    ChatConfig,
    ConfigurationError,
    EmbeddingConfig,
    IndexingConfig,
    LoggingConfig,
    MemoryConfig,
    RagentConfig,
    ServerConfig,
    WeatherConfig,
    load_config,
)

# Strategies for generating valid configuration values
safe_text = st.text(
    alphabet=st.characters(
        whitelist_categories=("L", "N", "P", "S"),
        blacklist_characters="\x00\n\r\t",
    ),
    min_size=1,
    max_size=50,
).filter(lambda s: s.strip() != "")

safe_url = st.from_regex(r"https?://[a-z0-9]+(\.[a-z0-9]+)*(:[0-9]+)?(/[a-z0-9]*)*", fullmatch=True)

file_extension = st.from_regex(r"\.[a-z]{1,5}", fullmatch=True)

timeout = st.one_of(
    st.none(),
    st.floats(min_value=0.1, max_value=300.0, allow_nan=False, allow_infinity=False),
)

log_level = st.sampled_from(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


@st.composite
def chat_config_strategy(draw):
    return ChatConfig(
        api_key=draw(safe_text),
        api_url=draw(safe_url),
        model=draw(safe_text),
        temperature=draw(st.floats(min_value=0.0, max_value=2.0, allow_nan=False)),
        max_tokens=draw(st.integers(min_value=1, max_value=8000)),
        timeout=draw(timeout),
    )


@st.composite
def embedding_config_strategy(draw):
    return EmbeddingConfig(
        provider=draw(st.sampled_from(["openai", "local"])),
        api_key=draw(safe_text),
        api_url=draw(safe_url),
        model=draw(safe_text),
        dimension=draw(st.integers(min_value=1, max_value=4096)),
        batch_size=draw(st.integers(min_value=1, max_value=1000)),
        timeout=draw(timeout),
    )


@st.composite
def indexing_config_strategy(draw):
    max_size = draw(st.integers(min_value=2, max_value=5000))
    return IndexingConfig(
        documents_dir=draw(st.from_regex(r"\./[a-z]{0,10}", fullmatch=True)),
        snapshot_path=draw(st.from_regex(r"\./[a-z]{1,10}\.json", fullmatch=True)),
        file_extensions=draw(st.lists(file_extension, min_size=1, max_size=5, unique=True)),
        recursive=draw(st.booleans()),
        chunk_size=max_size,
        chunk_overlap=draw(st.integers(min_value=0, max_value=max_size - 1)),
        change_detection=draw(st.sampled_from(["hash_or_mtime", "hash_only", "hash_and_mtime"])),
    )


@st.composite
def ragent_config_strategy(draw):
    return RagentConfig(
        chat=draw(chat_config_strategy()),
        embedding=draw(embedding_config_strategy()),
        weather=WeatherConfig(api_key=draw(st.one_of(st.just(""), safe_text)), timeout=draw(timeout)),
        indexing=draw(indexing_config_strategy()),
        memory=MemoryConfig(
            max_messages=draw(st.integers(min_value=1, max_value=200)),
            history_window=draw(st.integers(min_value=0, max_value=20)),
        ),
        agent=AgentConfig(top_k=draw(st.integers(min_value=1, max_value=20))),
        server=ServerConfig(
            host=draw(st.sampled_from(["0.0.0.0", "127.0.0.1", "localhost"])),
            port=draw(st.integers(min_value=1, max_value=65535)),
            max_message_length=draw(st.integers(min_value=1, max_value=10000)),
        ),
        logging=LoggingConfig(level=draw(log_level), format=draw(safe_text)),
    )


@given(config=ragent_config_strategy())
@settings(max_examples=100, deadline=None)
def test_config_yaml_round_trip(config: RagentConfig):
    """Saving to YAML and loading back yields an equivalent configuration."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yaml_path = Path(tmpdir) / "config.yaml"
        config.save(yaml_path)
        loaded_config = RagentConfig.from_file(yaml_path)
        assert config.to_dict() == loaded_config.to_dict()


@given(config=ragent_config_strategy())
@settings(max_examples=100, deadline=None)
def test_config_json_round_trip(config: RagentConfig):
    """Saving to JSON and loading back yields an equivalent configuration."""
    with tempfile.TemporaryDirectory() as tmpdir:
        json_path = Path(tmpdir) / "config.json"
        config.save(json_path)
        loaded_config = RagentConfig.from_file(json_path)
        assert config.to_dict() == loaded_config.to_dict()


def test_defaults_come_from_defaults_yaml():
    config = RagentConfig()
    assert config.indexing.chunk_size == 1000
    assert config.indexing.chunk_overlap == 200
    assert config.indexing.file_extensions == [".md"]
    assert config.indexing.change_detection == "hash_or_mtime"
    assert config.memory.max_messages == 20
    assert config.memory.history_window == 4
    assert config.agent.top_k == 3
    assert config.server.port == 3000
    assert config.server.max_message_length == 2000


def test_unsupported_format_rejected():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(ValueError):
            RagentConfig().save(Path(tmpdir) / "config.toml")


class TestEnvironmentOverrides:
    def test_prefixed_variables_override(self, monkeypatch):
        monkeypatch.setenv("RAGENT_CHAT_API_KEY", "chat-key")
        monkeypatch.setenv("RAGENT_INDEXING_RECURSIVE", "true")
        monkeypatch.setenv("RAGENT_AGENT_TOP_K", "5")
        monkeypatch.setenv("RAGENT_SERVER_PORT", "8080")

        config = load_config()

        assert config.chat.api_key == "chat-key"
        assert config.indexing.recursive is True
        assert config.agent.top_k == 5
        assert config.server.port == 8080

    def test_plain_variable_names_are_honoured(self, monkeypatch):
        monkeypatch.delenv("RAGENT_CHAT_API_KEY", raising=False)
        monkeypatch.delenv("RAGENT_EMBEDDING_API_KEY", raising=False)
        monkeypatch.delenv("RAGENT_WEATHER_API_KEY", raising=False)
        monkeypatch.delenv("RAGENT_SERVER_PORT", raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("WEATHER_API_KEY", "w-test")
        monkeypatch.setenv("PORT", "4000")

        config = load_config()

        assert config.chat.api_key == "sk-test"
        assert config.embedding.api_key == "sk-test"
        assert config.weather.api_key == "w-test"
        assert config.server.port == 4000

    def test_prefixed_variable_wins(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "plain")
        monkeypatch.setenv("RAGENT_CHAT_API_KEY", "prefixed")

        config = load_config()

        assert config.chat.api_key == "prefixed"

    def test_apply_env_disabled(self, monkeypatch):
        monkeypatch.setenv("RAGENT_AGENT_TOP_K", "9")
        assert load_config(apply_env=False).agent.top_k == 3


class TestValidation:
    def test_missing_chat_key(self):
        config = RagentConfig()
        config.chat.api_key = ""
        config.embedding.api_key = "e"
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_missing_embedding_key_for_remote_provider(self):
        config = RagentConfig()
        config.chat.api_key = "c"
        config.embedding.provider = "openai"
        config.embedding.api_key = ""
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_local_embeddings_need_no_key(self):
        config = RagentConfig()
        config.chat.api_key = "c"
        config.embedding.provider = "local"
        config.embedding.api_key = ""
        assert config.validate() is config

    def test_skipped_checks(self):
        config = RagentConfig()
        config.chat.api_key = ""
        config.embedding.api_key = ""
        config.validate(chat=False, embedding=False)

    def test_unknown_change_policy(self):
        config = RagentConfig()
        config.chat.api_key = "c"
        config.embedding.provider = "local"
        config.indexing.change_detection = "sometimes"
        with pytest.raises(ConfigurationError):
            config.validate()
