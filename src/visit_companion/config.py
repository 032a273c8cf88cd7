from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

BACKENDS = ("offline", "openai", "proxy")


@dataclass(slots=True)
class OpenAISettings:
    """Configuration block for calling the OpenAI Responses API directly."""

    model: str = "gpt-4.1-mini"
    api_key: str | None = None
    api_key_env: str = "OPENAI_API_KEY"
    base_url: str | None = None
    organization: str | None = None
    temperature: float = 0.3
    max_output_tokens: int = 1200
    top_p: float = 0.95
    request_timeout: float = 60.0


@dataclass(slots=True)
class ProxySettings:
    """Configuration block for the serverless proxy in front of the AI backend."""

    base_url: str | None = None
    base_url_env: str = "CLOUD_FUNCTION_BASE_URL"
    request_timeout: float = 300.0


@dataclass(slots=True)
class CompanionConfig:
    """Top-level configuration for the visit companion."""

    reading_level: int = 8
    backend: str = "offline"
    openai: OpenAISettings = field(default_factory=OpenAISettings)
    proxy: ProxySettings = field(default_factory=ProxySettings)

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        return dict(asdict(self))


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {field.name for field in fields(CompanionConfig)}
    kwargs = {key: data[key] for key in data if key in allowed}
    if "openai" in data:
        kwargs["openai"] = _build_section(data["openai"], OpenAISettings)
    if "proxy" in data:
        kwargs["proxy"] = _build_section(data["proxy"], ProxySettings)
    return kwargs


def _build_section(value: Any, section_cls: type[Any]) -> Any:
    if isinstance(value, section_cls):
        return value
    if not isinstance(value, Mapping):
        return section_cls()
    allowed = {field.name for field in fields(section_cls)}
    filtered = {key: value[key] for key in value if key in allowed}
    return section_cls(**filtered)


def config_from_dict(data: Mapping[str, Any] | None) -> CompanionConfig:
    """Build a CompanionConfig from a dictionary-like input."""
    if data is None:
        return CompanionConfig()
    return CompanionConfig(**_build_kwargs(data))


def config_from_yaml(path: str | Path) -> CompanionConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> CompanionConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return CompanionConfig()
    return config_from_yaml(path)
