"""Completion configuration loading and resolution."""

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

from ..errors import ConfigError
from .transport import DEFAULT_API_KEY_ENV

# Only the legacy text backend takes sampling parameters.
SAMPLING_BACKEND_TYPES = {"text"}

DEFAULT_CONFIG: dict[str, Any] = {
    "llm": {
        "default_backend": "chat",
        "language": "python",
        "backends": {
            "chat": {
                "type": "chat",
                "url": "https://api.openai.com/v1/chat/completions",
                "model": "gpt-3.5-turbo",
                "api_key_env": DEFAULT_API_KEY_ENV,
            },
            "text": {
                "type": "text",
                "url": "https://api.openai.com/v1/completions",
                "model": "text-davinci-003",
                "api_key_env": DEFAULT_API_KEY_ENV,
                "max_tokens": 1024,
                "temperature": 0.0,
            },
        },
        "roles": {
            "implementer": {"backend": "chat"},
            "tester": {"backend": "chat"},
        },
    }
}


@dataclass
class BackendConfig:
    """Configuration for one backend."""

    backend_id: str
    type: str
    url: str | None = None
    model: str | None = None
    api_key_env: str = DEFAULT_API_KEY_ENV
    timeout_s: float | None = None
    max_tokens: int | None = None
    temperature: float | None = None


@dataclass
class LLMConfig:
    """Complete completion configuration."""

    default_backend: str
    backends: Dict[str, BackendConfig]
    roles: Dict[str, str] = field(default_factory=dict)
    language: str = "python"


def _parse_backend(backend_id: str, data: Any) -> BackendConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"Backend '{backend_id}' must be a mapping")
    if "type" not in data:
        raise ConfigError(f"Backend '{backend_id}' missing 'type' field")

    backend_type = data["type"]
    if backend_type not in SAMPLING_BACKEND_TYPES:
        for key in ("max_tokens", "temperature"):
            if key in data:
                raise ConfigError(
                    f"Backend '{backend_id}': '{key}' is only supported by text backends"
                )

    return BackendConfig(
        backend_id=backend_id,
        type=backend_type,
        url=data.get("url"),
        model=data.get("model"),
        api_key_env=data.get("api_key_env", DEFAULT_API_KEY_ENV),
        timeout_s=data.get("timeout_s"),
        max_tokens=data.get("max_tokens"),
        temperature=data.get("temperature"),
    )


def parse_config(data: Any) -> LLMConfig:
    """Validate a raw configuration mapping.

    Raises:
        ConfigError: If configuration is invalid
    """
    if not isinstance(data, dict) or "llm" not in data:
        raise ConfigError("Configuration file missing 'llm' section")

    llm_config = data["llm"] or {}
    if not isinstance(llm_config, dict):
        raise ConfigError("Configuration 'llm' section must be a mapping")

    backends_data = llm_config.get("backends")
    if not backends_data:
        raise ConfigError("Configuration missing 'backends' section")
    if not isinstance(backends_data, dict):
        raise ConfigError("Configuration 'backends' section must be a mapping")

    backends = {
        backend_id: _parse_backend(backend_id, backend_data)
        for backend_id, backend_data in backends_data.items()
    }

    default_backend = llm_config.get("default_backend", "chat")
    if default_backend not in backends:
        raise ConfigError(f"Default backend '{default_backend}' is not configured")

    roles_data = llm_config.get("roles") or {}
    if not isinstance(roles_data, dict):
        raise ConfigError("Configuration 'roles' section must be a mapping")

    roles = {}
    for role_name, role_data in roles_data.items():
        if not isinstance(role_data, dict) or "backend" not in role_data:
            raise ConfigError(f"Role '{role_name}' missing 'backend' field")
        backend_id = role_data["backend"]
        if backend_id not in backends:
            raise ConfigError(
                f"Role '{role_name}' references unknown backend '{backend_id}'"
            )
        roles[role_name] = backend_id

    return LLMConfig(
        default_backend=default_backend,
        backends=backends,
        roles=roles,
        language=llm_config.get("language", "python"),
    )


def load_config(path: str | Path | None = None) -> LLMConfig:
    """Load configuration from a YAML file, or the built-in defaults.

    The credential is not checked here; it is resolved when a request
    is sent.

    Args:
        path: Path to YAML configuration file, or None for defaults

    Returns:
        Validated configuration

    Raises:
        ConfigError: If the file is missing, malformed or invalid
    """
    if path is None:
        return parse_config(copy.deepcopy(DEFAULT_CONFIG))

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed configuration file {path}: {e}") from e

    return parse_config(data)


def resolve_role(role: str, config: LLMConfig, backend: str | None = None) -> BackendConfig:
    """Resolve the backend configuration for a role.

    Args:
        role: Role name (e.g., "implementer", "tester")
        config: Loaded configuration
        backend: Explicit backend ID overriding the role mapping

    Returns:
        Backend configuration

    Raises:
        ConfigError: If the backend is not configured
    """
    backend_id = backend or config.roles.get(role, config.default_backend)
    if backend_id not in config.backends:
        available = ", ".join(config.backends.keys())
        raise ConfigError(
            f"Backend '{backend_id}' not found. Available backends: {available or 'none'}"
        )
    return config.backends[backend_id]
