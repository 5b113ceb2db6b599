"""Backend registration and construction."""

from typing import Dict

from ...errors import ConfigError
from ..transport import TransportClient
from .base import ConversationBackend


class BackendRegistry:
    """Registry of backend classes keyed by type id."""

    def __init__(self):
        self._backends: Dict[str, type[ConversationBackend]] = {}

    def register(self, backend_cls: type[ConversationBackend]) -> None:
        """Register a backend class.

        Args:
            backend_cls: Backend class with a non-empty ``id``
        """
        self._backends[backend_cls.id] = backend_cls

    def get(self, backend_id: str) -> type[ConversationBackend]:
        """Get a backend class by ID.

        Raises:
            ConfigError: If backend not found
        """
        if backend_id not in self._backends:
            available = ", ".join(self._backends.keys())
            raise ConfigError(
                f"Backend '{backend_id}' not found. "
                f"Available backends: {available or 'none'}"
            )
        return self._backends[backend_id]

    def list(self) -> list[str]:
        return list(self._backends.keys())


# Global registry instance
_registry = BackendRegistry()


def register_backend(backend_cls: type[ConversationBackend]) -> None:
    """Register a backend class in the global registry."""
    _registry.register(backend_cls)


def get_backend_class(backend_id: str) -> type[ConversationBackend]:
    """Get a backend class from the global registry."""
    return _registry.get(backend_id)


def list_backends() -> list[str]:
    """List all registered backend type IDs."""
    return _registry.list()


def build_backend(backend_cfg, transport: TransportClient | None = None) -> ConversationBackend:
    """Construct a fresh backend (with an empty conversation) from config.

    Args:
        backend_cfg: ``BackendConfig`` naming the type and its settings
        transport: Transport to use; built from ``backend_cfg`` if omitted

    Returns:
        Backend instance

    Raises:
        ConfigError: If the backend type is unknown
    """
    backend_cls = get_backend_class(backend_cfg.type)
    if transport is None:
        transport = TransportClient(
            api_key_env=backend_cfg.api_key_env,
            timeout_s=backend_cfg.timeout_s,
        )

    kwargs = {"model": backend_cfg.model, "url": backend_cfg.url}
    if backend_cfg.max_tokens is not None:
        kwargs["max_tokens"] = backend_cfg.max_tokens
    if backend_cfg.temperature is not None:
        kwargs["temperature"] = backend_cfg.temperature
    return backend_cls(transport, **kwargs)
