"""HTTP transport for completion endpoints."""

import os
from typing import Any

import requests

from ..errors import ConfigError, TransportError

DEFAULT_API_KEY_ENV = "OPENAI_API_KEY"


class TransportClient:
    """Issues one authenticated JSON POST per ``send`` call.

    No retries are made. A failed call is final.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_key_env: str = DEFAULT_API_KEY_ENV,
        timeout_s: float | None = None,
    ):
        """Initialize transport.

        Args:
            api_key: Explicit bearer token. When omitted, ``api_key_env``
                is read from the environment on every call.
            api_key_env: Environment variable holding the token
            timeout_s: Request timeout; None keeps the requests default
        """
        self.api_key = api_key
        self.api_key_env = api_key_env
        self.timeout_s = timeout_s

    def resolve_api_key(self) -> str:
        """Return the bearer token or fail before any network I/O.

        Raises:
            ConfigError: If no token is configured
        """
        if self.api_key:
            return self.api_key
        api_key = os.getenv(self.api_key_env)
        if not api_key:
            raise ConfigError(f"Missing environment variable: {self.api_key_env}")
        return api_key

    def send(self, url: str, body: dict[str, Any]) -> str:
        """POST ``body`` as JSON to ``url`` and return the response text.

        Args:
            url: Endpoint URL
            body: JSON-serializable request payload

        Returns:
            Decoded response body

        Raises:
            ConfigError: If the credential is missing
            TransportError: On connection/TLS failure, non-2xx status or
                a body that is not valid UTF-8
        """
        api_key = self.resolve_api_key()

        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                url,
                headers=headers,
                json=body,
                timeout=self.timeout_s,
            )
        except requests.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}", url=url) from e

        content = response.content or b""
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TransportError(
                f"Response from {url} is not valid UTF-8",
                url=url,
                status_code=response.status_code,
            ) from e

        if response.status_code == 401 or response.status_code == 403:
            raise TransportError(
                f"Authentication failed (HTTP {response.status_code}). "
                f"Check your {self.api_key_env} environment variable.",
                url=url,
                status_code=response.status_code,
                body=text,
            )
        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"HTTP {response.status_code} from {url}: {text}",
                url=url,
                status_code=response.status_code,
                body=text,
            )

        return text
