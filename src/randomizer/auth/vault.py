"""HashiCorp Vault KV v2 reader for remotely stored secrets."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from randomizer.errors import SecretFetchError

logger = logging.getLogger(__name__)


class VaultClient:
    """Reads single string fields from a Vault KV version 2 mount."""

    def __init__(
        self,
        addr: str,
        token: str,
        *,
        mount: str = "secret",
        field: str = "value",
        timeout: float = 1.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.addr = addr.rstrip("/")
        self.mount = mount.strip("/")
        self.field = field
        self._token = token
        self._timeout = timeout
        self._transport = transport

    def secret_url(self, name: str) -> str:
        return f"{self.addr}/v1/{self.mount}/data/{name.strip('/')}"

    async def read(self, name: str) -> str:
        """Return the configured field of the latest version of a secret.

        Raises:
            SecretFetchError: the request failed, Vault refused it, or the
                secret has no such field.
        """
        url = self.secret_url(name)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(url, headers={"X-Vault-Token": self._token})
        except httpx.HTTPError as exc:
            raise SecretFetchError(f"loading secret {name!r} from Vault: {exc}") from exc

        if response.status_code >= 400:
            raise SecretFetchError(
                f"loading secret {name!r} from Vault: HTTP {response.status_code}"
            )

        try:
            payload: dict[str, Any] = response.json()
            value = payload["data"]["data"][self.field]
        except (ValueError, KeyError, TypeError) as exc:
            raise SecretFetchError(
                f"secret {name!r} has no {self.field!r} field in Vault"
            ) from exc

        if not isinstance(value, str) or not value:
            raise SecretFetchError(f"secret {name!r} field {self.field!r} is not a string")
        logger.debug("Loaded secret %s from Vault", name)
        return value
