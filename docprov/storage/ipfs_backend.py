import httpx

from docprov.storage.base import BaseContentBackend
from docprov.storage.exceptions import (
    ContentNotFoundError,
    StorageError,
    StorageUnavailableError,
)


class IpfsBackend(BaseContentBackend):
    """Primary backend speaking the Kubo RPC API (`/api/v0/...`) over httpx."""

    kind = "ipfs"

    def __init__(
        self,
        *,
        api_url: str,
        timeout_seconds: float,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=api_url.rstrip("/") + "/api/v0",
            timeout=timeout_seconds,
            transport=transport,
        )

    def add(self, data: bytes, *, pin: bool = True) -> str:
        response = self._post(
            "/add",
            params={"pin": str(pin).lower(), "cid-version": "1"},
            files={"file": ("blob", data, "application/octet-stream")},
        )
        try:
            return str(response.json()["Hash"])
        except (ValueError, KeyError) as exc:
            raise StorageError(f"IPFS add returned an unexpected body: {exc}") from exc

    def cat(self, content_address: str) -> bytes:
        return self._post("/cat", params={"arg": content_address}).content

    def pin(self, content_address: str) -> None:
        self._post("/pin/add", params={"arg": content_address})

    def unpin(self, content_address: str) -> None:
        self._post("/pin/rm", params={"arg": content_address})

    def close(self) -> None:
        self._client.close()

    def _post(self, path: str, **kwargs: object) -> httpx.Response:
        try:
            response = self._client.post(path, **kwargs)  # type: ignore[arg-type]
        except httpx.TimeoutException as exc:
            raise StorageUnavailableError(f"IPFS {path} timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise StorageUnavailableError(f"IPFS {path} unreachable: {exc}") from exc

        if response.is_success:
            return response
        message = _error_message(response)
        if "not found" in message.lower() or "not pinned" in message.lower():
            raise ContentNotFoundError(f"IPFS {path}: {message}")
        raise StorageUnavailableError(
            f"IPFS {path} failed with HTTP {response.status_code}: {message}"
        )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "Message" in body:
        return str(body["Message"])
    return response.text
