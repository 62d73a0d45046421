"""SiYuan kernel HTTP API adapter."""

from __future__ import annotations

import logging
import re

import requests

from siyuan_transcribe.core.audio import AudioBlob
from siyuan_transcribe.core.errors import HostApiError
from siyuan_transcribe.platform.base import SEVERITY_ERROR, SEVERITY_INFO, BlockInfo

LOG = logging.getLogger("siyuan_transcribe")

DEFAULT_KERNEL_URL = "http://127.0.0.1:6806"

_BLOCK_ID_RE = re.compile(r"^[0-9]{14}-[0-9a-z]{7}$")


def is_block_id(value: str) -> bool:
    """Check the ``20231012093000-abcdefg`` shape of SiYuan block ids."""
    return bool(_BLOCK_ID_RE.match(value or ""))


class SiYuanKernelClient:
    """Implements the file, block and notification collaborators over HTTP."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
        notify_timeout_ms: int = 7000,
    ):
        self.base_url = (base_url or DEFAULT_KERNEL_URL).rstrip("/")
        self.token = token or ""
        self.session = session or requests.Session()
        self.timeout = timeout
        self.notify_timeout_ms = notify_timeout_ms

    @classmethod
    def from_config(cls, config, session: requests.Session | None = None):
        return cls(
            base_url=config.get("siyuan_url"),
            token=config.get("siyuan_token"),
            session=session,
            timeout=config.get("request_timeout"),
            notify_timeout_ms=config.get("notify_timeout_ms", 7000),
        )

    def _headers(self) -> dict[str, str]:
        if self.token:
            return {"Authorization": f"Token {self.token}"}
        return {}

    def _post(self, endpoint: str, payload: dict):
        """POST a JSON payload and unwrap the ``{code, msg, data}`` envelope."""
        try:
            response = self.session.post(
                f"{self.base_url}{endpoint}",
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise HostApiError(endpoint, str(exc)) from exc

        if response.status_code != 200:
            raise HostApiError(endpoint, f"HTTP {response.status_code}")
        try:
            envelope = response.json()
        except ValueError as exc:
            raise HostApiError(endpoint, "response is not JSON") from exc
        if not isinstance(envelope, dict):
            raise HostApiError(endpoint, "unexpected response shape")

        code = envelope.get("code", 0)
        if code != 0:
            raise HostApiError(endpoint, envelope.get("msg") or "request failed", code=code)
        return envelope.get("data")

    def get_file_blob(self, path: str) -> AudioBlob | None:
        """Read a workspace file; ``/assets/...`` paths are served directly."""
        if path.startswith("/assets/"):
            method, url, kwargs = "GET", f"{self.base_url}{path}", {}
        else:
            method, url, kwargs = "POST", f"{self.base_url}/api/file/getFile", {"json": {"path": path}}

        try:
            response = self.session.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise HostApiError(url, str(exc)) from exc

        if response.status_code != 200:
            LOG.warning(f"File {path} not available: HTTP {response.status_code}")
            return None

        content_type = response.headers.get("Content-Type", "")
        if content_type.startswith("application/json"):
            # getFile reports missing files as a JSON envelope
            try:
                envelope = response.json()
            except ValueError:
                envelope = None
            if isinstance(envelope, dict) and envelope.get("code", 0) != 0:
                LOG.warning(f"File {path} not available: {envelope.get('msg')}")
                return None
        return AudioBlob(data=response.content, content_type=content_type.split(";", 1)[0].strip())

    def get_block_kramdown(self, block_id: str) -> str:
        data = self._post("/api/block/getBlockKramdown", {"id": block_id}) or {}
        return data.get("kramdown", "")

    def get_block_dom(self, block_id: str) -> str:
        data = self._post("/api/block/getBlockDOM", {"id": block_id}) or {}
        return data.get("dom", "")

    def get_block_by_id(self, block_id: str) -> BlockInfo | None:
        if not is_block_id(block_id):
            raise HostApiError("/api/query/sql", f"invalid block id {block_id!r}")
        rows = self._post("/api/query/sql", {"stmt": f"select * from blocks where id = '{block_id}'"}) or []
        if not rows:
            return None
        row = rows[0]
        return BlockInfo(id=row.get("id", block_id), parent_id=row.get("parent_id", ""), root_id=row.get("root_id", ""))

    def insert_block(self, data_type, data, next_id=None, previous_id=None, parent_id=None):
        payload = {
            "dataType": data_type,
            "data": data,
            "nextID": next_id,
            "previousID": previous_id,
            "parentID": parent_id,
        }
        return self._post("/api/block/insertBlock", payload)

    def notify(self, message, severity=SEVERITY_INFO):
        endpoint = "/api/notification/pushErrMsg" if severity == SEVERITY_ERROR else "/api/notification/pushMsg"
        try:
            self._post(endpoint, {"msg": message, "timeout": self.notify_timeout_ms})
        except HostApiError as exc:
            LOG.warning(f"Failed to push notification: {exc}")
