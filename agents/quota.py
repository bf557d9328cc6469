"""Quota-aware request helpers shared by the upstream API clients.

- Respects HTTP 429 responses and the Retry-After header (seconds or HTTP-date).
- Persists a per-service 'blocked_until' timestamp to a small JSON file
  (default ~/.openscript/quota_state.json, guarded by a filelock) so multiple
  worker processes of the API server back off together.
- Retries transport errors and 5xx responses with exponential backoff.
"""

import json
import logging
import os
import random
import time
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Dict, Optional, cast

import requests
from filelock import FileLock, Timeout

from .errors import APIError, QuotaExceeded

logger = logging.getLogger(__name__)

# conservative block window when Retry-After is missing or unparsable
DEFAULT_BLOCK_SECONDS = 60.0


def default_state_path() -> str:
    state_dir = os.environ.get("OPENSCRIPT_STATE_DIR") or os.path.join(
        os.path.expanduser("~"), ".openscript"
    )
    return os.path.join(state_dir, "quota_state.json")


class QuotaState:
    """Per-service block windows stored in one JSON file."""

    def __init__(self, path: Optional[str] = None):
        self.path = path or default_state_path()
        self._lock = FileLock(self.path + ".lock", timeout=1.0)

    def _read(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return cast(Dict[str, Any], json.load(f))
        except (OSError, ValueError):
            logger.warning("Unreadable quota state at %s; ignoring", self.path)
            return {}

    def _write(self, data: Dict[str, Any]) -> None:
        tmp = f"{self.path}.{os.getpid()}.tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)

    def load(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with self._lock:
                return self._read()
        except Timeout:
            logger.debug("Could not acquire file lock for reading %s", self.path)
            return self._read()

    def save(self, data: Dict[str, Any]) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        try:
            with self._lock:
                self._write(data)
        except Timeout:
            logger.debug("Could not acquire file lock for writing %s", self.path)
            self._write(data)

    def blocked_until(self, service: str) -> Optional[float]:
        """Return the blocked_until timestamp (epoch seconds) for `service` or None."""
        return self.load().get(service, {}).get("blocked_until")

    def block(self, service: str, until: float) -> None:
        def update(st: Dict[str, Any]) -> bool:
            st.setdefault(service, {})["blocked_until"] = until
            return True

        self._update(update)
        logger.info("%s blocked until %s", service, until)

    def clear(self, service: str) -> None:
        self._update(lambda st: st.pop(service, None) is not None)

    def _update(self, mutate: Callable[[Dict[str, Any]], bool]) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        # one lock hold spans load and save; FileLock is reentrant
        try:
            with self._lock:
                st = self.load()
                if mutate(st):
                    self.save(st)
        except Timeout:
            logger.debug("Could not acquire file lock for updating %s", self.path)
            st = self.load()
            if mutate(st):
                self.save(st)


def parse_retry_after(value: Optional[str], now: Optional[float] = None) -> Optional[float]:
    """Parse a Retry-After header into seconds from `now`; None when unusable."""
    if value is None:
        return None
    now = time.time() if now is None else now
    try:
        return float(value)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(value).timestamp() - now
    except (TypeError, ValueError):
        return None


def send_with_retries(
    send: Callable[[], requests.Response],
    service: str,
    state: QuotaState,
    max_attempts: int = 3,
) -> requests.Response:
    """Run `send` until it yields a non-5xx response.

    Raises QuotaExceeded while the service is blocked or when it answers 429,
    and APIError once transport or server errors exhaust the attempts. Other
    responses (including 4xx) are returned for the caller to interpret.
    """
    now = time.time()
    blocked_until = state.blocked_until(service)
    if blocked_until and now < blocked_until:
        raise QuotaExceeded(retry_after=blocked_until - now)

    backoff = 1.0
    for attempt in range(1, max_attempts + 1):
        try:
            resp = send()
        except requests.RequestException as exc:
            if attempt == max_attempts:
                raise APIError(f"{service} request failed: {exc}") from exc
            logger.debug("%s transport error (attempt %d): %s", service, attempt, exc)
            time.sleep(backoff + random.random() * 0.1)
            backoff = min(backoff * 2, 30)
            continue

        status = resp.status_code
        if status == 429:
            # the block window starts when the 429 arrives
            now = time.time()
            retry_after = parse_retry_after(resp.headers.get("Retry-After"), now)
            block_seconds = (
                retry_after
                if (retry_after and retry_after > 0)
                else max(backoff, DEFAULT_BLOCK_SECONDS)
            )
            state.block(service, now + block_seconds)
            raise QuotaExceeded(retry_after=block_seconds)

        if status >= 500:
            if attempt == max_attempts:
                raise APIError(f"HTTP {status} from {service}", status_code=status)
            logger.debug("%s returned %d (attempt %d)", service, status, attempt)
            time.sleep(backoff + random.random() * 0.1)
            backoff = min(backoff * 2, 30)
            continue

        return resp

    raise APIError("Exceeded retry attempts")


def error_message(resp: requests.Response) -> str:
    """Best-effort extraction of an error message from a JSON error body."""
    try:
        body = resp.json()
    except ValueError:
        return getattr(resp, "reason", None) or "Unknown error"
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            return str(err.get("message") or "Unknown error")
        if err:
            return str(err)
        if body.get("message"):
            return str(body["message"])
    return getattr(resp, "reason", None) or "Unknown error"
