from __future__ import annotations

import json
import sys
import uuid
from typing import Any, List, Optional, Sequence, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import API_URL, DEFAULT_TIMEOUT_S, MAX_BATCH_SIZE, USER_AGENT
from .core.contracts import ResolvedPair
from .counters import HarvestCounters
from .errors import BatchTooLargeError


def make_session(pool_size: int = 10) -> requests.Session:
    """
    One pooled session shared by every worker thread.
    Retries are off: a failed batch is dropped, not replayed.
    """
    s = requests.Session()
    retry = Retry(total=0, raise_on_status=False)
    adapter = HTTPAdapter(
        pool_connections=1,
        pool_maxsize=max(1, int(pool_size)),
        max_retries=retry,
    )
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers.update(
        {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
    )
    return s


def safe_post(
    session: requests.Session,
    url: str,
    names: Sequence[str],
    timeout: float = DEFAULT_TIMEOUT_S,
) -> Tuple[Optional[Any], int, str]:
    """
    Return (json_or_None, status_code, text_snippet). Never raises.
    """
    try:
        r = session.post(url, data=json.dumps(list(names)), timeout=timeout)
        status = r.status_code
        text_snippet = (r.text or "")[:300].replace("\n", " ")
        if status >= 400:
            return (None, status, text_snippet)
        try:
            return (r.json(), status, text_snippet)
        except ValueError:
            return (None, status, text_snippet)
    except requests.RequestException as e:
        return (None, -1, f"{type(e).__name__}: {e}")


def parse_players(payload: Any) -> List[ResolvedPair]:
    """
    Decode the bulk lookup response: a JSON array of {"id", "name"} objects.
    Raises ValueError on anything else.
    """
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array, got {type(payload).__name__}")
    out: List[ResolvedPair] = []
    for item in payload:
        try:
            pid, name = item["id"], item["name"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"malformed player entry: {item!r}") from e
        if not isinstance(pid, str) or not isinstance(name, str):
            raise ValueError(f"malformed player entry: {item!r}")
        out.append(ResolvedPair(uuid.UUID(pid), name))
    return out


class HttpBatchResolver:
    """
    Bulk name -> UUID lookup against the mowojang-compatible endpoint.

    Endpoint:
      POST {API_URL}   body: ["name1", "name2", ...]  (at most 10)
      ->  [{"id": "<32 hex>", "name": "<canonical name>"}, ...]

    Notes:
      - Unknown names are simply missing from the response.
      - Any transport, HTTP or decode failure is reported on stderr and the
        batch yields nothing; the caller carries on with the next batch.
      - `counters.requests` is bumped once per call whatever the outcome,
        `counters.resolved` once per returned player.
    """

    def __init__(
        self,
        counters: HarvestCounters,
        *,
        session: Optional[requests.Session] = None,
        url: str = API_URL,
        timeout: float = DEFAULT_TIMEOUT_S,
        debug: bool = False,
    ) -> None:
        self._counters = counters
        self._session = session or make_session()
        self._url = url
        self._timeout = timeout
        self._debug = bool(debug)

    @property
    def counters(self) -> HarvestCounters:
        return self._counters

    def resolve(self, names: Sequence[str]) -> List[ResolvedPair]:
        if len(names) > MAX_BATCH_SIZE:
            raise BatchTooLargeError(
                f"{len(names)} names in one lookup (max {MAX_BATCH_SIZE})"
            )
        data, status, body = safe_post(
            self._session, self._url, names, timeout=self._timeout
        )
        self._counters.requests.incr()
        if self._debug:
            print(
                f"[resolver] POST {self._url} names={list(names)} "
                f"status={status}",
                file=sys.stderr,
            )
            print(f"[resolver] body={body}", file=sys.stderr)
        if data is None:
            print(
                f"[resolver] lookup failed (status={status}): {body}",
                file=sys.stderr,
            )
            return []
        try:
            players = parse_players(data)
        except ValueError as e:
            print(f"[resolver] bad response: {e}", file=sys.stderr)
            return []
        self._counters.resolved.incr(len(players))
        return players


def smoke_test(session: requests.Session, url: str = API_URL) -> bool:
    """Look up one well-known name and report the outcome on stderr."""
    data, status, body = safe_post(session, url, ["notch"])
    print(f"[smoke] POST {url} -> {status}", file=sys.stderr)
    if data is None:
        print(f"[smoke] body: {body}", file=sys.stderr)
        return False
    return True
