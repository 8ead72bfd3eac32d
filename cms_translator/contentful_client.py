"""Contentful Content Management API wrapper."""

import logging

import requests

from . import FetchError, PersistError
from .project_model import Entry

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.contentful.com"
CONTENT_TYPE_HEADER = "application/vnd.contentful.management.v1+json"


class ContentfulClient:
    """Client for the Contentful Content Management REST API."""

    def __init__(self, access_token: str, base_url: str = DEFAULT_BASE_URL,
                 timeout: int = 30):
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, *, params: dict = None,
                 json: dict = None, headers: dict = None) -> dict:
        """Send one API request and return the decoded JSON body.

        Centralizes auth and timeout handling. Raises the underlying
        ``requests`` exception (or ValueError on a non-JSON body); callers
        map it to FetchError or PersistError.
        """
        all_headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": CONTENT_TYPE_HEADER,
        }
        if headers:
            all_headers.update(headers)
        log.debug("%s %s params=%s", method, path, params)
        r = requests.request(
            method,
            f"{self.base_url}{path}",
            params=params,
            json=json,
            headers=all_headers,
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json()

    def _get(self, path: str, params: dict = None) -> dict:
        try:
            return self._request("GET", path, params=params)
        except (requests.RequestException, ValueError) as e:
            raise FetchError(f"Contentful API error on {path}: {e}") from e

    # ── Space / environment / locale listings ─────────────────────

    def list_spaces(self) -> list:
        """Return [{"id", "name"}] for every space the token can access."""
        data = self._get("/spaces", params={"limit": 100})
        return [{"id": s["sys"]["id"], "name": s.get("name", "")}
                for s in data.get("items", [])]

    def get_space(self, space_id: str) -> dict:
        return self._get(f"/spaces/{space_id}")

    def list_environments(self, space_id: str) -> list:
        """Return [{"id", "name"}], names annotated with their aliases.

        An environment targeted by aliases is named ``"<name> (<alias>, ...)"``.
        """
        environments = self._get(f"/spaces/{space_id}/environments")
        aliases = self._get(f"/spaces/{space_id}/environment_aliases")

        alias_map = {}
        for alias in aliases.get("items", []):
            env_id = alias["environment"]["sys"]["id"]
            alias_map.setdefault(env_id, []).append(alias["sys"]["id"])

        result = []
        for env in environments.get("items", []):
            env_id = env["sys"]["id"]
            name = env.get("name", env_id)
            if env_id in alias_map:
                name = f"{name} ({', '.join(alias_map[env_id])})"
            result.append({"id": env_id, "name": name})
        return result

    def list_locales(self, space_id: str, environment_id: str) -> list:
        """Return [{"code", "name", "default"}] for an environment."""
        data = self._get(f"/spaces/{space_id}/environments/{environment_id}/locales")
        return [{"code": loc["code"], "name": loc.get("name", ""),
                 "default": bool(loc.get("default", False))}
                for loc in data.get("items", [])]

    # ── Entries ───────────────────────────────────────────────────

    def get_entries(self, space_id: str, environment_id: str, content_type: str,
                    skip: int = 0, limit: int = 100, entry_ids: list = None) -> dict:
        """Fetch one page of entries of a content type.

        Returns:
            The raw page: {"items": [...], "total": int, ...}.
        """
        params = {"content_type": content_type, "skip": skip, "limit": limit}
        if entry_ids:
            params["sys.id[in]"] = ",".join(entry_ids)
        return self._get(
            f"/spaces/{space_id}/environments/{environment_id}/entries",
            params=params,
        )

    def get_all_entries(self, space_id: str, environment_id: str, content_type: str,
                        entry_ids: list = None, page_size: int = 100) -> list:
        """Fetch every entry matching the filter, page by page.

        Returns:
            List of Entry objects.

        Raises:
            FetchError: any page request failed. The run is not retried.
        """
        try:
            page = self.get_entries(space_id, environment_id, content_type,
                                    skip=0, limit=page_size, entry_ids=entry_ids)
            items = list(page.get("items", []))
            total = page.get("total", len(items))
            while len(items) < total:
                page = self.get_entries(space_id, environment_id, content_type,
                                        skip=len(items), limit=page_size,
                                        entry_ids=entry_ids)
                next_items = page.get("items", [])
                if not next_items:
                    log.warning("Entry page at skip=%d came back empty (total=%d)",
                                len(items), total)
                    break
                items.extend(next_items)
        except FetchError as e:
            log.error("Error fetching entries: %s", e)
            raise
        return [Entry.from_json(item) for item in items]

    def update_entry(self, space_id: str, environment_id: str, entry: Entry) -> Entry:
        """Persist an entry's fields, refreshing its ``sys`` from the response.

        Raises:
            PersistError: the update request failed.
        """
        path = f"/spaces/{space_id}/environments/{environment_id}/entries/{entry.id}"
        headers = {}
        if entry.version is not None:
            headers["X-Contentful-Version"] = str(entry.version)
        try:
            data = self._request("PUT", path, json=entry.to_payload(), headers=headers)
        except (requests.RequestException, ValueError) as e:
            raise PersistError(f"Failed to update entry {entry.id}: {e}") from e
        entry.sys = data.get("sys", entry.sys)
        return entry
