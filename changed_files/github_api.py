from __future__ import annotations

from typing import Any, Iterator
import logging

import requests

logger = logging.getLogger(__name__)

PER_PAGE = 100


def _files_url(api_url: str, owner: str, repo: str, pr_number: int) -> str:
    base = api_url.rstrip("/")
    return f"{base}/repos/{owner}/{repo}/pulls/{pr_number}/files"


def list_pull_request_files(
    api_url: str,
    token: str,
    owner: str,
    repo: str,
    pr_number: int,
    per_page: int = PER_PAGE,
    timeout_seconds: int = 30,
) -> Iterator[dict[str, Any]]:
    """Yield every file entry of a pull request, following ``Link: rel="next"`` pages.

    Pages are fetched one after another and only when the caller asks for more.
    HTTP failures raise ``requests.HTTPError``.
    """
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"

    url: str | None = _files_url(api_url, owner, repo, pr_number)
    params: dict[str, Any] | None = {"per_page": per_page, "page": 1}
    page = 0

    while url:
        resp = requests.get(url, headers=headers, params=params, timeout=timeout_seconds)
        resp.raise_for_status()
        page += 1

        items = resp.json()
        if not isinstance(items, list):
            raise ValueError(f"Unexpected response shape from {url}: expected a list")
        logger.debug("Fetched page %d with %d files", page, len(items))
        yield from items

        # The next link already carries the query string.
        url = (resp.links.get("next") or {}).get("url")
        params = None
