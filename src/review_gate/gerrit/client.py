"""Gerrit REST facade."""

import json
import logging
from typing import Any
from urllib.parse import quote

import requests
from requests.auth import HTTPBasicAuth

from review_gate.facade import ReviewFacade, ReviewSystemError
from review_gate.models.review import ReviewInput

logger = logging.getLogger(__name__)

# Gerrit prefixes JSON responses with this line to prevent XSSI
XSSI_PREFIX = ")]}'"

# Entries of the file list that are not files of the change
MAGIC_FILES = frozenset({"/COMMIT_MSG", "/MERGE_LIST", "/PATCHSET_LEVEL"})


class GerritReviewFacade(ReviewFacade):
    """Posts reviews to a Gerrit change revision."""

    NAME = "gerrit"

    def __init__(
        self,
        url: str,
        change_id: str,
        revision_id: str = "current",
        username: str | None = None,
        password: str | None = None,
        path_prefix: str = "",
        timeout_seconds: int = 30,
    ) -> None:
        """Initialize the Gerrit facade.

        Args:
            url: Gerrit base URL, e.g. https://review.example.com
            change_id: Change identifier (number, Change-Id or project~branch~id)
            revision_id: Revision (patch set number or commit SHA)
            username: HTTP username, enables authenticated /a/ endpoints
            password: HTTP password
            path_prefix: Prefix stripped by parse_file_name
            timeout_seconds: Timeout for each request
        """
        super().__init__(path_prefix=path_prefix)
        self.url = url.rstrip("/")
        self.change_id = change_id
        self.revision_id = revision_id
        self.timeout_seconds = timeout_seconds
        self._auth = HTTPBasicAuth(username, password or "") if username else None

    def revision_url(self, endpoint: str) -> str:
        """Build the URL of a revision endpoint."""
        base = f"{self.url}/a" if self._auth else self.url
        change = quote(self.change_id, safe="")
        revision = quote(self.revision_id, safe="")
        return f"{base}/changes/{change}/revisions/{revision}/{endpoint}"

    @staticmethod
    def parse_response(text: str) -> Any:
        """Decode a Gerrit JSON response, dropping the XSSI prefix."""
        if text.startswith(XSSI_PREFIX):
            text = text[len(XSSI_PREFIX) :]
        return json.loads(text)

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        url = self.revision_url(endpoint)
        logger.debug(f"{method} {url}")
        try:
            response = requests.request(
                method, url, auth=self._auth, timeout=self.timeout_seconds, **kwargs
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise ReviewSystemError(f"Gerrit request {method} {url} failed: {e}") from e
        return response

    def list_files(self) -> list[str]:
        response = self._request("GET", "files/")
        try:
            files = self.parse_response(response.text)
        except ValueError as e:
            raise ReviewSystemError(f"Unexpected file list from Gerrit: {e}") from e
        names = [name for name in files if name not in MAGIC_FILES]
        logger.debug(f"Files in change {self.change_id}: {names}")
        return names

    def set_review(self, review: ReviewInput) -> None:
        payload = review.to_payload()
        logger.info(
            f"Send review for change {self.change_id}, revision {self.revision_id}: "
            f"{payload['labels']}, {review.size()} comments"
        )
        self._request("POST", "review", json=payload)
