"""
GitHub REST API Client

Thin wrapper over the repository contents and git data endpoints that the
publisher needs. Every call is a single blocking round trip; non-2xx responses
become PublishError (NotFoundError for 404).
"""

import base64
import threading
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import requests

from propertysite.config import GitHubConfig
from propertysite.exceptions import ConfigurationError, NotFoundError, PublishError
from propertysite.logging_config import get_logger

logger = get_logger(__name__)

API_VERSION = "2022-11-28"


def encode_content(content: bytes) -> str:
    """Base64-encode raw bytes for the GitHub API."""
    return base64.b64encode(content).decode("ascii")


class GitHubClient:
    """Blocking client for one owner/repo pair.

    Blob uploads run on a thread pool and ``requests.Session`` is not
    thread-safe, so each thread gets its own session from ``session_factory``.
    """

    def __init__(
        self,
        config: GitHubConfig,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        if not config.token:
            raise ConfigurationError("GITHUB_TOKEN is not set")
        if not config.owner:
            raise ConfigurationError("GITHUB_OWNER is not set")

        self.owner = config.owner
        self.repo = config.repo
        self.timeout = config.timeout
        self.base_url = f"{config.api_url}/repos/{config.owner}/{config.repo}"

        self._session_factory = session_factory
        self._local = threading.local()
        self._headers = {
            "Authorization": f"Bearer {config.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": "propertysite-publisher",
        }

    @property
    def session(self) -> requests.Session:
        """The calling thread's session, created on first use."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            session.headers.update(self._headers)
            self._local.session = session
        return session

    def _request(self, method: str, path: str, step: str, **kwargs) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("%s %s (%s)", method, url, step)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise PublishError(f"{step} failed: {e}", step=step) from e

        if response.status_code == 404:
            raise NotFoundError(f"{step} failed: Not Found", step=step, status_code=404)
        if not response.ok:
            try:
                detail = response.json().get("message", response.reason)
            except ValueError:
                detail = response.reason
            raise PublishError(
                f"{step} failed: {detail}",
                step=step,
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _content_path(path: str) -> str:
        return "contents/" + quote(path.strip("/"))

    # Git data API

    def get_ref(self, branch: str) -> str:
        """Return the commit sha that ``branch`` points at."""
        data = self._request("GET", f"git/ref/heads/{quote(branch)}", step="get_ref")
        return data["object"]["sha"]

    def get_commit_tree(self, commit_sha: str) -> str:
        """Return the root tree sha of a commit."""
        data = self._request("GET", f"git/commits/{commit_sha}", step="get_commit")
        return data["tree"]["sha"]

    def create_blob(self, content: bytes) -> str:
        data = self._request(
            "POST",
            "git/blobs",
            step="create_blob",
            json={"content": encode_content(content), "encoding": "base64"},
        )
        return data["sha"]

    def create_tree(self, base_tree: str, entries: List[Dict[str, str]]) -> str:
        """Create a tree layering ``entries`` over ``base_tree``."""
        data = self._request(
            "POST",
            "git/trees",
            step="create_tree",
            json={"base_tree": base_tree, "tree": entries},
        )
        return data["sha"]

    def create_commit(self, message: str, tree_sha: str, parents: List[str]) -> Dict[str, Any]:
        return self._request(
            "POST",
            "git/commits",
            step="create_commit",
            json={"message": message, "tree": tree_sha, "parents": parents},
        )

    def update_ref(self, branch: str, commit_sha: str) -> None:
        self._request(
            "PATCH",
            f"git/refs/heads/{quote(branch)}",
            step="update_ref",
            json={"sha": commit_sha},
        )

    # Contents API

    def get_contents(self, path: str, ref: str) -> Any:
        """Return file metadata (dict) or directory listing (list) at ``path``."""
        return self._request(
            "GET",
            self._content_path(path),
            step="get_contents",
            params={"ref": ref},
        )

    def put_file(
        self,
        path: str,
        content: bytes,
        message: str,
        branch: str,
        sha: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create or update one file; ``sha`` is required when it exists."""
        body = {"message": message, "content": encode_content(content), "branch": branch}
        if sha:
            body["sha"] = sha
        return self._request("PUT", self._content_path(path), step="put_file", json=body)

    def delete_file(self, path: str, sha: str, message: str, branch: str) -> None:
        self._request(
            "DELETE",
            self._content_path(path),
            step="delete_file",
            json={"message": message, "sha": sha, "branch": branch},
        )

    def get_pages(self) -> Dict[str, Any]:
        """Return the GitHub Pages settings for the repository."""
        return self._request("GET", "pages", step="get_pages")
