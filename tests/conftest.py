"""
Pytest Configuration and Fixtures

Provides shared fixtures for all tests.
"""

import copy
import hashlib
import itertools
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from propertysite.config import GitHubConfig, reset_config
from propertysite.exceptions import NotFoundError, PublishError


class FakeGitHubClient:
    """In-memory stand-in for GitHubClient.

    Models one branch with content-addressed blobs, trees (flat path -> blob
    maps) and commits, so publishes and deletes can be inspected afterwards.
    """

    def __init__(self, branch: str = "main"):
        self.branch = branch
        self.blobs: Dict[str, bytes] = {}
        self.trees: Dict[str, Dict[str, str]] = {"tree-0": {}}
        self.commits: Dict[str, Dict[str, Any]] = {
            "commit-0": {"tree": "tree-0", "parents": [], "message": "initial"}
        }
        self.refs: Dict[str, str] = {branch: "commit-0"}
        self.calls: List[str] = []
        self.fail_on: Optional[str] = None
        self.pages: Optional[Dict[str, Any]] = None
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def _record(self, step: str) -> None:
        with self._lock:
            self.calls.append(step)
        if self.fail_on == step:
            raise PublishError(f"{step} failed: Server Error", step=step, status_code=500)

    def _next(self, prefix: str) -> str:
        with self._lock:
            return f"{prefix}-{next(self._ids)}"

    def _ref(self, branch: str) -> str:
        if branch not in self.refs:
            raise NotFoundError("get_ref failed: Not Found", step="get_ref", status_code=404)
        return self.refs[branch]

    # Inspection helpers

    def head_files(self, branch: str = None) -> Dict[str, bytes]:
        """Path -> content of every file at the branch tip."""
        commit = self.commits[self.refs[branch or self.branch]]
        return {path: self.blobs[sha] for path, sha in self.trees[commit["tree"]].items()}

    def seed(self, files: Dict[str, bytes]) -> None:
        """Commit files directly, bypassing call recording."""
        tree = dict(self.trees[self.commits[self.refs[self.branch]]["tree"]])
        for path, content in files.items():
            sha = hashlib.sha1(content).hexdigest()
            self.blobs[sha] = content
            tree[path] = sha
        tree_sha = self._next("tree")
        self.trees[tree_sha] = tree
        commit_sha = self._next("commit")
        self.commits[commit_sha] = {"tree": tree_sha, "parents": [self.refs[self.branch]], "message": "seed"}
        self.refs[self.branch] = commit_sha

    # Git data API

    def get_ref(self, branch: str) -> str:
        self._record("get_ref")
        return self._ref(branch)

    def get_commit_tree(self, commit_sha: str) -> str:
        self._record("get_commit")
        return self.commits[commit_sha]["tree"]

    def create_blob(self, content: bytes) -> str:
        self._record("create_blob")
        sha = hashlib.sha1(content).hexdigest()
        with self._lock:
            self.blobs[sha] = content
        return sha

    def create_tree(self, base_tree: str, entries: List[Dict[str, str]]) -> str:
        self._record("create_tree")
        tree = dict(self.trees[base_tree])
        for entry in entries:
            tree[entry["path"]] = entry["sha"]
        sha = self._next("tree")
        self.trees[sha] = tree
        return sha

    def create_commit(self, message: str, tree_sha: str, parents: List[str]) -> Dict[str, Any]:
        self._record("create_commit")
        sha = self._next("commit")
        self.commits[sha] = {"tree": tree_sha, "parents": list(parents), "message": message}
        return {"sha": sha, "message": message}

    def update_ref(self, branch: str, commit_sha: str) -> None:
        self._record("update_ref")
        self.refs[branch] = commit_sha

    # Contents API

    def get_contents(self, path: str, ref: str) -> Any:
        self._record("get_contents")
        files = self.head_files(ref)
        path = path.strip("/")
        if path in files:
            return {"type": "file", "name": path.rsplit("/", 1)[-1], "path": path,
                    "sha": hashlib.sha1(files[path]).hexdigest()}

        children: Dict[str, Dict[str, Any]] = {}
        prefix = f"{path}/"
        for file_path, content in files.items():
            if not file_path.startswith(prefix):
                continue
            name, _, rest = file_path[len(prefix):].partition("/")
            child_path = prefix + name
            if rest:
                children[name] = {"type": "dir", "name": name, "path": child_path, "sha": "dir"}
            else:
                children[name] = {"type": "file", "name": name, "path": child_path,
                                  "sha": hashlib.sha1(content).hexdigest()}
        if not children:
            raise NotFoundError("get_contents failed: Not Found", step="get_contents", status_code=404)
        return sorted(children.values(), key=lambda c: c["name"])

    def _write(self, branch: str, path: str, content: Optional[bytes], message: str) -> Dict[str, Any]:
        commit = self.commits[self._ref(branch)]
        tree = dict(self.trees[commit["tree"]])
        if content is None:
            tree.pop(path, None)
        else:
            sha = hashlib.sha1(content).hexdigest()
            self.blobs[sha] = content
            tree[path] = sha
        tree_sha = self._next("tree")
        self.trees[tree_sha] = tree
        commit_sha = self._next("commit")
        self.commits[commit_sha] = {"tree": tree_sha, "parents": [self.refs[branch]], "message": message}
        self.refs[branch] = commit_sha
        return {"commit": {"sha": commit_sha}}

    def put_file(self, path: str, content: bytes, message: str, branch: str, sha: Optional[str] = None):
        self._record("put_file")
        exists = path in self.head_files(branch)
        if exists and not sha:
            raise PublishError("put_file failed: sha wasn't supplied", step="put_file", status_code=422)
        return self._write(branch, path, content, message)

    def delete_file(self, path: str, sha: str, message: str, branch: str) -> None:
        self._record("delete_file")
        if path not in self.head_files(branch):
            raise NotFoundError("delete_file failed: Not Found", step="delete_file", status_code=404)
        self._write(branch, path, None, message)

    def get_pages(self) -> Dict[str, Any]:
        self._record("get_pages")
        if self.pages is None:
            raise NotFoundError("get_pages failed: Not Found", step="get_pages", status_code=404)
        return self.pages


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests independent of the developer's environment and .env file."""
    for name in (
        "GITHUB_TOKEN",
        "GITHUB_OWNER",
        "GITHUB_REPO",
        "GITHUB_BRANCH",
        "GITHUB_PAGES_BASE_URL",
        "GITHUB_API_URL",
        "GITHUB_TIMEOUT",
        "PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PROPERTYSITE_UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("PROPERTYSITE_STATIC_DIR", str(tmp_path / "no-static"))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def github_config() -> GitHubConfig:
    """Hosting configuration for a fake owner/repo."""
    return GitHubConfig(token="test-token", owner="acme", repo="sites", branch="main")


@pytest.fixture
def fake_github() -> FakeGitHubClient:
    return FakeGitHubClient(branch="main")


@pytest.fixture
def publisher(github_config, fake_github):
    from propertysite.github.publisher import SitePublisher
    return SitePublisher(github_config, client=fake_github)


@pytest.fixture
def upload_store(tmp_path):
    from propertysite.uploads.store import UploadStore
    store = UploadStore(str(tmp_path / "uploads"))
    store.ensure_directory()
    return store


@pytest.fixture
def app(upload_store):
    """Flask app with publishing not configured."""
    from propertysite.api.server import create_app
    return create_app({"TESTING": True}, upload_store=upload_store)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def publishing_app(upload_store, publisher):
    """Flask app wired to the in-memory hosting fake."""
    from propertysite.api.server import create_app
    return create_app({"TESTING": True}, publisher=publisher, upload_store=upload_store)


@pytest.fixture
def publishing_client(publishing_app):
    return publishing_app.test_client()


@pytest.fixture
def sample_submission() -> Dict[str, Any]:
    """A complete, valid form submission."""
    return copy.deepcopy({
        "property": {
            "address": "123 Main St",
            "city": "Springfield",
            "state": "IL",
            "zip": "62701",
            "price": 425000,
            "bedrooms": 4,
            "bathrooms": 2.5,
            "sqft": 2350,
            "yearBuilt": 1998,
            "description": "Sunny colonial with a renovated kitchen.",
            "neighborhood": "Quiet tree-lined street near the park.",
            "schools": "Lincoln Elementary",
        },
        "realtor": {
            "name": "Dana Reyes",
            "company": "Prairie Realty",
            "license": "IL-475123",
            "phone": "(217) 555-0142",
            "email": "dana@prairierealty.example",
        },
        "loanOfficer": {
            "name": "Sam Okafor",
            "company": "Heartland Lending",
            "nmls": "884512",
            "phone": "(217) 555-0199",
            "email": "sam@heartland.example",
        },
        "photos": [
            {"url": "https://img.example.com/front.jpg", "label": "Front Exterior"},
        ],
        "testimonials": [
            {"text": "Dana made buying our first home easy.", "author": "The Parkers"},
        ],
        "showNeighborhood": True,
    })


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Minimal JPEG-looking payload (content is never decoded)."""
    return b"\xff\xd8\xff\xe0" + b"\x00" * 64 + b"\xff\xd9"
