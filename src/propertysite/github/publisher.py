"""
Site Publisher

Publishes, lists and deletes property sites in the hosted GitHub Pages repo.

Each site lives at ``properties/<slug>/index.html`` with its photos under
``properties/<slug>/images/``. A publish writes all of a site's files in one
commit; a delete removes files one at a time.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

from propertysite.config import GitHubConfig
from propertysite.core.constants import (
    BLOB_MODE,
    PROPERTIES_DIR,
    SITE_IMAGES_DIR,
    SITE_INDEX_FILE,
)
from propertysite.core.models import PublishedSite, SiteFile
from propertysite.exceptions import NotFoundError, PublishError, ValidationError
from propertysite.github.client import GitHubClient
from propertysite.logging_config import get_logger
from propertysite.utils.slug import is_valid_slug

logger = get_logger(__name__)

# Upper bound on concurrent blob uploads per publish
MAX_BLOB_WORKERS = 8


def site_path(slug: str) -> str:
    """Repository directory of a site; raises ValidationError for a non-slug."""
    if not is_valid_slug(slug):
        raise ValidationError(f"Invalid property slug: {slug!r}")
    return f"{PROPERTIES_DIR}/{slug}"


class SitePublisher:
    """Publishes property sites to a branch of the hosted repository.

    No compare-and-swap guards the branch update: two publishes racing on the
    same branch both succeed and the later ref update wins.
    """

    def __init__(self, config: GitHubConfig, client: Optional[GitHubClient] = None):
        self.client = client or GitHubClient(config)
        self.owner = config.owner
        self.repo = config.repo
        self.branch = config.branch
        self.pages_base_url = config.pages_base_url or f"https://{config.owner}.github.io/{config.repo}"

    def site_url(self, slug: str) -> str:
        """Browsable URL of a published site."""
        return f"{self.pages_base_url}/{PROPERTIES_DIR}/{quote(slug)}/"

    def upload_file(self, path: str, content: bytes, message: str) -> Dict[str, Any]:
        """Create or replace a single file with one contents API call."""
        sha = None
        try:
            existing = self.client.get_contents(path, ref=self.branch)
            if isinstance(existing, dict):
                sha = existing.get("sha")
        except NotFoundError:
            pass

        logger.info("%s %s on %s", "Updating" if sha else "Creating", path, self.branch)
        return self.client.put_file(path, content, message, branch=self.branch, sha=sha)

    def upload_multiple_files(self, files: Sequence[SiteFile], message: str) -> Dict[str, Any]:
        """Commit all ``files`` on top of the branch tip in a single commit.

        Steps: resolve ref, read its tree, create blobs, create tree, create
        commit, move ref. Any failure aborts; objects already created are left
        unreferenced.

        Args:
            files: Repository-relative paths and their contents.
            message: Commit message.

        Returns:
            The new commit as returned by the API.

        Raises:
            PublishError: If any step fails.
        """
        if not files:
            raise PublishError("No files to publish", step="prepare")

        parent_sha = self.client.get_ref(self.branch)
        base_tree = self.client.get_commit_tree(parent_sha)
        logger.debug("Branch %s at %s (tree %s)", self.branch, parent_sha, base_tree)

        workers = min(MAX_BLOB_WORKERS, len(files))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="blob_upload") as pool:
            blob_shas = list(pool.map(lambda f: self.client.create_blob(f.content), files))

        entries = [
            {"path": f.path, "mode": BLOB_MODE, "type": "blob", "sha": sha}
            for f, sha in zip(files, blob_shas)
        ]
        tree_sha = self.client.create_tree(base_tree, entries)
        commit = self.client.create_commit(message, tree_sha, parents=[parent_sha])
        self.client.update_ref(self.branch, commit["sha"])

        logger.info(
            "Committed %d file(s) to %s/%s@%s as %s",
            len(files), self.owner, self.repo, self.branch, commit["sha"][:7],
        )
        return commit

    def publish_property_site(
        self,
        slug: str,
        html: str,
        images: Sequence[SiteFile] = (),
    ) -> PublishedSite:
        """Publish a site's page and images under ``properties/<slug>/``.

        Args:
            slug: Site identifier.
            html: Rendered page.
            images: Image files; ``path`` is the name inside the images folder.

        Returns:
            The published site reference.
        """
        base = site_path(slug)
        files = [SiteFile(f"{base}/{SITE_INDEX_FILE}", html.encode("utf-8"))]
        files.extend(
            SiteFile(f"{base}/{SITE_IMAGES_DIR}/{image.path}", image.content)
            for image in images
        )

        self.upload_multiple_files(files, f"Add property site: {slug}")
        return PublishedSite(slug=slug, url=self.site_url(slug), path=f"{base}/")

    def check_pages_status(self) -> Dict[str, Any]:
        """Report whether GitHub Pages is enabled for the repository."""
        try:
            data = self.client.get_pages()
        except NotFoundError:
            return {"enabled": False}
        return {"enabled": True, "url": data.get("html_url"), "status": data.get("status")}

    def list_property_sites(self) -> List[PublishedSite]:
        """List published sites; a missing ``properties/`` folder means none."""
        try:
            data = self.client.get_contents(PROPERTIES_DIR, ref=self.branch)
        except NotFoundError:
            return []

        if not isinstance(data, list):
            return []
        return [
            PublishedSite(slug=item["name"], url=self.site_url(item["name"]), path=item.get("path", ""))
            for item in data
            if item.get("type") == "dir"
        ]

    def _collect_files(self, path: str) -> List[Dict[str, Any]]:
        """Every file under ``path``, descending into sub-directories."""
        data = self.client.get_contents(path, ref=self.branch)
        entries = data if isinstance(data, list) else [data]

        files: List[Dict[str, Any]] = []
        for entry in entries:
            if entry.get("type") == "dir":
                files.extend(self._collect_files(entry["path"]))
            else:
                files.append(entry)
        return files

    def delete_property_site(self, slug: str) -> int:
        """Delete every file of a site, one API call per file.

        A failure partway leaves the site partially deleted.

        Returns:
            Number of files deleted.

        Raises:
            ValidationError: If the slug is not a bare site slug.
            NotFoundError: If no site exists under the slug.
            PublishError: If a delete call fails.
        """
        files = self._collect_files(site_path(slug))
        message = f"Delete property site: {slug}"
        for entry in files:
            self.client.delete_file(entry["path"], entry["sha"], message, branch=self.branch)

        logger.info("Deleted %d file(s) for site %s", len(files), slug)
        return len(files)
