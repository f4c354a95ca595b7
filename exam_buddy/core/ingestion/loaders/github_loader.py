import os
import logging
from typing import Any, Dict, List, Optional

from langchain_community.document_loaders import GithubFileLoader
from langchain_core.documents import Document

from exam_buddy.core.ingestion.base.processor import BaseDocumentLoader
from exam_buddy.models.enums import DocumentSource
from exam_buddy.models.jobs import RepoJob
from exam_buddy.utils.helpers import parse_github_repo_url

logger = logging.getLogger(__name__)

# Files the loader cannot turn into text
BINARY_EXTENSIONS = {
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".svg", ".webp",
    ".pdf", ".zip", ".gz", ".tar", ".tgz", ".7z", ".rar", ".jar",
    ".exe", ".dll", ".so", ".dylib", ".bin", ".class", ".pyc",
    ".woff", ".woff2", ".ttf", ".eot", ".mp3", ".mp4", ".mov", ".wav",
}


class GitHubRepoLoader(BaseDocumentLoader):
    """
    Loads the text files of a repository, one document per file.

    Non-recursive by default: only files at the repository root are read.
    """

    source_type = DocumentSource.GITHUB

    def __init__(
        self,
        branch: str = "main",
        recursive: bool = False,
        access_token: Optional[str] = None,
        github_api_url: str = "https://api.github.com",
    ):
        self.branch = branch
        self.recursive = recursive
        self.access_token = access_token
        self.github_api_url = github_api_url

    def accept_path(self, path: str) -> bool:
        if not self.recursive and "/" in path:
            return False

        extension = os.path.splitext(path)[1].lower()
        if extension in BINARY_EXTENSIONS:
            logger.warning(f"Skipping {path}: binary file type {extension}")
            return False

        return True

    def load_documents(self, job: RepoJob) -> List[Document]:
        repo, branch = parse_github_repo_url(job.url)
        branch = branch or self.branch

        logger.info(f"Reading {repo}@{branch} (recursive={self.recursive})")
        loader = GithubFileLoader(
            repo=repo,
            branch=branch,
            access_token=self.access_token,
            github_api_url=self.github_api_url,
            file_filter=self.accept_path,
        )

        documents = []
        for entry in loader.get_file_paths():
            # Directories and submodules have no content of their own
            if entry.get("type") != "blob":
                continue

            path = entry["path"]
            try:
                content = loader.get_file_content_by_path(path)
            except UnicodeDecodeError:
                logger.warning(f"Skipping {path}: not a UTF-8 text file")
                continue

            if not content:
                continue

            documents.append(Document(
                page_content=content,
                metadata={
                    "path": path,
                    "sha": entry.get("sha"),
                    "source": f"{self.github_api_url}/{repo}/blob/{branch}/{path}",
                },
            ))

        return documents

    def build_locator(self, metadata: Dict[str, Any]) -> Dict[str, Any]:
        return {"path": metadata.get("path", "")}
