from .pdf_loader import PDFLoader
from .youtube_loader import YouTubeTranscriptLoader
from .github_loader import GitHubRepoLoader

__all__ = ["PDFLoader", "YouTubeTranscriptLoader", "GitHubRepoLoader"]
