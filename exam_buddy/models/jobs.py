"""
Upload jobs: the unit of work handed from the intake to the ingestion workers.

A job is immutable once enqueued. It travels through the broker as a plain
dict (``job.model_dump(mode="json")``) and is rebuilt on the worker side with
``parse_job``.
"""

from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class BaseJob(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_id: str
    collection_name: str


class FileJob(BaseJob):
    kind: Literal["file"] = "file"
    filename: str
    source_directory: str
    storage_path: str

    @property
    def source(self) -> str:
        return self.storage_path


class VideoLinkJob(BaseJob):
    kind: Literal["video_link"] = "video_link"
    url: str

    @property
    def source(self) -> str:
        return self.url


class RepoJob(BaseJob):
    kind: Literal["repo"] = "repo"
    url: str

    @property
    def source(self) -> str:
        return self.url


UploadJob = Annotated[Union[FileJob, VideoLinkJob, RepoJob], Field(discriminator="kind")]

_upload_job_adapter = TypeAdapter(UploadJob)


def parse_job(data: Dict[str, Any]) -> Union[FileJob, VideoLinkJob, RepoJob]:
    """Rebuild a job from its broker payload. Raises ``pydantic.ValidationError`` on a bad payload."""
    return _upload_job_adapter.validate_python(data)
