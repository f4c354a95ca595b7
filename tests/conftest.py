"""
Pytest configuration for the Exam Buddy service.

This module provides fixtures and configurations used by the test suite.
Redis and Qdrant are replaced by in-process stand-ins, the dramatiq broker
by its stub broker, and the OpenAI clients by a fake embedding and a mock
chat model, so the suite runs without any external service.
"""

import os
import tempfile
import threading
import time
from typing import Callable, Dict, Generator, List
from unittest.mock import MagicMock

# Must be set before anything from exam_buddy is imported
os.environ["UNIT_TESTS"] = "1"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="exam-buddy-uploads-")
os.environ["INGESTION_MAX_RETRIES"] = "1"
os.environ["INGESTION_MIN_BACKOFF_MS"] = "10"
os.environ["INGESTION_MAX_BACKOFF_MS"] = "50"
os.environ.setdefault("OPENAI_API_KEY", "sk-test")

import dramatiq
import pytest
from fastapi.testclient import TestClient
from langchain_core.embeddings import DeterministicFakeEmbedding
from langchain_core.messages import AIMessage
from qdrant_client import QdrantClient

from exam_buddy.api.dependencies import get_chat_service
from exam_buddy.api.main import app
from exam_buddy.core.background import models
from exam_buddy.core.background.actors import ingestion as ingestion_actors
from exam_buddy.core.background.common import broker
from exam_buddy.core.background.job_tracker import JobTracker, set_job_tracker
from exam_buddy.core.query.chat_service import ChatService
from exam_buddy.core.vectorstore import QdrantStore

EMBEDDING_SIZE = 32


class InMemoryRedis:
    """The subset of the redis client the job tracker uses, backed by dicts."""

    def __init__(self):
        self._hashes: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()

    def hset(self, name, key, value):
        with self._lock:
            bucket = self._hashes.setdefault(name, {})
            created = key not in bucket
            bucket[key] = value
            return int(created)

    def hget(self, name, key):
        with self._lock:
            return self._hashes.get(name, {}).get(key)

    def hgetall(self, name):
        with self._lock:
            return dict(self._hashes.get(name, {}))

    def hdel(self, name, *keys):
        with self._lock:
            bucket = self._hashes.get(name, {})
            return sum(1 for key in keys if bucket.pop(key, None) is not None)

    def ping(self):
        return True

    def info(self, section=None):
        return {"used_memory_human": "1M", "used_memory_peak_human": "1M"}

    def close(self):
        pass


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Poll ``predicate`` until it holds or the timeout expires."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return predicate()


def build_pdf(pages: List[str]) -> bytes:
    """
    Build a small valid PDF with one line of text per page.

    Args:
        pages: Text of each page, in order

    Returns:
        bytes: The PDF file contents
    """
    page_ids = [4 + 2 * i for i in range(len(pages))]
    kids = " ".join(f"{page_id} 0 R" for page_id in page_ids)

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for page_id, text in zip(page_ids, pages):
        objects.append(
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {page_id + 1} 0 R >>".encode()
        )
        escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode()
        objects.append(f"<< /Length {len(stream)} >>\nstream\n".encode() + stream + b"\nendstream")

    output = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(output))
        output += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(output)
    output += f"xref\n0 {len(objects) + 1}\n".encode()
    output += b"0000000000 65535 f \n"
    for offset in offsets:
        output += f"{offset:010d} 00000 n \n".encode()
    output += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return output


@pytest.fixture
def make_pdf() -> Callable[[List[str]], bytes]:
    """
    PDF builder for upload and loader tests.

    Returns:
        Callable: Function taking the page texts and returning PDF bytes
    """
    return build_pdf


@pytest.fixture
def temp_data_dir() -> Generator[str, None, None]:
    """
    Create a temporary directory for test data.

    Returns:
        str: Path to temporary directory
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def job_tracker() -> Generator[JobTracker, None, None]:
    """
    Job tracker over an in-memory Redis, installed as the process-wide tracker.

    Returns:
        JobTracker: Job tracker instance
    """
    tracker = JobTracker(redis_client=InMemoryRedis())
    set_job_tracker(tracker)
    yield tracker
    set_job_tracker(None)


@pytest.fixture
def embedding_function() -> DeterministicFakeEmbedding:
    """
    Create an embedding function for testing.

    Returns:
        DeterministicFakeEmbedding: Same text, same vector
    """
    return DeterministicFakeEmbedding(size=EMBEDDING_SIZE)


@pytest.fixture
def mock_qdrant_client() -> QdrantClient:
    """
    Create an in-memory Qdrant client for testing.

    Returns:
        QdrantClient: In-memory Qdrant client
    """
    return QdrantClient(location=":memory:")


@pytest.fixture
def vector_store(mock_qdrant_client, embedding_function) -> QdrantStore:
    """
    Create a vector store for testing.

    Returns:
        QdrantStore: Vector store over a not yet existing collection
    """
    return QdrantStore(
        client=mock_qdrant_client,
        collection_name="test_collection",
        embedding_function=embedding_function,
    )


@pytest.fixture
def shared_clients(mock_qdrant_client, embedding_function) -> Generator[QdrantClient, None, None]:
    """
    Point the process-wide Qdrant and embedding clients at the test doubles.

    Returns:
        QdrantClient: The in-memory client behind every vector store
    """
    models.configure(qdrant_client=mock_qdrant_client, embedding_function=embedding_function)
    ingestion_actors._pipeline = None
    yield mock_qdrant_client
    models.configure()
    ingestion_actors._pipeline = None


@pytest.fixture
def stub_broker() -> Generator[dramatiq.Broker, None, None]:
    """
    The stub broker all actors are bound to, emptied around each test.

    Returns:
        StubBroker: In-process broker
    """
    broker.flush_all()
    yield broker
    broker.flush_all()


@pytest.fixture
def stub_worker(stub_broker) -> Generator[dramatiq.Worker, None, None]:
    """
    A worker consuming every lane of the stub broker.

    Returns:
        Worker: Started dramatiq worker
    """
    worker = dramatiq.Worker(stub_broker, worker_timeout=100, worker_threads=10)
    worker.start()
    yield worker
    worker.stop()


@pytest.fixture
def mock_chat_model() -> MagicMock:
    """
    Chat model double that always gives the same answer.

    Returns:
        MagicMock: Object with an ``invoke`` returning an AIMessage
    """
    chat_model = MagicMock()
    chat_model.invoke.return_value = AIMessage(content="Force equals mass times acceleration (F = ma) 🚀")
    return chat_model


@pytest.fixture
def test_client(job_tracker, shared_clients, stub_broker, mock_chat_model) -> Generator[TestClient, None, None]:
    """
    Create a FastAPI test client wired to the test doubles.

    Returns:
        TestClient: FastAPI test client
    """
    app.dependency_overrides[get_chat_service] = lambda: ChatService(
        vector_store_provider=models.get_vector_store,
        chat_model_provider=lambda: mock_chat_model,
    )
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def queued_messages(stub_broker, queue_name: str) -> List[dramatiq.Message]:
    """Decode the messages waiting on a stub broker queue without consuming them."""
    queue = stub_broker.queues[queue_name]
    return [dramatiq.Message.decode(data) for data in list(queue.queue)]
