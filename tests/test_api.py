"""
Tests for the API endpoints.
"""

import os

from langchain_core.documents import Document

from exam_buddy.core.background.models import get_vector_store

from conftest import queued_messages


def test_root_endpoint(test_client):
    """Test the root endpoint."""
    response = test_client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Hello from Exam Buddy"


def test_health_endpoint(test_client):
    """Test the health check endpoint with both backends reachable."""
    response = test_client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["components"] == {"redis": "connected", "qdrant": "connected"}
    assert data["jobs"]["total"] == 0


def test_upload_pdf_enqueues_one_file_job(test_client, stub_broker, job_tracker, make_pdf):
    """Test that a PDF upload is stored and exactly one file job is queued."""
    pdf_bytes = make_pdf(["Chapter 1"])

    response = test_client.post(
        "/upload/pdf",
        files={"pdf": ("notes.pdf", pdf_bytes, "application/pdf")},
    )

    # Verify response
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "File uploaded successfully"
    assert data["session_id"] is None

    # Verify the queued job
    messages = queued_messages(stub_broker, "file_upload_queue")
    assert len(messages) == 1
    job = messages[0].args[0]
    assert job["kind"] == "file"
    assert job["job_id"] == data["job_id"]
    assert job["filename"] == "notes.pdf"
    assert job["collection_name"] == "college-syllabus"
    assert os.path.basename(job["storage_path"]).endswith("-notes.pdf")

    # The stored copy is byte for byte what was uploaded
    with open(job["storage_path"], "rb") as f:
        assert f.read() == pdf_bytes

    # Verify the job record
    record = job_tracker.get_job(data["job_id"])
    assert record["status"] == "pending"
    assert record["job_type"] == "file"
    assert record["metadata"]["filename"] == "notes.pdf"


def test_upload_pdf_with_session(test_client, stub_broker, make_pdf):
    """Test that a session id routes the job to the session's collection."""
    response = test_client.post(
        "/upload/pdf",
        files={"pdf": ("notes.pdf", make_pdf(["Chapter 1"]), "application/pdf")},
        data={"session_id": "alice"},
    )

    assert response.status_code == 200
    assert response.json()["session_id"] == "alice"

    job = queued_messages(stub_broker, "file_upload_queue")[0].args[0]
    assert job["collection_name"] == "college-syllabus-alice"


def test_upload_same_name_twice_gets_distinct_storage(test_client, stub_broker, make_pdf):
    """Test that two uploads with the same name never share a stored file."""
    for _ in range(2):
        response = test_client.post(
            "/upload/pdf",
            files={"pdf": ("notes.pdf", make_pdf(["Chapter 1"]), "application/pdf")},
        )
        assert response.status_code == 200

    messages = queued_messages(stub_broker, "file_upload_queue")
    paths = {message.args[0]["storage_path"] for message in messages}
    assert len(paths) == 2


def test_upload_pdf_without_file(test_client, stub_broker):
    """Test that an upload without a file is rejected and nothing is queued."""
    response = test_client.post("/upload/pdf")

    assert response.status_code == 400
    assert "error" in response.json()
    assert queued_messages(stub_broker, "file_upload_queue") == []


def test_upload_pdf_wrong_type(test_client, stub_broker):
    """Test that a non-PDF upload is rejected."""
    response = test_client.post(
        "/upload/pdf",
        files={"pdf": ("notes.txt", b"plain text", "text/plain")},
    )

    assert response.status_code == 400
    assert "Unsupported file type" in response.json()["error"]
    assert queued_messages(stub_broker, "file_upload_queue") == []


def test_upload_pdf_invalid_session(test_client, stub_broker, make_pdf):
    """Test that a malformed session id is rejected."""
    response = test_client.post(
        "/upload/pdf",
        files={"pdf": ("notes.pdf", make_pdf(["Chapter 1"]), "application/pdf")},
        data={"session_id": "../etc"},
    )

    assert response.status_code == 400
    assert queued_messages(stub_broker, "file_upload_queue") == []


def test_upload_video_link(test_client, stub_broker, job_tracker):
    """Test that a video link is queued on the video lane."""
    response = test_client.post(
        "/upload/ytlink",
        json={"link": "  https://www.youtube.com/watch?v=dQw4w9WgXcQ  "},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Video link submitted successfully"

    messages = queued_messages(stub_broker, "video_link_queue")
    assert len(messages) == 1
    assert messages[0].args[0]["kind"] == "video_link"
    assert messages[0].args[0]["url"] == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    assert job_tracker.get_job(data["job_id"])["job_type"] == "video_link"

    # Other lanes untouched
    assert queued_messages(stub_broker, "file_upload_queue") == []
    assert queued_messages(stub_broker, "repo_queue") == []


def test_upload_repo_link(test_client, stub_broker):
    """Test that a repository link is queued on the repository lane."""
    response = test_client.post(
        "/upload/githubrepo",
        json={"link": "https://github.com/octocat/Hello-World", "session_id": "bob"},
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Repository link submitted successfully"

    messages = queued_messages(stub_broker, "repo_queue")
    assert len(messages) == 1
    assert messages[0].args[0]["kind"] == "repo"
    assert messages[0].args[0]["collection_name"] == "college-syllabus-bob"


def test_upload_links_require_link(test_client, stub_broker):
    """Test that missing or blank links are rejected and nothing is queued."""
    for path in ("/upload/ytlink", "/upload/githubrepo"):
        assert test_client.post(path, json={}).status_code == 400
        assert test_client.post(path, json={"link": "   "}).status_code == 400
        assert test_client.post(path).status_code == 400

    assert queued_messages(stub_broker, "video_link_queue") == []
    assert queued_messages(stub_broker, "repo_queue") == []


def test_delete_collections_is_idempotent(test_client, shared_clients):
    """Test that deleting succeeds whether or not a collection exists."""
    get_vector_store().add_documents([Document(page_content="Some notes", metadata={"loc": {"pageNumber": 1}})])
    assert shared_clients.collection_exists("college-syllabus")

    first = test_client.get("/deleteCollections")
    assert first.status_code == 200
    assert first.json()["message"] == "Collections deleted successfully"
    assert not shared_clients.collection_exists("college-syllabus")

    second = test_client.get("/deleteCollections")
    assert second.status_code == 200
    assert second.json()["message"] == "No collections to delete"


def test_chat_without_material(test_client, mock_chat_model):
    """Test that chatting before any upload still answers, with no documents."""
    response = test_client.get("/chat", params={"message": "What is Newton's second law?"})

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Force equals mass times acceleration (F = ma) 🚀"
    assert data["docs"] == []
    assert data["documents"] == []

    # The model was told there is no context
    messages = mock_chat_model.invoke.call_args[0][0]
    assert "No document context" in messages[0].content


def test_chat_returns_chunks(test_client, shared_clients):
    """Test that the chunks used are returned in both document fields."""
    get_vector_store().add_documents([
        Document(
            page_content="Newton's second law: F = ma",
            metadata={"loc": {"pageNumber": 4}, "source": "physics.pdf"},
        )
    ])

    response = test_client.get("/chat", params={"message": "Newton's second law: F = ma"})

    assert response.status_code == 200
    data = response.json()
    assert len(data["docs"]) == 1
    assert data["docs"] == data["documents"]
    assert data["docs"][0]["pageContent"] == "Newton's second law: F = ma"
    assert data["docs"][0]["metadata"]["loc"]["pageNumber"] == 4


def test_chat_passes_previous_exchange(test_client, mock_chat_model):
    """Test that the previous exchange reaches the model between system prompt and question."""
    response = test_client.get(
        "/chat",
        params={
            "message": "And the third?",
            "previous_message": "What is the second law?",
            "previous_response": "F = ma",
        },
    )

    assert response.status_code == 200
    messages = mock_chat_model.invoke.call_args[0][0]
    assert [m.type for m in messages] == ["system", "human", "ai", "human"]
    assert messages[-1].content == "And the third?"


def test_chat_empty_message(test_client, mock_chat_model):
    """Test that an empty question is rejected without calling the model."""
    assert test_client.get("/chat").status_code == 400
    assert test_client.get("/chat", params={"message": "  "}).status_code == 400
    mock_chat_model.invoke.assert_not_called()


def test_chat_model_failure(test_client, mock_chat_model):
    """Test that a chat model error becomes a 502 with an apology."""
    mock_chat_model.invoke.side_effect = RuntimeError("rate limited")

    response = test_client.get("/chat", params={"message": "What is inertia?"})

    assert response.status_code == 502
    data = response.json()
    assert data["error"] == "The chat model did not answer"
    assert data["message"].startswith("Sorry")
    assert data["docs"] == []


def test_job_status(test_client, make_pdf):
    """Test polling a job record after an upload."""
    response = test_client.post(
        "/upload/pdf",
        files={"pdf": ("notes.pdf", make_pdf(["Chapter 1"]), "application/pdf")},
    )
    job_id = response.json()["job_id"]

    status = test_client.get(f"/jobs/{job_id}")
    assert status.status_code == 200
    assert status.json()["status"] == "pending"
    assert status.json()["job_type"] == "file"

    jobs = test_client.get("/jobs", params={"job_type": "file"})
    assert [job["job_id"] for job in jobs.json()] == [job_id]


def test_job_status_unknown(test_client):
    """Test that an unknown job id gives 404."""
    response = test_client.get("/jobs/does-not-exist")
    assert response.status_code == 404
    assert "not found" in response.json()["error"]
