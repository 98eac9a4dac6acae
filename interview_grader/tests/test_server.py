import pytest
from fastapi.testclient import TestClient

from conftest import FIXED_ID
from interview_grader.core.assembler import SessionAssembler
from interview_grader.core.storage import JsonFileResultStore, PersistenceError, ResultStore
from interview_grader.server import create_app, limiter
from interview_grader.utils.constants import ERROR_NOT_PENDING, ERROR_SAVE_FAILED


class FailingStore(ResultStore):
    backend = "failing"

    def _write(self, record):
        raise PersistenceError("disk full")

    def list_all(self):
        raise PersistenceError("disk full")

    def get_by_id(self, record_id):
        raise PersistenceError("disk full")


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def store(tmp_path):
    return JsonFileResultStore(str(tmp_path))


@pytest.fixture
def client(catalog, store, assembler):
    with TestClient(create_app(catalog=catalog, store=store, assembler=assembler)) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["storage"] == "json"
    assert body["pendingResults"] == 0
    assert body["totalQuestions"] == 3
    assert body["questionStructure"]["Part A (Theory)"]["count"] == 2
    assert body["questionStructure"]["Part B (Coding)"]["count"] == 1


def test_questions(client):
    response = client.get("/questions", params={"theoryCount": 1, "codingCount": 1, "seed": 7})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["totalQuestions"] == 2
    assert body["partA"][0]["id"] in ("T1", "T2")
    assert body["partB"][0]["id"] == "C1"


def test_questions_rejects_negative_counts(client):
    assert client.get("/questions", params={"theoryCount": -1}).status_code == 422


def test_submit_scores_and_persists(client, store, submit_payload):
    response = client.post("/interview/submit", json=submit_payload)

    assert response.status_code == 200
    body = response.json()
    assert body["persisted"] is True
    assert body["interviewId"] == FIXED_ID
    assert body["score"] == 6
    assert body["maxScore"] == 20
    assert body["percentage"] == 30
    assert body["status"] == "completed"
    assert [record["id"] for record in store.list_all()] == [FIXED_ID]


def test_submit_with_integrity_infractions(client, submit_payload):
    submit_payload["tabSwitchCount"] = 2
    submit_payload["violations"] = [{"type": "tab_switch", "timestamp": "2024-01-01T00:10:00Z"}]

    body = client.post("/interview/submit", json=submit_payload).json()

    assert body["interviewStatus"] == "completed_with_violations"
    assert body["penalties"]["totalPenalty"] == 8
    assert body["score"] == 0
    assert body["partAScore"] == 20
    assert body["theoryScore"] == 60


def test_submit_requires_json_object(client):
    assert client.post("/interview/submit", json=["not", "an", "object"]).status_code == 422


def test_admin_views(client, submit_payload):
    client.post("/interview/submit", json=submit_payload)

    rows = client.get("/admin/interviews").json()
    assert len(rows) == 1
    assert rows[0]["candidateName"] == "Dana Smith"
    assert rows[0]["score"] == "6/20 (30%)"

    record = client.get(f"/admin/interviews/{FIXED_ID}").json()
    assert record["totalScore"] == 6
    assert record["submission"]["candidateInfo"]["email"] == "dana@example.com"

    stats = client.get("/admin/stats").json()
    assert stats["totalInterviews"] == 1
    assert stats["averageScore"] == 30
    assert stats["totalQuestionPool"] == 3


def test_unknown_interview_is_404(client):
    response = client.get("/admin/interviews/does-not-exist")

    assert response.status_code == 404
    assert response.json()["detail"] == "Interview not found"


def test_failed_persist_keeps_result_for_retry(catalog, assembler, tmp_path, submit_payload):
    app = create_app(catalog=catalog, store=FailingStore(), assembler=assembler)
    with TestClient(app) as client:
        response = client.post("/interview/submit", json=submit_payload)

        assert response.status_code == 503
        body = response.json()
        assert body["error"] == ERROR_SAVE_FAILED
        assert body["persisted"] is False
        assert body["score"] == 6
        assert client.get("/health").json()["pendingResults"] == 1

        assert client.post(f"/interview/{FIXED_ID}/persist").status_code == 503

        working = JsonFileResultStore(str(tmp_path))
        client.app.state.store = working
        retry = client.post(f"/interview/{FIXED_ID}/persist")

        assert retry.status_code == 200
        assert retry.json() == {"persisted": True, "interviewId": FIXED_ID}
        assert working.get_by_id(FIXED_ID)["totalScore"] == 6

        again = client.post(f"/interview/{FIXED_ID}/persist")
        assert again.status_code == 404
        assert again.json()["detail"] == ERROR_NOT_PENDING


def test_storage_read_failure_is_500(catalog, assembler):
    with TestClient(create_app(catalog=catalog, store=FailingStore(), assembler=assembler)) as client:
        assert client.get("/admin/interviews").status_code == 500
        assert client.get("/admin/stats").status_code == 500


def test_pending_results_are_bounded(catalog, submit_payload):
    ids = iter(["first", "second", "third"])
    assembler = SessionAssembler(catalog, id_factory=lambda: next(ids))
    app = create_app(catalog=catalog, store=FailingStore(), assembler=assembler, max_pending=2)

    with TestClient(app) as client:
        for _ in range(3):
            assert client.post("/interview/submit", json=submit_payload).status_code == 503

        assert client.get("/health").json()["pendingResults"] == 2
        assert list(client.app.state.pending) == ["second", "third"]
        assert client.post("/interview/first/persist").status_code == 404
