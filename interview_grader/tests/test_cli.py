import json

import pytest

from conftest import QUESTION_RECORDS
from interview_grader import cli


@pytest.fixture
def question_bank(tmp_path):
    path = tmp_path / "bank.yaml"
    path.write_text(json.dumps({"questions": QUESTION_RECORDS}))
    return str(path)


@pytest.fixture
def storage(tmp_path, monkeypatch):
    directory = tmp_path / "store"
    monkeypatch.setattr(cli, "get_storage_config", lambda: {"backend": "json", "directory": str(directory)})
    return directory


@pytest.fixture
def submission_file(tmp_path, submit_payload):
    path = tmp_path / "submission.json"
    path.write_text(json.dumps(submit_payload))
    return str(path)


def test_questions_command(question_bank, capsys):
    assert cli.main(["--question-bank", question_bank, "questions", "--theory", "1", "--coding", "1", "--seed", "3"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["totalQuestions"] == 2
    assert output["partB"][0]["id"] == "C1"


def test_score_prints_response(question_bank, submission_file, capsys):
    assert cli.main(["--question-bank", question_bank, "score", submission_file]) == 0

    response = json.loads(capsys.readouterr().out)
    assert response["score"] == 6
    assert response["percentage"] == 30
    assert "persisted" not in response


def test_score_writes_output_file(question_bank, submission_file, tmp_path, capsys):
    out = tmp_path / "result.json"

    assert cli.main(["--question-bank", question_bank, "score", submission_file, "--out", str(out)]) == 0

    assert "Result written to" in capsys.readouterr().out
    assert json.loads(out.read_text())["maxScore"] == 20


def test_score_save_then_inspect(question_bank, submission_file, storage, capsys):
    assert cli.main(["--question-bank", question_bank, "score", submission_file, "--save"]) == 0
    response = json.loads(capsys.readouterr().out)
    assert response["persisted"] is True
    interview_id = response["interviewId"]

    assert cli.main(["list", "--json"]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert [row["id"] for row in rows] == [interview_id]
    assert rows[0]["candidateName"] == "Dana Smith"

    assert cli.main(["show", interview_id]) == 0
    assert json.loads(capsys.readouterr().out)["totalScore"] == 6

    assert cli.main(["--question-bank", question_bank, "stats"]) == 0
    stats = json.loads(capsys.readouterr().out)
    assert stats["totalInterviews"] == 1
    assert stats["totalQuestionPool"] == 3


def test_score_save_failure_exit_code(question_bank, submission_file, storage, capsys):
    storage.mkdir()
    (storage / "interviews.json").write_text("{broken")

    assert cli.main(["--question-bank", question_bank, "score", submission_file, "--save"]) == 1

    captured = capsys.readouterr()
    assert json.loads(captured.out)["persisted"] is False
    assert "Failed to save interview" in captured.err


def test_score_rejects_unreadable_submission(tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2, 3]")

    assert cli.main(["score", str(tmp_path / "missing.json")]) == 2
    assert cli.main(["score", str(bad)]) == 2


def test_list_empty_store(storage, capsys):
    assert cli.main(["list"]) == 0
    assert "No interviews stored." in capsys.readouterr().out


def test_show_unknown_interview(storage, capsys):
    assert cli.main(["show", "nope"]) == 1
    assert "Interview not found" in capsys.readouterr().err


def test_report_command(question_bank, submission_file, storage, tmp_path, capsys):
    cli.main(["--question-bank", question_bank, "score", submission_file, "--save"])
    interview_id = json.loads(capsys.readouterr().out)["interviewId"]

    reports = tmp_path / "reports"
    assert cli.main(["report", interview_id, "--format", "json", "--output-dir", str(reports)]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["success"] is True
    assert report["json_path"].startswith(str(reports))


def test_invalid_question_bank(tmp_path, capsys):
    path = tmp_path / "bank.yaml"
    path.write_text("questions:\n  - {id: T1, question: no part}\n")

    assert cli.main(["--question-bank", str(path), "questions"]) == 2
    assert "Invalid question bank" in capsys.readouterr().err


def test_score_rejects_invalid_submission(question_bank, tmp_path, capsys):
    path = tmp_path / "invalid.json"
    path.write_text(json.dumps({"questions": [{"id": "T1", "text": 123}], "answers": ["volatile"]}))

    assert cli.main(["--question-bank", question_bank, "score", str(path)]) == 2
    assert "Invalid submission" in capsys.readouterr().err


class ClosingStore:
    backend = "memory"

    def __init__(self):
        self.closed = False

    def list_all(self):
        return []

    def get_by_id(self, record_id):
        return None

    def append(self, result):
        raise AssertionError("read commands must not write")

    def close(self):
        self.closed = True


@pytest.mark.parametrize("argv", [["list"], ["show", "nope"], ["stats"], ["report", "nope"]])
def test_read_commands_close_store(question_bank, monkeypatch, argv):
    store = ClosingStore()
    monkeypatch.setattr(cli, "create_store", lambda config: store)

    cli.main(["--question-bank", question_bank] + argv)

    assert store.closed


def test_score_save_closes_store(question_bank, submission_file, storage, monkeypatch, capsys):
    closed = []
    real_create_store = cli.create_store

    def tracking_create_store(config):
        store = real_create_store(config)
        store.close = lambda: closed.append(store.backend)
        return store

    monkeypatch.setattr(cli, "create_store", tracking_create_store)

    assert cli.main(["--question-bank", question_bank, "score", submission_file, "--save"]) == 0
    assert closed == ["json"]
