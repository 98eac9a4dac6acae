import pytest

from interview_grader.core.assembler import SessionAssembler
from interview_grader.core.catalog import RubricCatalog

FIXED_ID = "1700000000000"
FIXED_TIMESTAMP = "2024-01-01T00:00:00+00:00"

WORKED_ANSWER = "This class is thread-safe because of synchronization"

QUESTION_RECORDS = [
    {
        "id": "T1",
        "part": "A",
        "topic": "Concurrency",
        "question": "Is this class thread-safe? Explain what makes it so.",
        "keywords": ["thread-safe", "synchronization", "performance"],
        "expectedAnswer": "It is thread-safe because access is guarded by synchronization.",
        "maxScore": 10,
    },
    {
        "id": "T2",
        "part": "A",
        "topic": "Spring Framework",
        "question": "How does Spring handle circular dependencies?",
        "keywords": ["circular dependencies", "early references", "proxies"],
        "maxScore": 10,
    },
    {
        "id": "C1",
        "part": "B",
        "topic": "Binary Search",
        "question": "Implement binary search iteratively over a sorted array of integers.",
        "keywords": ["binary search", "iterative", "sorted array"],
        "language": "java",
        "starterCode": "public class BinarySearch {}",
        "maxScore": 10,
    },
]


@pytest.fixture
def catalog():
    return RubricCatalog.from_records(QUESTION_RECORDS)


@pytest.fixture
def assembler(catalog):
    return SessionAssembler(catalog, id_factory=lambda: FIXED_ID, clock=lambda: FIXED_TIMESTAMP)


@pytest.fixture
def submit_payload():
    """Dashboard submit payload: worked-example theory answer, empty coding answer."""
    return {
        "candidateInfo": {"name": "Dana Smith", "email": "dana@example.com", "position": "Backend Engineer"},
        "questions": [
            {"id": "T1", "text": QUESTION_RECORDS[0]["question"], "part": "A"},
            {"id": "C1", "text": QUESTION_RECORDS[2]["question"], "part": "B"},
        ],
        "answers": [WORKED_ANSWER, ""],
        "violations": [],
        "tabSwitchCount": 0,
        "duration": 1200,
        "terminated": False,
    }
