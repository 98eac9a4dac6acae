"""
Constants used throughout the Interview Grader application.

The scoring tables below are the fixed configuration of the answer evaluator.
Changing a threshold here changes every score the engine produces, so they are
kept in one place instead of inline in the evaluator.
"""
from interview_grader.models.rubric import Part
from interview_grader.models.scoring import (
    ComponentWeights,
    LengthTier,
    ScoringProfile,
    StructureMarker,
)

DEFAULT_MAX_SCORE = 10
DEFAULT_KEYWORD_COVERAGE = 50.0

# Structural markers shared by both parts
STRUCTURE_MARKERS = (
    StructureMarker(name="examples", phrases=("example", "for instance"), bonus=5),
    StructureMarker(name="enumeration", phrases=("1.", "2.", "first", "second"), bonus=5),
    StructureMarker(name="reasoning", phrases=("because", "therefore", "however"), bonus=3),
)

THEORY_VOCABULARY = (
    "jvm", "garbage", "collection", "heap", "stack", "thread", "synchronization", "concurrent",
    "performance", "memory", "algorithm", "complexity", "framework", "spring", "hibernate",
    "interface", "abstract", "inheritance", "polymorphism", "encapsulation", "volatile",
    "atomic", "deadlock", "optimization", "cache", "transaction", "annotation", "reflection",
)

CODING_VOCABULARY = (
    "class", "method", "function", "variable", "array", "list", "map", "set", "queue",
    "stack", "tree", "graph", "sort", "search", "loop", "recursion", "iteration",
    "implementation", "algorithm", "complexity", "optimization", "data structure",
)

THEORY_PROFILE = ScoringProfile(
    length_tiers=(
        LengthTier(min_chars=300, points=35),
        LengthTier(min_chars=200, points=30),
        LengthTier(min_chars=100, points=20),
        LengthTier(min_chars=50, points=10),
    ),
    length_floor=5,
    vocabulary=THEORY_VOCABULARY,
    depth_multiplier=2,
    depth_cap=25,
    weights=ComponentWeights(keyword=0.5, length=0.25, depth=0.2, structure=0.05),
    structure_markers=STRUCTURE_MARKERS,
    default_coverage=DEFAULT_KEYWORD_COVERAGE,
)

CODING_PROFILE = ScoringProfile(
    length_tiers=(
        LengthTier(min_chars=200, points=30),
        LengthTier(min_chars=100, points=25),
        LengthTier(min_chars=50, points=15),
    ),
    length_floor=8,
    vocabulary=CODING_VOCABULARY,
    depth_multiplier=3,
    depth_cap=25,
    weights=ComponentWeights(keyword=0.4, length=0.3, depth=0.25, structure=0.05),
    structure_markers=STRUCTURE_MARKERS,
    default_coverage=DEFAULT_KEYWORD_COVERAGE,
)

SCORING_PROFILES = {
    Part.THEORY: THEORY_PROFILE,
    Part.CODING: CODING_PROFILE,
}

# Integrity penalties
VIOLATION_PENALTY_PER_RECORD = 2
VIOLATION_PENALTY_CAP = 15
TAB_SWITCH_PENALTY_PER_SWITCH = 3
TAB_SWITCH_PENALTY_CAP = 25
TERMINATION_PENALTY = 30
TAB_SWITCH_VIOLATION_THRESHOLD = 2

# Overall assessment bands, highest first
ASSESSMENT_BANDS = (
    (80, "Excellent Java knowledge"),
    (65, "Good Java understanding with room for improvement"),
    (0, "Needs significant improvement in Java concepts and coding"),
)

# Feedback text
NO_ANSWER_FEEDBACK = "No answer provided"
NO_ANSWER_ANALYSIS = "Answer not submitted"
UNSCORABLE_FEEDBACK = "Question not found in rubric catalog"
UNSCORABLE_ANALYSIS = "Answer could not be scored: no rubric is registered for question {question_id}"

FALLBACK_CATEGORY = "General"
DISPLAY_QUESTION_LENGTH = 60

PART_TITLES = {
    Part.THEORY: "Theory & Conceptual Knowledge",
    Part.CODING: "Practical Coding Challenges",
}

PART_DESCRIPTIONS = {
    Part.THEORY: "Advanced Java concepts, JVM internals, concurrency, frameworks, and system design",
    Part.CODING: "Algorithm implementation, data structures, design patterns, and coding problems",
}

PART_TOPICS = {
    Part.THEORY: [
        "JVM Internals & Memory", "Concurrency & Performance", "Advanced Java 8+ Features",
        "Frameworks & Persistence", "System Design & Scalability", "JVM & Tooling",
    ],
    Part.CODING: [
        "Arrays & Strings", "Collections & Data Structures", "Algorithms",
        "OOP & Design Patterns", "Concurrency & File Handling", "Problem Solving",
    ],
}

# Error messages
ERROR_INTERVIEW_NOT_FOUND = "Interview not found"
ERROR_SAVE_FAILED = "Failed to save interview results"
ERROR_LOAD_FAILED = "Failed to load interviews"
ERROR_NOT_PENDING = "No pending result for this interview"
