"""Answer evaluation and session integrity engine."""
from interview_grader.core.aggregator import Aggregation, aggregate
from interview_grader.core.assembler import SessionAssembler
from interview_grader.core.catalog import CatalogValidationError, RubricCatalog
from interview_grader.core.classifier import Classifier, classify
from interview_grader.core.evaluator import AnswerEvaluator, evaluate
from interview_grader.core.integrity import IntegrityMonitor, compute_penalties, resolve_status
from interview_grader.core.storage import (
    JsonFileResultStore,
    MongoResultStore,
    PersistenceError,
    PersistOutcome,
    create_store,
)
