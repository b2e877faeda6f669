"""Question catalog: the immutable, ordered question set a session plays through.

The session only ever reads the catalog by index. Questions can come from the
built-in sample set, a JSON file, or the ``question`` table.
"""
import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from .errors import CatalogError


@dataclass(frozen=True)
class Question:
    id: Any
    text: str
    options: Tuple[str, ...]
    correct_option_index: int

    def to_public_dict(self) -> Dict[str, Any]:
        # Never includes the correct answer
        return {'id': self.id, 'text': self.text, 'options': list(self.options)}


SAMPLE_QUESTIONS: List[Dict[str, Any]] = [
    {
        'id': 1,
        'text': 'Which hook is used to manage state in a React function component?',
        'options': ['useEffect', 'useState', 'useContext', 'useRef'],
        'correctOptionIndex': 1,
    },
    {
        'id': 2,
        'text': 'What prop is required to render a list with stable identity and avoid re-mounts?',
        'options': ['id', 'key', 'index', 'ref'],
        'correctOptionIndex': 1,
    },
    {
        'id': 3,
        'text': 'Which hook runs after paint and is suitable for non-blocking effects?',
        'options': ['useEffect', 'useLayoutEffect', 'useMemo', 'useCallback'],
        'correctOptionIndex': 0,
    },
    {
        'id': 4,
        'text': 'What should you avoid mutating directly to maintain predictability?',
        'options': ['Props and state', 'DOM nodes', 'Context value', 'All of the above'],
        'correctOptionIndex': 3,
    },
]


class QuestionCatalog(Sequence):
    """Read-only ordered sequence of questions."""

    def __init__(self, questions: Iterable[Question] = ()):
        self._questions = tuple(questions)
        seen = set()
        for q in self._questions:
            if q.id in seen:
                raise CatalogError(f"duplicate question id {q.id!r}")
            seen.add(q.id)

    def __getitem__(self, index):
        return self._questions[index]

    def __len__(self) -> int:
        return len(self._questions)

    def in_bounds(self, index: int) -> bool:
        return 0 <= index < len(self._questions)

    def to_public_list(self) -> List[Dict[str, Any]]:
        return [q.to_public_dict() for q in self._questions]


def question_from_dict(data: Dict[str, Any]) -> Question:
    """Build a validated ``Question`` from a JSON-style mapping.

    Accepts ``correctOptionIndex`` or the older ``answerIndex`` key.
    """
    if not isinstance(data, dict):
        raise CatalogError('question entries must be objects')
    qid = data.get('id')
    if qid is None:
        raise CatalogError('question is missing an id')
    if isinstance(qid, bool) or not isinstance(qid, (int, str)):
        raise CatalogError(f"question id {qid!r} must be a string or integer")
    text = data.get('text')
    if not isinstance(text, str) or not text.strip():
        raise CatalogError(f"question {qid!r} has no text")
    options = data.get('options')
    if not isinstance(options, (list, tuple)) or len(options) < 2:
        raise CatalogError(f"question {qid!r} needs at least two options")
    if not all(isinstance(o, str) for o in options):
        raise CatalogError(f"question {qid!r} has non-string options")
    correct = data.get('correctOptionIndex', data.get('answerIndex'))
    if isinstance(correct, bool) or not isinstance(correct, int):
        raise CatalogError(f"question {qid!r} has no integer correctOptionIndex")
    if not 0 <= correct < len(options):
        raise CatalogError(f"question {qid!r} correctOptionIndex {correct} out of range")
    return Question(id=qid, text=text.strip(), options=tuple(options), correct_option_index=correct)


def catalog_from_dicts(items: Iterable[Dict[str, Any]]) -> QuestionCatalog:
    return QuestionCatalog(question_from_dict(item) for item in items)


def load_sample_catalog() -> QuestionCatalog:
    return catalog_from_dicts(SAMPLE_QUESTIONS)


def read_question_file(path: str) -> List[Dict[str, Any]]:
    try:
        with open(path, encoding='utf-8') as fh:
            data = json.load(fh)
    except OSError as exc:
        raise CatalogError(f"cannot read question file {path}: {exc}") from exc
    except ValueError as exc:
        raise CatalogError(f"question file {path} is not valid JSON: {exc}") from exc
    if isinstance(data, dict):
        data = data.get('questions')
    if not isinstance(data, list):
        raise CatalogError(f"question file {path} must contain a list of questions")
    return data


def load_file_catalog(path: str) -> QuestionCatalog:
    return catalog_from_dicts(read_question_file(path))


def load_database_catalog() -> QuestionCatalog:
    """Load questions from the ``question`` table; needs an app context."""
    from quizroom.models import QuestionRecord

    records = QuestionRecord.query.order_by(QuestionRecord.position, QuestionRecord.id).all()
    return catalog_from_dicts(r.to_dict() for r in records)


def load_catalog(config) -> QuestionCatalog:
    source = (config.get('QUESTION_SOURCE') or 'sample').lower()
    if source == 'sample':
        return load_sample_catalog()
    if source == 'file':
        path = config.get('QUESTION_SET_PATH')
        if not path:
            raise CatalogError('QUESTION_SOURCE=file requires QUESTION_SET_PATH')
        return load_file_catalog(path)
    if source == 'database':
        return load_database_catalog()
    raise CatalogError(f"unknown QUESTION_SOURCE {source!r}")
