"""JSON export and import of extracted questions."""

import json
import os
from datetime import datetime
from typing import Any

from quizcrawl.models import Answer, Question
from quizcrawl.normalizer import answer_label


def format_json(url: str | None, domain: str | None, questions: list[Question]) -> dict[str, Any]:
    """Format questions in the flat export shape with metadata.

    Args:
        url: Source URL, if the page was fetched
        domain: Domain name, if known
        questions: Extracted questions

    Returns:
        Dictionary ready for JSON serialization.

    """
    return {
        'url': url,
        'domain': domain,
        'extracted_at': datetime.now().isoformat(),
        'count': len(questions),
        'questions': [question.to_export() for question in questions],
    }


def save_json(filepath: str, url: str | None, domain: str | None, questions: list[Question]):
    """Format and save questions as a JSON file, creating parent directories.

    Args:
        filepath: Path to save the file
        url: Source URL
        domain: Domain name
        questions: Extracted questions

    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    data = format_json(url, domain, questions)

    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def question_from_export(position: int, record: dict[str, Any]) -> Question:
    """Rebuild a Question from one exported record.

    The export carries no labels or ids, so both are rebuilt from positions.

    Args:
        position: 1-based position of the record in the export
        record: ``{text, explanation, paragraph: {text}, image, answers: [{text, correct}]}``

    Returns:
        The rebuilt question.

    """
    raw_answers = record.get('answers') or []
    answers = tuple(
        Answer(label=answer_label(index), text=item.get('text', ''), is_correct=bool(item.get('correct')))
        for index, item in enumerate(raw_answers)
    )
    paragraph = record.get('paragraph')
    if isinstance(paragraph, dict):
        paragraph = paragraph.get('text')

    return Question(
        id=str(position),
        question_number=f'Question {position}',
        question_text=record.get('text') or '',
        answers=answers,
        explanation=record.get('explanation') or None,
        paragraph=paragraph or None,
        image=record.get('image') or None,
        has_multiple_correct=sum(1 for answer in answers if answer.is_correct) > 1,
    )


def load_json(filepath: str) -> list[Question]:
    """Load questions from a JSON export.

    Accepts both the full export document and a bare list of records.

    Args:
        filepath: Path to the export

    Returns:
        Questions in file order.

    """
    with open(filepath, encoding='utf-8') as f:
        data = json.load(f)

    records = data.get('questions', []) if isinstance(data, dict) else data
    return [question_from_export(position, record) for position, record in enumerate(records, 1)]
