"""Markdown output formatter for extracted questions."""

import os
from datetime import datetime

from quizcrawl.models import Question


def format_markdown(url: str | None, domain: str | None, questions: list[Question]) -> str:
    """Format questions as a Markdown quiz sheet.

    Correct answers are marked with a check mark; optional fields are
    only written when present.

    Args:
        url: Source URL, if the page was fetched
        domain: Domain name, if known
        questions: Extracted questions

    Returns:
        Formatted markdown string.

    """
    lines = [f'# Questions from {domain or "local file"}', '']

    lines.append('---')
    if url:
        lines.append(f'**Source:** {url}')
    lines.append(f'**Questions:** {len(questions)}')
    lines.append(f'**Extracted:** {datetime.now().isoformat()}')
    lines.append('---')
    lines.append('')

    for question in questions:
        lines.extend(_format_question(question))

    return '\n'.join(lines)


def save_markdown(filepath: str, url: str | None, domain: str | None, questions: list[Question]):
    """Format and save questions as a Markdown file, creating parent directories."""
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(filepath, 'w', encoding='utf-8') as f:
        f.write(format_markdown(url, domain, questions))


def _format_question(question: Question) -> list[str]:
    lines = [f'## {question.question_number}', '']

    if question.paragraph:
        lines.extend([f'> {question.paragraph}', ''])

    lines.extend([question.question_text, ''])

    if question.image:
        lines.extend([f'![{question.question_number}]({question.image})', ''])

    for answer in question.answers:
        marker = ' ✓' if answer.is_correct else ''
        lines.append(f'- **{answer.label}.** {answer.text}{marker}')
    if question.answers:
        lines.append('')

    if question.explanation:
        lines.extend([f'**Explanation:** {question.explanation}', ''])

    return lines
