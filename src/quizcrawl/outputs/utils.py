"""Dispatch helpers for formatting and saving extracted questions."""

from quizcrawl.models import Question
from quizcrawl.outputs.json_output import format_json, save_json
from quizcrawl.outputs.markdown_output import format_markdown, save_markdown

OUTPUT_FORMATS = ('json', 'markdown')


def format_content(
    url: str | None, domain: str | None, questions: list[Question], output_format: str = 'json'
) -> str | dict:
    """Format questions in the specified format.

    Args:
        url: Source URL
        domain: Domain name
        questions: Extracted questions
        output_format: 'json' or 'markdown'. Defaults to 'json'.

    Returns:
        Formatted content - dict for JSON, string for Markdown.

    """
    if output_format == 'markdown':
        return format_markdown(url, domain, questions)
    return format_json(url, domain, questions)


def save_formatted_content(
    filepath: str, url: str | None, domain: str | None, questions: list[Question], output_format: str = 'json'
) -> str:
    """Format and save questions to ``filepath``.

    Returns:
        Path to the saved file.

    Raises:
        ValueError: If the output format is unknown

    """
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f'Unknown output format: {output_format}. Choose from: {list(OUTPUT_FORMATS)}')

    if output_format == 'markdown':
        save_markdown(filepath, url, domain, questions)
    else:
        save_json(filepath, url, domain, questions)

    return filepath
