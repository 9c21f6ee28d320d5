"""Output formatting for extracted questions."""

from quizcrawl.outputs.json_output import load_json
from quizcrawl.outputs.utils import OUTPUT_FORMATS, format_content, save_formatted_content

__all__ = ['OUTPUT_FORMATS', 'format_content', 'load_json', 'save_formatted_content']
