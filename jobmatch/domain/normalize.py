"""Text normalization helpers shared by deduplication and skill matching."""
import re
from typing import Dict

# Whole-token abbreviations expanded to their canonical skill names.
# 'swift' and 'scala' are already canonical and stay as they are.
SKILL_ABBREVIATIONS: Dict[str, str] = {
    'js': 'javascript',
    'ts': 'typescript',
    'py': 'python',
    'rb': 'ruby',
    'go': 'golang',
    'rs': 'rust',
    'kt': 'kotlin',
    'ml': 'machine learning',
    'pl': 'programming language',
    'hs': 'haskell',
    'clj': 'clojure',
    'erl': 'erlang',
}

_SPECIAL_CHARS = re.compile(r'[^\w\s-]')
_WHITESPACE = re.compile(r'\s+')


def normalize_field(value: str) -> str:
    """Lowercase and trim a field. Internal whitespace is left untouched."""
    return value.lower().strip()


def normalize_text(value: str) -> str:
    """Lowercase, trim and collapse internal whitespace to single spaces."""
    return _WHITESPACE.sub(' ', value.lower().strip())


def normalize_skill(raw: str) -> str:
    """Normalize a skill name into a skill token.

    Special characters other than hyphens are dropped before whitespace is
    collapsed, so the result is stable under repeated normalization.

    Args:
        raw: Skill as written by a user or a job posting

    Returns:
        Normalized skill token
    """
    token = _SPECIAL_CHARS.sub('', raw.lower())
    token = _WHITESPACE.sub(' ', token).strip()
    return SKILL_ABBREVIATIONS.get(token, token)


def normalize_job_data(job) -> Dict[str, str]:
    """Return the comparable title/company/location of a job as plain text."""
    return {
        'title': normalize_text(job.title),
        'company': normalize_text(job.company),
        'location_text': normalize_text(job.location_text),
    }
