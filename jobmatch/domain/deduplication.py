"""Fingerprinting and fuzzy duplicate detection for job postings."""
import hashlib
import logging
from typing import List, Sequence, Tuple, TypeVar

from .normalize import normalize_field

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_THRESHOLD = 0.8

# Weights applied to title, company and location similarity.
TITLE_WEIGHT = 0.5
COMPANY_WEIGHT = 0.3
LOCATION_WEIGHT = 0.2


def compute_fingerprint(signature) -> str:
    """Compute the identity hash of a job posting.

    Title, company and location are lowercased and trimmed, then joined with
    pipes and hashed with SHA-256. ``external_url`` does not contribute.

    Args:
        signature: Any object with ``title``, ``company`` and ``location_text``

    Returns:
        64 character lowercase hex digest
    """
    composite = '|'.join([
        normalize_field(signature.title),
        normalize_field(signature.company),
        normalize_field(signature.location_text),
    ])
    return hashlib.sha256(composite.encode('utf-8')).hexdigest()


def string_similarity(str1: str, str2: str) -> float:
    """Jaro-Winkler similarity of two strings after lowercasing and trimming.

    Args:
        str1: First string
        str2: Second string

    Returns:
        Similarity score between 0 and 1
    """
    s1 = normalize_field(str1)
    s2 = normalize_field(str2)

    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    match_window = max(len(s1), len(s2)) // 2 - 1
    s1_matches = [False] * len(s1)
    s2_matches = [False] * len(s2)

    matches = 0
    for i, char in enumerate(s1):
        start = max(0, i - match_window)
        end = min(i + match_window + 1, len(s2))
        for j in range(start, end):
            if s2_matches[j] or char != s2[j]:
                continue
            s1_matches[i] = True
            s2_matches[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    transpositions = 0
    k = 0
    for i, char in enumerate(s1):
        if not s1_matches[i]:
            continue
        while not s2_matches[k]:
            k += 1
        if char != s2[k]:
            transpositions += 1
        k += 1

    jaro = (
        matches / len(s1)
        + matches / len(s2)
        + (matches - transpositions / 2) / matches
    ) / 3

    prefix = 0
    for i in range(min(len(s1), len(s2), 4)):
        if s1[i] != s2[i]:
            break
        prefix += 1

    return jaro + prefix * 0.1 * (1 - jaro)


def job_similarity(job1, job2) -> float:
    """Weighted similarity of two jobs over title, company and location."""
    return (
        TITLE_WEIGHT * string_similarity(job1.title, job2.title)
        + COMPANY_WEIGHT * string_similarity(job1.company, job2.company)
        + LOCATION_WEIGHT * string_similarity(job1.location_text, job2.location_text)
    )


def is_duplicate(job1, job2, threshold: float = DEFAULT_THRESHOLD) -> bool:
    """Check whether two jobs are fuzzy duplicates of each other."""
    return job_similarity(job1, job2) >= threshold


def filter_duplicates(jobs: Sequence[T], threshold: float = DEFAULT_THRESHOLD) -> List[T]:
    """Remove duplicates, keeping the first occurrence and the input order.

    Every job is compared against the jobs kept so far, so this is quadratic
    in the batch size. Only use it on a single batch or result page.
    """
    unique_jobs: List[T] = []
    for job in jobs:
        if not any(is_duplicate(job, kept, threshold) for kept in unique_jobs):
            unique_jobs.append(job)
    return unique_jobs


def group_similar(jobs: Sequence[T], threshold: float = DEFAULT_THRESHOLD) -> List[List[T]]:
    """Cluster jobs into groups of near-duplicates.

    Each ungrouped job seeds a new group and absorbs every later ungrouped job
    that matches the seed itself. Matches between other members are not
    followed.
    """
    groups: List[List[T]] = []
    grouped = [False] * len(jobs)

    for i, seed in enumerate(jobs):
        if grouped[i]:
            continue
        grouped[i] = True
        group = [seed]
        for j in range(i + 1, len(jobs)):
            if not grouped[j] and is_duplicate(seed, jobs[j], threshold):
                group.append(jobs[j])
                grouped[j] = True
        groups.append(group)

    return groups


class JobDeduplicator:
    """Handles fuzzy duplicate detection for job postings."""

    def __init__(self, similarity_threshold: float = DEFAULT_THRESHOLD):
        """Initialize the deduplicator.

        Args:
            similarity_threshold: Minimum weighted similarity (0-1) to consider jobs duplicates
        """
        self.similarity_threshold = similarity_threshold

    def fingerprint(self, job) -> str:
        return compute_fingerprint(job)

    def calculate_similarity(self, job1, job2) -> float:
        """Calculate the weighted similarity score between two jobs."""
        return job_similarity(job1, job2)

    def is_duplicate(self, job1, job2) -> bool:
        return is_duplicate(job1, job2, self.similarity_threshold)

    def find_duplicates(self, jobs: Sequence[T]) -> List[Tuple[T, T, float]]:
        """Find all duplicate pairs in a list of jobs.

        Args:
            jobs: List of jobs to check for duplicates

        Returns:
            List of tuples (job1, job2, similarity_score) for duplicate pairs
        """
        duplicates = []
        for i in range(len(jobs)):
            for j in range(i + 1, len(jobs)):
                similarity = job_similarity(jobs[i], jobs[j])
                if similarity >= self.similarity_threshold:
                    duplicates.append((jobs[i], jobs[j], similarity))
        return duplicates

    def deduplicate(self, jobs: Sequence[T]) -> List[T]:
        """Remove duplicates from a list of jobs, keeping the first occurrence."""
        unique_jobs = filter_duplicates(jobs, self.similarity_threshold)
        removed = len(jobs) - len(unique_jobs)
        if removed:
            logger.info(f"Removed {removed} duplicate jobs out of {len(jobs)}")
        return unique_jobs

    def group(self, jobs: Sequence[T]) -> List[List[T]]:
        """Group near-duplicate jobs around their first occurrence."""
        groups = group_similar(jobs, self.similarity_threshold)
        logger.debug(f"Grouped {len(jobs)} jobs into {len(groups)} groups")
        return groups
