"""Tests for fuzzy duplicate detection."""
import pytest
from jobmatch.domain.job import Job, JobSignature
from jobmatch.domain.deduplication import (
    JobDeduplicator,
    filter_duplicates,
    group_similar,
    is_duplicate,
    job_similarity,
    string_similarity,
)


@pytest.fixture
def acme():
    return JobSignature(title="Software Engineer", company="Acme Corp", location_text="Mumbai")


@pytest.fixture
def acme_long():
    return JobSignature(title="Software Engineer", company="Acme Corporation", location_text="Mumbai")


@pytest.fixture
def globex():
    return JobSignature(title="Data Scientist", company="Globex", location_text="Berlin")


class TestStringSimilarity:
    """Jaro-Winkler similarity."""

    def test_classic_transposition_example(self):
        assert string_similarity("MARTHA", "MARHTA") == pytest.approx(0.9611, abs=1e-4)

    def test_classic_partial_match_example(self):
        assert string_similarity("DIXON", "DICKSONX") == pytest.approx(0.8133, abs=1e-4)

    def test_prefix_bonus(self):
        # jaro = (1 + 4/6 + 1) / 3, plus 0.1 * 4 * (1 - jaro)
        assert string_similarity("abcd", "abcdxy") == pytest.approx(0.93333, abs=1e-5)

    def test_case_and_outer_whitespace_ignored(self):
        assert string_similarity("  Acme ", "ACME") == 1.0

    def test_empty_string_scores_zero(self):
        assert string_similarity("", "acme") == 0.0
        assert string_similarity("acme", "   ") == 0.0

    def test_no_common_characters(self):
        assert string_similarity("abc", "xyz") == 0.0


class TestIsDuplicate:
    """Weighted duplicate decision."""

    def test_company_variant_is_duplicate(self, acme, acme_long):
        assert is_duplicate(acme, acme_long, 0.8)
        assert not is_duplicate(acme, acme_long, 0.99)

    def test_weighted_score(self, acme, acme_long):
        # Only the company differs: 0.5 + 0.3 * 0.9125 + 0.2
        assert job_similarity(acme, acme_long) == pytest.approx(0.97375)

    def test_self_is_duplicate(self, acme, globex):
        for signature in (acme, globex):
            assert is_duplicate(signature, signature, 1.0)

    def test_symmetric(self, acme, acme_long, globex):
        pairs = [(acme, acme_long), (acme, globex), (acme_long, globex)]
        for a, b in pairs:
            for threshold in (0.8, 0.95, 0.99):
                assert is_duplicate(a, b, threshold) == is_duplicate(b, a, threshold)

    def test_different_jobs_not_duplicates(self, acme, globex):
        assert not is_duplicate(acme, globex)

    def test_accepts_full_job_records(self):
        job1 = Job(title="Senior Engineer", company="TechCorp", location_text="Remote")
        job2 = Job(title="senior engineer", company="techcorp ", location_text="remote")
        assert is_duplicate(job1, job2)


class TestFilterDuplicates:
    """Greedy first-seen-wins deduplication."""

    def test_first_seen_wins(self, acme, acme_long, globex):
        assert filter_duplicates([acme, acme_long, globex]) == [acme, globex]

    def test_order_preserved(self, acme, acme_long, globex):
        assert filter_duplicates([globex, acme_long, acme]) == [globex, acme_long]

    def test_empty_input(self):
        assert filter_duplicates([]) == []

    def test_compares_against_kept_jobs_only(self):
        a = JobSignature("Engineer", "Acme", "abcd")
        b = JobSignature("Engineer", "Acme", "abcdxy")
        c = JobSignature("Engineer", "Acme", "abcdxyzw")
        # a~b and b~c hold at this threshold, a~c does not
        assert filter_duplicates([a, c, b], threshold=0.984) == [a, c]


class TestGroupSimilar:
    """Seed-based grouping."""

    def test_every_job_in_exactly_one_group(self, acme, acme_long, globex):
        groups = group_similar([acme, globex, acme_long])
        assert groups == [[acme, acme_long], [globex]]

    def test_identical_postings_grouped(self):
        x1 = JobSignature("Backend Developer", "Initech", "Austin")
        x2 = JobSignature("Backend Developer", "Initech", "Austin", external_url="https://b.example")
        y1 = JobSignature("Product Designer", "Hooli", "Palo Alto")
        y2 = JobSignature("Product Designer", "Hooli", "Palo Alto")
        assert group_similar([x1, y1, x2, y2]) == [[x1, x2], [y1, y2]]

    def test_absorbs_only_seed_matches(self):
        a = JobSignature("Engineer", "Acme", "abcd")
        b = JobSignature("Engineer", "Acme", "abcdxy")
        c = JobSignature("Engineer", "Acme", "abcdxyzw")
        # c matches b but not the seed a, so it starts its own group
        assert group_similar([a, c, b], threshold=0.984) == [[a, b], [c]]

    def test_empty_input(self):
        assert group_similar([]) == []


class TestJobDeduplicator:
    """Test the configurable deduplicator."""

    @pytest.fixture
    def deduplicator(self):
        return JobDeduplicator(similarity_threshold=0.8)

    def test_find_duplicates_in_list(self, deduplicator, acme, acme_long, globex):
        duplicates = deduplicator.find_duplicates([acme, globex, acme_long])
        assert len(duplicates) == 1
        first, second, score = duplicates[0]
        assert (first, second) == (acme, acme_long)
        assert score >= 0.8

    def test_deduplicate_removes_duplicates(self, deduplicator, acme, acme_long, globex):
        unique_jobs = deduplicator.deduplicate([acme, acme_long, globex])
        assert unique_jobs == [acme, globex]

    def test_high_threshold_keeps_variants(self, acme, acme_long):
        deduplicator = JobDeduplicator(similarity_threshold=0.99)
        assert deduplicator.deduplicate([acme, acme_long]) == [acme, acme_long]

    def test_group(self, deduplicator, acme, acme_long, globex):
        assert deduplicator.group([acme, acme_long, globex]) == [[acme, acme_long], [globex]]
