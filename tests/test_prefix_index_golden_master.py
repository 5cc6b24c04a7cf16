"""
Golden Master Test Suite for the Prefix Index

The expected query results of a fixed name collection are recorded below, so changes to
ingestion or the search algorithm cannot silently change what callers get back.

Cases covered:
- Prefixes ending exactly at a part boundary ("Ivanov" vs "Ivanov ")
- Neighbouring surnames sharing a bucket (Ivanov / Ivanova / Ivanenko)
- Records with missing given name or patronymic
- Non-Latin leading characters (Cyrillic buckets)
- Misses inside an existing bucket and in a missing bucket
"""

import sys
from pathlib import Path
from typing import Dict, List
import pytest

# Add the parent directory to path to import nameindex
sys.path.insert(0, str(Path(__file__).parent.parent))

from nameindex.prefix_index import PrefixIndex, build_index


NAME_RECORDS = [
    {"surname": "Ivanov", "given": "Ivan", "patronymic": "Ivanovich"},
    {"surname": "Ivanov", "given": "Petr", "patronymic": "Sergeevich"},
    {"surname": "Ivanova", "given": "Maria"},
    {"surname": "Ivanova", "given": "Anna", "patronymic": "Olegovna"},
    {"surname": "Ivanenko", "patronymic": "Ivanovich"},
    {"given": "Ivan", "patronymic": "Petrovich"},
    {"surname": "Petrov", "given": "Petr"},
    {"surname": "Petrova", "given": "Olga", "patronymic": "Petrovna"},
    {"surname": "Petrenko"},
    {"surname": "Sidorov", "given": "Sergei"},
    {"surname": "Smirnov", "given": "Pavel", "patronymic": "Andreevich"},
    {"surname": "Иванов", "given": "Иван", "patronymic": "Иванович"},
    {"surname": "Иванова", "given": "Мария"},
    {"surname": "Петров", "given": "Пётр"},
]

# Prefixes with expected results
PREFIX_TEST_CASES = [
    ("Ivanov", ["Ivanov Ivan Ivanovich", "Ivanov Petr Sergeevich", "Ivanova Anna Olegovna", "Ivanova Maria"]),
    ("Ivanov ", ["Ivanov Ivan Ivanovich", "Ivanov Petr Sergeevich"]),
    ("Ivanova", ["Ivanova Anna Olegovna", "Ivanova Maria"]),
    ("Ivan ", ["Ivan Petrovich"]),
    ("Ivane", ["Ivanenko Ivanovich"]),
    ("Petr", ["Petrenko", "Petrov Petr", "Petrova Olga Petrovna"]),
    ("S", ["Sidorov Sergei", "Smirnov Pavel Andreevich"]),
    ("Иванов", ["Иванов Иван Иванович", "Иванова Мария"]),
    ("П", ["Петров Пётр"]),
]

# Prefixes that must come back empty
NO_MATCH_PREFIXES = [
    "Ivanovich",
    "Ivanova Maria Ivanovna",
    "Petrovs",
    "Sa",
    "Z",
    "ivanov",
    "Сидоров",
]

PREFIXES = [prefix for prefix, expected in PREFIX_TEST_CASES] + NO_MATCH_PREFIXES

GOLDEN_RESULTS: Dict[str, List[str]] = {
    **dict(PREFIX_TEST_CASES),
    **{prefix: [] for prefix in NO_MATCH_PREFIXES},
}


class GoldenMasterTester:
    """Captures and validates prefix index behavior."""

    def __init__(self):
        self.index = build_index(NAME_RECORDS)

    def capture_golden_master(self, prefixes: List[str]) -> Dict[str, List[str]]:
        """Capture the current behavior as golden master."""
        return {prefix: self.index.query(prefix) for prefix in prefixes}

    def validate_against_golden_master(
        self, current_results: Dict[str, List[str]], golden_results: Dict[str, List[str]]
    ) -> None:
        """Validate current results match golden master."""
        mismatches = []

        for prefix, golden_result in golden_results.items():
            if prefix not in current_results:
                mismatches.append(f"Missing prefix: {prefix!r}")
                continue

            current_result = current_results[prefix]
            if current_result != golden_result:
                mismatches.append(
                    f"Mismatch for {prefix!r}:\n" f"  Golden:  {golden_result}\n" f"  Current: {current_result}"
                )

        if mismatches:
            raise AssertionError(
                f"Golden master validation failed with {len(mismatches)} mismatches:\n"
                + "\n".join(mismatches[:10])  # Show first 10 mismatches
            )


@pytest.fixture(scope="session")
def golden_master_tester():
    """Create and return a golden master tester instance."""
    return GoldenMasterTester()


def test_prefixes_with_expected_results(golden_master_tester):
    """Test prefixes against their expected exact results."""
    passed = 0
    failed = 0

    for prefix, expected in PREFIX_TEST_CASES:
        result = golden_master_tester.index.query(prefix)
        if result == expected:
            passed += 1
        else:
            failed += 1
            print(f"FAILED: {prefix!r}: expected {expected}, got {result}")

    assert failed == 0, f"Prefix tests: {failed} failures out of {len(PREFIX_TEST_CASES)} tests"
    print(f"Prefix tests: {passed} passed, {failed} failed")


def test_unmatched_prefixes_return_nothing(golden_master_tester):
    """Test that prefixes without matches return an empty list rather than raising."""
    for prefix in NO_MATCH_PREFIXES:
        result = golden_master_tester.index.query(prefix)
        assert result == [], f"Failed for {prefix!r}: expected [], got {result}"

    print(f"No-match tests: {len(NO_MATCH_PREFIXES)} passed")


def test_results_match_golden_master(golden_master_tester):
    """Validate current behavior for every recorded prefix."""
    current_results = golden_master_tester.capture_golden_master(PREFIXES)
    golden_master_tester.validate_against_golden_master(current_results, GOLDEN_RESULTS)
    print(f"Validated {len(current_results)} prefixes against golden master")


def test_golden_master_reports_mismatches(golden_master_tester):
    """The validator must flag both changed and missing results."""
    current_results = golden_master_tester.capture_golden_master(PREFIXES[:-1])
    current_results["Ivanova"] = ["Ivanova Maria"]

    with pytest.raises(AssertionError) as excinfo:
        golden_master_tester.validate_against_golden_master(current_results, GOLDEN_RESULTS)

    message = str(excinfo.value)
    assert "2 mismatches" in message
    assert "Mismatch for 'Ivanova'" in message
    assert f"Missing prefix: {PREFIXES[-1]!r}" in message


def test_batch_order_does_not_change_results():
    """Ingesting the same names in reversed batches must give identical answers."""
    reference = build_index(NAME_RECORDS)
    index = PrefixIndex()
    reversed_records = NAME_RECORDS[::-1]
    for start in range(0, len(reversed_records), 4):
        index.ingest(reversed_records[start : start + 4])

    for prefix in PREFIXES:
        assert index.query(prefix) == reference.query(prefix), f"Mismatch for {prefix!r}"


if __name__ == "__main__":
    # Run directly to print current results for updating GOLDEN_RESULTS
    tester = GoldenMasterTester()
    results = tester.capture_golden_master(PREFIXES)
    for prefix, result in results.items():
        print(f"  {prefix!r} -> {result}")
