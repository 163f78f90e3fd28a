"""
Gamekins - Report Parsers

Readers for the build artifacts challenges are built from: JaCoCo pages and
CSV, PIT mutation reports, static-analysis findings and JUnit results.
Missing or half-written reports yield empty results, never exceptions.
"""

from gamekins.reports.base import (
    IncompleteReportError,
    MalformedReportError,
    ReportError,
)
from gamekins.reports.io import read_report_text
from gamekins.reports.jacoco import (
    SourceReport,
    aggregate_methods,
    load_method_entries,
    load_source_report,
    parse_branch_counts,
    parse_class_coverage,
    parse_source_page,
    read_class_coverage,
)
from gamekins.reports.junit import TestSuiteResult, count_tests, read_test_suite
from gamekins.reports.mutation import load_mutations, mutants_of_file, parse_mutation_report
from gamekins.reports.smells import load_smells, parse_smells, smells_of_file

__all__ = [
    # Errors
    "ReportError",
    "MalformedReportError",
    "IncompleteReportError",
    # I/O
    "read_report_text",
    # JaCoCo
    "SourceReport",
    "aggregate_methods",
    "load_method_entries",
    "load_source_report",
    "parse_branch_counts",
    "parse_class_coverage",
    "parse_source_page",
    "read_class_coverage",
    # PIT
    "load_mutations",
    "mutants_of_file",
    "parse_mutation_report",
    # Smells
    "load_smells",
    "parse_smells",
    "smells_of_file",
    # JUnit
    "TestSuiteResult",
    "count_tests",
    "read_test_suite",
]
