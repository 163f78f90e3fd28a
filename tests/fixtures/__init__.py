"""
Test Fixtures for Gamekins

Renderers for the build reports the engine reads (JaCoCo pages and CSV,
PIT mutations.xml, smell findings, JUnit results) and a helper that writes
them where a build would.
"""

from pathlib import Path

FIXTURES_DIR = Path(__file__).parent
