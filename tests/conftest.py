# FILE: tests/conftest.py
"""
Pytest configuration for the vocapp test suite.

Configures:
- pytest-asyncio for async test support
- a small on-disk workspace used by the filesystem, resolver and turn tests
"""
import pytest

pytest_plugins = ["pytest_asyncio"]


@pytest.fixture
def workspace(tmp_path):
    """
    Root directory shaped like a user's Documents folder:

        AndroidDevelpment/
        FutbolDB/
            README.md
            src/
                main.py
        Unity/
        notes.txt
        .secret
    """
    (tmp_path / "AndroidDevelpment").mkdir()
    futbol = tmp_path / "FutbolDB"
    futbol.mkdir()
    (futbol / "README.md").write_text("# FutbolDB\n")
    (futbol / "src").mkdir()
    (futbol / "src" / "main.py").write_text("print('hi')\n")
    (tmp_path / "Unity").mkdir()
    (tmp_path / "notes.txt").write_text("remember\n")
    (tmp_path / ".secret").write_text("x\n")
    return tmp_path
