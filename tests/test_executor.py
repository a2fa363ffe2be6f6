# FILE: tests/test_executor.py
"""Tests for the command executor - CRITICAL SAFETY TESTS."""

from unittest.mock import patch

import pytest

from vocapp.execution.executor import execute_command
from vocapp.security.access import AccessMode, AccessScope


@pytest.fixture
def scope(workspace):
    return AccessScope(mode=AccessMode.WORKDIR, workdir=str(workspace))


class TestRefusals:
    """Commands refused before anything is spawned."""

    @pytest.mark.asyncio
    async def test_shell_operators_refused_before_tokenizing(self, scope):
        with patch("vocapp.execution.executor.tokenize") as tok:
            result = await execute_command("ls | wc -l", scope=scope)
        tok.assert_not_called()
        assert result.ok is False
        assert result.error.startswith("shell_operator_not_supported")
        assert result.stderr == "Shell operators not supported. Use simple commands only."

    @pytest.mark.asyncio
    async def test_empty_command(self, scope):
        result = await execute_command("   ", scope=scope)
        assert result.ok is False
        assert result.error == "Empty or malformed command"

    @pytest.mark.asyncio
    async def test_unterminated_quote(self, scope):
        result = await execute_command("ls 'oops", scope=scope)
        assert result.error == "Empty or malformed command"

    @pytest.mark.asyncio
    async def test_blocked(self, scope):
        result = await execute_command("rm -rf /", scope=scope)
        assert result.ok is False
        assert result.error == "Blocked for safety: rm -rf /"

    @pytest.mark.asyncio
    async def test_blocked_after_unquoting(self, scope):
        result = await execute_command("rm -rf '/'", scope=scope)
        assert result.ok is False
        assert result.error.startswith("Blocked for safety")

    @pytest.mark.asyncio
    async def test_path_outside_allowlist(self, workspace):
        scope = AccessScope(mode=AccessMode.ALLOWLIST, allowed_paths=[str(workspace)], workdir=str(workspace))
        result = await execute_command("cat /etc/passwd", scope=scope)
        assert result.ok is False
        assert result.error == "Path not allowed: /etc/passwd"

    @pytest.mark.asyncio
    async def test_missing_workdir(self, workspace):
        scope = AccessScope(workdir=str(workspace / "gone"))
        result = await execute_command("ls", scope=scope)
        assert result.ok is False
        assert result.error.startswith("Working directory not found")


class TestExecution:
    """Real subprocesses in the workspace."""

    @pytest.mark.asyncio
    async def test_success(self, scope, workspace):
        result = await execute_command("ls", scope=scope)
        assert result.ok is True
        assert result.error is None
        assert result.cwd == str(workspace)
        assert "FutbolDB" in result.stdout_lines()

    @pytest.mark.asyncio
    async def test_quoted_argument_passed_literally(self, scope):
        result = await execute_command("echo 'a  b'", scope=scope)
        assert result.stdout == "a  b\n"

    @pytest.mark.asyncio
    async def test_allowed_path_runs(self, workspace):
        scope = AccessScope(mode=AccessMode.ALLOWLIST, allowed_paths=[str(workspace)], workdir=str(workspace))
        result = await execute_command(f"ls {workspace}/FutbolDB", scope=scope)
        assert result.ok is True
        assert "README.md" in result.stdout

    @pytest.mark.asyncio
    async def test_nonzero_exit(self, scope):
        result = await execute_command("ls does-not-exist", scope=scope)
        assert result.ok is False
        assert result.error.startswith("Command exited with status")
        assert result.stderr

    @pytest.mark.asyncio
    async def test_missing_binary(self, scope):
        result = await execute_command("definitely-not-a-real-binary-xyz", scope=scope)
        assert result.ok is False
        assert result.error == "Command not found: definitely-not-a-real-binary-xyz"

    @pytest.mark.asyncio
    async def test_timeout(self, scope):
        result = await execute_command("sleep 5", scope=scope, timeout_s=0.2)
        assert result.ok is False
        assert result.error == "Command timed out after 0.2s"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
