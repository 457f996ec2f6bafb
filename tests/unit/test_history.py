from typing import Any

"""
Unit tests for commit range detection and git log enumeration.
"""

import subprocess

import pytest

from checkcommit.core.errors import EnvironmentDetectionError, HistoryError
from checkcommit.history.environment import (
    KNOWN_PROVIDERS,
    CIProvider,
    CommitRange,
    resolve_range,
)
from checkcommit.history.git_log import (
    build_log_command,
    list_subjects,
    parse_log_output,
)


class TestResolveRange:
    """Test CI provider detection."""

    def test_github(self: Any) -> None:
        commit_range = resolve_range(
            {"GITHUB_REF": "feature", "GITHUB_BASE_REF": "master"}
        )
        assert commit_range == CommitRange("feature", "master", "Github")
        assert commit_range.spec == "master...feature"

    def test_gitlab(self: Any) -> None:
        commit_range = resolve_range(
            {
                "CI_MERGE_REQUEST_SOURCE_BRANCH_NAME": "topic",
                "CI_MERGE_REQUEST_TARGET_BRANCH_NAME": "main",
            }
        )
        assert commit_range.provider == "Gitlab"
        assert commit_range.spec == "main...topic"

    def test_first_provider_wins(self: Any) -> None:
        commit_range = resolve_range(
            {
                "GITHUB_REF": "gh-ref",
                "GITHUB_BASE_REF": "gh-base",
                "CI_MERGE_REQUEST_SOURCE_BRANCH_NAME": "gl-ref",
                "CI_MERGE_REQUEST_TARGET_BRANCH_NAME": "gl-base",
            }
        )
        assert commit_range.provider == "Github"

    def test_incomplete_pair_is_skipped(self: Any) -> None:
        # GitHub sets GITHUB_REF on push builds without a base ref
        commit_range = resolve_range(
            {
                "GITHUB_REF": "refs/heads/master",
                "GITHUB_BASE_REF": "",
                "CI_MERGE_REQUEST_SOURCE_BRANCH_NAME": "topic",
                "CI_MERGE_REQUEST_TARGET_BRANCH_NAME": "main",
            }
        )
        assert commit_range.provider == "Gitlab"

    def test_nothing_detected(self: Any) -> None:
        with pytest.raises(EnvironmentDetectionError) as exc_info:
            resolve_range({"GITHUB_REF": "feature"})
        assert "GITHUB_BASE_REF" in str(exc_info.value)

    def test_custom_providers(self: Any) -> None:
        providers = [CIProvider("Jenkins", "CHANGE_BRANCH", "CHANGE_TARGET")]
        commit_range = resolve_range(
            {"CHANGE_BRANCH": "PR-7", "CHANGE_TARGET": "main"}, providers=providers
        )
        assert commit_range.provider == "Jenkins"

    def test_reads_process_environment(self, clean_ci_env: Any) -> None:
        clean_ci_env.setenv("GITHUB_REF", "feature")
        clean_ci_env.setenv("GITHUB_BASE_REF", "master")
        assert resolve_range().spec == "master...feature"

    def test_known_provider_order(self: Any) -> None:
        assert [p.name for p in KNOWN_PROVIDERS] == ["Github", "Gitlab"]


class TestParseLogOutput:
    """Test splitting of git log output."""

    def test_strips_quotes(self: Any) -> None:
        output = "'BUG/MINOR: fix the thing'\n'MINOR: add an option'"
        assert parse_log_output(output) == ["BUG/MINOR: fix the thing", "MINOR: add an option"]

    def test_keeps_inner_quotes(self: Any) -> None:
        assert parse_log_output("'DOC: mention 'foo' in the manual'") == [
            "DOC: mention 'foo' in the manual"
        ]

    def test_empty(self: Any) -> None:
        assert parse_log_output("") == []
        assert parse_log_output("\n") == []


class TestListSubjects:
    """Test running git log."""

    def test_command(self: Any) -> None:
        cmd = build_log_command(CommitRange("feature", "master"))
        assert cmd == ["git", "log", "master...feature", "--pretty=format:'%s'"]

    def test_success(self, monkeypatch: Any) -> None:
        calls = []

        def _run(cmd: Any, **kwargs: Any) -> Any:
            calls.append((cmd, kwargs))
            return subprocess.CompletedProcess(
                cmd, 0, stdout="'BUG: fix a'\n'MINOR: add b'", stderr=""
            )

        monkeypatch.setattr("checkcommit.history.git_log.subprocess.run", _run)
        subjects = list_subjects(CommitRange("feature", "master"), git="/usr/bin/git")

        assert subjects == ["BUG: fix a", "MINOR: add b"]
        cmd, kwargs = calls[0]
        assert cmd[0] == "/usr/bin/git"
        assert kwargs["check"] is True

    def test_command_failure(self, monkeypatch: Any) -> None:
        def _run(cmd: Any, **kwargs: Any) -> Any:
            raise subprocess.CalledProcessError(
                128, cmd, output="", stderr="fatal: bad revision 'master...feature'"
            )

        monkeypatch.setattr("checkcommit.history.git_log.subprocess.run", _run)
        with pytest.raises(HistoryError) as exc_info:
            list_subjects(CommitRange("feature", "master"))
        assert "bad revision" in str(exc_info.value)

    def test_missing_executable(self, monkeypatch: Any) -> None:
        def _run(cmd: Any, **kwargs: Any) -> Any:
            raise FileNotFoundError(2, "No such file or directory", cmd[0])

        monkeypatch.setattr("checkcommit.history.git_log.subprocess.run", _run)
        with pytest.raises(HistoryError):
            list_subjects(CommitRange("feature", "master"), git="no-such-git")
