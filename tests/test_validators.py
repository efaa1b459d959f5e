"""Tests for per-step form validators."""

import pytest

from app.modules.wizard import validators
from app.modules.wizard.schemas import GithubRepo, ProjectDetailsData, SourceCodeData


@pytest.mark.parametrize("url", [
    "https://github.com/octo/my-app",
    "https://gitlab.com/group/project.git",
    "https://bitbucket.org/team/repo",
])
def test_public_url_accepted(url: str) -> None:
    assert validators.validate_public_repo_url(url).ok


@pytest.mark.parametrize("url", [
    "http://github.com/octo/my-app",
    "https://example.com/octo/my-app",
    "https://github.com/octo",
])
def test_public_url_rejected(url: str) -> None:
    result = validators.validate_public_repo_url(url)
    assert not result.ok
    assert result.errors[0].field == "public_repo_url"
    assert "valid" in result.errors[0].message


def test_public_url_required() -> None:
    result = validators.validate_public_repo_url("   ")
    assert not result.ok
    assert result.errors[0].message == "Please enter a repository URL"


def test_repo_name_from_url() -> None:
    assert validators.repo_name_from_url("https://github.com/octo/my-app.git") == "my-app"
    assert validators.repo_name_from_url("https://gitlab.com/group/project/") == "project"


def test_validate_source_code() -> None:
    assert not validators.validate_source_code(SourceCodeData()).ok
    assert not validators.validate_source_code(SourceCodeData(type="github")).ok
    assert not validators.validate_source_code(SourceCodeData(type="public", public_repo_url="nope")).ok
    assert validators.validate_source_code(
        SourceCodeData(type="public", public_repo_url="https://github.com/a/b")
    ).ok


def test_validate_source_code_github(github_repo_payload: dict) -> None:
    data = SourceCodeData(type="github", github_repo=GithubRepo(**github_repo_payload))
    assert validators.validate_source_code(data).ok


def test_validate_project_details_reports_every_field() -> None:
    result = validators.validate_project_details(
        ProjectDetailsData(project_name="", branch="", build_command="")
    )
    assert not result.ok
    assert {e.field for e in result.errors} == {"project_name", "branch", "build_command"}


def test_validate_project_name_length() -> None:
    assert validators.validate_project_details(ProjectDetailsData(project_name="a" * 50)).ok
    result = validators.validate_project_details(ProjectDetailsData(project_name="a" * 51))
    assert [e.field for e in result.errors] == ["project_name"]
