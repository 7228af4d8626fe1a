from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from dashdeploy import config
from dashdeploy.regions import get_regions


def test_project_path_precedence(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DASH_PROJECT_PATH", str(tmp_path / "env.yml"))
    assert config.get_project_path() == (tmp_path / "env.yml").resolve()
    assert config.get_project_path(str(tmp_path / "arg.yml")) == (tmp_path / "arg.yml").resolve()


def test_project_path_default(monkeypatch) -> None:
    monkeypatch.delenv("DASH_PROJECT_PATH", raising=False)
    assert config.get_project_path().name == "project.yml"


@pytest.mark.parametrize(("flag", "expected"), [("1", True), ("true", True), ("0", False), ("false", False)])
def test_interactive_flag(monkeypatch, flag: str, expected: bool) -> None:
    monkeypatch.setenv("DASH_INTERACTIVE", flag)
    assert config.is_interactive() is expected


def test_page_limit(monkeypatch) -> None:
    monkeypatch.delenv("DASH_PAGE_LIMIT", raising=False)
    assert config.get_page_limit() == 500
    monkeypatch.setenv("DASH_PAGE_LIMIT", "50")
    assert config.get_page_limit() == 50
    monkeypatch.setenv("DASH_PAGE_LIMIT", "9000")
    assert config.get_page_limit() == 500
    monkeypatch.setenv("DASH_PAGE_LIMIT", "lots")
    with pytest.raises(ValueError, match="DASH_PAGE_LIMIT"):
        config.get_page_limit()


def test_regions_span_every_partition() -> None:
    session = MagicMock()
    session.get_available_partitions.return_value = ["aws", "aws-us-gov"]
    session.get_available_regions.side_effect = lambda service, partition_name: {
        "aws": ["us-east-1", "il-central-1"],
        "aws-us-gov": ["us-gov-west-1"],
    }[partition_name]

    assert get_regions(session) == ["us-east-1", "il-central-1", "us-gov-west-1"]
    session.get_available_regions.assert_any_call("apigateway", partition_name="aws")


def test_regions_from_botocore_data() -> None:
    regions = get_regions()
    assert "us-east-1" in regions
    assert "il-central-1" in regions
