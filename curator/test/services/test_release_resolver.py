from __future__ import annotations

from pathlib import Path

from curator.core.result import Err, Ok
from curator.services.release.model import TrainRequest
from curator.services.release.resolver import resolve_train_version, scan_train_versions
from curator.services.release.version import ReleaseVersion


def _v(text: str) -> ReleaseVersion:
    major, minor = text.split(".")
    return ReleaseVersion(int(major), int(minor))


def test_major_bump_with_no_existing_versions_starts_at_zero() -> None:
    result = resolve_train_version(TrainRequest(bump="major"), [])
    assert isinstance(result, Ok)
    assert result.value.version == ReleaseVersion(0, 0)
    assert result.value.base is None


def test_major_bump_follows_newest() -> None:
    result = resolve_train_version(TrainRequest(bump="major"), [_v("4.2"), _v("5.9"), _v("5.10")])
    assert isinstance(result, Ok)
    assert result.value.version == ReleaseVersion(6, 0)
    assert result.value.base == ReleaseVersion(5, 10)


def test_minor_bump_uses_numeric_not_lexical_order() -> None:
    result = resolve_train_version(TrainRequest(bump="minor"), [_v("5.9"), _v("5.10")])
    assert isinstance(result, Ok)
    assert result.value.version == ReleaseVersion(5, 11)


def test_minor_bump_with_major_goal() -> None:
    existing = [_v("5.9"), _v("6.0")]
    result = resolve_train_version(TrainRequest(bump="minor", goal="5"), existing)
    assert isinstance(result, Ok)
    assert result.value.version == ReleaseVersion(5, 10)
    assert result.value.base == ReleaseVersion(5, 9)


def test_minor_bump_with_exclusive_goal() -> None:
    existing = [_v("5.1"), _v("5.2"), _v("5.3")]
    result = resolve_train_version(TrainRequest(bump="minor", goal="5.3"), existing)
    assert isinstance(result, Ok)
    assert result.value.version == ReleaseVersion(5, 3)


def test_minor_bump_without_base_fails() -> None:
    result = resolve_train_version(TrainRequest(bump="minor"), [])
    assert isinstance(result, Err)
    assert result.error.kind == "missing_base_version"


def test_minor_bump_when_goal_filters_everything_fails() -> None:
    result = resolve_train_version(TrainRequest(bump="minor", goal="3"), [_v("5.0")])
    assert isinstance(result, Err)
    assert result.error.kind == "missing_base_version"
    assert "'3'" in result.error.message


def test_invalid_goal_is_reported() -> None:
    result = resolve_train_version(TrainRequest(bump="major", goal="abc"), [_v("1.0")])
    assert isinstance(result, Err)
    assert result.error.kind == "goal_parse"


def test_scan_train_versions(tmp_path: Path) -> None:
    for name in ("lts-5.9.json", "lts-5.10.json", "nightly-2026-10-19.json", "lts-x.json"):
        (tmp_path / name).write_text("{}", encoding="utf-8")
    (tmp_path / "lts-7.0.json").mkdir()

    assert scan_train_versions(tmp_path) == frozenset({_v("5.9"), _v("5.10")})


def test_scan_missing_directory(tmp_path: Path) -> None:
    assert scan_train_versions(tmp_path / "missing") == frozenset()
