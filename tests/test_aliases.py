"""Tests for alias resolution."""

import pytest

from cloud_icons.icons.iconset import IconEntry, IconSet
from cloud_icons.pipeline.aliases import find_alias_target, resolve_aliases


def _icon_set(*names: str) -> IconSet:
    icon_set = IconSet("aws")
    for name in names:
        icon_set.set_icon(name, IconEntry(body=f'<path id="{name}" d="M0 0h1v1z" />'))
    return icon_set


@pytest.mark.unit
def test_exact_match_creates_alias():
    icon_set = _icon_set("ec2-instance", "s3")

    resolution = resolve_aliases(icon_set, {"EC2 Instance.svg": "compute"})

    assert icon_set.resolve("compute") == "ec2-instance"
    assert icon_set.to_svg("compute").get_body() == icon_set.to_svg("ec2-instance").get_body()
    assert resolution.resolved == {"compute": "ec2-instance"}
    assert resolution.fuzzy == []
    assert resolution.missing == []


@pytest.mark.unit
def test_fuzzy_match_uses_substring_of_icon_key():
    icon_set = _icon_set("aws-ec2-instance", "s3")

    resolution = resolve_aliases(icon_set, {"EC2 Instance.svg": "compute"})

    assert icon_set.resolve("compute") == "aws-ec2-instance"
    assert resolution.fuzzy == ["compute"]


@pytest.mark.unit
def test_fuzzy_match_is_deterministic():
    icon_set = _icon_set("b-ec2-instance", "a-ec2-instance")

    assert find_alias_target(icon_set, "EC2 Instance.svg") == "a-ec2-instance"


@pytest.mark.unit
def test_exact_match_wins_over_fuzzy():
    icon_set = _icon_set("aws-ec2-instance", "ec2-instance")

    assert find_alias_target(icon_set, "EC2 Instance.svg") == "ec2-instance"


@pytest.mark.unit
def test_unmatched_alias_is_skipped():
    icon_set = _icon_set("s3")

    resolution = resolve_aliases(icon_set, {"Lambda.svg": "serverless", "S3.svg": "storage"})

    assert icon_set.aliases == {"storage": "s3"}
    assert resolution.missing == ["serverless"]


@pytest.mark.unit
def test_alias_shadowing_an_icon_is_recorded_as_conflict():
    icon_set = _icon_set("s3", "ec2")

    resolution = resolve_aliases(icon_set, {"EC2.svg": "s3"})

    assert icon_set.aliases == {}
    assert icon_set.resolve("s3") == "s3"
    assert resolution.missing == []
    assert resolution.conflicting == ["s3"]
    assert resolution.to_dict()["conflicting"] == ["s3"]


@pytest.mark.unit
def test_empty_filename_never_matches():
    icon_set = _icon_set("s3")

    assert find_alias_target(icon_set, ".svg") is None
