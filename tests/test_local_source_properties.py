"""
Property-based tests for the local zone directory source.

Uses Hypothesis to verify zone name filtering, lowercasing and the minimum
zone count that guards against an empty or unmounted directory.
"""

import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from softlayer_tools.exceptions import LocalSourceError
from softlayer_tools.local_source import LocalDomainSource, looks_like_zone_name


label_strategy = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-"),
    min_size=1,
    max_size=12,
).filter(lambda label: label[0].isalnum() and label[-1].isalnum())


@st.composite
def zone_name_strategy(draw) -> str:
    """Generate plausible zone names such as Example-1.co.uk."""
    labels = draw(st.lists(label_strategy, min_size=2, max_size=4))
    return ".".join(labels)


def populate(directory: Path, names) -> None:
    for name in names:
        (directory / name).write_text("; zone\n", encoding="utf-8")


class TestZoneNameFilter:
    """Only directory entries that look like zone names are returned."""

    @given(name=zone_name_strategy())
    @settings(max_examples=200)
    def test_zone_names_are_accepted(self, name: str) -> None:
        assert looks_like_zone_name(name)

    @pytest.mark.parametrize("name", [
        ".hidden.zone",
        "localhost",
        "example.",
        "named_conf.local",
        "example.com_old",
        "-example.com",
        "example com.net",
        "",
    ])
    def test_non_zone_names_are_rejected(self, name: str) -> None:
        assert not looks_like_zone_name(name)

    @given(name=zone_name_strategy(), position=st.integers(min_value=0, max_value=100))
    @settings(max_examples=100)
    def test_underscore_always_excludes(self, name: str, position: int) -> None:
        index = position % (len(name) + 1)
        assert not looks_like_zone_name(name[:index] + "_" + name[index:])


class TestListLocalDomains:
    """list_local_domains reads, filters, lowercases and enforces the floor."""

    @given(names=st.sets(zone_name_strategy(), min_size=11, max_size=30))
    @settings(max_examples=50, deadline=None)
    def test_returns_lowercased_zone_names(self, names: set[str]) -> None:
        # Case-insensitive filesystems cannot hold names differing only in case
        unique = {name.lower(): name for name in names}
        if len(unique) <= 10:
            return

        with tempfile.TemporaryDirectory() as tmpdir:
            directory = Path(tmpdir)
            populate(directory, unique.values())
            populate(directory, ["named_conf", "README", ".lock.db"])

            result = LocalDomainSource(directory, min_domains=10).list_local_domains()

        assert result == set(unique)
        assert all(name == name.lower() for name in result)

    @given(count=st.integers(min_value=0, max_value=10))
    @settings(max_examples=20, deadline=None)
    def test_too_few_domains_aborts(self, count: int) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            directory = Path(tmpdir)
            populate(directory, [f"zone{i}.example.com" for i in range(count)])

            with pytest.raises(LocalSourceError) as exc_info:
                LocalDomainSource(directory, min_domains=10).list_local_domains()

        assert exc_info.value.code == "too_few_domains"
        assert exc_info.value.details["found"] == count

    def test_floor_is_strictly_greater(self, tmp_path: Path) -> None:
        populate(tmp_path, [f"zone{i}.example.com" for i in range(3)])

        with pytest.raises(LocalSourceError):
            LocalDomainSource(tmp_path, min_domains=3).list_local_domains()

        populate(tmp_path, ["zone3.example.com"])
        assert len(LocalDomainSource(tmp_path, min_domains=3).list_local_domains()) == 4

    def test_ignored_entries_do_not_count(self, tmp_path: Path) -> None:
        populate(tmp_path, [f"zone{i}.example.com" for i in range(2)])
        populate(tmp_path, ["named_a.conf", "named_b.conf", "localhost", ".cache"])

        with pytest.raises(LocalSourceError):
            LocalDomainSource(tmp_path, min_domains=2).list_local_domains()

    def test_missing_directory_is_unreadable(self, tmp_path: Path) -> None:
        source = LocalDomainSource(tmp_path / "does-not-exist", min_domains=0)

        with pytest.raises(LocalSourceError) as exc_info:
            source.list_local_domains()

        assert exc_info.value.code == "unreadable"

    def test_subdirectories_named_like_zones_are_listed(self, tmp_path: Path) -> None:
        (tmp_path / "Example.ORG").mkdir()
        populate(tmp_path, ["example.net"])

        result = LocalDomainSource(tmp_path, min_domains=1).list_local_domains()

        assert result == {"example.org", "example.net"}
