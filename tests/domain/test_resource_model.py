from __future__ import annotations

import pytest

from resdepot.domain.model import ResourceGroup, ResourceName


def test_full_name_appends_variant() -> None:
    assert ResourceName("art").full_name == "art"
    assert ResourceName("art", "hd").full_name == "art.hd"
    assert str(ResourceName("art", "hd")) == "art.hd"


def test_names_with_and_without_variant_are_distinct() -> None:
    assert ResourceName("art") != ResourceName("art", "hd")
    assert len({ResourceName("art"), ResourceName("art"), ResourceName("art", "hd")}) == 2


@pytest.mark.parametrize(
    ("variant", "current", "expected"),
    [
        (None, None, True),
        (None, "hd", True),
        ("hd", "hd", True),
        ("hd", "sd", False),
        ("hd", None, False),
    ],
)
def test_matches_variant(variant: str | None, current: str | None, expected: bool) -> None:
    assert ResourceName("art", variant).matches_variant(current) is expected


def test_names_sort_by_base_name_then_variant() -> None:
    names = [ResourceName("b"), ResourceName("a", "sd"), ResourceName("a"), ResourceName("a", "hd")]

    assert sorted(names) == [
        ResourceName("a"),
        ResourceName("a", "hd"),
        ResourceName("a", "sd"),
        ResourceName("b"),
    ]


@pytest.mark.parametrize(("name", "variant"), [("", None), ("art", "")])
def test_invalid_names_are_rejected(name: str, variant: str | None) -> None:
    with pytest.raises(ValueError, match="Resource"):
        ResourceName(name, variant)


def test_group_membership_is_idempotent() -> None:
    group = ResourceGroup("levels")

    assert group.add_resource(ResourceName("level1"), 100, 40)
    assert not group.add_resource(ResourceName("level1"), 100, 40)

    assert group.resource_count == 1
    assert group.total_length == 100
    assert group.total_compressed_length == 40
    assert group.has_resource(ResourceName("level1"))
