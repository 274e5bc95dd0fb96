# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for typekits."""

import pytest

from modelkit.component import ModelError, Typekit
from modelkit.types import TypeCategory, TypeNotFound, TypeRegistry

# ###############
# Helpers
# ###############


def _make_typekit() -> Typekit:
    typekit = Typekit(None, "base")
    typekit.create_interface(TypeCategory.NUMERIC, "/int32_t", 4)
    typekit.create(TypeCategory.OPAQUE, "/Handle", 8)
    return typekit


# ###############
# Tests
# ###############


def test_create_records_type_in_typelist_only() -> None:
    """create records the type in the typelist only."""
    typekit = _make_typekit()
    assert typekit.include("/Handle")
    assert not typekit.interface_type("/Handle")


def test_create_interface_records_type_in_both_lists() -> None:
    """create_interface records the type in both lists."""
    typekit = _make_typekit()
    assert typekit.include("/int32_t")
    assert typekit.interface_type("/int32_t")
    assert typekit.interface_typelist <= typekit.typelist


def test_queries_on_unknown_types_return_false() -> None:
    """Membership queries on unknown types return False."""
    typekit = _make_typekit()
    assert not typekit.include("/unknown")
    assert not typekit.interface_type("/unknown")
    assert not typekit.defines_array_of("/unknown")


def test_imported_types_are_not_included() -> None:
    """Types present in the registry but not in the typelist are only imported."""
    registry = TypeRegistry()
    registry.create_numeric("/int32_t", 4)
    registry.create_numeric("/imported", 4)
    typekit = Typekit(None, "tk", registry=registry, typelist=["/int32_t"])
    assert typekit.resolve_type("/imported").name == "/imported"
    assert not typekit.include("/imported")


def test_defines_array_of() -> None:
    """defines_array_of checks for an array of the given element type."""
    typekit = _make_typekit()
    assert not typekit.defines_array_of("/int32_t")
    typekit.create(TypeCategory.ARRAY, "/int32_t", 4)
    assert typekit.defines_array_of("/int32_t")
    assert not typekit.defines_array_of("/Handle")


def test_interface_typelist_must_be_a_subset() -> None:
    """Interface types outside the typelist are rejected."""
    registry = TypeRegistry()
    registry.create_numeric("/int32_t", 4)
    with pytest.raises(ModelError, match="/int32_t"):
        Typekit(None, "tk", registry=registry, interface_typelist=["/int32_t"])


def test_resolve_type_follows_aliases() -> None:
    """resolve_type follows registry aliases."""
    typekit = _make_typekit()
    typekit.registry.create_alias("/int", "/int32_t")
    assert typekit.resolve_type("/int").name == "/int32_t"
    assert typekit.include("/int")
    with pytest.raises(TypeNotFound):
        typekit.resolve_type("/nope")


def test_self_types_lists_defined_types() -> None:
    """self_types lists the types of the typelist."""
    typekit = _make_typekit()
    assert [t.name for t in typekit.self_types()] == ["/Handle", "/int32_t"]


def test_register_interface_type_adds_to_typelist() -> None:
    """register_interface_type records the type in both lists."""
    typekit = Typekit(None, "tk")
    t = typekit.registry.create_null("/nil")
    typekit.register_interface_type(t)
    assert typekit.typelist == {"/nil"}
    assert typekit.interface_typelist == {"/nil"}
