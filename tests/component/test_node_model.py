# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for node models: inheritance, promotion and name uniqueness."""

import pytest

from modelkit.component import (
    BASE_NODE_MODEL,
    InterfaceCategory,
    ModelError,
    NodeModel,
    NotInterfaceType,
    Project,
    Typekit,
)
from modelkit.component.loaders import Base
from modelkit.types import TypeCategory, TypeNotFound

# ###############
# Helpers
# ###############


def _make_project() -> Project:
    loader = Base()
    typekit = Typekit(loader, "base")
    typekit.create_interface(TypeCategory.NUMERIC, "/int32_t", 4)
    typekit.create_interface(TypeCategory.NUMERIC, "/double", 8, integer=False)
    typekit.create(TypeCategory.OPAQUE, "/Internal")
    loader.register_typekit_model(typekit)
    return Project(loader, name="test")


# ###############
# Construction
# ###############


def test_node_derives_from_the_base_model_by_default() -> None:
    """Project nodes derive from the base node model unless told otherwise."""
    project = _make_project()
    model = project.node("Task")
    assert model.supermodel is BASE_NODE_MODEL
    assert model.project is project
    assert model.is_submodel_of(BASE_NODE_MODEL)
    assert [m.name for m in model.ancestors()] == ["Task", BASE_NODE_MODEL.name]


def test_submodel_inherits_the_project() -> None:
    """A submodel created without a project uses its supermodel's."""
    project = _make_project()
    sub = project.node("Task").new_submodel(name="Sub")
    assert sub.project is project
    assert sub.loader is project.loader


def test_model_without_project_cannot_resolve_types() -> None:
    """Declaring a typed object on a detached model fails."""
    model = NodeModel(name="Orphan")
    with pytest.raises(ModelError, match="Orphan"):
        model.input_port("in", "/int32_t")


def test_types_are_resolved_as_interface_types() -> None:
    """Interface objects only accept exported types."""
    model = _make_project().node("Task")
    with pytest.raises(NotInterfaceType):
        model.property("p", "/Internal")
    with pytest.raises(TypeNotFound):
        model.property("p", "/unknown")
    assert model.property("p", "/int32_t").type.name == "/int32_t"


# ###############
# Promotion
# ###############


def test_inherited_port_is_a_rebound_copy() -> None:
    """Finding an inherited port promotes a copy bound to the submodel."""
    model = _make_project().node("Task")
    port = model.output_port("p", "/double")
    sub = model.new_submodel(name="Sub")

    promoted = sub.find_output_port("p")
    assert promoted is not port
    assert promoted.name == port.name
    assert promoted.type == port.type
    assert promoted.node is sub
    assert port.node is model
    assert sub.find_output_port("p") is promoted


def test_documenting_a_promoted_object_keeps_the_original() -> None:
    """Changing a promoted object leaves the supermodel's object untouched."""
    model = _make_project().node("Task")
    model.output_port("p", "/double").doc("original")
    sub = model.new_submodel()
    sub.find_output_port("p").doc("x")
    assert model.find_output_port("p").documentation == "original"
    assert sub.find_output_port("p").documentation == "x"


def test_each_yields_base_entries_first() -> None:
    """Enumeration yields supermodel objects before local ones."""
    model = _make_project().node("Task")
    model.input_port("a", "/double")
    model.input_port("b", "/double")
    sub = model.new_submodel()
    sub.input_port("c", "/double")

    ports = list(sub.each_input_port())
    assert [p.name for p in ports] == ["a", "b", "c"]
    assert all(p.node is sub for p in ports)


def test_self_accessors_only_return_local_objects() -> None:
    """self_* accessors ignore inherited objects."""
    model = _make_project().node("Task")
    model.property("p", "/double")
    sub = model.new_submodel()
    sub.property("q", "/double")
    sub.find_property("p")
    assert [p.name for p in sub.self_properties()] == ["q"]
    assert [p.name for p in model.self_properties()] == ["p"]


def test_grand_submodel_promotes_through_the_chain() -> None:
    """Promotion works across several levels of inheritance."""
    model = _make_project().node("Task")
    model.operation("reset")
    leaf = model.new_submodel().new_submodel()
    op = leaf.find_operation("reset")
    assert op.node is leaf
    assert leaf.has_operation("reset")
    assert not leaf.has_operation("other")


def test_interface_map_is_shared_by_generic_accessors() -> None:
    """Per-category accessors and generic ones see the same map."""
    model = _make_project().node("Task")
    model.attribute("a", "/int32_t", 10)
    assert model.find(InterfaceCategory.ATTRIBUTE, "a") is model.find_attribute("a")
    assert model.has(InterfaceCategory.ATTRIBUTE, "a")
    assert len(model.interface_map(InterfaceCategory.ATTRIBUTE)) == 1
    assert model.find_attribute("a").default_value == 10


# ###############
# Uniqueness
# ###############


def test_attribute_and_property_cannot_share_a_name() -> None:
    """Names are unique across interface categories."""
    model = _make_project().node("Task")
    model.attribute("x", "/int32_t")
    with pytest.raises(ModelError, match="x"):
        model.property("x", "/int32_t")


def test_names_are_unique_across_the_supermodel_chain() -> None:
    """A submodel cannot reuse a name declared on a supermodel."""
    model = _make_project().node("Task")
    model.input_port("in", "/double")
    sub = model.new_submodel()
    with pytest.raises(ModelError):
        sub.operation("in")
    with pytest.raises(ModelError):
        sub.dynamic_output_port("in", pattern="^in")


def test_distinct_names_do_not_interfere() -> None:
    """Objects with distinct names coexist."""
    model = _make_project().node("Task")
    model.attribute("a", "/int32_t")
    model.property("p", "/int32_t")
    model.operation("o")
    model.input_port("i", "/int32_t")
    model.output_port("out", "/int32_t")
    model.dynamic_input_port("di", pattern="^di")
    model.dynamic_output_port("do", pattern="^do")
    assert model.has_attribute("a")
    assert model.has_port("i")
    assert model.has_port("out")
    assert model.has_dynamic_port("di")
    assert model.has_dynamic_port("do")
    assert [p.name for p in model.each_port()] == ["i", "out"]


# ###############
# Port queries
# ###############


def test_find_matching_ports_by_name_and_type() -> None:
    """Ports can be looked up by name and type."""
    model = _make_project().node("Task")
    model.output_port("pose", "/double")
    model.output_port("count", "/int32_t")
    model.output_port("position", "/double")

    assert [p.name for p in model.find_matching_output_ports(type="/double")] == ["pose", "position"]
    assert [p.name for p in model.find_matching_output_ports(name="count")] == ["count"]
    assert model.find_matching_output_ports(name="count", type="/double") == []
    assert model.find_matching_input_ports() == []


def test_find_matching_ports_with_a_pattern() -> None:
    """Ports can be looked up with a name pattern."""
    import re

    model = _make_project().node("Task")
    model.output_port("pose", "/double")
    model.output_port("count", "/int32_t")
    assert [p.name for p in model.find_matching_output_ports(name=re.compile("^po"))] == ["pose"]


def test_to_dict_includes_inherited_interface() -> None:
    """to_dict exports inherited objects along with local ones."""
    model = _make_project().node("Task").doc("a task")
    model.input_port("in", "/double")
    sub = model.new_submodel(name="Sub")
    sub.property("gain", "/double", 1.5)

    data = sub.to_dict()
    assert data["name"] == "Sub"
    assert data["superclass"] == "Task"
    assert [p["name"] for p in data["ports"]] == ["in"]
    assert data["properties"] == [{"name": "gain", "type": "/double", "dynamic": False, "doc": "", "default": 1.5}]
