# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for static input and output ports."""

import pytest

from modelkit.component import Incompatibility, ModelError, NodeModel, Project, Typekit
from modelkit.component.loaders import Base
from modelkit.types import TypeCategory

# ###############
# Helpers
# ###############


def _make_node() -> NodeModel:
    loader = Base()
    typekit = Typekit(loader, "base")
    typekit.create_interface(TypeCategory.NUMERIC, "/double", 8, integer=False)
    loader.register_typekit_model(typekit)
    return Project(loader, name="test").node("Task")


# ###############
# Input ports
# ###############


def test_input_port_defaults() -> None:
    """Input ports start with the default connection policy."""
    port = _make_node().input_port("in", "/double")
    assert not port.is_output
    assert not port.dynamic
    assert not port.static
    assert not port.reliable_connection_required
    assert port.clean_on_node_start
    assert not port.multiplexing


def test_input_port_flags_are_chainable() -> None:
    """Input port flag setters return the port."""
    port = (
        _make_node()
        .input_port("in", "/double")
        .needs_reliable_connection()
        .do_not_clean_on_node_start()
        .multiplexes()
        .static_connections()
    )
    assert port.reliable_connection_required
    assert not port.clean_on_node_start
    assert port.multiplexing
    assert port.static
    assert not port.dynamic_connections().static


# ###############
# Output ports
# ###############


def test_output_port_defaults() -> None:
    """Output ports start triggered on update, with no bursts."""
    port = _make_node().output_port("out", "/double")
    assert port.is_output
    assert port.sample_size == 1
    assert port.period == 1
    assert port.burst_size == 0
    assert port.is_triggered_on_update
    assert not port.is_triggered_once_per_update
    assert not port.has_port_triggers


def test_burst_and_period() -> None:
    """Burst, period and sample size are recorded."""
    port = _make_node().output_port("out", "/double").burst(10, 2).set_period(5).set_sample_size(3)
    assert (port.burst_size, port.burst_period) == (10, 2)
    assert port.period == 5
    assert port.sample_size == 3


def test_triggered_on_input_ports() -> None:
    """Output ports can be triggered by input ports given by name or object."""
    node = _make_node()
    a = node.input_port("a", "/double")
    node.input_port("b", "/double")
    port = node.output_port("out", "/double").triggered_on(a, "b")

    assert port.port_triggers == {"a", "b"}
    assert [p.name for p in port.trigger_ports()] == ["a", "b"]
    assert not port.is_triggered_on_update


def test_triggered_on_ports_and_on_update() -> None:
    """Port triggers and update triggers can be combined."""
    node = _make_node()
    node.input_port("a", "/double")
    port = node.output_port("out", "/double").triggered_on("a").triggered_on_update()
    assert port.is_triggered_on_update


def test_triggered_on_unknown_port_fails() -> None:
    """Triggering on an unknown port fails."""
    node = _make_node()
    with pytest.raises(ModelError, match="missing"):
        node.output_port("out", "/double").triggered_on("missing")


def test_triggered_on_output_port_fails() -> None:
    """Triggering on an output port fails."""
    node = _make_node()
    other = node.output_port("other", "/double")
    with pytest.raises(ModelError):
        node.output_port("out", "/double").triggered_on(other)


def test_triggered_on_port_of_another_node_fails() -> None:
    """Triggering on a port of another model fails."""
    foreign = _make_node().input_port("in", "/double")
    node = _make_node()
    with pytest.raises(ModelError):
        node.output_port("out", "/double").triggered_on(foreign)


def test_port_triggers_and_once_per_update_are_incompatible() -> None:
    """Port triggers cannot be combined with once-per-update."""
    node = _make_node()
    node.input_port("a", "/double")
    triggered = node.output_port("out", "/double").triggered_on("a")
    with pytest.raises(Incompatibility):
        triggered.triggered_once_per_update()

    once = node.output_port("once", "/double").triggered_once_per_update()
    assert once.is_triggered_once_per_update
    assert once.is_triggered_on_update
    with pytest.raises(Incompatibility):
        once.triggered_on("a")


def test_promoted_port_triggers_follow_the_submodel() -> None:
    """Triggers of a promoted port resolve on the submodel."""
    node = _make_node()
    node.input_port("a", "/double")
    node.output_port("out", "/double").triggered_on("a")
    sub = node.new_submodel()

    promoted = sub.find_output_port("out")
    assert promoted.trigger_ports()[0].node is sub
    promoted.port_triggers.add("extra")
    assert node.find_output_port("out").port_triggers == {"a"}


def test_port_to_dict() -> None:
    """to_dict exports direction, name, type and doc."""
    port = _make_node().input_port("in", "/double").doc("samples")
    assert port.to_dict() == {"direction": "input", "name": "in", "type": "/double", "doc": "samples"}
