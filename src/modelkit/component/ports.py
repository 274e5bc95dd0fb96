# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Static and dynamic ports of node models."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Self

from modelkit.component.exceptions import Incompatibility, ModelError
from modelkit.component.interface import InterfaceObject

if TYPE_CHECKING:
    from modelkit.component.node import NodeModel
    from modelkit.types import Type

# ###############
# Public Interface
# ###############

# Name of the null type that stands for "any type" on dynamic ports.
VOID_TYPE_NAME = "/modelkit/component/void"


class Port(InterfaceObject):
    """Common base of input and output ports.

    Attributes:
        type: The resolved interface type of the data flowing through the port.
            Only dynamic ports may have None, meaning any type.
        static: If True, the node must be stopped to change this port's
            connections.
    """

    is_output = False
    dynamic = False

    def __init__(self, node: NodeModel, name: str, type: Type | str | None) -> None:
        super().__init__(node, name)
        self.type: Type | None = node.loader.resolve_interface_type(type) if type is not None else None
        self.static = False

    def static_connections(self) -> Self:
        """Declare that connections can only change while the node is stopped."""
        self.static = True
        return self

    def dynamic_connections(self) -> Self:
        """Declare that connections can change while the node runs (the default)."""
        self.static = False
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "direction": "output" if self.is_output else "input",
            "name": self.name,
            "type": self.type.name if self.type is not None else None,
            "doc": self.documentation or "",
        }


class InputPort(Port):
    """A port through which a node receives data."""

    def __init__(self, node: NodeModel, name: str, type: Type | str | None) -> None:
        super().__init__(node, name, type)
        self.reliable_connection_required = False
        self.clean_on_node_start = True
        self.multiplexing = False

    def needs_reliable_connection(self) -> Self:
        """Declare that the node requires non-lossy connections to this port."""
        self.reliable_connection_required = True
        return self

    def do_not_clean_on_node_start(self) -> Self:
        """Keep unread samples when the node starts."""
        self.clean_on_node_start = False
        return self

    def multiplexes(self) -> Self:
        """Accept several active connections at the same time."""
        self.multiplexing = True
        return self


class OutputPort(Port):
    """A port through which a node publishes data.

    Attributes:
        sample_size: How many samples are written at once.
        period: Minimal number of execution cycles between two writes.
        burst_size: Maximum number of samples written in a burst.
        burst_period: How often a burst can happen (0 means "rarely").
        port_triggers: Names of the input ports whose data causes a write.
    """

    is_output = True

    def __init__(self, node: NodeModel, name: str, type: Type | str | None) -> None:
        super().__init__(node, name, type)
        self.sample_size = 1
        self.period = 1
        self.burst_size = 0
        self.burst_period = 0
        self.port_triggers: set[str] = set()
        self._triggered_on_update: bool | None = None
        self._triggered_once_per_update = False

    def set_sample_size(self, size: int) -> Self:
        self.sample_size = int(size)
        return self

    def set_period(self, period: int) -> Self:
        self.period = int(period)
        return self

    def burst(self, size: int, period: int = 1) -> Self:
        """Declare that up to *size* samples can be written at once every *period* cycles."""
        self.burst_size = int(size)
        self.burst_period = int(period)
        return self

    def triggered_on(self, *input_ports: InputPort | str) -> Self:
        """Declare that data arriving on *input_ports* causes a write on this port.

        Raises:
            Incompatibility: If the port is already triggered once per update.
            ModelError: If one of the ports is not an input port of this node.
        """
        if self._triggered_once_per_update:
            raise Incompatibility(
                f"{self.name}: a port cannot be triggered by input ports and once per update at the same time"
            )
        names = set()
        for port in input_ports:
            if isinstance(port, str):
                if self.node.find_input_port(port) is None:
                    raise ModelError(f"{port} is not an input port of {self.node.name}")
                names.add(port)
            elif port.is_output:
                raise ModelError(f"{port.name} is an output port of {self.node.name}, cannot be used as a trigger")
            elif port.node is not self.node:
                raise ModelError(f"{port.name} is not an input port of {self.node.name}")
            else:
                names.add(port.name)
        self.port_triggers |= names
        return self

    @property
    def has_port_triggers(self) -> bool:
        return bool(self.port_triggers)

    def trigger_ports(self) -> list[InputPort]:
        """Resolve :attr:`port_triggers` on the node this port is bound to."""
        return [self.node.find_input_port(name) for name in sorted(self.port_triggers)]

    def triggered_on_update(self) -> Self:
        """Declare that the port is written on each update of the node."""
        self._triggered_on_update = True
        return self

    def triggered_once_per_update(self) -> Self:
        """Declare that at most one sample is written per update.

        Raises:
            Incompatibility: If the port already has input port triggers.
        """
        if self.has_port_triggers:
            raise Incompatibility(
                f"{self.name}: a port cannot be triggered by the node's update and by input ports at the same time"
            )
        self._triggered_once_per_update = True
        return self

    @property
    def is_triggered_on_update(self) -> bool:
        if self._triggered_once_per_update:
            return True
        if not self.has_port_triggers:
            return self._triggered_on_update is not False
        return bool(self._triggered_on_update)

    @property
    def is_triggered_once_per_update(self) -> bool:
        return self._triggered_once_per_update

    def _copy_containers(self) -> None:
        self.port_triggers = set(self.port_triggers)


class DynamicPort(Port):
    """Specification of ports that a node creates at runtime.

    Attributes:
        pattern: Names of the created ports must match this expression (searched,
            not anchored). None accepts any name.
    """

    dynamic = True

    def __init__(
        self,
        node: NodeModel,
        name: str,
        pattern: re.Pattern[str] | str | None = None,
        type: Type | str | None = None,
    ) -> None:
        if type is not None and _type_name(type) == VOID_TYPE_NAME:
            type = None
        super().__init__(node, name, type)
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    @property
    def any_type(self) -> bool:
        return self.type is None

    def matches(self, name: str) -> bool:
        """Return True if a port called *name* can be created from this specification."""
        return self.pattern is None or self.pattern.search(name) is not None

    def same_pattern(self, other: DynamicPort) -> bool:
        if self.pattern is None or other.pattern is None:
            return self.pattern is other.pattern
        return (self.pattern.pattern, self.pattern.flags) == (other.pattern.pattern, other.pattern.flags)

    def instanciate(self, name: str, type: Type | str | None = None) -> Self:
        """Return the concrete port called *name* created from this specification.

        Raises:
            ModelError: If *name* does not match the pattern, if *type*
                conflicts with the type of the specification, or if neither
                gives a type.
        """
        if not self.matches(name):
            raise ModelError(
                f"cannot instanciate {self.name} as {name}: {name} does not match the expected pattern "
                f"{self.pattern.pattern}"
            )
        if type is not None:
            resolved = self.node.loader.resolve_interface_type(type)
            if self.type is not None and resolved != self.type:
                raise ModelError(f"cannot instanciate {self.name} with type {resolved} as {self.type} was specified")
        elif self.type is None:
            raise ModelError(f"no type given to instanciate {self.name}, and it does not specify one itself")
        else:
            resolved = self.type
        port = self.dup()
        port.name = name
        port.type = resolved
        return port

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["pattern"] = self.pattern.pattern if self.pattern is not None else None
        return result


class DynamicInputPort(DynamicPort, InputPort):
    """Specification of input ports created at runtime."""


class DynamicOutputPort(DynamicPort, OutputPort):
    """Specification of output ports created at runtime."""


# ################
# Implementation
# ################


def _type_name(type: Type | str) -> str:
    return type if isinstance(type, str) else type.name
