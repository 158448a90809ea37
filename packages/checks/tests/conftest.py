"""Shared fixtures for state check tests."""

from __future__ import annotations

import pytest

from flatstate_checks import FlatState, InstanceState, ResourceState, StateSnapshot

SECURITY_GROUP = "aws_security_group.web"

INGRESS_ATTRIBUTES = {
    "id": "sg-0123",
    "name": "web",
    "ingress.#": "2",
    "ingress.1403647648.from_port": "80",
    "ingress.1403647648.to_port": "80",
    "ingress.1403647648.protocol": "tcp",
    "ingress.1403647648.cidr_blocks.#": "1",
    "ingress.1403647648.cidr_blocks.0": "10.0.0.0/8",
    "ingress.2541437006.from_port": "443",
    "ingress.2541437006.to_port": "443",
    "ingress.2541437006.protocol": "tcp",
    "ingress.2541437006.cidr_blocks.#": "0",
    "tags.%": "1",
    "tags.Name": "web",
    "security_groups.#": "2",
    "security_groups.3214213114": "sg-aaa",
    "security_groups.1982389122": "sg-bbb",
}


@pytest.fixture
def ingress_state() -> FlatState:
    return FlatState(INGRESS_ATTRIBUTES)


@pytest.fixture
def snapshot() -> StateSnapshot:
    return StateSnapshot(
        resources={
            SECURITY_GROUP: ResourceState(
                type="aws_security_group",
                primary=InstanceState(id="sg-0123", attributes=INGRESS_ATTRIBUTES),
            ),
            "aws_security_group.pending": ResourceState(type="aws_security_group"),
        }
    )
