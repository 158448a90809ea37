"""Tests for scalar and nested set element matching."""

from __future__ import annotations

import itertools

import pytest

from flatstate_checks import (
    CountMismatchError,
    DepthAddress,
    FlatState,
    NoMatchingElementError,
    NotACollectionError,
    match_set_elem_attr,
    match_set_elem_nested_attrs,
)

PORTS = {"ports.#": "2", "ports.0": "80", "ports.1": "443"}
RULE = {"rule.#": "1", "rule.0.name": "allow", "rule.0.port": "80"}

# -- scalar mode --------------------------------------------------------------


def test_scalar_match():
    ref = match_set_elem_attr(FlatState(PORTS), "ports", "443")
    assert ref.element_id == "1"
    assert ref.collection == "ports"


def test_scalar_no_match():
    with pytest.raises(NoMatchingElementError) as exc_info:
        match_set_elem_attr(FlatState(PORTS), "ports", "22")
    message = str(exc_info.value)
    assert "has no element with value: '22'" in message
    assert "'ports.1': '443'" in message


def test_scalar_requires_count_marker():
    with pytest.raises(NotACollectionError):
        match_set_elem_attr(FlatState({"ports.0": "80"}), "ports", "80")


def test_scalar_ignores_nested_values(ingress_state):
    # "tcp" only appears below an element, never as an element itself
    with pytest.raises(NoMatchingElementError):
        match_set_elem_attr(ingress_state, "ingress", "tcp")


def test_scalar_does_not_match_count_marker():
    state = FlatState({"ports.#": "2", "ports.0": "80", "ports.1": "443"})
    with pytest.raises(NoMatchingElementError):
        match_set_elem_attr(state, "ports", "2")


@pytest.mark.parametrize("value, expected", [("80", True), ("22", False)])
def test_scalar_outcome_is_order_independent(value, expected):
    items = [("ports.#", "2"), ("ports.0", "80"), ("ports.1", "443"), ("id", "x")]
    for ordering in itertools.permutations(items):
        state = FlatState(ordering)
        try:
            match_set_elem_attr(state, "ports", value)
        except NoMatchingElementError:
            outcome = False
        else:
            outcome = True
        assert outcome is expected


def test_scalar_depth_address():
    state = FlatState(
        {
            "rules.#": "2",
            "rules.0.ports.#": "1",
            "rules.0.ports.5": "80",
            "rules.1.ports.#": "1",
            "rules.1.ports.6": "8080",
        }
    )
    ref = match_set_elem_attr(state, ("ports", 3), "8080")
    assert ref.collection == "rules.1.ports"


def test_scalar_depth_address_ignores_deeper_keys_with_same_name():
    state = FlatState(
        {
            "rules.#": "2",
            "rules.0.ports.#": "1",
            "rules.0.ports.5": "80",
            "rules.1.ports.cfg.mode": "strict",
        }
    )
    ref = match_set_elem_attr(state, ("ports", 3), "80")
    assert ref.collection == "rules.0.ports"


def test_scalar_depth_address_rejects_non_set_even_on_value_match():
    state = FlatState({"rules.#": "1", "rules.0.ports.0": "80"})
    with pytest.raises(NotACollectionError) as exc_info:
        match_set_elem_attr(state, ("ports", 3), "80")
    assert exc_info.value.collection == "rules.0.ports"


def test_scalar_depth_address_no_match():
    state = FlatState({"rules.#": "1", "rules.0.ports.#": "1", "rules.0.ports.5": "80"})
    with pytest.raises(NoMatchingElementError, match=r"ports \(depth 3\)"):
        match_set_elem_attr(state, ("ports", 3), "22")


# -- nested mode --------------------------------------------------------------


def test_nested_match():
    match = match_set_elem_nested_attrs(
        FlatState(RULE), "rule", {"name": "allow", "port": "80"}
    )
    assert match.element_id == "0"
    assert match.attributes == {"name": "allow", "port": "80"}


def test_nested_no_match():
    with pytest.raises(NoMatchingElementError) as exc_info:
        match_set_elem_nested_attrs(
            FlatState(RULE), "rule", {"name": "allow", "port": "81"}
        )
    assert "has no element with attr/value pairs" in str(exc_info.value)
    assert exc_info.value.expected == {"name": "allow", "port": "81"}


def test_nested_requires_all_pairs_in_one_element():
    state = FlatState(
        {
            "rule.#": "2",
            "rule.1.a": "1",
            "rule.2.b": "2",
        }
    )
    with pytest.raises(NoMatchingElementError):
        match_set_elem_nested_attrs(state, "rule", {"a": "1", "b": "2"})


def test_nested_ignores_extra_attributes(ingress_state):
    match = match_set_elem_nested_attrs(
        ingress_state, "ingress", {"from_port": "443"}
    )
    assert match.element_id == "2541437006"


def test_nested_matches_nested_collections(ingress_state):
    match = match_set_elem_nested_attrs(
        ingress_state,
        "ingress",
        {"cidr_blocks.#": "1", "cidr_blocks.0": "10.0.0.0/8"},
    )
    assert match.element_id == "1403647648"


def test_nested_count_mismatch():
    state = FlatState({"rule.#": "2", "rule.0.name": "allow", "rule.0.port": "80"})
    with pytest.raises(CountMismatchError):
        match_set_elem_nested_attrs(state, "rule", {"name": "allow"})


def test_nested_empty_request_needs_an_element():
    assert match_set_elem_nested_attrs(FlatState(RULE), "rule", {}).element_id == "0"
    with pytest.raises(NoMatchingElementError):
        match_set_elem_nested_attrs(FlatState({"rule.#": "0"}), "rule", {})


def test_nested_depth_address():
    state = FlatState(
        {
            "policy.#": "1",
            "policy.0.statement.#": "2",
            "policy.0.statement.11.effect": "Allow",
            "policy.0.statement.11.action": "s3:GetObject",
            "policy.0.statement.12.effect": "Deny",
            "policy.0.statement.12.action": "s3:PutObject",
        }
    )
    match = match_set_elem_nested_attrs(
        state,
        ("statement", 3),
        {"effect": "Deny", "action": "s3:PutObject"},
    )
    assert match.collection == "policy.0.statement"
    assert match.element_id == "12"


def test_nested_depth_address_rejects_non_set():
    state = FlatState({"policy.0.statement.0.effect": "Allow"})
    with pytest.raises(NotACollectionError):
        match_set_elem_nested_attrs(state, ("statement", 3), {"effect": "Allow"})


# -- literal and depth addresses agree -----------------------------------------

NESTED_RULES = {
    "rules.#": "1",
    "rules.0.ports.#": "2",
    "rules.0.ports.901": "80",
    "rules.0.ports.902": "443",
    "rules.0.targets.#": "1",
    "rules.0.targets.77.host": "a",
    "rules.0.targets.77.port": "80",
}


@pytest.mark.parametrize("value", ["80", "443", "22"])
def test_scalar_literal_and_depth_agree(value):
    state = FlatState(NESTED_RULES)
    outcomes = []
    for address in (
        "rules.0.ports",
        ("ports", 3),
        DepthAddress(attribute="ports", depth=3, parent="rules.0"),
    ):
        try:
            match_set_elem_attr(state, address, value)
        except NoMatchingElementError:
            outcomes.append(False)
        else:
            outcomes.append(True)
    assert len(set(outcomes)) == 1


@pytest.mark.parametrize(
    "values",
    [{"host": "a"}, {"host": "a", "port": "80"}, {"host": "a", "port": "81"}],
)
def test_nested_literal_and_depth_agree(values):
    state = FlatState(NESTED_RULES)
    outcomes = []
    for address in ("rules.0.targets", ("targets", 3)):
        try:
            match_set_elem_nested_attrs(state, address, values)
        except NoMatchingElementError:
            outcomes.append(False)
        else:
            outcomes.append(True)
    assert len(set(outcomes)) == 1
