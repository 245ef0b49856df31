"""Tests for queuing schema rules onto chains."""

from __future__ import annotations

import logging
from unittest.mock import Mock, call

import pytest

from fieldcheck.chain import ValidationChain, check
from fieldcheck.chain.items import Bail, Condition, CustomValidation, Sanitization, StandardValidation
from fieldcheck.errors import SchemaError
from fieldcheck.schema import RULES, RuleKind, RuleSpec, dispatch_rules, get_rule
from fieldcheck.schema.compiler import INVALID_RULE_ARGUMENTS, UNKNOWN_RULE


@pytest.fixture
def mock_chain(monkeypatch: pytest.MonkeyPatch) -> Mock:
    """A chain mock; the rules used in tests forward to its methods."""
    chain = Mock(spec=ValidationChain)
    for name, kind in [
        ("is_int", RuleKind.VALIDATOR),
        ("is_in", RuleKind.VALIDATOR),
        ("is_email", RuleKind.VALIDATOR),
        ("trim", RuleKind.SANITIZER),
    ]:
        monkeypatch.setitem(
            RULES,
            name,
            RuleSpec(name=name, kind=kind, invoke=lambda chain, *args, _name=name: getattr(chain, _name)(*args)),
        )
    return chain


class TestRegistry:
    def test_rules_are_tagged(self):
        assert get_rule("is_email").kind is RuleKind.VALIDATOR
        assert get_rule("trim").kind is RuleKind.SANITIZER
        assert get_rule("custom_sanitizer").accepts_modifiers is False

    def test_unknown_and_non_string_names(self):
        assert get_rule("is_nothing") is None
        assert get_rule(42) is None

    def test_every_rule_is_a_chain_method(self):
        for name, spec in RULES.items():
            assert spec.invoke is getattr(ValidationChain, name)


class TestArguments:
    def test_true_calls_rule_without_arguments_or_modifiers(self, mock_chain):
        dispatch_rules("age", {"is_int": True}, mock_chain, [])

        assert mock_chain.mock_calls == [call.is_int()]

    def test_single_option_is_one_argument(self, mock_chain):
        dispatch_rules("age", {"is_int": {"options": {"min": 1}}}, mock_chain, [])

        assert mock_chain.mock_calls == [call.is_int({"min": 1})]

    def test_list_options_are_spread(self, mock_chain):
        dispatch_rules("role", {"is_in": {"options": [["a", "b"]]}}, mock_chain, [])

        assert mock_chain.mock_calls == [call.is_in(["a", "b"])]

    def test_mapping_without_options_means_no_arguments(self, mock_chain):
        dispatch_rules("age", {"is_int": {}}, mock_chain, [])

        assert mock_chain.mock_calls == [call.is_int()]


class TestModifiers:
    def test_validator_modifier_order(self, mock_chain):
        condition = Mock()

        dispatch_rules(
            "email",
            {"is_email": {"if": condition, "negated": True, "error_message": "bad", "bail": True}},
            mock_chain,
            [],
        )

        assert mock_chain.mock_calls == [
            call.if_(condition),
            call.not_(),
            call.is_email(),
            call.with_message("bad"),
            call.bail(),
        ]

    def test_sanitizer_ignores_modifiers(self, mock_chain):
        dispatch_rules(
            "name",
            {"trim": {"options": " x", "negated": True, "error_message": "bad", "bail": True, "if": Mock()}},
            mock_chain,
            [],
        )

        assert mock_chain.mock_calls == [call.trim(" x")]

    def test_truthy_flags_are_coerced(self, mock_chain):
        dispatch_rules("age", {"is_int": {"negated": "yes", "bail": 1}}, mock_chain, [])

        assert mock_chain.mock_calls == [call.not_(), call.is_int(), call.bail()]

    def test_real_chain_items(self):
        chain = check("email", ["body"])

        dispatch_rules(
            "email",
            {"trim": True, "is_email": {"if": lambda value, meta: True, "error_message": "bad email", "bail": True}},
            chain,
            [],
        )

        assert [type(item) for item in chain.items] == [Sanitization, Condition, StandardValidation, Bail]
        assert chain.items[2].message == "bad email"


class TestSkippedKeys:
    def test_falsy_rules_are_skipped(self, mock_chain):
        dispatch_rules("age", {"is_int": False, "is_email": None, "trim": 0}, mock_chain, [])

        assert mock_chain.mock_calls == []

    def test_reserved_keys_are_not_rules(self, mock_chain, caplog):
        with caplog.at_level(logging.WARNING):
            dispatch_rules("age", {"in": "body", "error_message": "bad", "is_int": True}, mock_chain, [])

        assert mock_chain.mock_calls == [call.is_int()]
        assert caplog.records == []

    def test_unknown_rule_warns_and_records_diagnostic(self, mock_chain, caplog):
        diagnostics = []

        with caplog.at_level(logging.WARNING, logger="fieldcheck"):
            dispatch_rules("age", {"is_nothing": True, "is_int": True}, mock_chain, diagnostics)

        assert mock_chain.mock_calls == [call.is_int()]
        assert "a validator/sanitizer with name is_nothing does not exist" in caplog.text
        [diagnostic] = diagnostics
        assert diagnostic.field == "age"
        assert diagnostic.rule == "is_nothing"
        assert diagnostic.code == UNKNOWN_RULE

    def test_invalid_optional_configuration_raises(self):
        with pytest.raises(SchemaError, match="nickname"):
            dispatch_rules("nickname", {"optional": {"options": "yes"}}, check("nickname"), [])


class TestOptional:
    def test_optional_true(self):
        chain = check("nickname")

        dispatch_rules("nickname", {"optional": True, "custom": {"options": lambda v, m: True}}, chain, [])

        assert chain.optional_options.nullable is False
        assert chain.optional_options.check_falsy is False
        assert isinstance(chain.items[0], CustomValidation)

    def test_optional_with_options(self):
        chain = check("nickname")

        dispatch_rules("nickname", {"optional": {"options": {"nullable": True}}}, chain, [])

        assert chain.optional_options.nullable is True
        assert chain.items == []


class TestUnusableArguments:
    @pytest.mark.parametrize("rule", ["custom", "is_in", "equals", "matches", "contains", "blacklist", "default"])
    def test_rule_needing_arguments_set_to_true_is_skipped(self, rule, caplog):
        chain = check("x", ["body"])
        diagnostics = []

        with caplog.at_level(logging.WARNING, logger="fieldcheck"):
            dispatch_rules("x", {rule: True, "is_int": True}, chain, diagnostics)

        assert [item.name for item in chain.items] == ["is_int"]
        [diagnostic] = diagnostics
        assert diagnostic.code == INVALID_RULE_ARGUMENTS
        assert diagnostic.rule == rule
        assert f"invalid arguments for {rule} on field x" in caplog.text

    def test_modifiers_of_skipped_rule_are_not_queued(self):
        chain = check("x", ["body"])

        dispatch_rules(
            "x",
            {"custom": {"if": lambda value, meta: True, "negated": True, "error_message": "bad", "bail": True}},
            chain,
            [],
        )
        dispatch_rules("x", {"is_int": True}, chain, [])

        assert [type(item) for item in chain.items] == [StandardValidation]
        assert chain.items[0].negated is False

    def test_unsupported_regex_flag_is_reported(self):
        chain = check("code", ["body"])
        diagnostics = []

        dispatch_rules("code", {"matches": {"options": ["^a", "g"]}}, chain, diagnostics)

        assert chain.items == []
        assert "'g'" in diagnostics[0].message
