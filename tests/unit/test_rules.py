"""Tests for rule snapshots, ordering and user name substitution."""

import re
from types import SimpleNamespace

from conftest import programmatic_rule, reg_exp_rule

from password_validator.services.rules import (
    USER_NAME_PLACEHOLDER,
    RuleState,
    RuleType,
    ValidationRule,
    ValidationType,
    prepare_rules,
    sort_rules,
    substitute_user_name,
)


class TestSortRules:
    """Tests for rule ordering."""

    def test_sorts_by_order_no(self):
        rules = [
            reg_exp_rule("c", ".*", order_no=2),
            reg_exp_rule("a", ".*", order_no=0),
            reg_exp_rule("b", ".*", order_no=1),
        ]

        assert [r.name for r in sort_rules(rules)] == ["a", "b", "c"]

    def test_equal_order_numbers_keep_fetch_order(self):
        rules = [
            reg_exp_rule("first", ".*", order_no=1),
            reg_exp_rule("zero", ".*", order_no=0),
            reg_exp_rule("second", ".*", order_no=1),
            reg_exp_rule("third", ".*", order_no=1),
        ]

        assert [r.name for r in sort_rules(rules)] == ["zero", "first", "second", "third"]

    def test_empty(self):
        assert sort_rules([]) == []


class TestSubstituteUserName:
    """Tests for the user name placeholder."""

    def test_replaces_every_occurrence(self):
        expression = f"^(?!.*{USER_NAME_PLACEHOLDER}).*{USER_NAME_PLACEHOLDER}?$"

        result = substitute_user_name(expression, "bob")

        assert USER_NAME_PLACEHOLDER not in result
        assert result.count("bob") == 2

    def test_user_name_matches_literally(self):
        """Regex metacharacters in a user name are not interpreted."""
        pattern = substitute_user_name(r"^(?:(?!<USER_NAME>).)+$", "j.doe")

        assert re.fullmatch(pattern, "xxj.doexx") is None
        assert re.fullmatch(pattern, "xxjxdoexx") is not None

    def test_expression_without_placeholder_is_unchanged(self):
        assert substitute_user_name("^.{8,}$", "bob") == "^.{8,}$"


class TestPrepareRules:
    """Tests for rule preparation before evaluation."""

    def test_substitutes_in_reg_exp_rules_only(self):
        pattern = reg_exp_rule("no_user", f"^(?:(?!{USER_NAME_PLACEHOLDER}).)+$")
        remote = programmatic_rule(
            "remote", f"/check/{USER_NAME_PLACEHOLDER}", order_no=1
        )

        prepared = prepare_rules([remote, pattern], "admin")

        assert prepared[0].expression == "^(?:(?!admin).)+$"
        assert prepared[1].implementation_reference == f"/check/{USER_NAME_PLACEHOLDER}"

    def test_returns_sorted_copies(self):
        original = reg_exp_rule("no_user", f"{USER_NAME_PLACEHOLDER}", order_no=5)
        other = reg_exp_rule("length", "^.{8,}$", order_no=1)

        prepared = prepare_rules([original, other], "admin")

        assert [r.name for r in prepared] == ["length", "no_user"]
        assert original.expression == USER_NAME_PLACEHOLDER
        assert prepared[1] is not original

    def test_rules_without_placeholder_are_passed_through(self):
        rule = reg_exp_rule("length", "^.{8,}$")

        assert prepare_rules([rule], "admin")[0] is rule


class TestValidationRule:
    """Tests for the ValidationRule snapshot."""

    def test_type_checks(self):
        assert reg_exp_rule("a", ".*").is_reg_exp
        assert not reg_exp_rule("a", ".*").is_programmatic
        assert programmatic_rule("b", "/b").is_programmatic
        assert not reg_exp_rule("c", ".*", rule_type="Other").is_reg_exp

    def test_from_model(self):
        model = SimpleNamespace(
            rule_id="r-1",
            name="length",
            type=RuleType.REG_EXP.value,
            validation_type=ValidationType.STRONG.value,
            err_message_id="password.length.invalid",
            order_no=3,
            state=RuleState.ENABLED.value,
            expression="^.{8,}$",
            implementation_reference=None,
            module_name="mod-password-validator",
            description="Minimum length",
        )

        rule = ValidationRule.from_model(model)

        assert rule.rule_id == "r-1"
        assert rule.rule_type == "RegExp"
        assert rule.order_no == 3
        assert rule.is_reg_exp
        assert rule.expression == "^.{8,}$"

    def test_defaults(self):
        rule = ValidationRule(
            rule_id="r",
            name="n",
            rule_type="RegExp",
            validation_type="Strong",
            err_message_id="e",
        )

        assert rule.order_no == 0
        assert rule.state == "Enabled"
        assert rule.expression is None
