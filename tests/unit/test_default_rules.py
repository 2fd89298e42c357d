"""Behaviour of the default rule set against sample passwords."""

import pytest

from conftest import TEST_USER_ID, InMemoryRuleSource, StaticIdentityResolver

from password_validator.services.default_rules import DEFAULT_RULES
from password_validator.services.engine import ValidationEngine
from password_validator.services.evaluators import ProgrammaticRuleEvaluator
from password_validator.services.rules import ValidationRule


def default_rule_snapshots() -> list[ValidationRule]:
    return [
        ValidationRule(
            rule_id=f"default-{fields['order_no']}",
            name=fields["name"],
            rule_type=fields["type"],
            validation_type=fields["validation_type"],
            err_message_id=fields["err_message_id"],
            order_no=fields["order_no"],
            state=fields["state"],
            expression=fields["expression"],
            module_name=fields["module_name"],
            description=fields["description"],
        )
        for fields in DEFAULT_RULES
    ]


@pytest.fixture
def engine(gateway_client, metrics) -> ValidationEngine:
    return ValidationEngine(
        rule_source=InMemoryRuleSource(default_rule_snapshots()),
        identity_resolver=StaticIdentityResolver("admin"),
        programmatic_evaluator=ProgrammaticRuleEvaluator(gateway_client, metrics=metrics),
        metrics=metrics,
    )


class TestDefaultRules:
    """Each sample password breaks exactly one default rule."""

    @pytest.mark.asyncio
    async def test_valid_password(self, engine, request_context):
        verdict = await engine.validate(TEST_USER_ID, "P@sw0rd1", request_context)

        assert verdict.is_valid

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "password, error_code",
        [
            ("P@sw0rd", "password.length.invalid"),
            ("p@sw0rds", "password.alphabetical.invalid"),
            ("P@SW0RDS", "password.alphabetical.invalid"),
            ("p@sWords", "password.number.invalid"),
            ("pasW0rds", "password.specialCharacter.invalid"),
            ("P@swadmin0rd1", "password.usernameDuplicate.invalid"),
            ("p@sw0qwertyrD", "password.keyboardSequence.invalid"),
            ("p@ssw0rD", "password.repeatingSymbols.invalid"),
            ("P@s w0rd1", "password.whiteSpace.invalid"),
        ],
    )
    async def test_single_violation(self, engine, request_context, password, error_code):
        verdict = await engine.validate(TEST_USER_ID, password, request_context)

        assert verdict.messages == [error_code]

    @pytest.mark.asyncio
    async def test_several_violations_in_rule_order(self, engine, request_context):
        verdict = await engine.validate(TEST_USER_ID, "aa 1", request_context)

        assert verdict.messages == [
            "password.length.invalid",
            "password.alphabetical.invalid",
            "password.specialCharacter.invalid",
            "password.repeatingSymbols.invalid",
            "password.whiteSpace.invalid",
        ]

    @pytest.mark.asyncio
    async def test_keyboard_sequence_dot_is_literal(self, engine, request_context):
        """'ol.' is a sequence but 'olx' is not."""
        assert (await engine.validate(TEST_USER_ID, "Xol.9rtB", request_context)).messages == [
            "password.keyboardSequence.invalid"
        ]
        assert (await engine.validate(TEST_USER_ID, "Xolx9rt!", request_context)).is_valid

    def test_rule_order_numbers_are_unique(self):
        orders = [fields["order_no"] for fields in DEFAULT_RULES]

        assert sorted(orders) == list(range(len(DEFAULT_RULES)))
