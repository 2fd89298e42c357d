"""Unit tests for CLI module."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from password_validator.cli.main import app
from password_validator.services.engine import ValidationVerdict
from password_validator.services.errors import IdentityErrorKind, IdentityResolutionError

runner = CliRunner()


class TestCLIValidateCommand:
    """Tests for the validate command."""

    def test_validate_requires_tenant(self):
        result = runner.invoke(app, ["validate", "--user-id", "u1", "--password", "secret"])

        assert result.exit_code != 0

    @patch("password_validator.services.engine.ValidationEngine.validate", new_callable=AsyncMock)
    def test_valid_password(self, mock_validate):
        mock_validate.return_value = ValidationVerdict()

        result = runner.invoke(app, [
            "validate",
            "--tenant", "diku",
            "--user-id", "u1",
            "--password", "P@sw0rd1",
        ])

        assert result.exit_code == 0
        assert "Password is valid" in result.output
        user_id, password, context = mock_validate.call_args.args
        assert (user_id, password) == ("u1", "P@sw0rd1")
        assert context.tenant_id == "diku"

    @patch("password_validator.services.engine.ValidationEngine.validate", new_callable=AsyncMock)
    def test_invalid_password_lists_error_codes(self, mock_validate):
        mock_validate.return_value = ValidationVerdict(
            messages=["password.length.invalid", "password.whiteSpace.invalid"]
        )

        result = runner.invoke(app, [
            "validate",
            "--tenant", "diku",
            "--user-id", "u1",
            "--password", "a b",
        ])

        assert result.exit_code == 1
        assert "password.length.invalid" in result.output
        assert "password.whiteSpace.invalid" in result.output

    @patch("password_validator.services.engine.ValidationEngine.validate", new_callable=AsyncMock)
    def test_engine_error_exits_with_2(self, mock_validate):
        mock_validate.side_effect = IdentityResolutionError(
            "No user found by user id: u1", kind=IdentityErrorKind.NOT_FOUND, user_id="u1"
        )

        result = runner.invoke(app, [
            "validate",
            "--tenant", "diku",
            "--user-id", "u1",
            "--password", "secret",
        ])

        assert result.exit_code == 2
        assert "No user found" in result.output

    @patch("password_validator.services.engine.ValidationEngine.validate", new_callable=AsyncMock)
    def test_password_is_prompted(self, mock_validate):
        mock_validate.return_value = ValidationVerdict()

        result = runner.invoke(
            app,
            ["validate", "--tenant", "diku", "--user-id", "u1"],
            input="P@sw0rd1\n",
        )

        assert result.exit_code == 0
        assert mock_validate.call_args.args[1] == "P@sw0rd1"


class TestCLIRuleCommands:
    """Tests for the rule registry commands."""

    @patch("password_validator.services.registry.RuleRegistryService.load_default_rules", new_callable=AsyncMock)
    def test_seed_rules(self, mock_load):
        mock_load.return_value = {"created": 8, "skipped": 0}

        result = runner.invoke(app, ["seed-rules", "diku"])

        assert result.exit_code == 0
        assert "8 created, 0 skipped" in result.output
        assert mock_load.call_args.args == ("diku",)

    @patch("password_validator.services.registry.RuleRegistryService.list_rules", new_callable=AsyncMock)
    def test_list_rules(self, mock_list):
        mock_list.return_value = (
            [
                SimpleNamespace(
                    order_no=0,
                    name="length",
                    type="RegExp",
                    validation_type="Strong",
                    state="Enabled",
                    err_message_id="len.invalid",
                )
            ],
            1,
        )

        result = runner.invoke(app, ["rules", "diku", "--state", "Enabled"])

        assert result.exit_code == 0
        assert "length" in result.output
        assert "len.invalid" in result.output
        assert mock_list.call_args.kwargs["state"] == "Enabled"

    def test_rules_requires_tenant(self):
        result = runner.invoke(app, ["rules"])

        assert result.exit_code != 0
