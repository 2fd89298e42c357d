"""Rule set installed for a tenant that has not configured its own."""

from typing import Any

from password_validator.models.rule import RuleState, RuleType, ValidationType

MODULE_NAME = "mod-password-validator"


def _reg_exp_rule(
    name: str,
    expression: str,
    description: str,
    order_no: int,
    err_message_id: str,
) -> dict[str, Any]:
    return {
        "name": name,
        "type": RuleType.REG_EXP.value,
        "validation_type": ValidationType.STRONG.value,
        "state": RuleState.ENABLED.value,
        "module_name": MODULE_NAME,
        "expression": expression,
        "description": description,
        "order_no": order_no,
        "err_message_id": err_message_id,
    }


DEFAULT_RULES: list[dict[str, Any]] = [
    _reg_exp_rule(
        "password_length",
        r"^.{8,}$",
        "The password length must be minimum 8 digits",
        0,
        "password.length.invalid",
    ),
    _reg_exp_rule(
        "alphabetical_letters",
        r"(?=.*[a-z])(?=.*[A-Z]).+",
        "The password must contain both upper and lower case letters",
        1,
        "password.alphabetical.invalid",
    ),
    _reg_exp_rule(
        "numeric_symbol",
        r"(?=.*\d).+",
        "The password must contain at least one numeric character",
        2,
        "password.number.invalid",
    ),
    _reg_exp_rule(
        "special_character",
        r"(?=.*[!\"#$%&'()*+,\-./:;<=>?@\[\]^_`{|}~]).+",
        "The password must contain at least one special character",
        3,
        "password.specialCharacter.invalid",
    ),
    _reg_exp_rule(
        "no_user_name",
        r"^(?:(?!<USER_NAME>).)+$",
        "The password must not contain your username",
        4,
        "password.usernameDuplicate.invalid",
    ),
    _reg_exp_rule(
        "keyboard_sequence",
        r"^(?:(?!qwe)(?!asd)(?!zxc)(?!qaz)(?!zaq)(?!xsw)(?!wsx)(?!edc)(?!cde)(?!rfv)"
        r"(?!vfr)(?!tgb)(?!bgt)(?!yhn)(?!nhy)(?!ujm)(?!mju)(?!ik,)(?!,ki)(?!ol\.)"
        r"(?!\.lo)(?!p;/)(?!/;p)(?!123).)+$",
        "The password must not contain a keyboard sequence",
        5,
        "password.keyboardSequence.invalid",
    ),
    _reg_exp_rule(
        "repeating_characters",
        r"^(?:(.)(?!\1))*$",
        "The password must not contain repeating symbols",
        6,
        "password.repeatingSymbols.invalid",
    ),
    _reg_exp_rule(
        "no_white_space_character",
        r"^[^\s]+$",
        "The password must not contain a white space",
        7,
        "password.whiteSpace.invalid",
    ),
]
