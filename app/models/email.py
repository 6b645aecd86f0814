from typing import Annotated
from pydantic import AfterValidator
from pydantic.networks import validate_email


def _check_email(value: str) -> str:
    """Reject malformed addresses but keep the spelling the caller sent"""
    validate_email(value)
    return value


# Emails are lookup keys (users, submissions, payments, winners), stored as sent
Email = Annotated[str, AfterValidator(_check_email)]
