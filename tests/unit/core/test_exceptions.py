import pytest

from tokenize_auth.core.exceptions import (
    ConfigurationError,
    InvalidPrefixError,
    InvalidTokenError,
    TokenFormatError,
    TokenizeError,
    TokenSignatureError,
    ValidationError,
)


def test_tokenize_error_default():
    # Act
    error = TokenizeError("Something broke")

    # Assert
    assert error.message == "Something broke"
    assert error.code == "generic_error"
    assert str(error) == "Something broke"


def test_format_error_defaults():
    error = TokenFormatError()

    assert error.code == "token_format_error"
    assert isinstance(error, InvalidTokenError)
    assert isinstance(error, TokenizeError)


def test_signature_error_defaults():
    error = TokenSignatureError()

    assert error.code == "token_signature_error"
    assert isinstance(error, InvalidTokenError)
    assert not isinstance(error, TokenFormatError)


def test_custom_code_is_kept():
    error = ConfigurationError("No secret", code="missing_secret")

    assert error.code == "missing_secret"
    assert str(error) == "No secret"


def test_prefix_error_is_a_value_error():
    with pytest.raises(ValueError):
        raise InvalidPrefixError()

    error = InvalidPrefixError()
    assert isinstance(error, ValidationError)
    assert error.code == "invalid_prefix"
    assert error.message == "Prefix cannot contain dots."
