"""Unit tests for the token codec and signer."""

import base64
import hashlib
import hmac
from unittest.mock import patch

import pytest

from tokenize_auth.core.exceptions import (
    ConfigurationError,
    InvalidPrefixError,
    TokenFormatError,
    TokenSignatureError,
    ValidationError,
)
from tokenize_auth.domain.services.signer import TokenSigner, b64decode_unpadded


def reference_signature(secret: bytes, unsigned: str, version: int = 1) -> str:
    digest = hmac.new(secret, f"TTF.{version}.{unsigned}".encode(), hashlib.sha256).digest()
    return base64.b64encode(digest).decode().rstrip("=")


@pytest.fixture
def signer():
    return TokenSigner("s3cr3t")


class TestEncoding:
    def test_encode_without_prefix(self, signer):
        assert signer.encode_unsigned("user-42", 12345) == "dXNlci00Mg.MTIzNDU"

    def test_encode_with_prefix(self, signer):
        assert signer.encode_unsigned("user-42", 12345, "bot") == "bot.dXNlci00Mg.MTIzNDU"

    def test_padding_is_stripped(self, signer):
        unsigned = signer.encode_unsigned("a", 1)

        assert "=" not in unsigned
        assert unsigned == "YQ.MQ"

    def test_signature_is_unpadded_hmac(self, signer):
        signature = signer.sign("dXNlci00Mg.MTIzNDU")

        assert "=" not in signature
        assert signature == reference_signature(b"s3cr3t", "dXNlci00Mg.MTIzNDU")

    def test_version_is_part_of_signed_material(self):
        v1 = TokenSigner("s3cr3t", version=1)
        v2 = TokenSigner("s3cr3t", version=2)

        assert v1.sign("abc.def") != v2.sign("abc.def")

    def test_prefix_with_dot_rejected(self, signer):
        with pytest.raises(InvalidPrefixError):
            signer.encode_unsigned("user-42", 12345, "a.b")

    def test_empty_prefix_rejected(self, signer):
        with pytest.raises(InvalidPrefixError):
            signer.encode_unsigned("user-42", 12345, "")

    def test_empty_account_rejected(self, signer):
        with pytest.raises(ValidationError):
            signer.encode_unsigned("", 12345)

    def test_non_integer_time_rejected(self, signer):
        with pytest.raises(ValidationError):
            signer.encode_unsigned("user-42", "12345")


class TestBuildAndParse:
    def test_example_token(self, signer):
        wire = signer.build_token("user-42", 12345)
        account_part, time_part, signature = wire.split(".")

        assert b64decode_unpadded(account_part) == b"user-42"
        assert b64decode_unpadded(time_part) == b"12345"
        assert signature == reference_signature(b"s3cr3t", f"{account_part}.{time_part}")

    def test_known_wire_strings(self, signer):
        # Reference values computed with openssl, independently of this package.
        assert signer.build_token("user-42", 12345) == (
            "dXNlci00Mg.MTIzNDU.8B+UpBhrGBagyeTJDi3wxvardsRLCG2d+KgU/Wz1Uys"
        )
        assert signer.build_token("user-42", 12345, "bot") == (
            "bot.dXNlci00Mg.MTIzNDU.mUlpolXtVwV7fJ8ApDByPwpuPiZYllXCDB6aSf+wN/c"
        )

    def test_deterministic(self, signer):
        assert signer.build_token("user-42", 12345, "bot") == TokenSigner("s3cr3t").build_token(
            "user-42", 12345, "bot"
        )

    def test_different_secrets_differ(self, signer):
        assert signer.build_token("user-42", 12345) != TokenSigner("other").build_token("user-42", 12345)

    @pytest.mark.parametrize("prefix", [None, "bot", "mfa"])
    @pytest.mark.parametrize("account_id", ["user-42", "1", "ünïcödé", "x" * 50])
    def test_parse_recovers_fields(self, signer, account_id, prefix):
        parsed = signer.parse_and_verify(signer.build_token(account_id, 98765, prefix))

        assert parsed.account_id == account_id
        assert parsed.issued_at == 98765
        assert parsed.prefix == prefix

    def test_parse_accepts_padded_segments(self, signer):
        # Segments re-padded by a sloppy client still verify when signed that way.
        unsigned = "dXNlci00Mg==.MTIzNDU="
        wire = f"{unsigned}.{signer.sign(unsigned)}"

        parsed = signer.parse_and_verify(wire)

        assert parsed.account_id == "user-42"
        assert parsed.issued_at == 12345


class TestRejection:
    @pytest.mark.parametrize("wire", ["", "abc", "a.b", "a.b.c.d.e", "a.b.c.d.e.f"])
    def test_bad_segment_count_is_format_error(self, signer, wire, mocker):
        sign = mocker.spy(TokenSigner, "sign")

        with pytest.raises(TokenFormatError):
            signer.parse_and_verify(wire)

        sign.assert_not_called()

    def test_non_string_is_format_error(self, signer):
        with pytest.raises(TokenFormatError):
            signer.parse_and_verify(None)

    def test_every_single_character_flip_is_detected(self, signer):
        wire = signer.build_token("user-42", 12345, "bot")

        for index, char in enumerate(wire):
            if char == ".":
                continue
            replacement = "A" if char != "A" else "B"
            tampered = wire[:index] + replacement + wire[index + 1 :]
            with pytest.raises(TokenSignatureError):
                signer.parse_and_verify(tampered)

    def test_foreign_secret_is_signature_error(self, signer):
        forged = TokenSigner("attacker").build_token("admin", 12345)

        with pytest.raises(TokenSignatureError):
            signer.parse_and_verify(forged)

    def test_prefix_cannot_be_added_or_removed(self, signer):
        wire = signer.build_token("user-42", 12345)

        with pytest.raises(TokenSignatureError):
            signer.parse_and_verify("mfa." + wire)

        prefixed = signer.build_token("user-42", 12345, "mfa")
        with pytest.raises(TokenSignatureError):
            signer.parse_and_verify(prefixed.split(".", 1)[1])

    def test_signature_checked_before_decoding(self, signer):
        with pytest.raises(TokenSignatureError):
            signer.parse_and_verify("!!!.???.bogus")

    def test_signed_garbage_base64_is_format_error(self, signer):
        unsigned = "!!!.MTIzNDU"
        wire = f"{unsigned}.{signer.sign(unsigned)}"

        with pytest.raises(TokenFormatError):
            signer.parse_and_verify(wire)

    def test_signed_non_integer_time_is_format_error(self, signer):
        time_part = base64.b64encode(b"12a45").decode().rstrip("=")
        unsigned = f"dXNlci00Mg.{time_part}"
        wire = f"{unsigned}.{signer.sign(unsigned)}"

        with pytest.raises(TokenFormatError):
            signer.parse_and_verify(wire)

    def test_signed_empty_prefix_is_format_error(self, signer):
        unsigned = ".dXNlci00Mg.MTIzNDU"
        wire = f"{unsigned}.{signer.sign(unsigned)}"

        with pytest.raises(TokenFormatError):
            signer.parse_and_verify(wire)


class TestConfiguration:
    def test_empty_secret_rejected(self):
        with pytest.raises(ConfigurationError):
            TokenSigner("")

    def test_missing_hmac_primitive_is_fatal(self):
        with patch("tokenize_auth.domain.services.signer.hashlib.algorithms_available", set()):
            with pytest.raises(ConfigurationError):
                TokenSigner("s3cr3t")

    def test_repr_hides_secret(self, signer):
        assert "s3cr3t" not in repr(signer)
