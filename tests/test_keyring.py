"""
Tests for the Keyring rotation wrapper.
"""

import logging
import threading

import pytest

from cookiesignature import (
    DecodingError,
    EmptyInputError,
    EmptySecretError,
    ErrorKind,
    InvalidSignatureError,
    Keyring,
    KeyringConfig,
    NoSecretsProvidedError,
    SignatureConfigurationError,
    create_keyring,
    sign,
)

HELLO_SIGNED = "hello.DGDUkGlIkCzPz+C0B064FNgHdEjox7ch8tOBGslZ5QI"


@pytest.fixture
def keyring():
    return Keyring(["correctsecret"])


@pytest.fixture
def rotated_keyring():
    """Keyring after rotating 'old' out for 'new'."""
    return Keyring(["new", "old"])


class TestKeyringConstruction:
    """Test construction-time validation."""

    def test_no_secrets(self):
        with pytest.raises(NoSecretsProvidedError) as exc_info:
            Keyring([])
        assert exc_info.value.kind is ErrorKind.NO_SECRETS_PROVIDED
        assert str(exc_info.value) == "secret key must be provided"

    def test_empty_secret(self):
        with pytest.raises(EmptySecretError) as exc_info:
            Keyring([""])
        assert exc_info.value.index == 0
        assert exc_info.value.kind is ErrorKind.EMPTY_SECRET
        assert str(exc_info.value) == "secret key at index 0 must not be empty"

    def test_first_empty_secret_reported(self):
        with pytest.raises(EmptySecretError) as exc_info:
            Keyring(["a", "b", "", "c", ""])
        assert exc_info.value.index == 2

    def test_empty_bytes_secret(self):
        with pytest.raises(EmptySecretError):
            Keyring(["a", b""])

    @pytest.mark.parametrize("secrets", ["tobiiscool", b"tobiiscool"])
    def test_single_secret_instead_of_list(self, secrets):
        """Test a bare str or bytes is not split into one-character keys."""
        with pytest.raises(SignatureConfigurationError) as exc_info:
            Keyring(secrets)
        assert exc_info.value.context == {"type": type(secrets).__name__}

    def test_secrets_stored_as_bytes_in_order(self):
        keyring = Keyring(["new", b"old"])
        assert keyring.secrets == (b"new", b"old")
        assert keyring.current_secret == b"new"
        assert len(keyring) == 2

    def test_secrets_are_copied(self):
        """Test mutating the source list does not change the keyring."""
        source = ["new", "old"]
        keyring = Keyring(source)
        source.insert(0, "newer")
        assert keyring.secrets == (b"new", b"old")

    def test_keyring_is_immutable(self, keyring):
        with pytest.raises(AttributeError):
            keyring.secrets = (b"other",)
        with pytest.raises(AttributeError):
            keyring.extra = 1

    def test_repr_hides_secrets(self):
        keyring = Keyring(["topsecret", "older"])
        assert "topsecret" not in repr(keyring)
        assert "2 hidden" in repr(keyring)

    def test_get_info(self, rotated_keyring):
        assert rotated_keyring.get_info() == {"secret_count": 2, "encoding": "utf-8"}


class TestKeyringSign:
    """Test signing with a keyring."""

    def test_known_vector(self):
        assert Keyring(["tobiiscool"]).sign("hello") == HELLO_SIGNED

    def test_signs_with_first_secret(self, rotated_keyring):
        assert rotated_keyring.sign("value") == sign("value", b"new")

    def test_empty_value(self, keyring):
        with pytest.raises(EmptyInputError):
            keyring.sign("")

    def test_sign_base64_empty_value(self, keyring):
        with pytest.raises(EmptyInputError):
            keyring.sign_base64("")
        with pytest.raises(EmptyInputError):
            keyring.sign_base64(b"")

    def test_sign_base64_payload_is_padded_base64(self, keyring):
        signed = keyring.sign_base64("hello")
        assert signed.rsplit(".", 1)[0] == "aGVsbG8="
        assert signed == keyring.sign("aGVsbG8=")


class TestKeyringUnsign:
    """Test verification with a keyring."""

    def test_round_trip(self, keyring):
        assert keyring.unsign(keyring.sign("hello")) == "hello"

    def test_base64_round_trip(self, keyring):
        signed = keyring.sign_base64("hello")
        assert keyring.unsign_base64(signed) == b"hello"

    def test_base64_round_trip_binary(self, keyring):
        data = bytes(range(256))
        assert keyring.unsign_base64(keyring.sign_base64(data)) == data

    def test_empty_signed_value(self, keyring):
        with pytest.raises(EmptyInputError) as exc_info:
            keyring.unsign("")
        assert str(exc_info.value) == "signed value must be provided"

    def test_missing_separator(self, keyring):
        with pytest.raises(InvalidSignatureError):
            keyring.unsign("foo")

    def test_illegal_tag(self, keyring):
        with pytest.raises(DecodingError) as exc_info:
            keyring.unsign("foo.bar==")
        assert str(exc_info.value) == "illegal base64 data at input byte 3"

    def test_wrong_secret(self, keyring):
        with pytest.raises(InvalidSignatureError):
            keyring.unsign(sign("hello", b"wrongsecret"))

    def test_unsign_base64_wrong_secret(self, keyring):
        with pytest.raises(InvalidSignatureError):
            keyring.unsign_base64(sign("aGVsbG8=", b"wrongsecret"))

    def test_unsign_base64_tolerates_extra_padding(self, keyring):
        assert keyring.unsign_base64(keyring.sign("aGVsbG8====")) == b"hello"

    def test_unsign_base64_rejects_non_base64_payload(self, keyring):
        with pytest.raises(DecodingError):
            keyring.unsign_base64(keyring.sign("not base64!"))

    @pytest.mark.parametrize(
        "secrets, encoding, payload",
        [(["k"], "utf-8", "\udcff"), (["k"], "latin-1", "\u20ac")],
    )
    def test_unencodable_payload_is_decoding_error(self, secrets, encoding, payload):
        keyring = Keyring(secrets, encoding=encoding)
        with pytest.raises(DecodingError) as exc_info:
            keyring.unsign(payload + "." + "A" * 43)
        assert exc_info.value.context["original_error_type"] == "UnicodeEncodeError"

    def test_logs_warning_when_all_secrets_fail(self, rotated_keyring, caplog):
        with caplog.at_level(logging.WARNING, logger="cookiesignature.keyring"):
            with pytest.raises(InvalidSignatureError):
                rotated_keyring.unsign(sign("hello", b"unknown"))
        assert "failed against all 2 secret(s)" in caplog.text


class TestKeyRotation:
    """Test zero-downtime secret rotation."""

    def test_value_signed_with_old_secret_still_verifies(self, rotated_keyring):
        signed = Keyring(["old"]).sign("session")
        assert rotated_keyring.unsign(signed) == "session"

    def test_value_signed_with_new_secret_verifies(self, rotated_keyring):
        assert rotated_keyring.unsign(rotated_keyring.sign("session")) == "session"

    def test_retired_secret_removed(self):
        signed = Keyring(["old"]).sign("session")
        with pytest.raises(InvalidSignatureError):
            Keyring(["new"]).unsign(signed)

    def test_first_error_is_reported(self):
        """Test the newest secret's error is raised when every secret fails."""
        keyring = Keyring(["new", "old"])
        with pytest.raises(InvalidSignatureError) as exc_info:
            keyring.unsign(sign("session", b"other"))

        with pytest.raises(InvalidSignatureError) as first:
            Keyring(["new"]).unsign(sign("session", b"other"))
        assert str(exc_info.value) == str(first.value)

    def test_first_error_object_is_from_first_secret(self, monkeypatch):
        raised = []

        def fake_unsign(signed, secret, encoding):
            error = InvalidSignatureError(f"mismatch for {secret.decode()}")
            raised.append(error)
            raise error

        monkeypatch.setattr("cookiesignature.keyring.unsign", fake_unsign)
        with pytest.raises(InvalidSignatureError) as exc_info:
            Keyring(["new", "mid", "old"]).unsign("value.tag")

        assert len(raised) == 3
        assert exc_info.value is raised[0]

    def test_stops_at_first_success(self, monkeypatch):
        tried = []

        def fake_unsign(signed, secret, encoding):
            tried.append(secret)
            if secret == b"mid":
                return "value"
            raise InvalidSignatureError()

        monkeypatch.setattr("cookiesignature.keyring.unsign", fake_unsign)
        assert Keyring(["new", "mid", "old"]).unsign("value.tag") == "value"
        assert tried == [b"new", b"mid"]

    def test_concurrent_use(self, rotated_keyring):
        """Test a shared keyring from many threads."""
        errors = []

        def worker(n):
            try:
                for i in range(50):
                    value = f"user={n}:{i}"
                    assert rotated_keyring.unsign(rotated_keyring.sign(value)) == value
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []


class TestKeyringFactory:
    """Test keyring creation from configuration."""

    def test_from_config(self):
        keyring = Keyring.from_config(KeyringConfig(secrets=["tobiiscool"]))
        assert keyring.sign("hello") == HELLO_SIGNED

    def test_create_keyring_with_secrets(self):
        assert create_keyring(["tobiiscool"]).sign("hello") == HELLO_SIGNED

    def test_create_keyring_secrets_override_config(self):
        config = KeyringConfig(secrets=["ignored"])
        keyring = create_keyring(["tobiiscool"], config=config)
        assert keyring.sign("hello") == HELLO_SIGNED

    def test_create_keyring_encoding_override(self):
        keyring = create_keyring(["clé"], encoding="latin-1")
        assert keyring.current_secret == "clé".encode("latin-1")
        assert keyring.encoding == "latin-1"

    def test_create_keyring_without_secrets(self):
        with pytest.raises(NoSecretsProvidedError):
            create_keyring()

    def test_create_keyring_unknown_override(self, caplog):
        with caplog.at_level(logging.WARNING):
            create_keyring(["s"], colour="blue")
        assert "Unknown configuration parameter ignored: colour" in caplog.text
