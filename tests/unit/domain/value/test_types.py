"""Unit tests for domain value objects."""

import pytest
from pydantic import ValidationError

from emcid.domain.value import AccessToken, Email, ProviderIdentity, Username


class TestUsername:
    """Tests for Username."""

    @pytest.mark.parametrize(
        "value", ["jane-doe", "emcid_4k2x9", "o'brien", "j.doe@example", "a+b"]
    )
    def test_valid_usernames(self, value):
        assert Username(value).root == value

    def test_empty_username_is_rejected(self):
        with pytest.raises(ValidationError, match="You must enter a username"):
            Username("")

    def test_space_is_illegal(self):
        with pytest.raises(ValidationError, match="illegal character"):
            Username("jane doe")

    def test_too_long_username_is_rejected(self):
        with pytest.raises(ValidationError, match="too long"):
            Username("a" * 61)

    def test_sixty_characters_are_allowed(self):
        assert len(Username("a" * 60).root) == 60


class TestEmail:
    """Tests for Email."""

    def test_valid_email(self):
        assert Email("jane@emercoinid.local").root == "jane@emercoinid.local"

    @pytest.mark.parametrize("value", ["", "jane", "jane@", "@b.com", "a b@c.com"])
    def test_invalid_email(self, value):
        with pytest.raises(ValidationError):
            Email(value)


class TestAccessToken:
    def test_empty_token_is_rejected(self):
        with pytest.raises(ValidationError):
            AccessToken("")


class TestProviderIdentity:
    """Tests for ProviderIdentity."""

    def test_serial_is_lower_cased(self):
        identity = ProviderIdentity(provider_user_id=" ABC123 ")

        assert identity.provider_user_id == "abc123"
        assert identity.email == ""
        assert identity.first_name == ""

    def test_empty_serial_is_rejected(self):
        with pytest.raises(ValidationError):
            ProviderIdentity(provider_user_id="  ")
