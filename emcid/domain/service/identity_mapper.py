"""Derivation of local account names from a provider identity."""

import random
import re
import string

import logfire

from emcid.config import AccountSettings
from emcid.domain.repository import AccountRepository

from .base import Service

SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
SUFFIX_LENGTH = 5

# Normalized names this short are replaced by the fallback prefix
MIN_NAME_LENGTH = 3


class IdentityMapper(Service):
    """Generates collision-free usernames and emails for new accounts.

    Suffixes only avoid collisions, so a plain ``random.Random`` is used.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        account_settings: AccountSettings,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize identity mapper.

        Args:
            account_repository: Account repository used for uniqueness checks
            account_settings: Account policy (fallback prefix, reserved domain)
            rng: Random generator for suffixes
        """
        self.account_repository = account_repository
        self.account_settings = account_settings
        self.rng = rng or random.Random()

    def generate_suffix(self) -> str:
        """Return 5 characters drawn uniformly from [a-z0-9]."""
        return "".join(self.rng.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))

    async def derive_username(self, first_name: str, last_name: str) -> str:
        """Derive an unused username from the person's name.

        "Jane  Doe" becomes "jane-doe"; a taken name gets "-<suffix>"
        appended. Names of three characters or less fall back to the
        configured prefix plus a suffix.

        Args:
            first_name: First name from the infocard
            last_name: Last name from the infocard

        Returns:
            Username no existing account uses
        """
        base_name = f"{first_name} {last_name}".lower().strip()
        base_name = re.sub(r"\s+", "-", base_name)

        if len(base_name) > MIN_NAME_LENGTH:
            candidate = base_name
        else:
            prefix = self.account_settings.username_fallback_prefix
            candidate = prefix + self.generate_suffix()
            base_name = prefix

        attempts = 1
        while await self.account_repository.find_by_username(candidate):
            candidate = f"{base_name}-{self.generate_suffix()}"
            attempts += 1

        logfire.debug("Username derived", username=candidate, attempts=attempts)
        return candidate

    async def derive_email(self, candidate_email: str, username: str) -> str:
        """Use the provider email, or synthesize one on the reserved domain.

        Args:
            candidate_email: Email from the infocard, possibly empty
            username: Username derived for the account

        Returns:
            Email no existing account uses
        """
        if candidate_email and not await self.account_repository.find_by_email(
            candidate_email
        ):
            return candidate_email

        domain = self.account_settings.reserved_email_domain
        local_part = re.sub(r"\s+", "", username.lower().strip())

        while await self.account_repository.find_by_email(f"{local_part}@{domain}"):
            local_part = f"{username}-{self.generate_suffix()}"

        email = f"{local_part}@{domain}"
        logfire.debug(
            "Email synthesized",
            email=email,
            provider_email_present=bool(candidate_email),
        )
        return email
