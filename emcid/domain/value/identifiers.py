"""Strongly typed identifiers for domain entities."""

from typing import NewType
from uuid import UUID

AccountId = NewType("AccountId", UUID)
IdentityBindingId = NewType("IdentityBindingId", UUID)
