"""Test configuration and fixtures."""

import os

import logfire

# Provider settings for the test container; tests needing an unconfigured
# provider blank them on the Settings instance.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SESSION__SECRET_KEY", "test-secret")
os.environ.setdefault("EMERCOIN__CLIENT_ID", "test-client")
os.environ.setdefault("EMERCOIN__CLIENT_SECRET", "test-secret")
os.environ.setdefault("EMERCOIN__AUTH_PAGE", "https://id.emercoin.test/oauth/v2/auth")
os.environ.setdefault("EMERCOIN__TOKEN_PAGE", "https://id.emercoin.test/oauth/v2/token")
os.environ.setdefault("EMERCOIN__INFOCARD", "https://id.emercoin.test/infocard")

logfire.configure(send_to_logfire=False, console=False)
