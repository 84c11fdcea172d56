# ABOUTME: Credential lookup through the 1Password CLI.
# ABOUTME: Reads a username/password pair from a named 1Password item via `op item get`.

import logging
import subprocess
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

OP_BINARY = "op"


class CredentialError(Exception):
    """Raised when credentials cannot be fetched from 1Password."""


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)


def _read_field(item_name: str, field_name: str) -> str:
    """Run `op item get` for a single revealed field."""
    try:
        completed = subprocess.run(
            [OP_BINARY, "item", "get", item_name, "--fields", field_name, "--reveal"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise CredentialError(f"Cannot run {OP_BINARY}: {exc}") from exc

    if completed.returncode != 0:
        output = (completed.stderr or completed.stdout).strip()
        raise CredentialError(f"Failed to fetch {field_name} for {item_name}: {output}")
    return completed.stdout.strip()


def fetch_credentials(item_name: str) -> Credentials:
    """Fetch the username and password stored in a 1Password item.

    Raises:
        CredentialError: If `op` is missing, exits non-zero, or returns empty values.
    """
    username = _read_field(item_name, "username")
    password = _read_field(item_name, "password")
    if not username or not password:
        raise CredentialError(f"Empty credentials for {item_name}")

    logger.info(
        "Fetched credentials for %s (username: %s, password length: %d)",
        item_name,
        username,
        len(password),
    )
    return Credentials(username=username, password=password)
