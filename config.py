"""
Configuration module for the Cloud Identity groups tool
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence, Tuple

from dotenv import load_dotenv

from errors import MissingFileError, PathResolutionError

load_dotenv()

CLOUD_IDENTITY_GROUPS_SCOPE = 'https://www.googleapis.com/auth/cloud-identity.groups'

# Cloud Identity and Admin Directory scopes granted for domain-wide delegation
REQUIRED_SCOPES = (
    CLOUD_IDENTITY_GROUPS_SCOPE,
    'https://www.googleapis.com/auth/admin.directory.group',
    'https://www.googleapis.com/auth/admin.directory.group.member',
)


def _split_scopes(value: str) -> Tuple[str, ...]:
    return clean_scopes(value.split(','))


def clean_scopes(scopes: Sequence[str]) -> Tuple[str, ...]:
    """Strip scopes and drop blank entries"""
    return tuple(s.strip() for s in scopes if s and s.strip())


def parse_page_size(value) -> int:
    """Convert a page size from env or flags, rejecting non-positive values"""
    try:
        page_size = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Page size must be a positive integer, got {value!r}") from None

    if page_size <= 0:
        raise ValueError(f"Page size must be a positive integer, got {page_size}")
    return page_size


class Config:
    """Configuration settings read from the environment / .env"""

    # Credentials
    CREDENTIALS_FILE = os.getenv('GROUPS_CREDENTIALS_FILE', 'service_account.json')
    DELEGATED_USER = os.getenv('GROUPS_DELEGATED_USER', '')

    # Directory
    CUSTOMER_ID = os.getenv('GROUPS_CUSTOMER_ID', '')
    # kept as text; converted by validate()
    PAGE_SIZE = os.getenv('GROUPS_PAGE_SIZE', '10')
    SCOPES = _split_scopes(os.getenv('GROUPS_SCOPES', '')) or REQUIRED_SCOPES

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE', '')

    @classmethod
    def validate(cls, customer_id=None, page_size=None, scopes=None):
        """
        Validate required configuration

        Arguments override the environment values, so command line flags
        are checked the same way.
        """
        customer_id = cls.CUSTOMER_ID if customer_id is None else customer_id
        page_size = cls.PAGE_SIZE if page_size is None else page_size
        scopes = cls.SCOPES if scopes is None else clean_scopes(scopes)

        if not customer_id:
            raise ValueError("Missing required configuration: GROUPS_CUSTOMER_ID")

        parse_page_size(page_size)

        if not scopes:
            raise ValueError("At least one OAuth scope is required")

        return True


@dataclass(frozen=True)
class ServiceConfig:
    """Resolved settings for one run, immutable once built"""
    service_account_key_path: str
    delegated_user: str
    customer_id: str
    scopes: Tuple[str, ...] = field(default=REQUIRED_SCOPES)


def new_service_config(key_path: str, delegated_user: str, customer_id: str,
                       scopes: Sequence[str] = REQUIRED_SCOPES) -> ServiceConfig:
    """
    Build a ServiceConfig with the key path resolved and checked

    Args:
        key_path: Path to the service account key JSON (relative or absolute)
        delegated_user: Workspace user to impersonate, empty for none
        customer_id: Cloud Identity customer id, e.g. C03ygpcl8
        scopes: OAuth scopes requested by the delegated grant

    Raises:
        PathResolutionError: path is empty or cannot be resolved
        MissingFileError: resolved path is not an existing file
    """
    if not key_path:
        raise PathResolutionError("failed to resolve key path: empty path")

    try:
        abs_path = Path(key_path).expanduser().resolve()
    except (OSError, RuntimeError) as e:
        raise PathResolutionError(f"failed to resolve key path: {e}") from e

    if not abs_path.is_file():
        raise MissingFileError(f"service account key file does not exist: {abs_path}")

    return ServiceConfig(
        service_account_key_path=str(abs_path),
        delegated_user=delegated_user or '',
        customer_id=customer_id,
        scopes=tuple(scopes),
    )
