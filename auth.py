"""
Authentication module for the Cloud Identity API
Builds service account grants, verifies them, and creates API clients
with and without domain-wide delegation
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import google_auth_httplib2
from google.auth.exceptions import GoogleAuthError, RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from googleapiclient import errors as api_errors
from googleapiclient.discovery import build

from config import CLOUD_IDENTITY_GROUPS_SCOPE, ServiceConfig
from errors import (
    ClientConstructionError,
    MissingDelegationTargetError,
    MissingFileError,
    ParseError,
    ReadError,
    TokenAcquisitionError,
)

logger = logging.getLogger(__name__)

API_NAME = 'cloudidentity'
API_VERSION = 'v1'

_BUILD_ERRORS = (api_errors.Error, GoogleAuthError, OSError, ValueError)


@dataclass(frozen=True)
class CredentialSummary:
    """Identity fields of a service account key"""
    client_email: str
    project_id: str
    client_id: str = ''

    @classmethod
    def from_info(cls, info: dict) -> 'CredentialSummary':
        return cls(
            client_email=info.get('client_email', ''),
            project_id=info.get('project_id', ''),
            client_id=info.get('client_id', ''),
        )


def read_key_file(path: str) -> bytes:
    """Read the raw bytes of a service account key file"""
    try:
        with open(path, 'rb') as f:
            return f.read()
    except FileNotFoundError as e:
        raise MissingFileError(f"service account key file does not exist: {path}") from e
    except OSError as e:
        raise ReadError(f"failed to read credentials: {e}") from e


def parse_key_info(data: bytes) -> dict:
    """Decode key file bytes into the service account info mapping"""
    try:
        info = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"failed to parse service account JSON: {e}") from e

    if not isinstance(info, dict):
        raise ParseError("failed to parse service account JSON: expected an object")
    return info


def describe_service_account(data: bytes) -> CredentialSummary:
    """Print the identity a key file belongs to"""
    summary = CredentialSummary.from_info(parse_key_info(data))

    print(f"Service Account Email: {summary.client_email}")
    print(f"Project ID: {summary.project_id}")
    return summary


def build_grant(info: dict, scopes: Sequence[str], subject: Optional[str] = None):
    """
    Create a service account grant over the given scopes

    Args:
        info: Parsed service account key
        scopes: OAuth scopes to request
        subject: User to impersonate (domain-wide delegation), or None
    """
    try:
        credentials = service_account.Credentials.from_service_account_info(
            info,
            scopes=list(scopes)
        )
    except (ValueError, KeyError, TypeError) as e:
        raise ParseError(f"failed to parse service account key: {e}") from e

    if subject:
        credentials = credentials.with_subject(subject)
    return credentials


def format_scopes(scopes: Sequence[str]) -> str:
    return '[' + ' '.join(scopes) + ']'


def verify_token_access(config: ServiceConfig, request=None):
    """
    Confirm the key can mint an access token for the configured scopes

    Args:
        config: Resolved service configuration
        request: google.auth transport request, defaults to a requests-based one

    Raises:
        ReadError, ParseError, TokenAcquisitionError
    """
    data = read_key_file(config.service_account_key_path)
    info = parse_key_info(data)
    summary = CredentialSummary.from_info(info)

    print("Attempting authentication with:")
    print(f"- Service Account: {summary.client_email}")
    print(f"- Project ID: {summary.project_id}")
    print(f"- Delegated User: {config.delegated_user}")
    print(f"- Requested Scopes: {format_scopes(config.scopes)}")

    credentials = build_grant(info, config.scopes, subject=config.delegated_user or None)

    if config.delegated_user:
        print(f"Using delegation with subject: {config.delegated_user}")

    logger.debug("Requesting access token...")
    try:
        credentials.refresh(request or Request())
    except (RefreshError, TransportError) as e:
        raise TokenAcquisitionError(f"failed to get token: {e}") from e

    print("Token acquired successfully")
    print(f"Token: {credentials.token}")


def create_service_without_delegation(config: ServiceConfig):
    """
    Build a Cloud Identity client that acts as the service account itself

    Only the Cloud Identity groups scope is requested and no subject is set.
    """
    key_path = config.service_account_key_path
    if not Path(key_path).is_file():
        raise MissingFileError(f"service account key file does not exist: {key_path}")

    logger.info("Building Cloud Identity client without delegation...")
    try:
        credentials = service_account.Credentials.from_service_account_file(
            key_path,
            scopes=[CLOUD_IDENTITY_GROUPS_SCOPE]
        )
    except FileNotFoundError as e:
        raise MissingFileError(f"service account key file does not exist: {key_path}") from e
    except (ValueError, KeyError) as e:
        raise ClientConstructionError(f"failed to create Cloud Identity service: {e}") from e
    except OSError as e:
        raise ReadError(f"failed to read credentials: {e}") from e

    try:
        return build(API_NAME, API_VERSION, credentials=credentials, cache_discovery=False)
    except _BUILD_ERRORS as e:
        raise ClientConstructionError(f"failed to create Cloud Identity service: {e}") from e


def create_service_with_delegation(config: ServiceConfig):
    """
    Build a Cloud Identity client that impersonates the delegated user

    Requires domain-wide delegation for the service account client id with
    every scope in config.scopes.
    """
    if not config.delegated_user:
        raise MissingDelegationTargetError("delegated user is required for delegation")

    data = read_key_file(config.service_account_key_path)
    credentials = build_grant(parse_key_info(data), config.scopes, subject=config.delegated_user)

    logger.info(f"Delegating to: {config.delegated_user}")
    try:
        authed_http = google_auth_httplib2.AuthorizedHttp(credentials)
        return build(API_NAME, API_VERSION, http=authed_http, cache_discovery=False)
    except _BUILD_ERRORS as e:
        raise ClientConstructionError(f"failed to create cloud identity service: {e}") from e
