"""
Group listing for the Cloud Identity API
"""
import logging
from dataclasses import dataclass
from typing import Dict, List

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from errors import ListError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Group:
    """A Cloud Identity group as returned by the BASIC view"""
    name: str
    display_name: str
    email: str = ''
    description: str = ''

    @classmethod
    def from_api(cls, group: Dict) -> 'Group':
        return cls(
            name=group.get('name', ''),
            display_name=group.get('displayName', ''),
            email=group.get('groupKey', {}).get('id', ''),
            description=group.get('description', ''),
        )


def list_groups(service, customer_id: str, page_size: int) -> List[Group]:
    """
    Print and return the first page of groups owned by a customer

    Args:
        service: Cloud Identity API service
        customer_id: Customer id, without the customers/ prefix
        page_size: Groups to request; the API applies its own upper bound

    Returns:
        Groups in the order the API returned them
    """
    parent = f"customers/{customer_id}"
    logger.info(f"Listing groups for {parent} (page size {page_size})")

    try:
        response = service.groups().list(
            parent=parent,
            view='BASIC',
            pageSize=page_size
        ).execute()
    except (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
        raise ListError(f"failed to list groups: {e}") from e

    groups = [Group.from_api(g) for g in response.get('groups', [])]
    for group in groups:
        print(f"Group: {group.display_name}")

    if response.get('nextPageToken'):
        logger.debug("More groups available; only the first page was fetched")

    logger.info(f"Retrieved {len(groups)} groups")
    return groups
