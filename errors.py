"""
Exceptions raised by the Cloud Identity groups tool
"""


class GroupsToolError(Exception):
    """Base class for all tool errors"""


class PathResolutionError(GroupsToolError):
    """Credential path could not be resolved to an absolute path"""


class MissingFileError(GroupsToolError, FileNotFoundError):
    """Resolved credential path does not exist"""


class ReadError(GroupsToolError):
    """Credential file could not be read"""


class ParseError(GroupsToolError):
    """Credential file is not a valid service account key"""


class TokenAcquisitionError(GroupsToolError):
    """Token endpoint rejected the grant or could not be reached"""


class ClientConstructionError(GroupsToolError):
    """Cloud Identity client could not be built"""


class MissingDelegationTargetError(GroupsToolError, ValueError):
    """Delegated mode requested without a user to impersonate"""


class ListError(GroupsToolError):
    """Groups list call failed"""
