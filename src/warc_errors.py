"""
Exceptions raised by the extraction pipeline and the summarization client.

Only stream-level and collaborator-level failures are raised. Problems with
a single record are logged and skipped where they happen.
"""


class WarcBuddyError(Exception):
    """Base class for request-level failures"""


class NoFileProvided(WarcBuddyError):
    """The request did not carry exactly one uploaded file"""

    def __init__(self, message="File not found in the request"):
        super().__init__(message)


class MalformedArchiveError(WarcBuddyError):
    """The byte stream stopped being a valid archive container"""


class CollaboratorResponseInvalid(WarcBuddyError):
    """The summarization service returned no content, or content that is not JSON"""


class CollaboratorUnavailable(WarcBuddyError):
    """The call to the summarization service itself failed"""
