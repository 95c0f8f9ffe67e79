"""Store-level exceptions raised by repository implementations."""


class StoreError(Exception):
    """Base class for store-level failures with a known meaning."""


class RecordNotFoundError(StoreError):
    """A referenced row does not exist."""


class DuplicateRecordError(StoreError):
    """A row with the same key already exists."""


class ReviewerNotAssignedError(StoreError):
    """The reviewer is not associated with the pull request."""


class PullRequestMergedError(StoreError):
    """The pull request was merged before the write could be applied."""


class ReviewerSetChangedError(StoreError):
    """The reviewer set changed between the caller's read and the locked write."""


class InvalidReplacementError(StoreError):
    """The replacement reviewer is the reviewer being replaced."""
