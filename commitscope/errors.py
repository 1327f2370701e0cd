"""Error taxonomy for commitscope.

Data-layer errors (``LoadError``, ``EmptyDatasetError``) are fatal to the
dashboard and are surfaced once, at the top level. ``RenderTargetMissingError``
is raised by a single view and recovered by the view pipeline.
"""


class CommitScopeError(Exception):
    pass


class LoadError(CommitScopeError):
    """The dataset is unreadable or malformed."""


class ParseError(LoadError):
    """A single row could not be parsed. Aborts the whole load."""

    def __init__(self, row: int, message: str) -> None:
        super().__init__(f"row {row}: {message}")
        self.row = row


class EmptyDatasetError(CommitScopeError):
    """No commits could be formed from the dataset."""


class RenderTargetMissingError(CommitScopeError):
    """The drawing surface has no anchor for a view."""

    def __init__(self, target: str) -> None:
        super().__init__(f"render target missing: {target}")
        self.target = target
