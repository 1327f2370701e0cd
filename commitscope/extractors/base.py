"""Base extractor interface."""

import abc
import logging
from pathlib import Path

from commitscope.models import LineRecord

logger = logging.getLogger(__name__)


class BaseExtractor(abc.ABC):
    """Base class for line-record extractors."""

    def __init__(self, project_path: Path) -> None:
        self.project_path = project_path

    @abc.abstractmethod
    def extract(self, since: str | None = None) -> list[LineRecord]:
        """Extract line records from the source.

        Args:
            since: ISO 8601 timestamp. Only return records after this time.

        Returns:
            List of line records, in commit traversal order.
        """
        ...

    @property
    def project_name(self) -> str:
        return self.project_path.name
