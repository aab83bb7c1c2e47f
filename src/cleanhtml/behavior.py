"""Apply the pipeline to attributes of a record before it is stored.

Hosts call ``before_validate`` / ``before_save`` from their own lifecycle
hooks; deciding when those run is up to the host.
"""

import logging
from typing import Any, Iterable, Optional

from .config import ConfigError
from .pipeline import CleanHtmlPipeline

logger = logging.getLogger(__name__)


class CleanHtmlBehavior:
    """Clean the named string attributes of a record in place."""

    def __init__(self, attributes: Iterable[str], pipeline: Optional[CleanHtmlPipeline] = None):
        """Initialize the behavior.

        Args:
            attributes: Names of the attributes holding HTML.
            pipeline: Configured pipeline. Defaults to CleanHtmlPipeline().

        Raises:
            ConfigError: If no attributes are given.
        """
        self.attributes = list(attributes)
        if not self.attributes:
            raise ConfigError("Attributes cannot be empty.")
        self.pipeline = pipeline or CleanHtmlPipeline()

    def clean(self, record: Any) -> list[str]:
        """Clean each configured attribute present on record.

        Attributes that are missing or not strings are skipped.

        Returns:
            Names of the attributes that were cleaned.
        """
        cleaned = []
        for attribute in self.attributes:
            value = getattr(record, attribute, None)
            if not isinstance(value, str):
                continue
            setattr(record, attribute, self.pipeline.clean(value))
            cleaned.append(attribute)
        logger.debug("Cleaned attributes %s on %s", cleaned, type(record).__name__)
        return cleaned

    def before_validate(self, record: Any) -> list[str]:
        return self.clean(record)

    def before_save(self, record: Any) -> list[str]:
        return self.clean(record)
