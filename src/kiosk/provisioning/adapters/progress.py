"""Headless progress indicator adapter.

Implements IProgressIndicatorFactory for hosts without a screen: the
indicator is reported through the logger instead of being drawn.
"""

import logging

from ..domain.entities import ProgressOptions
from ..domain.ports import IProgressIndicator, IProgressIndicatorFactory

logger = logging.getLogger(__name__)


class LoggingProgressIndicator(IProgressIndicator):
    """Progress indicator that logs when it is shown and hidden."""

    def __init__(self, options: ProgressOptions):
        self.options = options
        self.visible = False

    async def present(self) -> None:
        self.visible = True
        logger.info(f"[progress] {self.options.message}")

    async def dismiss(self) -> None:
        if not self.visible:
            return
        self.visible = False
        logger.info("[progress] done")


class LoggingProgressIndicatorFactory(IProgressIndicatorFactory):
    """Creates LoggingProgressIndicator handles."""

    def create(self, options: ProgressOptions) -> IProgressIndicator:
        return LoggingProgressIndicator(options)
