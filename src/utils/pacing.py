"""Fixed pre-call pacing for the fulfillment service.

The service throttles bursts of calls. Every workflow step pauses once
before its single remote call. This is pacing, not retry: the pause runs
unconditionally and nothing is re-attempted on failure.
"""

import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_PACING_DELAY_SECONDS = 1.0


class Pacer:
    """Sleeps a fixed interval before each remote call.

    Attributes:
        delay_seconds: Pause length. 0 disables pacing.
    """

    def __init__(
        self,
        delay_seconds: float = DEFAULT_PACING_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {delay_seconds}")
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def pause(self) -> None:
        """Block for the configured interval."""
        if self.delay_seconds <= 0:
            return
        logger.debug("Pacing %.2fs before fulfillment service call", self.delay_seconds)
        self._sleep(self.delay_seconds)
