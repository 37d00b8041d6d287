"""Bounded polling for eventually consistent API resources."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
	from collections.abc import Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollTimeoutError(Exception):
	"""Raised when a polled resource is not ready within the attempt budget."""


def poll_until(
	fetch: Callable[[], T],
	is_done: Callable[[T], bool],
	max_attempts: int = 5,
	delay: float = 2.0,
	sleep: Callable[[float], None] = time.sleep,
) -> T:
	"""
	Call ``fetch`` until ``is_done`` accepts its result.

	Args:
	    fetch: Produces the current state
	    is_done: Decides whether the state is final
	    max_attempts: Maximum number of ``fetch`` calls
	    delay: Seconds to wait between attempts
	    sleep: Sleep function, replaceable in tests

	Returns:
	    The first accepted result

	Raises:
	    PollTimeoutError: If no result was accepted after ``max_attempts`` calls

	"""
	for attempt in range(1, max_attempts + 1):
		result = fetch()
		if is_done(result):
			return result
		if attempt < max_attempts:
			logger.debug("Not ready after attempt %d/%d, retrying in %.1fs", attempt, max_attempts, delay)
			sleep(delay)

	msg = f"Resource not ready after {max_attempts} attempts"
	raise PollTimeoutError(msg)
