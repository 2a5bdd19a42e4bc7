"""
Condition polling.

Repeatedly awaits a predicate, sleeping between attempts, until it returns
a truthy value or the attempt or time budget runs out.
"""

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

from gitchain.errors import PollTimeoutError

logger = structlog.get_logger(__name__)


async def poll_condition(
    predicate: Callable[[], Awaitable[bool]],
    interval: float = 1.0,
    max_attempts: Optional[int] = None,
    timeout: Optional[float] = None,
    backoff: float = 1.0,
    max_interval: Optional[float] = None,
) -> int:
    """
    Poll an async predicate until it holds.
    
    With neither ``max_attempts`` nor ``timeout`` set the loop runs until
    the predicate holds or the task is cancelled.
    
    Args:
        predicate: Coroutine function evaluated once per attempt
        interval: Seconds to sleep after a failed attempt
        max_attempts: Maximum number of predicate evaluations
        timeout: Seconds after which polling gives up, including a slow attempt
        backoff: Factor applied to the interval after every failed attempt
        max_interval: Upper bound for the interval when backing off
        
    Returns:
        Number of attempts made
        
    Raises:
        PollTimeoutError: If the budget is exhausted first
    """
    if max_attempts is not None and max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    
    loop = asyncio.get_running_loop()
    start_time = loop.time()
    delay = interval
    attempts = 0
    
    while True:
        attempts += 1
        if timeout is None:
            done = await predicate()
        else:
            # A hung attempt must not outlive the deadline
            remaining = timeout - (loop.time() - start_time)
            try:
                done = await asyncio.wait_for(predicate(), max(remaining, 0))
            except asyncio.TimeoutError as e:
                elapsed = loop.time() - start_time
                logger.warning("poll_deadline_exceeded", attempts=attempts, elapsed=round(elapsed, 3))
                raise PollTimeoutError(
                    f"Condition not met within {timeout} seconds",
                    attempts=attempts,
                    elapsed=elapsed,
                ) from e
        if done:
            return attempts
        
        elapsed = loop.time() - start_time
        
        if max_attempts is not None and attempts >= max_attempts:
            logger.warning("poll_attempts_exhausted", attempts=attempts, elapsed=round(elapsed, 3))
            raise PollTimeoutError(
                f"Condition not met after {attempts} attempts",
                attempts=attempts,
                elapsed=elapsed,
            )
        
        if timeout is not None:
            remaining = timeout - elapsed
            if remaining <= 0:
                logger.warning("poll_deadline_exceeded", attempts=attempts, elapsed=round(elapsed, 3))
                raise PollTimeoutError(
                    f"Condition not met within {timeout} seconds",
                    attempts=attempts,
                    elapsed=elapsed,
                )
            # Do not sleep past the deadline
            await asyncio.sleep(min(delay, remaining))
        else:
            await asyncio.sleep(delay)
        
        delay = delay * backoff
        if max_interval is not None:
            delay = min(delay, max_interval)
