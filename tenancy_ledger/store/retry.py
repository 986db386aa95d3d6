"""Retry policies for store access, built on tenacity."""

import logging
from typing import Callable, TypeVar

import tenacity

from tenancy_ledger.config import RetryConfig
from tenancy_ledger.exceptions import ConcurrencyConflictError, TransientStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def make_retrying(
    policy: RetryConfig,
    retry_on: tuple[type[BaseException], ...] = (TransientStoreError,),
) -> tenacity.Retrying:
    """Build a tenacity retryer with exponential backoff."""
    return tenacity.Retrying(
        wait=tenacity.wait_exponential(multiplier=policy.min_wait, min=policy.min_wait, max=policy.max_wait),
        stop=tenacity.stop_after_attempt(policy.attempts),
        retry=tenacity.retry_if_exception_type(retry_on),
        before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


def call_read(policy: RetryConfig, fn: Callable[..., T], *args, **kwargs) -> T:
    """Run a read-only call, retrying transient store failures."""
    return make_retrying(policy)(fn, *args, **kwargs)


def call_write(policy: RetryConfig, fn: Callable[..., T], *args, idempotent: bool = False, **kwargs) -> T:
    """Run a command, retrying lost optimistic races.

    A conflict means nothing was applied, so re-running is always safe.
    Transient failures leave the outcome unknown and are only retried for
    commands that detect their own earlier success.
    """
    retry_on: tuple[type[BaseException], ...] = (ConcurrencyConflictError,)
    if idempotent:
        retry_on += (TransientStoreError,)
    return make_retrying(policy, retry_on)(fn, *args, **kwargs)
