"""
Fan-out / fan-in runner for the independent queries of one report.

Each task runs on a worker thread with its own database connection, which
is closed when the task finishes. The first failing task (in submission
order) re-raises its exception to the caller; no partial result is returned.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional

from django.conf import settings
from django.db import connections

logger = logging.getLogger(__name__)


def _run_with_own_connection(func: Callable[[], Any]) -> Any:
    try:
        return func()
    finally:
        # Connections are per-thread; this only closes the worker's own
        connections.close_all()


def run_concurrently(
    tasks: Dict[str, Callable[[], Any]],
    parallel: Optional[bool] = None,
    max_workers: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Run every callable in ``tasks`` and return their results by name.

    Args:
        tasks: Mapping of result name to a zero-argument callable
        parallel: Override ``settings.STATS_PARALLEL_QUERIES``
        max_workers: Override ``settings.STATS_MAX_WORKERS``

    Returns:
        dict: Results keyed like ``tasks``
    """
    if parallel is None:
        parallel = settings.STATS_PARALLEL_QUERIES

    if not parallel or len(tasks) <= 1:
        return {name: func() for name, func in tasks.items()}

    workers = min(max_workers or settings.STATS_MAX_WORKERS, len(tasks))
    logger.debug("Running %d report queries on %d threads", len(tasks), workers)

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='stats') as executor:
        futures = {
            name: executor.submit(_run_with_own_connection, func)
            for name, func in tasks.items()
        }
        return {name: future.result() for name, future in futures.items()}
