from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextvars import copy_context
from typing import Any, Callable, Optional, Sequence

from .render import OutputRecord


def fill_slots_fail_fast(
    tasks: Sequence[Callable[[], Any]],
    *,
    max_workers: int,
) -> list[Any]:
    """Run ``tasks`` on a pool; slot ``i`` holds the result of ``tasks[i]``.

    The first task exception cancels whatever has not started yet and is
    re-raised.
    """
    slots: list[Any] = [None] * len(tasks)
    if not tasks:
        return slots
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_index = {
            executor.submit(copy_context().run, task): index
            for index, task in enumerate(tasks)
        }
        try:
            for future in as_completed(future_to_index):
                slots[future_to_index[future]] = future.result()
        except Exception:
            for future in future_to_index:
                future.cancel()
            raise
    return slots


def run_ordered(
    files: Sequence[str],
    processor: Callable[[str], Optional[OutputRecord]],
    *,
    jobs: int = 1,
    sink: Callable[[str], Any],
    progress: Optional[Callable[[int, int, str], None]] = None,
    separator: str = "\n\n",
) -> int:
    """
    Process ``files`` and write rendered records to ``sink`` in input order.

    Sequential runs write each record as soon as it is produced. Parallel
    runs fill one slot per input index and write the slots afterwards, so
    the emitted text does not depend on ``jobs``. Returns the number of
    records written.
    """
    total = len(files)
    written = 0

    def emit(record: Optional[OutputRecord]) -> None:
        nonlocal written
        if record is None:
            return
        if written:
            sink(separator)
        sink(record.render())
        written += 1

    if jobs <= 1 or total <= 1:
        for done, rel_path in enumerate(files, 1):
            record = processor(rel_path)
            if progress:
                progress(done, total, rel_path)
            emit(record)
        return written

    lock = threading.Lock()
    finished = 0

    def task_for(rel_path: str) -> Callable[[], Optional[OutputRecord]]:
        def task() -> Optional[OutputRecord]:
            nonlocal finished
            record = processor(rel_path)
            if progress:
                with lock:
                    finished += 1
                    progress(finished, total, rel_path)
            return record

        return task

    slots = fill_slots_fail_fast(
        [task_for(rel_path) for rel_path in files], max_workers=jobs
    )
    for record in slots:
        emit(record)
    return written
