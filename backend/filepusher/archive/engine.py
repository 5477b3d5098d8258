"""
Archive engine — bounded, de-duplicated archiving of stable paths.

submit(path) is non-blocking. It accepts a path only if no archive for it
exists on disk and no job for it is already queued or running; accepted paths
are archived on a fixed-size worker pool.

Concurrency model:
- One lock guards the in-flight map (source path -> ArchiveJob).
- The lock is held for check/add at submission and for removal at completion,
  never while walking, compressing or deleting.
- Jobs for different paths run in parallel up to max_workers; a job's own
  steps (open -> walk -> write -> close -> delete) are strictly sequential.

Failure semantics:
- The source is deleted only after the archive was fully written and closed.
- On failure the source is kept, the archive may be left partial, the error
  is logged and the in-flight marker is cleared so a later submit can retry.
  A partial archive left by this engine is overwritten by that retry.
"""

import logging
import shutil
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import AbstractSet, Callable, Deque, Dict, List, Optional, Set, Union

from ..config.settings import DEFAULT_EXCLUDE_EXTENSIONS, parse_extensions
from .errors import ArchiveSourceNotFoundError
from .filters import ArchiveMemberWalk
from .models import ArchiveJob, ArchiveJobState
from .naming import archive_path_for
from .writer import write_archive

logger = logging.getLogger(__name__)


def delete_source(path: Path) -> None:
    """Remove a source file, symbolic link or directory tree."""
    if path.is_symlink() or not path.is_dir():
        path.unlink()
    else:
        shutil.rmtree(path)


class ArchiveEngine:
    """
    Archives stable source paths into sibling .tbz2 files.

    Args:
        excluded_extensions: Lower-cased extensions with leading dot to skip
            (default: .html,.exe,.txt,.readme,.nfo,.link)
        compress: Wrap archives in bzip2 (False writes plain tar)
        max_workers: Maximum number of archive jobs running at once
        on_complete: Optional callback invoked with each finished ArchiveJob
        history_size: Number of finished jobs kept for monitoring
    """

    def __init__(
        self,
        excluded_extensions: Optional[AbstractSet[str]] = None,
        compress: bool = True,
        max_workers: int = 2,
        on_complete: Optional[Callable[[ArchiveJob], None]] = None,
        history_size: int = 50,
    ):
        if excluded_extensions is None:
            excluded_extensions = parse_extensions(DEFAULT_EXCLUDE_EXTENSIONS)
        self.excluded_extensions = frozenset(excluded_extensions)
        self.compress = compress
        self.max_workers = max_workers
        self.on_complete = on_complete

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="archive"
        )
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        # source path -> active job
        self._in_flight: Dict[str, ArchiveJob] = {}
        self._history: Deque[ArchiveJob] = deque(maxlen=history_size)
        # Targets left partial by a failed job; they do not block a retry
        self._failed_targets: Set[str] = set()

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "ArchiveEngine":
        """Build an engine from FilePusherSettings."""
        return cls(
            excluded_extensions=settings.excluded_extensions,
            compress=settings.compress_folder,
            max_workers=settings.archive_max_workers,
            **kwargs,
        )

    def submit(self, path: Union[str, Path]) -> bool:
        """
        Request archiving of a path without waiting for it.

        Returns:
            True if a job was scheduled, False if the call was a no-op
            (archive already on disk, or a job for this path in flight)

        Raises:
            ArchiveSourceNotFoundError: If path does not exist
        """
        job = self._register(path)
        if job is None:
            return False

        try:
            self._executor.submit(self._run_job, job)
        except RuntimeError:
            # Executor shut down between registration and dispatch
            self._release(job)
            raise

        logger.debug(f"Archive job queued: {job.source_path}")
        return True

    def archive_now(self, path: Union[str, Path]) -> Optional[ArchiveJob]:
        """
        Archive a path in the calling thread, under the same de-duplication.

        Returns:
            The finished job, or None if the call was a no-op
        """
        job = self._register(path)
        if job is None:
            return None
        self._run_job(job)
        return job

    def _register(self, path: Union[str, Path]) -> Optional[ArchiveJob]:
        source = Path(path).absolute()
        if not source.exists() and not source.is_symlink():
            raise ArchiveSourceNotFoundError(str(source))

        target = archive_path_for(source)
        key = str(source)

        with self._lock:
            if key in self._in_flight:
                logger.debug(f"Archive already in progress: {key}")
                return None
            if target.exists() and str(target) not in self._failed_targets:
                logger.debug(f"Archive already exists: {target}")
                return None

            job = ArchiveJob(source_path=key, target_archive_path=str(target))
            self._in_flight[key] = job
            return job

    def _release(self, job: ArchiveJob) -> None:
        with self._lock:
            self._in_flight.pop(job.source_path, None)
            if job.state == ArchiveJobState.FAILED:
                self._failed_targets.add(job.target_archive_path)
            else:
                self._failed_targets.discard(job.target_archive_path)
            self._history.append(job.model_copy())
            if not self._in_flight:
                self._idle.notify_all()

    def _run_job(self, job: ArchiveJob) -> None:
        source = Path(job.source_path)
        target = Path(job.target_archive_path)

        logger.info(f"Start archive: {source}")
        job.state = ArchiveJobState.RUNNING
        job.started_at = datetime.now()

        try:
            members = ArchiveMemberWalk(source, self.excluded_extensions)
            job.entry_count = write_archive(members, target, compress=self.compress)

            # Archive complete and closed
            delete_source(source)
            job.state = ArchiveJobState.DONE

        except Exception as e:
            job.state = ArchiveJobState.FAILED
            job.error = str(e)
            logger.error(
                f"Archive failed for {source} (target {target}), source kept: {e}",
                exc_info=True,
            )

        finally:
            job.finished_at = datetime.now()
            self._release(job)

        if job.state == ArchiveJobState.DONE:
            logger.info(
                f"Stop archive: {source} -> {target.name}, {job.entry_count} member(s), "
                f"took {job.duration_seconds:.1f} seconds"
            )

        if self.on_complete:
            try:
                self.on_complete(job)
            except Exception as e:
                logger.error(f"Archive completion callback failed for {source}: {e}")

    def is_in_flight(self, path: Union[str, Path]) -> bool:
        with self._lock:
            return str(Path(path).absolute()) in self._in_flight

    def in_flight(self) -> List[ArchiveJob]:
        """Snapshot of queued and running jobs."""
        with self._lock:
            return [job.model_copy() for job in self._in_flight.values()]

    def recent_jobs(self) -> List[ArchiveJob]:
        """Finished jobs, newest first."""
        with self._lock:
            return list(reversed(self._history))

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until no job is queued or running.

        Returns:
            True if idle, False if the timeout expired first
        """
        with self._idle:
            return self._idle.wait_for(lambda: not self._in_flight, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work. Running jobs are never interrupted."""
        self._executor.shutdown(wait=wait)
