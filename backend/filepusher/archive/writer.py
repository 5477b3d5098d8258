"""
Archive writer.

Folds a sequence of archive members into a tar file.

Format: POSIX pax (long names, sizes beyond the 8 GiB ustar limit).
Compression: bzip2 at a fixed level around the whole tar stream, or none.
Every handle (archive, compressor, member file, member walk) is closed on
every exit path.
"""

import logging
import tarfile
from pathlib import Path
from typing import Iterable, Tuple, Union

from .errors import ArchiveWriteError

logger = logging.getLogger(__name__)

# Fixed bzip2 effort. Higher levels cost time for little gain on media.
COMPRESS_LEVEL = 3


def _open_archive(target: Union[str, Path], compress: bool) -> tarfile.TarFile:
    if compress:
        return tarfile.open(
            target,
            mode="w:bz2",
            compresslevel=COMPRESS_LEVEL,
            format=tarfile.PAX_FORMAT,
            dereference=True,
        )
    return tarfile.open(
        target,
        mode="w",
        format=tarfile.PAX_FORMAT,
        dereference=True,
    )


def write_archive(
    members: Iterable[Tuple[Path, str]],
    target: Union[str, Path],
    compress: bool = True,
) -> int:
    """
    Write members into a tar archive at target.

    The target is created or truncated. Symbolic links are stored as the
    content they point to.

    Args:
        members: (absolute path, relative name) pairs in archive order
        target: Archive file to write
        compress: Wrap the tar stream in bzip2 (True) or write a plain tar

    Returns:
        Number of members written. Sockets and other entries tar cannot
        store are skipped.

    Raises:
        ArchiveWriteError: On any read, write or format failure (the target
            may be left partial)
    """
    try:
        archive = _open_archive(target, compress)
    except (OSError, tarfile.TarError) as e:
        raise ArchiveWriteError(str(target), str(e)) from e

    count = 0
    walk = iter(members)
    try:
        with archive:
            for path, name in walk:
                info = archive.gettarinfo(name=str(path), arcname=name)
                if info is None:
                    logger.warning(f"Skipping unsupported file type: {path}")
                    continue
                if info.isreg():
                    with open(path, "rb") as f:
                        archive.addfile(info, f)
                else:
                    archive.addfile(info)
                count += 1
    except (OSError, tarfile.TarError) as e:
        raise ArchiveWriteError(str(target), str(e)) from e
    finally:
        # Generator walks hold directory handles until closed
        close = getattr(walk, "close", None)
        if close is not None:
            close()

    logger.debug(f"Wrote {count} member(s) to {target}")
    return count
