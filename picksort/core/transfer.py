"""
Conflict-safe batch copy / move of image files into a target folder.

Each file is handled on its own: a failure is recorded in that file's
outcome and the batch carries on with the next one. Only a target folder
that cannot be created aborts the whole call.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

from .errors import CrossDeviceError, DestinationError, SourceNotRemovedError
from .filesystem import LocalFileSystem
from .utils import describe_error, unique_dest

logger = logging.getLogger(__name__)

# How many failing file names the summary message lists
SUMMARY_NAME_LIMIT = 3


class TransferMode(str, Enum):
    COPY = "copy"
    MOVE = "move"


@dataclass(frozen=True)
class TransferOutcome:
    source: Path
    success: bool
    destination: Path | None = None
    error: str | None = None


@dataclass(frozen=True)
class BatchResult:
    mode: TransferMode
    outcomes: tuple[TransferOutcome, ...] = field(default_factory=tuple)
    success: bool = True
    error: str | None = None

    @property
    def succeeded(self) -> list[TransferOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> list[TransferOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def moved_sources(self) -> list[Path]:
        """Sources that no longer exist at their original location."""
        if self.mode != TransferMode.MOVE:
            return []
        return [o.source for o in self.outcomes if o.success]


def _summary(mode: TransferMode, outcomes: list[TransferOutcome]) -> str | None:
    failed = [o for o in outcomes if not o.success]
    if not failed:
        return None
    noun = "file" if len(outcomes) == 1 else "files"
    msg = f"{len(failed)} of {len(outcomes)} {noun} failed to {mode.value}"
    names = [o.source.name for o in failed[:SUMMARY_NAME_LIMIT]]
    if len(failed) > SUMMARY_NAME_LIMIT:
        names.append("...")
    return f"{msg}: {', '.join(names)}"


def _move_one(fs: LocalFileSystem, src: Path, dst: Path) -> None:
    try:
        fs.rename(src, dst)
        return
    except CrossDeviceError:
        logger.info("%s is on another volume, copying then deleting the original", src.name)
    # The original is only removed once the copy is complete
    fs.copy_file(src, dst)
    try:
        fs.remove(src)
    except OSError as e:
        raise SourceNotRemovedError(dst, describe_error(e)) from e


def transfer_one(fs: LocalFileSystem, src: Path, destination: Path, mode: TransferMode) -> TransferOutcome:
    src = Path(src)
    try:
        final_dest = unique_dest(destination, src.name, exists=fs.exists)
        if mode == TransferMode.MOVE:
            _move_one(fs, src, final_dest)
        else:
            fs.copy_file(src, final_dest)
    except SourceNotRemovedError as e:
        logger.warning("Failed to move %s: %s", src, e)
        return TransferOutcome(source=src, success=False, destination=e.copy, error=str(e))
    except Exception as e:
        reason = describe_error(e)
        logger.warning("Failed to %s %s: %s", mode.value, src, reason)
        return TransferOutcome(source=src, success=False, error=reason)
    return TransferOutcome(source=src, success=True, destination=final_dest)


def transfer(paths: Iterable[Path | str],
             destination: Path | str,
             mode: TransferMode | str = TransferMode.COPY,
             fs: LocalFileSystem | None = None,
             progress_cb: Callable[[int, int], None] | None = None) -> BatchResult:
    """
    Copy or move ``paths`` into ``destination``.

    Name collisions get a numeric suffix (``name_1.ext``), a move across
    volumes falls back to copy + delete. Returns one outcome per input path,
    in input order. Raises :class:`DestinationError` if the target folder
    cannot be created; every other failure is reported per file.
    """
    mode = TransferMode(mode)
    fs = fs or LocalFileSystem()
    sources = [Path(p) for p in paths]
    destination = Path(destination)

    if not sources:
        return BatchResult(mode=mode)

    try:
        fs.make_dirs(destination)
    except OSError as e:
        logger.error("Cannot create target folder %s: %s", destination, e)
        raise DestinationError(destination, describe_error(e)) from e

    logger.info("Starting %s of %d file(s) to %s", mode.value, len(sources), destination)
    total = len(sources)
    outcomes: list[TransferOutcome] = []
    for i, src in enumerate(sources):
        outcomes.append(transfer_one(fs, src, destination, mode))
        if progress_cb:
            progress_cb(i + 1, total)

    summary = _summary(mode, outcomes)
    if summary:
        logger.warning("Batch %s finished with errors: %s", mode.value, summary)
    else:
        logger.info("Batch %s finished: %d file(s)", mode.value, total)

    return BatchResult(
        mode=mode,
        outcomes=tuple(outcomes),
        success=summary is None,
        error=summary,
    )
