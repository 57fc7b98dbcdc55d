from pathlib import Path
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, MofNCompleteColumn, TimeElapsedColumn
from typing import Callable, Dict, List, Sequence, Tuple, TypeVar

from loguru import logger

T = TypeVar("T")

def create_progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
    )

def process_files(
    files: Sequence[Path],
    process_func: Callable[[Path], T],
    description: str = "Parsing scripts...",
) -> Tuple[List[T], Dict[Path, str]]:
    """Run ``process_func`` over ``files`` behind a progress bar.

    Unreadable files are reported and skipped rather than aborting the run.

    Returns:
        (results in file order, file -> error message for skipped files)
    """
    results: List[T] = []
    failures: Dict[Path, str] = {}

    with create_progress() as progress:
        task_id = progress.add_task(description, total=len(files))

        for path in files:
            progress.update(task_id, description=f"{description} {path.name}")
            try:
                results.append(process_func(path))
            except (OSError, UnicodeDecodeError) as e:
                failures[path] = str(e)
                progress.console.print(f"[red]Skipping {path.name}: {e}[/red]")
            progress.advance(task_id)

    if failures:
        logger.warning(f"Skipped {len(failures)}/{len(files)} unreadable scripts")
    return results, failures
