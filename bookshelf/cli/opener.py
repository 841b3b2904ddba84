"""External viewer integration.

Opens cataloged files with the system's default application, or with a
program named by the user.
"""

import logging
import shlex
import subprocess
from pathlib import Path

import click

from bookshelf.core.exceptions import OpenFailureError

logger = logging.getLogger(__name__)


def open_path(path: Path, program: str | None = None) -> None:
    """Open ``path`` in an external viewer.

    Args:
        path: File to open
        program: Viewer command, may include arguments. Uses the
            platform default when None.

    Raises:
        OpenFailureError: If the viewer cannot be started or fails
    """
    if program is None:
        logger.debug(f"Launching default viewer for {path}")
        result = click.launch(str(path))
        if result != 0:
            raise OpenFailureError(path, details=f"viewer exited with code {result}")
        return

    command = shlex.split(program) + [str(path)]
    logger.debug(f"Running {command}")
    try:
        result = subprocess.call(command)
    except FileNotFoundError as e:
        raise OpenFailureError(path, program, f"{program} not found") from e
    except OSError as e:
        raise OpenFailureError(path, program, str(e)) from e

    if result != 0:
        raise OpenFailureError(path, program, f"exited with code {result}")
