"""Out-of-process Hugo builds."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from cmsbridge.shared.errors import BuildError

logger = logging.getLogger(__name__)

IGNORE_CACHE_FLAG = "--ignoreCache"


def build_site(
    root_dir: Path,
    *,
    use_cache: bool = True,
    command: str = "hugo",
) -> str:
    """Run the site generator in ``root_dir`` and return its output.

    Args:
        root_dir: Site root the generator runs in.
        use_cache: When False, pass ``--ignoreCache``.
        command: Generator executable.

    Returns:
        The generator's stdout.

    Raises:
        BuildError: If the executable is missing or exits non-zero. The
            message carries the command output verbatim.
    """
    cmd = [command]
    if not use_cache:
        cmd.append(IGNORE_CACHE_FLAG)

    logger.debug("Running %s in %s", " ".join(cmd), root_dir)

    try:
        result = subprocess.run(
            cmd,
            cwd=root_dir,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise BuildError(
            f"cannot run {command} in {root_dir}: {exc}", identifier=command
        ) from exc

    if result.returncode != 0:
        raise BuildError(
            f"{command} build errored (exit {result.returncode})\n"
            f"command output: {result.stdout}{result.stderr}",
            identifier=str(root_dir),
        )

    logger.info("Built site in %s", root_dir)
    return result.stdout
