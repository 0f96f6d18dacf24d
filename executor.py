"""
Process Executor - runs the confirmed command through the host shell with the
terminal attached, so output streams live and interactive programs work.
"""

import logging
import subprocess

import i18n
from errors import CommandFailedError

logger = logging.getLogger(__name__)


def execute(command: str) -> None:
    """Run `command` via the shell; raise CommandFailedError unless it exits 0.

    stdin/stdout/stderr are inherited and there is no timeout.
    """
    logger.info("Executing: %s", command)
    try:
        process = subprocess.run(command, shell=True, check=False)
    except OSError as e:
        raise CommandFailedError(i18n.t("error.command_spawn", cause=e)) from e

    logger.info("Command finished with code %s", process.returncode)
    if process.returncode != 0:
        raise CommandFailedError(
            i18n.t("error.command_exit", code=process.returncode),
            returncode=process.returncode,
        )
