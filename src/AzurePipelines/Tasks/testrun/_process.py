# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import logging
import subprocess
from typing import Mapping, Sequence

_LOGGER = logging.getLogger(__name__)


class _ProcessRunner:
    """Run a child process to completion and report its exit code."""

    def run(
        self,
        executable: str,
        args: Sequence[str],
        env: Mapping[str, str],
        check: bool = False,
    ) -> int:
        """
        :param executable: Path of the program to start.
        :param args: Command line arguments.
        :param env: Complete environment of the child process.
        :param check: Raise :class:`subprocess.CalledProcessError` on a non-zero exit code.
        :return: The exit code.
        """
        command = [executable, *args]
        _LOGGER.debug("Starting %s", " ".join(command))
        completed = subprocess.run(command, env=dict(env), check=check)
        return completed.returncode
