"""Local transport: run commands and write files on this machine."""

import asyncio
import logging
import os
import shlex

logger = logging.getLogger(__name__)


def make_run_cmd(dry_run=False):
    """Create a run_cmd callable for local execution.

    run_cmd(command, timeout=600, log_output=False, quiet=False) -> (returncode, stdout, stderr)
    where command is a list of arguments. Commands never read from the
    terminal. With quiet=True failures are only logged at DEBUG. In dry-run
    mode the command is only logged and reported as a success with no output.
    """

    async def run_cmd(command, timeout=600, log_output=False, quiet=False):
        printable = shlex.join(command)
        if dry_run:
            logger.info(f"[dry-run] {printable}")
            return 0, "", ""

        logger.info(f"~ $ {printable}")
        fail_level = logging.DEBUG if quiet else logging.ERROR
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except TimeoutError:
            logger.log(fail_level, f"Command timed out after {timeout}s: {printable}")
            proc.kill()
            await proc.wait()
            return 1, "", ""
        except FileNotFoundError:
            logger.log(fail_level, f"Error: '{command[0]}' not found. Is it installed and on PATH?")
            return 127, "", f"'{command[0]}' not found"

        stdout = stdout_bytes.decode(errors="replace") if stdout_bytes else ""
        stderr = stderr_bytes.decode(errors="replace") if stderr_bytes else ""
        level = logging.INFO if log_output else logging.DEBUG
        for line in stdout.splitlines():
            logger.log(level, line)
        for line in stderr.splitlines():
            logger.log(fail_level if proc.returncode else level, line)
        return proc.returncode, stdout, stderr

    return run_cmd


def make_write_file(dry_run=False):
    """Create a write_file callable for local file writes."""

    async def write_file(path, content):
        if dry_run:
            logger.info(f"[dry-run] write {path}")
            return
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w") as f:
            f.write(content)
        logger.info(f"Wrote {path}")

    return write_file
