"""Tutum platform client: a thin wrapper over the ``tutum`` CLI."""

import json
import logging
import shlex

from tutumdeploy.errors import CommandFailedError, PlatformOutputError

logger = logging.getLogger(__name__)

DNS_FLUSH_TIMEOUT = 30


class TutumClient:
    """Issues tutum CLI commands through an injected run_cmd callable.

    run_cmd: async callable(command_list, timeout=..., log_output=...) -> (returncode, stdout, stderr)

    Query methods return parsed output, or ``None`` when the command printed
    nothing (which is what a dry-run runner does).
    """

    def __init__(self, run_cmd, tutum_bin="tutum"):
        self.run_cmd = run_cmd
        self.tutum_bin = tutum_bin

    async def _run(self, *args, log_output=False):
        command = [self.tutum_bin, *args]
        rc, stdout, _ = await self.run_cmd(command, log_output=log_output)
        if rc != 0:
            raise CommandFailedError(shlex.join(command), rc)
        return stdout

    async def _inspect(self, *args):
        stdout = await self._run(*args)
        if not stdout.strip():
            return None
        try:
            return json.loads(stdout)
        except json.JSONDecodeError as e:
            raise PlatformOutputError(f"Unexpected output from {self.tutum_bin} {' '.join(args)}: {e}") from None

    async def list_stacks(self) -> str:
        """Raw ``tutum stack list`` table."""
        return await self._run("stack", "list")

    async def inspect_image(self, image):
        return await self._inspect("image", "inspect", image)

    async def inspect_service(self, service):
        """Inspect a service by name, UUID or resource URI."""
        return await self._inspect("service", "inspect", service_identifier(service))

    async def create_stack(self, stack_name, stackfile_path):
        await self._run("stack", "up", f"--name={stack_name}", "-f", stackfile_path, log_output=True)

    async def update_stack(self, stack_id, stackfile_path):
        await self._run("stack", "update", "-f", stackfile_path, stack_id, log_output=True)

    async def redeploy_service(self, service):
        await self._run("service", "redeploy", service, log_output=True)


def service_identifier(reference):
    """Reduce a resource URI like /api/v1/service/<uuid>/ to the UUID; pass names through."""
    if "/" in reference:
        return reference.rstrip("/").rsplit("/", 1)[-1]
    return reference


def image_tag_names(image_data) -> list[str]:
    """Tag names from ``tutum image inspect`` output (tags are resource URIs)."""
    return [tag_url.rstrip("/").rsplit("/", 1)[-1] for tag_url in image_data.get("tags", [])]


async def flush_dns_cache(run_cmd, command):
    """Flush the local DNS resolver cache so new stack hostnames resolve. Failure is ignored."""
    if not command:
        return
    rc, _, _ = await run_cmd(shlex.split(command), timeout=DNS_FLUSH_TIMEOUT, quiet=True)
    if rc != 0:
        logger.debug(f"DNS cache flush exited with {rc}; ignoring.")
