"""Stack deployer: create or update a named tutum stack from a stackfile."""

import logging
import re

from tutumdeploy.deploy.template import render_stackfile
from tutumdeploy.errors import TagNotFoundError
from tutumdeploy.platform.tutum import image_tag_names

logger = logging.getLogger(__name__)

TERMINATED = "Terminated"

UPDATE_NOTICE = """
Stack {stack_name} already exists. If you only want to ship new code, push
the image again; autoredeploy restarts the services that use it (restarts do
not cascade to dependent services). Updating the stack definition is only
needed when a service was added, changed or removed, or a locked tag changed.
"""


def find_stack(stack_list, stack_name):
    """Return the UUID of the live stack named stack_name in ``tutum stack list`` output, or None."""
    pattern = re.compile(rf"^{re.escape(stack_name)}\s")
    for line in stack_list.splitlines():
        if pattern.match(line) and TERMINATED not in line:
            return line.split()[1]
    return None


async def deploy_stack(client, stack_name, output_path, template_path=None, store=None, write_file=None):
    """Create stack_name from output_path, or update it if a live stack already exists.

    When template_path is given it is rendered with store and written to
    output_path first. Returns "updated" or "created".
    """
    if template_path is not None:
        await render_stackfile(template_path, output_path, store, write_file)

    stack_id = find_stack(await client.list_stacks(), stack_name)
    if stack_id:
        logger.warning(UPDATE_NOTICE.format(stack_name=stack_name))
        await client.update_stack(stack_id, output_path)
        logger.info("Stack definition has been updated. Keep in mind that new services are not started automatically.")
        return "updated"

    await client.create_stack(stack_name, output_path)
    logger.info(f"Stack {stack_name} created.")
    return "created"


async def validate_locked_tags(client, store, locked_images):
    """Check that every locked tag with a known image is published for that image."""
    for name, tag in store.locked_tags().items():
        image = locked_images.get(f"LOCKED_{name}_TAG")
        if not image:
            continue
        image_data = await client.inspect_image(image)
        if image_data is None:  # dry-run
            logger.info(f"Skipping tag check for {image}:{tag}")
            continue
        available = image_tag_names(image_data)
        if tag not in available:
            raise TagNotFoundError(tag, image, available)
        logger.info(f"Locked to {image}:{tag}")
