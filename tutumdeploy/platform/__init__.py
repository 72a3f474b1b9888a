"""Platform access: command runner, tutum CLI client, endpoint probe."""

from tutumdeploy.platform.probe import endpoint_url, probe_endpoint
from tutumdeploy.platform.shell import make_run_cmd, make_write_file
from tutumdeploy.platform.tutum import TutumClient, flush_dns_cache, image_tag_names, service_identifier

__all__ = [
    "TutumClient",
    "endpoint_url",
    "flush_dns_cache",
    "image_tag_names",
    "make_run_cmd",
    "make_write_file",
    "probe_endpoint",
    "service_identifier",
]
