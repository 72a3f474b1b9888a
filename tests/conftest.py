"""Shared pytest fixtures for all test modules."""

import json
import os
import subprocess
import sys

import pytest

from tutumdeploy.config import DeployConfig
from tutumdeploy.deploy.params import build_params
from tutumdeploy.deploy.variables import build_variable_store

PROJECT_ROOT = os.path.normpath(os.path.join(os.path.dirname(__file__), ".."))

STACK_TEMPLATE = """\
defaults: &defaults
  restart: always
  autoredeploy: true

staging-web:
  <<: *defaults
  image: tutum.co/yniche/yniche.com:<%= IMAGE_TAG %>
  links:
    - staging-api
  environment:
    VIRTUAL_HOST: <%= BRANCH %>.staging.yniche.com
    API_VERSION: "1.0"

staging-api:
  <<: *defaults
  image: tutum.co/yniche/api.yniche.com:<%= LOCKED_API_TAG %>
"""

SOLO_TEMPLATE = """\
staging-lb:
  image: tutum/haproxy
  links: "<%= LB_LINKS %>"
  ports:
    - "80:80"
  roles:
    - global
"""

API_IMAGE_JSON = json.dumps(
    {
        "name": "tutum.co/yniche/api.yniche.com",
        "tags": [
            "/api/v1/image/tutum.co/yniche/api.yniche.com/tag/latest/",
            "/api/v1/image/tutum.co/yniche/api.yniche.com/tag/production/",
        ],
    }
)


@pytest.fixture(scope="session")
def project_root():
    """Absolute path to the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def run_cli(project_root):
    """Return a callable that invokes the tutumdeploy CLI as a subprocess."""

    def _run(*args, env=None):
        run_env = {k: v for k, v in os.environ.items() if not k.startswith("LOCKED_")}
        run_env.update(env or {})
        run_env["PYTHONPATH"] = project_root
        result = subprocess.run(
            [sys.executable, "-m", "tutumdeploy.tutumdeploy", *args],
            capture_output=True,
            text=True,
            cwd=project_root,
            env=run_env,
        )
        return result.returncode, result.stdout, result.stderr

    return _run


# ── Unit-test fixtures ──────────────────────────────────────────────


class FakeRunner:
    """Stand-in for run_cmd: records commands, answers from canned responses.

    responses maps a command prefix tuple to (returncode, stdout, stderr);
    the longest matching prefix wins, anything else succeeds silently.
    """

    def __init__(self, responses=None):
        self.commands = []
        self.calls = []
        self.responses = dict(responses or {})

    async def __call__(self, command, timeout=600, log_output=False, quiet=False):
        self.calls.append({"timeout": timeout, "log_output": log_output, "quiet": quiet})
        self.commands.append(list(command))
        best = None
        for prefix, response in self.responses.items():
            if tuple(command[: len(prefix)]) == prefix and (best is None or len(prefix) > len(best[0])):
                best = (prefix, response)
        return best[1] if best else (0, "", "")

    def find(self, *prefix):
        """All recorded commands starting with prefix."""
        return [c for c in self.commands if tuple(c[: len(prefix)]) == prefix]


class FakeWriter:
    """Stand-in for write_file: keeps every write in memory, last write wins."""

    def __init__(self):
        self.files = {}
        self.writes = []

    async def __call__(self, path, content):
        self.files[path] = content
        self.writes.append(path)


@pytest.fixture
def fake_runner():
    """The FakeRunner class; call it with a responses dict."""
    return FakeRunner


@pytest.fixture
def fake_writer():
    return FakeWriter()


@pytest.fixture
def template_dir(tmp_path):
    """Temp directory holding staging stack and solo templates."""
    (tmp_path / "staging.stack.template.yml").write_text(STACK_TEMPLATE)
    (tmp_path / "staging.solo.template.yml").write_text(SOLO_TEMPLATE)
    return tmp_path


@pytest.fixture
def config(template_dir):
    return DeployConfig(template_dir=str(template_dir), probe=False)


@pytest.fixture
def params(config):
    return build_params("linkedin-auth/staging-web", config)


@pytest.fixture
def store(params):
    """Variable store that ignores the real environment."""
    return build_variable_store(params, environ={})


@pytest.fixture
def api_image_json():
    return API_IMAGE_JSON
