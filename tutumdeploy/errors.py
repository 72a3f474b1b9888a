"""Fatal deploy errors. The CLI turns any DeployError into a '! ...' line and exit code 1."""


class DeployError(Exception):
    """Base class for errors that abort a deploy run."""


class UsageError(DeployError):
    """Bad command line target."""


class UnsupportedKeyError(DeployError):
    """A template placeholder has no value in the variable store."""

    def __init__(self, key, template_path=None):
        self.key = key
        self.template_path = template_path
        if template_path:
            message = f"Unsupported variable in {template_path}: {key}"
        else:
            message = f"Unsupported key: {key}"
        super().__init__(message)


class TemplateError(DeployError):
    """A stack template could not be parsed."""


class TemplateNotFoundError(TemplateError):
    """A required stack template does not exist."""


class CommandFailedError(DeployError):
    """An external command exited non-zero."""

    def __init__(self, command, returncode=1):
        self.command = command
        self.returncode = returncode
        super().__init__(f"Command failed (exit {returncode}): {command}")


class TagNotFoundError(DeployError):
    """A locked image tag is not published in the registry."""

    def __init__(self, tag, image, available):
        self.tag = tag
        self.image = image
        self.available = available
        super().__init__(f"Tag {tag} doesn't exist in {image}. Available tags are: {available}")


class PlatformOutputError(DeployError):
    """The tutum CLI printed something that is not the expected JSON."""
