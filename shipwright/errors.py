"""Error taxonomy shared by the job pipeline and the HTTP surface."""


class ShipwrightError(Exception):
    """Base class for every error raised deliberately by shipwright."""


class InvalidRequest(ShipwrightError):
    """Bad submission input. Rejected synchronously; no job is created."""


class NotFound(ShipwrightError):
    """Query for an unknown job id."""


class GenerationTimeout(ShipwrightError):
    """A polling generation backend did not finish within its attempt budget."""


class GenerationFailed(ShipwrightError):
    """A generation backend returned an error, an empty answer, or a failed run."""


class NoFilesExtracted(ShipwrightError):
    """The generated text contained no fenced code blocks."""


class ScaffoldFailed(ShipwrightError):
    """The scaffolding tool, its follow-up installs, or the file overlay failed."""


class DeploymentFailed(ShipwrightError):
    """The deployment CLI failed or its output held no deployment URL.

    The generated project is still valid and kept on disk.
    """
