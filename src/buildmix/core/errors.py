"""Custom exception hierarchy for the build orchestrator."""


class MixError(Exception):
    """Base exception for all buildmix errors."""


# --- Configuration ---
class ConfigurationError(MixError):
    """The user's configuration could not be loaded or raised while running."""


class LifecycleError(MixError):
    """An operation was attempted in a phase that does not allow it."""


# --- Components ---
class ComponentError(MixError):
    """Component installation or invocation error."""


class UnknownComponentError(ComponentError, AttributeError):
    """No component is registered under the requested alias."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"No component registered for alias '{alias}'")


# --- Dependencies ---
class DependencyError(MixError):
    """Dependency queueing or resolution error."""


class DependencyInstallFailure(DependencyError):
    """The external installer reported a failure."""

    def __init__(self, packages: list[str], returncode: int, output: str = ""):
        self.packages = packages
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"Installing {', '.join(packages)} failed (exit code {returncode})"
        )


# --- Manifest ---
class ManifestError(MixError, KeyError):
    """Manifest lookup or hashing error."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
