"""Error taxonomy for topology synthesis."""


class TopologyError(RuntimeError):
    """Base class for synthesis errors."""


class ConfigurationError(TopologyError):
    """Missing or malformed configuration, detected before any resource is built.

    Every missing variable and every malformed value is reported in one error,
    never one at a time.
    """

    def __init__(
        self,
        missing: list[str] | None = None,
        invalid: dict[str, str] | None = None,
    ) -> None:
        self.missing = list(missing or [])
        self.invalid = dict(invalid or {})
        super().__init__(self._format())

    def _format(self) -> str:
        parts: list[str] = []
        if self.missing:
            parts.append(f"Missing env vars: {', '.join(self.missing)}")
        if self.invalid:
            details = "; ".join(f"{name}: {reason}" for name, reason in self.invalid.items())
            parts.append(f"Invalid env vars: {details}")
        return ". ".join(parts) or "Invalid configuration"


class TopologyConstructionError(TopologyError):
    """A builder broke a graph invariant. Always a programming error."""


class DeferredProvisioningError(TopologyError):
    """Failure while applying a topology against the cloud API.

    Raised by provisioning engines that consume a Topology, never by synthesis.
    """
