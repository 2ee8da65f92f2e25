"""Common tag policy shared by every taggable resource."""

from dataclasses import dataclass

from ecs_topology.core.settings import EnvConfig

TagSet = dict[str, str]

MANAGED_BY = "terraform"
COMMON_TAG_KEYS: tuple[str, ...] = (
    "Project",
    "Environment",
    "ManagedBy",
    "AppName",
    "Owner",
    "CostCenter",
)


@dataclass(frozen=True)
class TaggingPolicy:
    """Produces the common tag set and per-resource `Name` overrides."""

    project: str
    environment: str
    owner: str
    cost_center: str
    app_name: str
    managed_by: str = MANAGED_BY

    @classmethod
    def from_config(cls, config: EnvConfig) -> "TaggingPolicy":
        """Build the policy from the configured tag values."""
        return cls(
            project=config.project_name,
            environment=config.environment,
            owner=config.owner,
            cost_center=config.cost_center,
            app_name=config.app_name,
        )

    def common_tags(self, app_name: str | None = None) -> TagSet:
        """Return the six common tags.

        Args:
            app_name: AppName override. Defaults to the policy's app name.

        Returns:
            A fresh tag set.
        """
        return {
            "Project": self.project,
            "Environment": self.environment,
            "ManagedBy": self.managed_by,
            "AppName": app_name or self.app_name,
            "Owner": self.owner,
            "CostCenter": self.cost_center,
        }

    @staticmethod
    def with_name(tags: TagSet, name: str) -> TagSet:
        """Return a copy of the tag set with `Name` set."""
        return {**tags, "Name": name}

    def named(self, name: str) -> TagSet:
        """Return the common tags plus a `Name` tag."""
        return self.with_name(self.common_tags(), name)
