"""
Repository merge policy configuration.

Each repository may carry ``.github/auto-merge.yml``::

    min-approvals: 1
    max-requested-changes: 0

Absent files and absent keys fall back to the defaults.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import yaml

from mergebot.exceptions import ConfigurationError, NotFoundError
from mergebot.logging import get_logger

if TYPE_CHECKING:
    from mergebot.async_client import AsyncGitHubClient

DEFAULT_CONFIG_PATH = ".github/auto-merge.yml"

logger = get_logger("config")

# file key -> MergeConfig field
_KEYS = {
    "min-approvals": "min_approvals",
    "min_approvals": "min_approvals",
    "max-requested-changes": "max_requested_changes",
    "max_requested_changes": "max_requested_changes",
}


@dataclass(frozen=True)
class MergeConfig:
    """Review thresholds for one repository."""

    min_approvals: int = 1
    max_requested_changes: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "MergeConfig":
        """
        Build a config from a parsed document, applying defaults.

        Raises:
            ConfigurationError: If the document is not a mapping or a threshold
                is not a non-negative integer
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config must be a mapping, got {type(data).__name__}"
            )

        values: dict[str, int] = {}
        for key, value in data.items():
            field_name = _KEYS.get(key)
            if field_name is None:
                continue
            # bool is an int subclass; `min-approvals: yes` is a mistake.
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(
                    f"{key} must be a non-negative integer, got {value!r}"
                )
            values[field_name] = value

        return cls(**values)


def parse_config(text: str) -> MergeConfig:
    """Parse the YAML text of a config file."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config: {e}") from e
    return MergeConfig.from_dict(data)


class ConfigLoader:
    """Loads a repository's MergeConfig from its default branch."""

    def __init__(self, client: "AsyncGitHubClient", path: str = DEFAULT_CONFIG_PATH) -> None:
        self.client = client
        self.path = path

    async def load(self, owner: str, repo: str) -> MergeConfig:
        try:
            text = await self.client.contents.get_text(owner, repo, self.path)
        except NotFoundError:
            logger.debug("%s/%s has no %s, using defaults", owner, repo, self.path)
            return MergeConfig()
        return parse_config(text)
