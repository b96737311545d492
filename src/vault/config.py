"""
Vault configuration

Loaded from a TOML file, by default ~/.vault/config.toml:

    owners = ["<vk hex>", "<vk hex>", "<vk hex>"]
    required = 2
    daily_limit = 0
    seconds_per_day = 86400
    sequence_window = 0
    instance_id = "<hex>"
    log_level = "INFO"
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import List, Optional

import toml

from vault.constants import Constants as c


@dataclass
class VaultConfig:
    """Owner set, limits and logging for one vault"""
    owners: List[str] = field(default_factory=list)
    required: int = 1
    daily_limit: int = 0
    seconds_per_day: int = c.SECONDS_PER_DAY
    sequence_window: int = c.SEQUENCE_WINDOW
    instance_id: Optional[str] = None
    log_level: str = "INFO"

    def validate(self) -> List[str]:
        """Return a list of configuration problems, empty if valid"""
        issues = []

        if not self.owners:
            issues.append("At least one owner is required")
        if len(set(self.owners)) != len(self.owners):
            issues.append("Owners must be unique")
        if len(self.owners) > c.MAX_OWNERS:
            issues.append(f"At most {c.MAX_OWNERS} owners are allowed")
        if self.required < 1 or self.required > len(self.owners):
            issues.append("required must be between 1 and the number of owners")
        if self.daily_limit < 0:
            issues.append("daily_limit must not be negative")
        if self.seconds_per_day < 1:
            issues.append("seconds_per_day must be positive")
        if self.sequence_window < 0:
            issues.append("sequence_window must not be negative")

        return issues

    def to_dict(self) -> dict:
        d = asdict(self)
        if d['instance_id'] is None:
            del d['instance_id']
        return d

    @classmethod
    def from_dict(cls, data: dict) -> 'VaultConfig':
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


def load_config(path: Path = c.CONFIG_FILE) -> VaultConfig:
    config = VaultConfig.from_dict(toml.load(path))
    issues = config.validate()
    if issues:
        raise ValueError(f"Invalid vault config {path}: {'; '.join(issues)}")
    return config


def save_config(config: VaultConfig, path: Path = c.CONFIG_FILE):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        f.write(toml.dumps(config.to_dict()))
