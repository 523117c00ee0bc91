"""Configuration for the index catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

AUTH_TYPES = ("none", "basic", "bearer", "api_key")


@dataclass
class ClusterConfig:
    """Connection to the search cluster serving index metadata."""
    url: str = "http://localhost:9200"
    timeout_seconds: float = 30.0
    verify_ssl: bool = True

    # none | basic | bearer | api_key
    auth_type: str = "none"
    # basic: username/password, bearer: token, api_key: key (+ optional header)
    auth_config: dict[str, Any] = field(default_factory=dict)

    # Extra headers sent with every metadata request
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.url:
            raise ValueError("Cluster url is required")
        if self.auth_type not in AUTH_TYPES:
            raise ValueError(
                f"Unknown auth_type '{self.auth_type}', expected one of {', '.join(AUTH_TYPES)}"
            )


@dataclass
class ResolverConfig:
    """Index validation rules."""
    # Indices whose concrete name starts with this prefix are internal
    # and never surface to SQL
    internal_index_prefix: str = "."

    # Template pseudo type merged into real types
    default_type_name: str = "_default_"


@dataclass
class TelemetryConfig:
    """Resolution telemetry configuration."""
    enabled: bool = False
    max_queue_size: int = 10000


@dataclass
class Config:
    """Main configuration container."""
    cluster: ClusterConfig = field(default_factory=ClusterConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Create config from dictionary."""
        return cls(
            cluster=ClusterConfig(**data.get("cluster", {})),
            resolver=ResolverConfig(**data.get("resolver", {})),
            telemetry=TelemetryConfig(**data.get("telemetry", {})),
        )

    @classmethod
    def from_yaml(cls, path: str) -> Config:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> Config:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)
