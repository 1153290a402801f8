"""
Configuration management for the application.
"""
from dataclasses import dataclass, field
from typing import Dict, Any


SINK_POLICY_DERIVED = "derived"
SINK_POLICY_CONSTANT = "constant"


@dataclass
class EngineConfig:
    """Configuration for the max-flow assignment engine."""

    # How the user -> sink edge capacity is chosen
    sink_policy: str = SINK_POLICY_DERIVED
    # Ceiling used by the "constant" policy
    sink_capacity: int = 10
    # Upper bound on max-flow solves while searching for a capacity-safe matching
    max_rounds: int = 200

    def __post_init__(self):
        if self.sink_policy not in (SINK_POLICY_DERIVED, SINK_POLICY_CONSTANT):
            raise ValueError(f"Unknown sink policy: {self.sink_policy!r}")
        if self.sink_capacity < 1:
            raise ValueError("sink_capacity must be at least 1")
        if self.max_rounds < 1:
            raise ValueError("max_rounds must be at least 1")


@dataclass
class SchedulerConfig:
    """Configuration for the priority scheduler score."""

    priority_factor: int = 1000
    dependents_factor: int = 100
    points_factor: int = 10
    dependency_penalty: int = 5
    default_priority_weight: int = 1
    priority_weights: Dict[str, int] = field(
        default_factory=lambda: {"high": 3, "medium": 2, "low": 1}
    )


@dataclass
class ServerConfig:
    """Configuration for the HTTP boundary."""

    host: str = "127.0.0.1"
    port: int = 5000
    enable_cors: bool = True


@dataclass
class AppConfig:
    """Main application configuration."""

    seed: int = 42
    log_level: str = "INFO"
    engine: EngineConfig = field(default_factory=EngineConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "AppConfig":
        """Create a configuration from a flat dictionary."""
        engine_config = EngineConfig(
            **{
                k.split("_", 1)[1].lower(): v
                for k, v in config_dict.items()
                if k.startswith("ENGINE_")
            }
        )

        scheduler_config = SchedulerConfig(
            priority_factor=config_dict.get("SCHED_PRIORITY_FACTOR", 1000),
            dependents_factor=config_dict.get("SCHED_DEPENDENTS_FACTOR", 100),
            points_factor=config_dict.get("SCHED_POINTS_FACTOR", 10),
            dependency_penalty=config_dict.get("SCHED_DEPENDENCY_PENALTY", 5),
            default_priority_weight=config_dict.get("SCHED_DEFAULT_PRIORITY_WEIGHT", 1),
            priority_weights=dict(
                config_dict.get(
                    "SCHED_PRIORITY_WEIGHTS", {"high": 3, "medium": 2, "low": 1}
                )
            ),
        )

        server_config = ServerConfig(
            host=config_dict.get("SERVER_HOST", "127.0.0.1"),
            port=config_dict.get("SERVER_PORT", 5000),
            enable_cors=config_dict.get("SERVER_ENABLE_CORS", True),
        )

        return cls(
            seed=config_dict.get("SEED", 42),
            log_level=config_dict.get("LOG_LEVEL", "INFO"),
            engine=engine_config,
            scheduler=scheduler_config,
            server=server_config,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a flat dictionary."""
        result = {"SEED": self.seed, "LOG_LEVEL": self.log_level}

        for key, value in vars(self.engine).items():
            result[f"ENGINE_{key.upper()}"] = value

        for key, value in vars(self.scheduler).items():
            if key == "priority_weights":
                result["SCHED_PRIORITY_WEIGHTS"] = dict(value)
            else:
                result[f"SCHED_{key.upper()}"] = value

        for key, value in vars(self.server).items():
            result[f"SERVER_{key.upper()}"] = value

        return result
