"""Configuration management for debt-manager."""

from dataclasses import dataclass, field
from pathlib import Path

from debt_manager.accrual import AccrualCalculator
from debt_manager.models.enums import RateUnit


@dataclass
class AccrualConfig:
    """Accrual convention for a deployment.

    ``rate_unit`` states what the stored ``interest_rate_per_day`` field is
    denominated over. It is fixed per deployment and never inferred per call.
    """

    rate_unit: RateUnit = RateUnit.DAY

    def calculator(self) -> AccrualCalculator:
        """Build the calculator for this convention."""
        return AccrualCalculator(self.rate_unit)


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class DebtManagerConfig:
    """Main configuration for debt-manager."""

    accrual: AccrualConfig = field(default_factory=AccrualConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"
    locale: str = "pt_BR"

    @classmethod
    def from_env(cls) -> "DebtManagerConfig":
        """Create config from environment variables."""
        import os

        from debt_manager.exceptions import ConfigurationError
        from debt_manager.rates import parse_rate_unit

        accrual = AccrualConfig(
            rate_unit=parse_rate_unit(os.getenv("ACCRUAL_RATE_UNIT", "day")),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        seed_str = os.getenv("SEED")
        try:
            seed = int(seed_str) if seed_str else None
        except ValueError as exc:
            raise ConfigurationError(f"SEED must be an integer, got {seed_str!r}") from exc

        return cls(
            accrual=accrual,
            output=output,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            locale=os.getenv("FAKER_LOCALE", "pt_BR"),
        )
