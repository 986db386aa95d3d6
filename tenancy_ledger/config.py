"""Configuration management for tenancy-ledger."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tenancy_ledger.exceptions import ConfigurationError

STORE_BACKENDS = ("memory", "postgres")


@dataclass
class KafkaConfig:
    """Kafka producer configuration for the activity feed."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic_prefix: str = "ledger"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "ledger"
    user: str = "postgres"
    password: str = "postgres"
    table: str = "ledger_documents"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class OutputConfig:
    """Output configuration for exports and the JSON activity sink."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class RetryConfig:
    """Backoff policy for store reads and conflicting writes."""

    attempts: int = 3
    min_wait: float = 0.1
    max_wait: float = 2.0

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ConfigurationError("RetryConfig.attempts must be >= 1")
        if self.min_wait < 0 or self.max_wait < self.min_wait:
            raise ConfigurationError("RetryConfig wait bounds are invalid")


@dataclass
class BillingConfig:
    """Reporting defaults."""

    currency: str = "BDT"
    trend_months: int = 6

    def __post_init__(self) -> None:
        if self.trend_months < 1:
            raise ConfigurationError("BillingConfig.trend_months must be >= 1")


@dataclass
class LedgerConfig:
    """Main configuration for tenancy-ledger."""

    store_backend: str = "memory"
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    billing: BillingConfig = field(default_factory=BillingConfig)
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.store_backend not in STORE_BACKENDS:
            raise ConfigurationError(
                f"Unknown store backend {self.store_backend!r}; expected one of {STORE_BACKENDS}"
            )

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Create config from environment variables."""
        import os

        try:
            postgres = PostgresConfig(
                host=os.getenv("POSTGRES_HOST", "localhost"),
                port=int(os.getenv("POSTGRES_PORT", "5432")),
                database=os.getenv("POSTGRES_DB", "ledger"),
                user=os.getenv("POSTGRES_USER", "postgres"),
                password=os.getenv("POSTGRES_PASSWORD", "postgres"),
                table=os.getenv("POSTGRES_TABLE", "ledger_documents"),
            )

            kafka = KafkaConfig(
                bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
                acks=os.getenv("KAFKA_ACKS", "all"),
                topic_prefix=os.getenv("KAFKA_TOPIC_PREFIX", "ledger"),
            )

            output = OutputConfig(
                json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
                pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
            )

            retry = RetryConfig(
                attempts=int(os.getenv("RETRY_ATTEMPTS", "3")),
                min_wait=float(os.getenv("RETRY_MIN_WAIT", "0.1")),
                max_wait=float(os.getenv("RETRY_MAX_WAIT", "2.0")),
            )

            billing = BillingConfig(
                currency=os.getenv("CURRENCY", "BDT"),
                trend_months=int(os.getenv("TREND_MONTHS", "6")),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        return cls(
            store_backend=os.getenv("STORE_BACKEND", "memory"),
            postgres=postgres,
            kafka=kafka,
            output=output,
            retry=retry,
            billing=billing,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
