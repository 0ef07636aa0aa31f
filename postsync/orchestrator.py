"""Migration orchestrator - copies posts from a source instance to the target."""

import logging
from typing import Optional

from .models.migration import MigrationConfig, MigrationOptions
from .models.record import MigrationResult
from .services.dedup import DedupIndex, slug_key
from .services.normalizer import RecordNormalizer
from .gateway.base import BaseGateway, GatewayError
from .gateway.ncb import NCBGateway

logger = logging.getLogger(__name__)


class MigrationError(RuntimeError):
    """A failure that aborts the whole run."""


class ConfigurationError(MigrationError):
    """Required configuration is missing."""


class MigrationOrchestrator:
    """
    Orchestrates a post migration between two backend instances.

    Handles:
    - Reading the source and target collections
    - Normalizing each source row
    - Skipping rows whose slug already exists at the target
    - Creating the rest (or counting them, on dry runs)

    Rows are processed strictly in source order, one at a time, so each
    slug added to the dedup index is visible to the rows after it. Nothing
    guards against two concurrent runs writing the same slug.
    """

    def __init__(
        self,
        config: MigrationConfig,
        gateway: Optional[BaseGateway] = None,
        normalizer: Optional[RecordNormalizer] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Migration configuration
            gateway: Backend gateway (defaults to an NCBGateway built from config)
            normalizer: Record normalizer with the field rules to apply
        """
        self.config = config
        self._gateway = gateway
        self.normalizer = normalizer or RecordNormalizer()

    @property
    def gateway(self) -> BaseGateway:
        if self._gateway is None:
            self._gateway = NCBGateway.from_config(self.config)
        return self._gateway

    def _check_config(self):
        """Fail the run if required configuration is missing."""
        if not self.config.api_key:
            raise ConfigurationError("Missing NCB_API_KEY in env")
        if not self.config.target_instance:
            raise ConfigurationError("Missing target NCB instance in env")

    def run(self, options: Optional[MigrationOptions] = None) -> MigrationResult:
        """
        Run the migration.

        Args:
            options: Dry-run flag and source instance for this run

        Returns:
            MigrationResult with counters and per-record errors

        Raises:
            ConfigurationError: API key or target instance is not configured
            MigrationError: a read fails, or a create fails during a live run
        """
        options = options or MigrationOptions()
        self._check_config()

        source_instance = self.config.resolve_source_instance(options.source_instance)
        target_instance = self.config.target_instance
        collection = self.config.collection

        result = MigrationResult(
            source_instance=source_instance,
            target_instance=target_instance,
            dry_run=options.dry_run,
        )

        mode = "dry run" if options.dry_run else "live run"
        logger.info(f"=== {mode.upper()}: {collection} {source_instance} -> {target_instance} ===")

        try:
            source_rows = self.gateway.read_all(source_instance, collection, self.config.read_limit)
            target_rows = self.gateway.read_all(target_instance, collection, self.config.read_limit)
        except GatewayError as e:
            logger.error(f"Failed to read {collection}: {e}")
            raise MigrationError(str(e)) from e

        result.source_count = len(source_rows)
        index = DedupIndex.from_records(target_rows)

        for row in source_rows:
            payload = self.normalizer.normalize(row)

            error = self.normalizer.validate(payload)
            if error:
                logger.warning(f"Skipping invalid row: {error}")
                result.add_error(error, payload)
                continue

            key = slug_key(payload["slug"])
            if index.has(key):
                logger.debug(f"Already present: {key}")
                result.skipped += 1
                continue

            if options.dry_run:
                result.would_create += 1
                index.add(key)
                continue

            try:
                self.gateway.create(target_instance, collection, payload)
            except GatewayError as e:
                logger.error(f"Create failed for {key}: {e}")
                raise MigrationError(str(e)) from e

            result.created += 1
            index.add(key)
            logger.debug(f"Created: {key}")

        logger.info(
            f"Migration finished: {result.source_count} read, "
            f"{result.created_count} {'would be created' if options.dry_run else 'created'}, "
            f"{result.skipped} skipped, {len(result.errors)} errors"
        )
        return result


def run_migration(
    config: MigrationConfig,
    options: Optional[MigrationOptions] = None,
    gateway: Optional[BaseGateway] = None
) -> MigrationResult:
    """Run one migration with a fresh orchestrator."""
    return MigrationOrchestrator(config, gateway).run(options)
