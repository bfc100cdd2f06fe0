"""Schema detection plugin for the host application.

Wires the detection service into a host configuration:
- Adds the detector-config collection (one record per detector)
- Optionally adds a ``schemaDetector`` relationship field to the datasets
  collection (unset means "use the default detector")
- Seeds missing detector records at startup
- Exposes the service and detector list under ``custom["schemaDetection"]``

Usage:
    host_config = schema_detection_plugin()(host_config)
    service = host_config.custom["schemaDetection"]["service"]
    result = await service.detect(dataset.schema_detector, context)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from schema_detection.core.config import get_settings
from schema_detection.core.logging import get_logger
from schema_detection.detectors import create_builtin_detectors
from schema_detection.detectors.base import SchemaDetector
from schema_detection.plugin.db_models import DEFAULT_PRIORITY
from schema_detection.plugin.host import CollectionConfig, FieldConfig, HostConfig
from schema_detection.plugin.seeding import seed_detectors
from schema_detection.service import SchemaDetectionService

logger = get_logger(__name__)

CUSTOM_KEY = "schemaDetection"
DATASET_FIELD_NAME = "schemaDetector"


@dataclass
class SchemaDetectionPluginOptions:
    """Plugin options.

    Slugs default to the values from Settings.
    """

    enabled: bool = True
    detectors: list[SchemaDetector] = field(default_factory=create_builtin_detectors)
    collection_slug: str | None = None
    extend_datasets: bool = True
    datasets_collection_slug: str | None = None


def detectors_collection(slug: str) -> CollectionConfig:
    """Collection storing one configuration record per detector."""
    return CollectionConfig(
        slug=slug,
        fields=[
            FieldConfig(name="name", type="text", required=True, unique=True),
            FieldConfig(name="label", type="text", required=True),
            FieldConfig(name="description", type="textarea"),
            FieldConfig(name="enabled", type="checkbox", default=True),
            FieldConfig(name="priority", type="number", default=DEFAULT_PRIORITY),
            FieldConfig(name="options", type="json", default={}),
            FieldConfig(
                name="statistics",
                type="group",
                fields=[
                    FieldConfig(name="totalRuns", type="number", default=0),
                    FieldConfig(name="lastUsed", type="date"),
                ],
                admin={"readOnly": True},
            ),
        ],
        admin={"useAsTitle": "label", "group": "Configuration"},
    )


def _extend_datasets(
    collections: list[CollectionConfig], datasets_slug: str, detectors_slug: str
) -> None:
    """Add the detector relationship field to the datasets collection (copied, not mutated)."""
    for index, collection in enumerate(collections):
        if collection.slug != datasets_slug:
            continue
        if collection.get_field(DATASET_FIELD_NAME) is None:
            selector = FieldConfig(
                name=DATASET_FIELD_NAME,
                type="relationship",
                relation_to=detectors_slug,
                admin={"description": "Detector used for schema detection. Empty uses the default."},
            )
            collections[index] = replace(collection, fields=[*collection.fields, selector])
        return
    logger.warning("datasets_collection_missing", slug=datasets_slug)


def schema_detection_plugin(
    options: SchemaDetectionPluginOptions | None = None,
) -> Callable[[HostConfig], HostConfig]:
    """Create the plugin.

    Args:
        options: Plugin options (defaults: enabled, built-in detectors)

    Returns:
        Function that extends a host configuration; the input is returned
        unchanged when the plugin is disabled
    """
    options = options or SchemaDetectionPluginOptions()

    def apply(config: HostConfig) -> HostConfig:
        if not options.enabled:
            return config

        settings = get_settings()
        detectors_slug = options.collection_slug or settings.detectors_collection_slug
        datasets_slug = options.datasets_collection_slug or settings.datasets_collection_slug
        detectors = list(options.detectors)

        collections = list(config.collections)
        if not any(c.slug == detectors_slug for c in collections):
            collections.append(detectors_collection(detectors_slug))
        if options.extend_datasets:
            _extend_datasets(collections, datasets_slug, detectors_slug)

        extended = replace(
            config,
            collections=collections,
            on_init=list(config.on_init),
            custom=dict(config.custom),
        )

        async def seed(session_factory: async_sessionmaker[AsyncSession]) -> None:
            await seed_detectors(session_factory, detectors)

        extended.on_init.append(seed)
        extended.custom[CUSTOM_KEY] = {
            "service": SchemaDetectionService(detectors),
            "detectors": detectors,
        }
        logger.debug("schema_detection_plugin_applied", detectors=[d.name for d in detectors])
        return extended

    return apply
