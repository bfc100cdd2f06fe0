"""Host application integration.

- Persisted detector configuration (db_models, repository)
- Startup seeding of detector records
- The plugin that wires the service into a host configuration
"""

from schema_detection.plugin.db_models import SchemaDetectorRecord
from schema_detection.plugin.host import CollectionConfig, FieldConfig, HostConfig
from schema_detection.plugin.integration import (
    SchemaDetectionPluginOptions,
    schema_detection_plugin,
)
from schema_detection.plugin.repository import (
    build_service,
    list_detector_records,
    load_detector_config,
    record_detector_run,
)
from schema_detection.plugin.seeding import seed_detectors

__all__ = [
    # Models
    "SchemaDetectorRecord",
    # Host
    "CollectionConfig",
    "FieldConfig",
    "HostConfig",
    # Plugin
    "SchemaDetectionPluginOptions",
    "schema_detection_plugin",
    # Repository
    "build_service",
    "list_detector_records",
    "load_detector_config",
    "record_detector_run",
    # Seeding
    "seed_detectors",
]
