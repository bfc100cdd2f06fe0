"""Tests for the host application plugin."""

from schema_detection.detectors import DefaultDetector
from schema_detection.detectors.base import DetectionContext, SchemaDetector
from schema_detection.models import DetectionResult
from schema_detection.plugin import (
    CollectionConfig,
    FieldConfig,
    HostConfig,
    SchemaDetectionPluginOptions,
    schema_detection_plugin,
)
from schema_detection.plugin.repository import list_detector_records
from schema_detection.service import SchemaDetectionService


class CsvDetector(SchemaDetector):
    name = "csv"
    label = "CSV Detector"

    def detect(self, context: DetectionContext) -> DetectionResult:
        return DetectionResult.empty()


def _host_config() -> HostConfig:
    return HostConfig(
        collections=[
            CollectionConfig(
                slug="datasets",
                fields=[FieldConfig(name="title", type="text", required=True)],
            )
        ],
        custom={"other": {"enabled": True}},
    )


class TestDisabled:
    def test_returns_config_unchanged(self):
        config = _host_config()

        result = schema_detection_plugin(SchemaDetectionPluginOptions(enabled=False))(config)

        assert result is config
        assert [c.slug for c in result.collections] == ["datasets"]
        assert "schemaDetection" not in result.custom
        assert result.on_init == []


class TestCollections:
    """Tests for the collections added by the plugin."""

    def test_adds_detectors_collection(self):
        result = schema_detection_plugin()(_host_config())

        collection = result.get_collection("schema-detectors")
        assert collection is not None
        assert [f.name for f in collection.fields] == [
            "name",
            "label",
            "description",
            "enabled",
            "priority",
            "options",
            "statistics",
        ]
        assert collection.get_field("name").unique is True
        assert collection.get_field("priority").default == 100
        assert collection.admin["useAsTitle"] == "label"

    def test_custom_collection_slug(self):
        options = SchemaDetectionPluginOptions(collection_slug="detector-configs")

        result = schema_detection_plugin(options)(_host_config())

        assert result.get_collection("detector-configs") is not None
        assert result.get_collection("schema-detectors") is None
        selector = result.get_collection("datasets").get_field("schemaDetector")
        assert selector.relation_to == "detector-configs"

    def test_existing_detectors_collection_kept(self):
        """Test an existing collection with the same slug is not duplicated."""
        config = _host_config()
        config.collections.append(CollectionConfig(slug="schema-detectors"))

        result = schema_detection_plugin()(config)

        assert [c.slug for c in result.collections].count("schema-detectors") == 1

    def test_extends_datasets_without_mutating_input(self):
        """Test the relationship field lands on a copy of the datasets collection."""
        config = _host_config()
        original = config.collections[0]

        result = schema_detection_plugin()(config)

        datasets = result.get_collection("datasets")
        selector = datasets.get_field("schemaDetector")
        assert selector is not None
        assert selector.type == "relationship"
        assert selector.relation_to == "schema-detectors"
        assert original.get_field("schemaDetector") is None
        assert config.get_collection("schema-detectors") is None

    def test_extend_datasets_disabled(self):
        options = SchemaDetectionPluginOptions(extend_datasets=False)

        result = schema_detection_plugin(options)(_host_config())

        assert result.get_collection("datasets").get_field("schemaDetector") is None

    def test_missing_datasets_collection(self):
        """Test a host without a datasets collection still gets the plugin."""
        result = schema_detection_plugin()(HostConfig())

        assert [c.slug for c in result.collections] == ["schema-detectors"]

    def test_field_not_added_twice(self):
        plugin = schema_detection_plugin()

        result = plugin(plugin(_host_config()))

        fields = [f.name for f in result.get_collection("datasets").fields]
        assert fields.count("schemaDetector") == 1


class TestCustomNamespace:
    """Tests for the services exposed to the host."""

    def test_exposes_service_and_detectors(self):
        result = schema_detection_plugin()(_host_config())

        exposed = result.custom["schemaDetection"]
        assert isinstance(exposed["service"], SchemaDetectionService)
        assert [d.name for d in exposed["detectors"]] == ["default"]
        assert exposed["service"].get_detector("default") is exposed["detectors"][0]
        assert result.custom["other"] == {"enabled": True}

    def test_custom_detectors(self):
        csv = CsvDetector()
        options = SchemaDetectionPluginOptions(detectors=[csv, DefaultDetector()])

        result = schema_detection_plugin(options)(_host_config())

        service = result.custom["schemaDetection"]["service"]
        assert service.get_detector("csv") is csv
        assert service.default_detector is not None

    def test_input_custom_not_mutated(self):
        config = _host_config()

        schema_detection_plugin()(config)

        assert "schemaDetection" not in config.custom
        assert config.on_init == []


class TestInitHook:
    async def test_seeds_detectors_on_init(self, session_factory, async_session):
        """Test the startup hook creates the detector records."""
        options = SchemaDetectionPluginOptions(detectors=[CsvDetector(), DefaultDetector()])
        result = schema_detection_plugin(options)(_host_config())

        await result.run_init_hooks(session_factory)

        records = await list_detector_records(async_session)
        assert [(r.name, r.priority) for r in records] == [("csv", 100), ("default", 1000)]
