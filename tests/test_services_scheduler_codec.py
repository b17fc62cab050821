"""
Tests for the schedule metadata codec.
"""
import json

import pytest

from services.scheduler import codec
from services.scheduler.exceptions import DecodeError, EncodingError
from services.scheduler.models import ScheduleMetadata


@pytest.fixture
def metadata():
    return ScheduleMetadata(
        task_definition_name="report",
        deployment_properties={"app.report.logging.level": "DEBUG"},
        commandline_arguments=["--verbose", "--format=csv"],
        cron_expression="0 0 * * * ?",
    )


class TestEncode:
    """Test encoding metadata to JSON."""

    def test_payload_layout(self, metadata):
        """Test the persisted JSON keys and values."""
        payload = json.loads(codec.encode(metadata))

        assert payload == {
            "definition": {"name": "report"},
            "deploymentProperties": {"app.report.logging.level": "DEBUG"},
            "commandlineArguments": ["--verbose", "--format=csv"],
            "cronExpression": "0 0 * * * ?",
        }

    def test_missing_cron_expression_is_omitted(self):
        """Test that an unset cron expression is not written."""
        payload = json.loads(codec.encode(ScheduleMetadata(task_definition_name="report")))

        assert "cronExpression" not in payload
        assert payload["deploymentProperties"] == {}
        assert payload["commandlineArguments"] == []

    def test_unserializable_metadata(self):
        """Test that serialization failures surface as EncodingError."""
        metadata = ScheduleMetadata.model_construct(
            task_definition_name="report",
            deployment_properties={"key": object()},
            commandline_arguments=[],
            cron_expression=None,
        )

        with pytest.raises(EncodingError):
            codec.encode(metadata)


class TestDecode:
    """Test decoding JSON payloads."""

    def test_round_trip(self, metadata):
        """Test that decoding an encoded payload restores the metadata."""
        assert codec.decode(codec.encode(metadata)) == metadata

    def test_round_trip_without_cron(self):
        """Test round trip of metadata without a cron expression."""
        metadata = ScheduleMetadata(task_definition_name="cleanup", commandline_arguments=["a b"])
        assert codec.decode(codec.encode(metadata)) == metadata

    @pytest.mark.parametrize("payload", [
        '{"definition": {"name": "report"}}',
        '{"definition": {"name": "report"}, "deploymentProperties": {}, "commandlineArguments": []}',
        '{"definition": {"name": "report"}, "deploymentProperties": null, "commandlineArguments": null}',
    ])
    def test_missing_or_empty_containers(self, payload):
        """Test that absent properties and arguments decode to empty containers."""
        metadata = codec.decode(payload)

        assert metadata.task_definition_name == "report"
        assert metadata.deployment_properties == {}
        assert metadata.commandline_arguments == []
        assert metadata.cron_expression is None

    def test_scalar_values_are_coerced_to_strings(self):
        """Test that non-string property values are read as strings."""
        metadata = codec.decode(
            '{"definition": {"name": "report"}, '
            '"deploymentProperties": {"retries": 3, "enabled": true}, '
            '"commandlineArguments": [1, "--x"]}'
        )

        assert metadata.deployment_properties == {"retries": "3", "enabled": "true"}
        assert metadata.commandline_arguments == ["1", "--x"]

    @pytest.mark.parametrize("payload", [
        "not json",
        "",
        "[]",
        '{"deploymentProperties": {}}',
        '{"definition": {}}',
        '{"definition": "report"}',
        '{"definition": {"name": null}}',
        '{"definition": {"name": "report"}, "deploymentProperties": ["a"]}',
        '{"definition": {"name": "report"}, "commandlineArguments": {"a": "b"}}',
        None,
        42,
    ])
    def test_invalid_payloads(self, payload):
        """Test that malformed or incomplete payloads raise DecodeError."""
        with pytest.raises(DecodeError):
            codec.decode(payload)
