"""Tests for inspection/event summarising."""

from __future__ import annotations

import pytest

from caddyfile_updater.errors import MetadataError
from caddyfile_updater.services.extractor import strip_name, summarize_container, summarize_event

from conftest import event_payload, inspect_payload, labels

APP_LABEL = "test.caddy.app"


class TestStripName:
    def test_strips_single_slash(self):
        assert strip_name("/web-1") == "web-1"

    def test_only_one_slash(self):
        assert strip_name("//web-1") == "/web-1"

    def test_no_prefix(self):
        assert strip_name("web-1") == "web-1"


class TestSummarizeContainer:
    def test_basic(self):
        summary = summarize_container(inspect_payload("abc123", "web-1", labels(app="web", port="8080")))
        assert summary.id == "abc123"
        assert summary.name == "web-1"
        assert summary.labels == {"test.caddy.app": "web", "test.caddy.port": "8080"}

    def test_null_labels_are_empty(self):
        summary = summarize_container(inspect_payload("abc123", "web-1", None))
        assert summary.labels == {}

    @pytest.mark.parametrize("missing", ["Id", "Name", "Config"])
    def test_missing_mandatory_field(self, missing):
        payload = inspect_payload("abc123", "web-1", {})
        del payload[missing]
        with pytest.raises(MetadataError):
            summarize_container(payload)


class TestSummarizeEvent:
    def test_create_event(self):
        event = event_payload("create", "abc123", "web-1", labels(app="web"))
        summary = summarize_event(event, APP_LABEL)
        assert summary.id == "abc123"
        assert summary.name == "web-1"
        assert summary.app_name == "web"
        assert summary.old_name is None

    def test_no_app_label(self):
        summary = summarize_event(event_payload("destroy", "abc123", "db"), APP_LABEL)
        assert summary.app_name is None

    def test_rename_strips_old_name(self):
        event = event_payload("rename", "abc123", "web-1b", labels(app="web"), old_name="web-1")
        summary = summarize_event(event, APP_LABEL)
        assert summary.old_name == "web-1"
        assert summary.name == "web-1b"

    def test_missing_actor_id(self):
        event = event_payload("create", "abc123", "web-1")
        del event["Actor"]["ID"]
        with pytest.raises(MetadataError):
            summarize_event(event, APP_LABEL)

    def test_missing_name_attribute(self):
        event = event_payload("create", "abc123", "web-1")
        del event["Actor"]["Attributes"]["name"]
        with pytest.raises(MetadataError):
            summarize_event(event, APP_LABEL)

    def test_missing_actor(self):
        with pytest.raises(MetadataError):
            summarize_event({"Type": "container", "Action": "create"}, APP_LABEL)
