"""Tests for the JSON-backed registration store"""

import json
from datetime import datetime

import pytest

from registration_intake.models.registration import RegistrationRecord
from registration_intake.services.registration_store import (
    RegistrationStore,
    StorageUnavailableError,
)
from tests.config import test_config


class TestRegistrationStore:
    """Test append, load and persistence behaviour"""

    def test_load_missing_directory_returns_empty(self, registration_store, data_dir):
        """A store whose directory does not exist yet loads an empty collection"""
        assert not data_dir.exists()

        assert registration_store.load() == []
        assert data_dir.is_dir()

    def test_ensure_data_dir_is_idempotent(self, registration_store, data_dir):
        registration_store.ensure_data_dir()
        registration_store.ensure_data_dir()

        assert data_dir.is_dir()

    def test_append_assigns_sequential_ids(self, registration_store):
        """Record i of N appends gets id i"""
        names = ["alice", "bob", "carol", "dave", "erin"]
        records = [registration_store.append({"username": n}) for n in names]

        assert [r.id for r in records] == [1, 2, 3, 4, 5]
        loaded = registration_store.load()
        assert [r.id for r in loaded] == [1, 2, 3, 4, 5]
        assert [r.fields["username"] for r in loaded] == names

    def test_append_sets_utc_registration_date(self, registration_store):
        record = registration_store.append(test_config["alice"])

        assert record.registration_date.endswith("Z")
        parsed = datetime.fromisoformat(record.registration_date.replace("Z", "+00:00"))
        assert parsed.utcoffset().total_seconds() == 0

    def test_append_keeps_extra_fields_verbatim(self, registration_store):
        fields = {**test_config["alice"], "phone": "555-1234", "shirt_size": "M"}

        record = registration_store.append(fields)

        assert record.fields == fields

    def test_append_ignores_caller_supplied_system_keys(self, registration_store):
        """Callers cannot choose the id or the registration date"""
        record = registration_store.append(
            {"username": "mallory", "id": 99, "registrationDate": "1999-01-01"}
        )

        assert record.id == 1
        assert record.registration_date != "1999-01-01"
        assert record.fields == {"username": "mallory"}

    def test_load_is_repeatable(self, registration_store):
        registration_store.append(test_config["alice"])
        registration_store.append(test_config["bob"])

        assert registration_store.load() == registration_store.load()

    def test_records_survive_restart(self, registration_store, data_dir):
        """A fresh store over the same directory sees previously appended records"""
        stored = registration_store.append(test_config["alice"])

        reopened = RegistrationStore(data_dir)
        records = reopened.load()

        assert len(records) == 1
        assert records[0].fields == test_config["alice"]
        assert records[0].registration_date == stored.registration_date

    def test_persisted_file_is_flat_json_list(self, registration_store):
        record = registration_store.append(test_config["alice"])

        documents = json.loads(registration_store.registrations_file.read_text())

        assert documents == [
            {
                "username": "alice",
                "email": "a@x.com",
                "team": "red",
                "registrationDate": record.registration_date,
                "id": 1,
            }
        ]

    def test_malformed_file_loads_as_empty(self, registration_store, caplog):
        registration_store.ensure_data_dir()
        registration_store.registrations_file.write_text("{not json")

        with caplog.at_level("WARNING"):
            assert registration_store.load() == []

        assert "malformed" in caplog.text
        # Left on disk until the next append
        assert registration_store.registrations_file.read_text() == "{not json"

    def test_non_list_document_loads_as_empty(self, registration_store):
        registration_store.ensure_data_dir()
        registration_store.registrations_file.write_text('{"id": 1}')

        assert registration_store.load() == []

    def test_append_after_malformed_file_starts_over(self, registration_store):
        registration_store.ensure_data_dir()
        registration_store.registrations_file.write_text("garbage")

        record = registration_store.append(test_config["bob"])

        assert record.id == 1
        assert len(registration_store.load()) == 1

    def test_unusable_directory_raises(self, blocked_dir):
        store = RegistrationStore(blocked_dir)

        with pytest.raises(StorageUnavailableError):
            store.load()

        with pytest.raises(StorageUnavailableError):
            store.append(test_config["alice"])

    def test_record_document_round_trip_keeps_field_order(self):
        document = {"team": "red", "username": "alice", "registrationDate": "t", "id": 3}

        record = RegistrationRecord.from_document(document)

        assert record.id == 3
        assert list(record.to_document()) == ["team", "username", "registrationDate", "id"]

    def test_failed_save_removes_temp_file(self, registration_store):
        registration_store.ensure_data_dir()
        # A directory in place of the collection file makes the final rename fail
        registration_store.registrations_file.mkdir()
        tmp_file = registration_store.data_dir / "registrations.json.tmp"

        record = RegistrationRecord.create(1, test_config["alice"])
        with pytest.raises(StorageUnavailableError):
            registration_store.save([record])

        assert not tmp_file.exists()
