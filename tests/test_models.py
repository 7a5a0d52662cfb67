"""
Schema tests for the dataset records: wire names, defaults and validation.
"""

import pytest
from pydantic import ValidationError

from portfolio.models import (
    Award,
    Dataset,
    FileType,
    Profile,
    Project,
    WriteResult,
)


class TestWireFormat:

    def test_dataset_json_round_trips_unchanged(self, sample_dataset_json):
        """Parsing and re-serialising keeps every camelCase key and value."""
        assert Dataset.model_validate(sample_dataset_json).to_json() == sample_dataset_json

    def test_camel_case_aliases_map_to_fields(self, sample_dataset):
        profile = sample_dataset.profiles[0]

        assert profile.user_id == "u1"
        assert profile.contact_info == "ada@example.com"
        assert profile.projects[0].file_type is FileType.PDF

    def test_award_without_image_url_omits_key(self):
        award = Award(id="a1", title="Medal", issuer="RS", date="1843")

        assert "imageUrl" not in award.to_json()

    def test_unknown_keys_are_preserved(self):
        """A newer client's extra fields survive a round trip through the store."""
        profile = Profile.model_validate({"id": "p1", "userId": "u1", "pronouns": "she/her"})

        assert profile.to_json()["pronouns"] == "she/her"

    def test_missing_lists_default_to_empty(self):
        profile = Profile.model_validate({"id": "p1", "userId": "u1"})

        assert profile.skills == []
        assert profile.projects == []
        assert profile.to_json()["education"] == []


class TestValidation:

    def test_unknown_file_type_is_kept_verbatim(self):
        project = Project.model_validate({"id": "pr1", "fileType": "image/png"})

        assert project.file_type == "image/png"
        assert project.to_json()["fileType"] == "image/png"

    def test_known_file_type_maps_to_enum(self):
        project = Project.model_validate({"id": "pr1", "fileType": "image/jpeg"})

        assert project.file_type is FileType.IMAGE

    def test_numbers_in_text_fields_become_strings(self):
        profile = Profile.model_validate({
            "id": 7,
            "userId": "u1",
            "skills": ["python", 3],
            "education": [{"id": "ed1", "degree": "BSc", "school": "MIT", "year": 2020}],
        })

        assert profile.id == "7"
        assert profile.skills == ["python", "3"]
        assert profile.education[0].year == "2020"

    def test_null_fields_fall_back_to_defaults(self):
        profile = Profile.model_validate({"id": "p1", "userId": "u1", "headline": None, "skills": None})

        assert profile.headline == ""
        assert profile.skills == []

    def test_profile_requires_user_id(self):
        with pytest.raises(ValidationError):
            Profile.model_validate({"id": "p1"})

    def test_non_object_record_is_rejected(self):
        with pytest.raises(ValidationError):
            Profile.model_validate(["p1", "u1"])


def test_write_result_omits_error_on_success():
    assert WriteResult(success=True, mode="sheets").to_json() == {"success": True, "mode": "sheets"}
    assert WriteResult(success=False, mode="memory", error="boom").to_json() == {
        "success": False, "mode": "memory", "error": "boom",
    }
