"""Tests for fact data models."""

import dataclasses

import pytest

from uselessfacts.models import Fact, SubmittedFact


class TestFact:
    """Tests for the Fact dataclass."""

    def test_approved_is_always_true(self):
        """Published facts are approved by construction."""
        fact = Fact(id="1", text="Bananas are berries.", category="Food")
        assert fact.approved is True

    def test_is_frozen(self):
        """Facts are immutable."""
        fact = Fact(id="1", text="Bananas are berries.", category="Food")
        with pytest.raises(dataclasses.FrozenInstanceError):
            fact.text = "changed"  # type: ignore[misc]

    def test_to_dict_uses_camel_case(self):
        """Serialized form uses submittedBy and createdAt."""
        fact = Fact(
            id="1",
            text="Bananas are berries.",
            category="Food",
            submitted_by="Ann",
            created_at="2024-01-01T00:00:00+00:00",
        )
        assert fact.to_dict() == {
            "id": "1",
            "text": "Bananas are berries.",
            "category": "Food",
            "submittedBy": "Ann",
            "createdAt": "2024-01-01T00:00:00+00:00",
            "approved": True,
        }

    def test_to_dict_omits_unset_optionals(self):
        """Unset optional fields are left out."""
        data = Fact(id="1", text="Bananas are berries.", category="Food").to_dict()
        assert "source" not in data
        assert "submittedBy" not in data
        assert "createdAt" not in data

    def test_from_dict_ignores_unknown_keys(self):
        """Extra columns from storage are ignored."""
        fact = Fact.from_dict(
            {"id": 7, "text": "Bats are not blind.", "category": "Animals", "isTrue": True}
        )
        assert fact.id == "7"
        assert fact.category == "Animals"

    def test_from_dict_reads_camel_case(self):
        fact = Fact.from_dict(
            {
                "id": "3",
                "text": "Some fact text here.",
                "category": "Science",
                "submittedBy": "Ann",
                "createdAt": "2024-01-01T00:00:00+00:00",
                "approved": True,
            }
        )
        assert fact.submitted_by == "Ann"
        assert fact.created_at == "2024-01-01T00:00:00+00:00"


class TestSubmittedFact:
    """Tests for the SubmittedFact dataclass."""

    def test_approved_is_always_false(self):
        """Pending submissions are never approved."""
        submission = SubmittedFact(
            id="1", text="Bananas are berries.", category="Food", submitted_by="Ann"
        )
        assert submission.approved is False

    def test_from_dict_ignores_approved_flag(self):
        """A stored approved flag cannot make a submission approved."""
        submission = SubmittedFact.from_dict(
            {
                "id": "1",
                "text": "Bananas are berries.",
                "category": "Food",
                "submittedBy": "Ann",
                "approved": True,
            }
        )
        assert submission.approved is False

    def test_from_dict_requires_submitter(self):
        """Submissions without a submitter are malformed."""
        with pytest.raises(TypeError):
            SubmittedFact.from_dict({"id": "1", "text": "Bananas are berries.", "category": "Food"})
