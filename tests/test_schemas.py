import pytest

from devconnector.api.schemas.profile import ExperienceIn, ProfileIn, normalize_skills
from devconnector.core.exceptions import ValidationFailed
from devconnector.services.profile_service import build_profile_fields


@pytest.mark.parametrize("raw, expected", [
    ("go, react, node", ["go", "react", "node"]),
    ("go,react ,  node", ["go", "react", "node"]),
    ("go,,", ["go"]),
    ([" go ", "", "rust"], ["go", "rust"]),
])
def test_normalize_skills(raw, expected):
    assert normalize_skills(raw) == expected


def test_profile_fields_only_include_present_values():
    payload = ProfileIn(status="dev", skills="go, react", company="", bio="hello", twitter="https://t.co/x")

    assert build_profile_fields(payload.model_dump()) == {
        "status": "dev",
        "bio": "hello",
        "skills": ["go", "react"],
        "social.twitter": "https://t.co/x",
    }


def test_ensure_valid_collects_all_missing_fields():
    with pytest.raises(ValidationFailed) as exc:
        ExperienceIn(location="Remote").ensure_valid()

    assert [e["param"] for e in exc.value.errors] == ["title", "company", "from"]
    assert exc.value.status_code == 400


def test_profile_fields_from_plain_dict():
    data = {"status": " dev ", "website": "   ", "skills": ["go"], "linkedin": "https://in/x"}

    assert build_profile_fields(data) == {
        "status": "dev",
        "skills": ["go"],
        "social.linkedin": "https://in/x",
    }
