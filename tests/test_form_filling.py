from __future__ import annotations

import pytest
from conftest import FakeControl, FakePage

from autofill.errors import NotAuthenticatedError
from autofill.form_detection import detect_fields
from autofill.form_filling import autofill
from autofill.profile import UserProfile
from autofill.value_assignment import plan_assignments, resolve_value
from autofill.field_classifier import FieldType


def test_end_to_end_fill(application_page, logger):
    fname, em, cv = application_page.controls
    result = detect_fields(application_page, logger)
    profile = UserProfile(first_name="Ada", email="ada@example.com")

    report = autofill(result, profile, logger)

    assert fname.value == "Ada"
    assert em.value == "ada@example.com"
    assert cv.value == "" and cv.writes == []
    assert report.filled_count == 2
    assert report.matched_count == 3


def test_events_fire_input_then_change(application_page, logger):
    fname = application_page.controls[0]
    result = detect_fields(application_page, logger)

    autofill(result, UserProfile(first_name="Ada"), logger)

    assert fname.events == ["input", "change"]


def test_existing_values_are_kept_without_overwrite(logger):
    control = FakeControl(id="em", type="email", label="Email", value="me@work.com")
    page = FakePage([control])
    result = detect_fields(page, logger)

    report = autofill(result, UserProfile(email="ada@example.com"), logger)

    assert control.value == "me@work.com"
    assert control.events == []
    assert report.filled_count == 0
    assert report.to_dict()["skipped"][0]["reason"] == "already_filled"


def test_overwrite_replaces_existing_values(logger):
    control = FakeControl(id="em", type="email", label="Email", value="me@work.com")
    result = detect_fields(FakePage([control]), logger)

    report = autofill(
        result, UserProfile(email="ada@example.com"), logger, overwrite=True
    )

    assert control.value == "ada@example.com"
    assert report.filled_count == 1


def test_missing_profile_values_leave_controls_untouched(logger):
    phone = FakeControl(id="ph", type="tel", label="Phone")
    skills = FakeControl(tag="textarea", id="sk", label="Skills")
    result = detect_fields(FakePage([phone, skills]), logger)

    report = autofill(result, UserProfile(phone="   ", skills=()), logger)

    assert phone.writes == [] and phone.events == []
    assert skills.writes == [] and skills.events == []
    assert report.filled_count == 0


def test_missing_profile_raises_before_any_write(application_page, logger):
    result = detect_fields(application_page, logger)

    with pytest.raises(NotAuthenticatedError):
        autofill(result, None, logger)

    assert all(control.writes == [] for control in application_page.controls)


def test_detached_control_is_skipped_without_aborting(logger):
    gone = FakeControl(id="fname", label="First Name")
    kept = FakeControl(id="lname", label="Last Name")
    result = detect_fields(FakePage([gone, kept]), logger)
    gone.connected = False

    report = autofill(result, UserProfile(first_name="Ada", last_name="Lovelace"), logger)

    assert gone.writes == []
    assert kept.value == "Lovelace"
    assert report.filled_count == 1
    assert report.results[0].error == "detached"


def test_select_without_matching_option_is_not_counted(logger):
    select = FakeControl(
        tag="select", id="loc", label="Location", options=["Berlin", "Paris"]
    )
    result = detect_fields(FakePage([select]), logger)

    report = autofill(result, UserProfile(preferred_locations="London"), logger)

    assert report.filled_count == 0
    assert report.results[0].error == "no_option"


class TestValueResolution:
    def test_full_name_falls_back_to_parts(self):
        profile = UserProfile(first_name="Ada", last_name="Lovelace")
        assert resolve_value(FieldType.FULL_NAME, profile) == "Ada Lovelace"

    def test_full_name_prefers_explicit_value(self):
        profile = UserProfile(full_name="Augusta Ada King", first_name="Ada")
        assert resolve_value(FieldType.FULL_NAME, profile) == "Augusta Ada King"

    def test_skills_are_joined(self):
        profile = UserProfile(skills=("Python", "SQL"))
        assert resolve_value(FieldType.SKILLS, profile) == "Python, SQL"

    @pytest.mark.parametrize(
        "field_type",
        [FieldType.RESUME, FieldType.COVER_LETTER, FieldType.MOTIVATION, FieldType.QUESTIONS],
    )
    def test_types_without_profile_source(self, field_type):
        assert resolve_value(field_type, UserProfile(email="a@b.c")) is None

    def test_file_inputs_are_never_planned(self, application_page, logger):
        result = detect_fields(application_page, logger)
        assignments, decisions = plan_assignments(
            result, UserProfile(first_name="Ada", email="a@b.c"), overwrite=True
        )

        assert [a.field.field_type for a in assignments] == [
            FieldType.FIRST_NAME,
            FieldType.EMAIL,
        ]
        assert decisions[2].reason == "file_input"


def test_value_typed_after_detection_is_kept(logger):
    control = FakeControl(id="fname", label="First Name")
    result = detect_fields(FakePage([control]), logger)
    control.value = "Grace"

    report = autofill(result, UserProfile(first_name="Ada"), logger)

    assert control.value == "Grace"
    assert control.events == []
    assert report.filled_count == 0
    assert report.results[0].error == "already_filled"


def test_select_left_on_placeholder_is_filled(logger):
    select = FakeControl(
        tag="select", id="loc", label="Location", options=["Berlin", "Paris"]
    )
    result = detect_fields(FakePage([select]), logger)

    report = autofill(result, UserProfile(preferred_locations="paris"), logger)

    assert result.fields[0].already_filled is False
    assert select.value == "Paris"
    assert report.filled_count == 1
