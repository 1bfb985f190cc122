import asyncio
from datetime import datetime, timezone

import pytest

from kneeklinic.core.exceptions import ResourceNotFoundError, ValidationError
from kneeklinic.schemas.activity import WeeklyStepData
from kneeklinic.services.activity_service import (
    clamp_water_intake,
    completion_percentage,
    toggle_item,
)
from kneeklinic.services.appointment_service import split_appointments
from kneeklinic.services.xray_service import get_kl_grade_info
from kneeklinic.utils.constants import MAX_IMAGE_SIZE


# Messages

def test_conversations(kk_app):
    conversations = asyncio.run(kk_app.messages.get_conversations())
    assert len(conversations) == 1
    assert conversations[0].participant_name == "Habib Khan"
    assert conversations[0].participant_role == "doctor"
    assert conversations[0].unread_count == 1


def test_conversation_messages_with_populated_sender(kk_app):
    messages = asyncio.run(kk_app.messages.get_conversation("d1"))
    assert messages[0].sender_ref == "d1"
    assert messages[0].sender_id.display_name == "Habib Khan"


def test_send_and_mark_read(kk_app, backend):
    sent = asyncio.run(kk_app.messages.send_message("d1", "  Knee feels better  "))
    assert sent.message == "Knee feels better"
    assert sent.sender_ref == "u1"
    assert sent.receiver_type == "doctor"

    asyncio.run(kk_app.messages.mark_as_read("m1"))
    assert backend.messages[0]["isRead"] is True


def test_blank_message_is_rejected(kk_app, backend):
    with pytest.raises(ValidationError):
        asyncio.run(kk_app.messages.send_message("d1", "   "))
    assert backend.requests == []


# Community

def test_posts_and_replies(kk_app):
    posts = asyncio.run(kk_app.community.get_posts())
    assert posts[0].author_name == "Sam Lee"
    assert posts[0].like_count == 1

    replies = asyncio.run(kk_app.community.get_replies("p1"))
    assert replies[0].author_name == "Anonymous"
    assert replies[0].post_id == "p1"


def test_create_like_and_delete_post(kk_app, backend):
    post = asyncio.run(kk_app.community.create_post("Cycling is easier on my knees"))
    assert post.id == "p2"
    assert post.author_name == "Jane Doe"

    asyncio.run(kk_app.community.like_post(post.id))
    liked = asyncio.run(kk_app.community.get_post(post.id))
    assert liked.is_liked_by("u1")

    reply = asyncio.run(kk_app.community.create_reply(post.id, "Agreed"))
    assert reply.post_id == post.id
    asyncio.run(kk_app.community.like_reply(reply.id))
    assert backend.replies[reply.id]["likes"] == ["u1"]
    asyncio.run(kk_app.community.delete_reply(reply.id))

    asyncio.run(kk_app.community.delete_post(post.id))
    with pytest.raises(ResourceNotFoundError) as exc_info:
        asyncio.run(kk_app.community.get_post(post.id))
    assert exc_info.value.message == "Post not found"


def test_empty_post_is_rejected(kk_app):
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(kk_app.community.create_post(" \n "))
    assert exc_info.value.details == {"content": "Message cannot be empty"}


# X-ray analysis

@pytest.mark.parametrize("grade, label", [
    ("0", "Normal"),
    (2, "Mild OA"),
    ("4", "Severe OA"),
])
def test_kl_grade_info(grade, label):
    info = get_kl_grade_info(grade)
    assert info.grade == int(grade)
    assert info.label == label
    assert info.recommendations


@pytest.mark.parametrize("grade", [None, "7", "abc", -1])
def test_kl_grade_info_unknown(grade):
    info = get_kl_grade_info(grade)
    assert info.grade is None
    assert info.label == "Unknown"


def test_analyze_xray_uploads_multipart(kk_app, backend, tmp_path):
    image = tmp_path / "left-knee.PNG"
    image.write_bytes(b"\x89PNG" + b"\0" * 128)

    analysis = asyncio.run(kk_app.xray.analyze_xray(image))

    assert analysis.kl_grade == "3"
    assert analysis.severity == "Severe"
    assert backend.last_form == {"filename": "left-knee.PNG", "content_type": "image/png", "size": 132}

    analyses = asyncio.run(kk_app.xray.get_analyses())
    assert [a.id for a in analyses] == ["a2", "a1"]
    assert asyncio.run(kk_app.xray.get_analysis_by_id("a1")).risk_score == 42.5


def test_analyze_xray_validates_before_upload(kk_app, backend, tmp_path):
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(kk_app.xray.analyze_xray(None))
    assert exc_info.value.details == {"xray": "Please select an X-ray image first."}

    big = tmp_path / "huge.jpg"
    big.write_bytes(b"\0" * (MAX_IMAGE_SIZE + 1))
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(kk_app.xray.analyze_xray(big))
    assert exc_info.value.message == "Image is too large. Maximum size is 10MB."
    assert backend.requests == []


def test_missing_analysis(kk_app):
    with pytest.raises(ResourceNotFoundError):
        asyncio.run(kk_app.xray.get_analysis_by_id("nope"))


# Appointments

def test_split_appointments(kk_app):
    upcoming, past = split_appointments(asyncio.run(kk_app.appointments.get_appointments()))
    assert [a.id for a in upcoming] == ["ap1"]
    assert [a.id for a in past] == ["ap2"]


def test_add_appointment_defaults(kk_app, backend):
    date = datetime(2026, 3, 20, tzinfo=timezone.utc)
    asyncio.run(kk_app.appointments.add_appointment(date=date))

    assert backend.last_body == {
        "doctorName": "Dr. Habib Khan",
        "specialty": "Orthopedic Specialist",
        "date": "2026-03-20T00:00:00Z",
        "time": "10:00 AM",
        "type": "Consultation",
        "notes": "Booked via Cal.com",
    }


def test_add_appointment_defaults_to_tomorrow(kk_app, backend):
    asyncio.run(kk_app.appointments.add_appointment())
    booked = datetime.fromisoformat(backend.last_body["date"].replace("Z", "+00:00"))
    delta = booked - datetime.now(timezone.utc)
    assert 0 < delta.total_seconds() <= 24 * 3600


def test_reschedule_and_cancel(kk_app, backend):
    asyncio.run(kk_app.appointments.reschedule_appointment("ap1"))
    assert backend.appointments["ap1"]["status"] == "rescheduled"

    asyncio.run(kk_app.appointments.cancel_appointment("ap1"))
    assert backend.appointments["ap1"]["status"] == "cancelled"

    upcoming, past = split_appointments(asyncio.run(kk_app.appointments.get_appointments()))
    assert upcoming == []
    assert len(past) == 2


# Activity

def test_toggle_item():
    assert toggle_item([], "b1") == ["b1"]
    assert toggle_item(["b1", "b2"], "b1") == ["b2"]


@pytest.mark.parametrize("done, total, percent", [
    (0, 0, 0),
    (0, 3, 0),
    (2, 3, 67),
    (1, 8, 13),
    (3, 3, 100),
])
def test_completion_percentage(done, total, percent):
    assert completion_percentage(done, total) == percent


def test_clamp_water_intake():
    assert clamp_water_intake(-1) == 0
    assert clamp_water_intake(7) == 7
    assert clamp_water_intake(15) == 12


def test_exercise_plan_progress(kk_app, backend):
    plans = asyncio.run(kk_app.activity.get_exercise_plans())
    assert set(plans) == {"beginning", "moderate", "severe"}
    assert len(plans["beginning"].exercises) == 3

    assert asyncio.run(kk_app.activity.get_exercise_today()).log is None

    asyncio.run(kk_app.activity.log_exercise("beginning", ["b1", "b2"], 3))
    assert backend.exercise_log == {
        "severityLevel": "beginning",
        "completedExercises": ["b1", "b2"],
        "totalExercises": 3,
    }
    today = asyncio.run(kk_app.activity.get_exercise_today())
    assert today.log.completed_exercises == ["b1", "b2"]


def test_diet_log_clamps_water(kk_app, backend):
    plans = asyncio.run(kk_app.activity.get_diet_plans())
    assert plans["beginning"].meals[0].type == "Breakfast"

    asyncio.run(kk_app.activity.log_diet("beginning", ["bm1"], 2, water_intake=20))
    assert backend.diet_log["waterIntake"] == 12
    assert asyncio.run(kk_app.activity.get_diet_today()).log.water_intake == 12


def test_history(kk_app, backend):
    history = asyncio.run(kk_app.activity.get_exercise_history(days=14))
    assert history.history[0].completion_percentage == 67
    assert history.stats.current_streak == 1
    assert ("GET", "/api/activity/exercise/history") in backend.requests

    diet = asyncio.run(kk_app.activity.get_diet_history())
    assert diet.stats.avg_water_intake == 6


def test_history_falls_back_to_empty(kk_app, backend):
    backend.failures[("GET", "/api/activity/diet/history")] = 500
    history = asyncio.run(kk_app.activity.get_diet_history_or_empty(14))
    assert history.history == []
    assert history.stats.total_days == 0


# Health and dashboard

def test_weekly_steps(kk_app):
    weekly = asyncio.run(kk_app.health.get_weekly_steps())
    assert weekly.summary.total_steps == 17400
    assert weekly.summary.best_day == "Thu"
    assert weekly.chart_data.values[3] == 5600
    assert weekly.days[0].day_name == "Mon"


@pytest.mark.parametrize("payload", [{"days": []}, {"chartData": None}, []])
def test_weekly_steps_invalid_payload_uses_empty_week(kk_app, backend, payload):
    backend.weekly_payload = payload
    weekly = asyncio.run(kk_app.health.get_weekly_steps())
    assert weekly == WeeklyStepData.empty_week()
    assert weekly.chart_data.labels == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert weekly.chart_data.values == [0] * 7


def test_weekly_steps_chart_values_never_negative(kk_app, backend):
    backend.weekly_payload = {
        "chartData": {
            "labels": ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"],
            "values": [1200, -40, None, 0, 3100, -1, 800],
        },
    }
    weekly = asyncio.run(kk_app.health.get_weekly_steps())
    assert weekly.chart_data.values == [1200, 0, 0, 0, 3100, 0, 800]


def test_weekly_steps_error_uses_empty_week(kk_app, backend):
    backend.failures[("GET", "/api/health/steps/weekly")] = 500
    weekly = asyncio.run(kk_app.health.get_weekly_steps())
    assert weekly.summary.total_steps == 0


def test_dashboard(kk_app):
    dashboard = asyncio.run(kk_app.health.get_dashboard())
    assert dashboard.stats.total_analyses == 1
    assert dashboard.stats.severity_distribution[0].id == "Moderate"
    assert dashboard.recent_analyses[0].kl_grade == "2"
