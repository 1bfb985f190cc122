"""
Patient Walkthrough
Signs in against a running KneeKlinic backend and walks through the main screens:
dashboard, X-ray analyses, appointments, weekly steps and activity plans.

Usage:
    API_BASE_URL=http://192.168.1.10:5000 python scripts/patient_walkthrough.py
"""

import asyncio
import getpass
import json

from kneeklinic.core.errors import handle_api_error
from kneeklinic.core.exceptions import KneeKlinicError
from kneeklinic.main import lifespan
from kneeklinic.services.appointment_service import split_appointments
from kneeklinic.services.xray_service import get_kl_grade_info
from kneeklinic.utils.time_utils import format_appointment_date


def print_section(title):
    print("\n" + "=" * 80)
    print(f"  {title}")
    print("=" * 80)


def print_response(data):
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


async def main():
    print("\n🦵 KneeKlinic - Patient Walkthrough")

    async with lifespan() as app:
        print(f"Backend: {app.client.base_url}\n")

        # ============================================================================
        # STEP 1: Sign in
        # ============================================================================
        print_section("STEP 1: Sign in")

        if app.session.is_authenticated:
            print(f"\n✅ Restored session for {app.session.user.full_name}")
        else:
            email = input("Email: ").strip()
            password = getpass.getpass("Password: ")
            try:
                user = await app.session.login(email, password)
            except KneeKlinicError as e:
                print(f"\n❌ Login failed: {handle_api_error(e)}")
                return
            print(f"\n✅ Welcome, {user.full_name}")

        # ============================================================================
        # STEP 2: Dashboard
        # ============================================================================
        print_section("STEP 2: Dashboard")

        try:
            dashboard = await app.health.get_dashboard()
            print_response(dashboard.stats.model_dump())
            for analysis in dashboard.recent_analyses:
                info = get_kl_grade_info(analysis.kl_grade)
                day = analysis.analysis_date.date() if analysis.analysis_date else "-"
                print(f"  • {day}  KL {info.grade} - {info.label}")
        except KneeKlinicError as e:
            print(f"\n❌ {handle_api_error(e)}")

        # ============================================================================
        # STEP 3: X-ray analyses
        # ============================================================================
        print_section("STEP 3: X-ray analyses")

        try:
            analyses = await app.xray.get_analyses()
            print(f"\n📷 {len(analyses)} analyses on record")
            if analyses:
                latest = analyses[0]
                info = get_kl_grade_info(latest.kl_grade)
                print(f"\nLatest: KL grade {latest.kl_grade} ({latest.severity}), risk {latest.risk_score}")
                print(f"{info.label}: {info.description}")
                for tip in info.recommendations:
                    print(f"  - {tip}")
        except KneeKlinicError as e:
            print(f"\n❌ {handle_api_error(e)}")

        # ============================================================================
        # STEP 4: Appointments
        # ============================================================================
        print_section("STEP 4: Appointments")

        try:
            upcoming, past = split_appointments(await app.appointments.get_appointments())
            print(f"\n📅 Upcoming ({len(upcoming)}):")
            for apt in upcoming:
                print(f"  • {format_appointment_date(apt.date)} {apt.time} - {apt.doctor_name}")
            print(f"\n🗂  Past ({len(past)})")
            print(f"\nBook a new consultation: {app.appointments.booking_url}")
        except KneeKlinicError as e:
            print(f"\n❌ {handle_api_error(e)}")

        # ============================================================================
        # STEP 5: Weekly steps
        # ============================================================================
        print_section("STEP 5: Weekly steps")

        weekly = await app.health.get_weekly_steps()
        for label, value in zip(weekly.chart_data.labels, weekly.chart_data.values):
            print(f"  {label}  {int(value):>6}")
        print(f"\nTotal: {weekly.summary.total_steps} steps, best day {weekly.summary.best_day}")

        # ============================================================================
        # STEP 6: Today's plans
        # ============================================================================
        print_section("STEP 6: Today's plans")

        try:
            today = await app.activity.get_exercise_today()
            if today.log:
                print(f"\n🏋️ Exercises: {len(today.log.completed_exercises)}/{today.log.total_exercises} done")
            else:
                print("\n🏋️ No exercise logged today")
            diet = await app.activity.get_diet_today()
            if diet.log:
                print(f"🥗 Meals: {len(diet.log.completed_meals)}/{diet.log.total_meals}, water {diet.log.water_intake}/12")
            else:
                print("🥗 No meals logged today")
        except KneeKlinicError as e:
            print(f"\n❌ {handle_api_error(e)}")

        if input("\nLog out? (y/N): ").strip().lower() == "y":
            await app.session.logout()
            print("👋 Logged out")

    print("\n✅ Walkthrough complete")


if __name__ == "__main__":
    asyncio.run(main())
