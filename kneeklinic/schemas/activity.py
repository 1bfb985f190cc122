"""
kneeklinic/schemas/activity.py

Purpose: Exercise, diet and step-tracking schemas

- Plans per severity level
- Daily completion logs
- History and weekly step summaries
"""

from datetime import datetime
from typing import Optional, List, Dict, Literal

from kneeklinic.schemas.response import ApiModel
from kneeklinic.utils.constants import WEEKDAY_LABELS

SeverityLevel = Literal["beginning", "moderate", "severe"]


class Exercise(ApiModel):
    id: str
    name: str
    duration: str = ""
    description: str = ""


class Meal(ApiModel):
    id: str
    type: str = ""
    name: str
    description: str = ""


class ExercisePlan(ApiModel):
    name: str
    description: str = ""
    exercises: List[Exercise] = []


class DietPlan(ApiModel):
    name: str
    description: str = ""
    meals: List[Meal] = []


class ExerciseLog(ApiModel):
    severity_level: SeverityLevel
    completed_exercises: List[str] = []
    total_exercises: int = 0


class DietLog(ApiModel):
    severity_level: SeverityLevel
    completed_meals: List[str] = []
    total_meals: int = 0
    water_intake: int = 0


class HistoryEntry(ApiModel):
    date: str
    completion_percentage: float = 0
    severity_level: Optional[str] = None


class HistoryStats(ApiModel):
    total_days: int = 0
    avg_completion: float = 0
    current_streak: int = 0
    avg_water_intake: Optional[float] = None


class ActivityHistory(ApiModel):
    history: List[HistoryEntry] = []
    stats: HistoryStats = HistoryStats()


class ExercisePlansResponse(ApiModel):
    plans: Dict[SeverityLevel, ExercisePlan]


class DietPlansResponse(ApiModel):
    plans: Dict[SeverityLevel, DietPlan]


class ExerciseTodayResponse(ApiModel):
    log: Optional[ExerciseLog] = None


class DietTodayResponse(ApiModel):
    log: Optional[DietLog] = None


# Steps

class StepSession(ApiModel):
    """
    One finished walking session as saved to the health record.
    distance is in km, calories in kcal, duration in seconds.
    """
    start_time: datetime
    end_time: Optional[datetime] = None
    steps: int
    distance: float
    calories: float
    duration: int = 0


class StepDay(ApiModel):
    date: str
    day_name: str
    steps: int = 0
    distance: float = 0
    calories: float = 0


class WeeklySummary(ApiModel):
    total_steps: int = 0
    total_distance: float = 0
    total_calories: float = 0
    avg_steps: float = 0
    best_day: str = "-"
    best_day_steps: int = 0


class ChartData(ApiModel):
    labels: List[str] = list(WEEKDAY_LABELS)
    values: List[Optional[float]] = [0] * len(WEEKDAY_LABELS)


class WeeklyStepData(ApiModel):
    days: List[StepDay] = []
    summary: WeeklySummary = WeeklySummary()
    chart_data: ChartData = ChartData()

    @classmethod
    def empty_week(cls) -> "WeeklyStepData":
        return cls()
