import itertools
from types import SimpleNamespace

import pytest

from fitplan.database.models import DietQuestionnaire, Profile, WorkoutQuestionnaire
from fitplan.database.queries import PlanStore
from fitplan.services.prompts import DIET_EXAMPLE, WORKOUT_EXAMPLE
import json


class FakeQuery:
    """Цепочка запросов в стиле supabase-py поверх списков в памяти"""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.filters = []
        self.action = "select"
        self.payload = None
        self.order_by = None
        self.row_limit = None

    def select(self, *columns):
        self.action = "select"
        return self

    def insert(self, row):
        self.action, self.payload = "insert", row
        return self

    def update(self, values):
        self.action, self.payload = "update", values
        return self

    def upsert(self, row, on_conflict=None):
        self.action, self.payload = "upsert", (row, on_conflict)
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def neq(self, column, value):
        self.filters.append(("neq", column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def _matches(self, row):
        return all((row.get(column) == value) == (op == "eq") for op, column, value in self.filters)

    def execute(self):
        rows = self.db.tables.setdefault(self.table, [])
        self.db.calls.append((self.table, self.action, list(self.filters)))

        if self.action == "insert":
            if self.table in self.db.failing_inserts:
                raise RuntimeError(f"insert into {self.table} failed")
            row = dict(self.payload)
            row.setdefault("id", next(self.db.ids))
            rows.append(row)
            return SimpleNamespace(data=[row])

        if self.action == "upsert":
            row, key = self.payload
            for existing in rows:
                if existing.get(key) == row.get(key):
                    existing.update(row)
                    return SimpleNamespace(data=[existing])
            row = dict(row)
            rows.append(row)
            return SimpleNamespace(data=[row])

        matched = [row for row in rows if self._matches(row)]

        if self.action == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=matched)

        if self.action == "delete":
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=matched)

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda row: row[column], reverse=desc)
        if self.row_limit is not None:
            matched = matched[:self.row_limit]
        return SimpleNamespace(data=[dict(row) for row in matched])


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.ids = itertools.count(1)
        self.failing_inserts = set()

    def table(self, name):
        return FakeQuery(self, name)


class FakeOpenAIService:
    """Возвращает заранее заданные ответы вместо запросов к API"""

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.prompts = []
        self.instructions = []

    async def complete(self, prompt, instruction=None, **overrides):
        self.prompts.append(prompt)
        self.instructions.append(instruction)
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def store(supabase):
    return PlanStore(supabase, history="keep")


@pytest.fixture
def profile():
    return Profile(
        sex="male",
        age=30,
        height=180,
        weight=80,
        target_weight=75,
        activity_level="moderate",
        goal="maintenance",
    )


@pytest.fixture
def diet_questionnaire():
    return DietQuestionnaire(goal="fat_loss", meals_per_day=3, allergies=["peanuts"])


@pytest.fixture
def workout_questionnaire():
    return WorkoutQuestionnaire(
        fitness_level="Beginner",
        days_per_week=3,
        workout_locations=["Home"],
        equipment_access=["None/minimal equipment"],
    )


@pytest.fixture
def diet_response():
    return json.dumps(DIET_EXAMPLE)


@pytest.fixture
def workout_response():
    return "```json\n" + json.dumps(WORKOUT_EXAMPLE) + "\n```"
