from datetime import datetime, timezone

import pytest

from fitplan.database.models import PlanRecord
from fitplan.database.queries import PlanStore
from fitplan.services.prompts import DIET_EXAMPLE, WORKOUT_EXAMPLE
from fitplan.utils.errors import PlanNotFound
from fitplan.utils.normalizer import normalize_plan

FIRST = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)
SECOND = datetime(2025, 1, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def diet_plan():
    return normalize_plan(DIET_EXAMPLE, "diet")


@pytest.mark.asyncio
async def test_put_and_get(store, diet_plan):
    saved = await store.put("42", "diet", diet_plan, {"targets": {"calories": 2000}}, created_at=FIRST)
    assert saved.id is not None

    record = await store.get("42", "diet")
    assert record.plan == diet_plan
    assert record.source_snapshot == {"targets": {"calories": 2000}}
    assert record.created_at == FIRST
    assert record.is_active


@pytest.mark.asyncio
async def test_new_plan_supersedes_previous(store, supabase, diet_plan):
    await store.put("42", "diet", diet_plan, {"version": 1}, created_at=FIRST)
    await store.put("42", "diet", diet_plan, {"version": 2}, created_at=SECOND)

    record = await store.get("42", "diet")
    assert record.source_snapshot == {"version": 2}

    rows = supabase.tables["plans"]
    assert [row["is_active"] for row in rows] == [False, True]

    history = await store.list_plans("42", "diet")
    assert [r.source_snapshot["version"] for r in history] == [2, 1]


@pytest.mark.asyncio
async def test_replace_history_deletes_previous(supabase, diet_plan):
    store = PlanStore(supabase, history="replace")
    await store.put("42", "diet", diet_plan, {}, created_at=FIRST)
    await store.put("42", "diet", diet_plan, {}, created_at=SECOND)
    assert len(supabase.tables["plans"]) == 1


@pytest.mark.asyncio
async def test_domains_are_independent(store, diet_plan):
    workout_plan = normalize_plan(WORKOUT_EXAMPLE, "workout")
    await store.put("42", "diet", diet_plan, {}, created_at=FIRST)
    await store.put("42", "workout", workout_plan, {}, created_at=SECOND)

    assert (await store.get("42", "diet")).plan == diet_plan
    assert (await store.get("42", "workout")).plan == workout_plan


@pytest.mark.asyncio
async def test_get_missing_plan(store):
    with pytest.raises(PlanNotFound) as exc:
        await store.get("42", "workout")
    assert exc.value.domain == "workout"


def test_record_row_round_trip(diet_plan):
    record = PlanRecord(owner_id="42", domain="diet", plan=diet_plan, source_snapshot={}, created_at=FIRST, id=7)
    row = record.to_row()
    assert row["created_at"] == FIRST.isoformat()
    assert PlanRecord.from_row(row) == record


@pytest.mark.asyncio
async def test_questionnaire_upsert(store):
    assert await store.get_questionnaire("42", "diet") is None

    await store.save_questionnaire("42", "diet", {"mealsPerDay": 3})
    await store.save_questionnaire("42", "diet", {"mealsPerDay": 4})

    assert (await store.get_questionnaire("42", "diet"))["mealsPerDay"] == 4
    assert await store.get_questionnaire("42", "workout") is None


@pytest.mark.asyncio
async def test_get_profile(store, supabase):
    supabase.tables["user_profiles"] = [{"user_id": "42", "gender": "male"}]
    assert (await store.get_profile("42"))["gender"] == "male"
    assert await store.get_profile("7") is None


@pytest.mark.asyncio
async def test_failed_insert_keeps_previous_plan_active(store, supabase, diet_plan):
    await store.put("42", "diet", diet_plan, {"version": 1}, created_at=FIRST)
    supabase.failing_inserts.add("plans")

    with pytest.raises(RuntimeError):
        await store.put("42", "diet", diet_plan, {"version": 2}, created_at=SECOND)

    record = await store.get("42", "diet")
    assert record.source_snapshot == {"version": 1}
    assert record.is_active


@pytest.mark.asyncio
async def test_failed_insert_keeps_previous_plan_in_replace_mode(supabase, diet_plan):
    store = PlanStore(supabase, history="replace")
    await store.put("42", "diet", diet_plan, {"version": 1}, created_at=FIRST)
    supabase.failing_inserts.add("plans")

    with pytest.raises(RuntimeError):
        await store.put("42", "diet", diet_plan, {"version": 2}, created_at=SECOND)

    assert len(supabase.tables["plans"]) == 1
    assert (await store.get("42", "diet")).source_snapshot == {"version": 1}


@pytest.mark.asyncio
async def test_insert_happens_before_superseding(store, supabase, diet_plan):
    await store.put("42", "diet", diet_plan, {}, created_at=FIRST)
    supabase.calls.clear()

    saved = await store.put("42", "diet", diet_plan, {}, created_at=SECOND)

    actions = [action for table, action, _ in supabase.calls if table == "plans"]
    assert actions == ["insert", "update"]
    assert ("neq", "id", saved.id) in supabase.calls[-1][2]


@pytest.mark.asyncio
async def test_save_profile_upsert(store):
    await store.save_profile("42", {"gender": "male", "age": 30})
    await store.save_profile("42", {"age": 31})

    profile = await store.get_profile("42")
    assert profile["gender"] == "male"
    assert profile["age"] == 31
