import pytest

from nexo_clinic import db
from nexo_clinic.models.tenant import Tenant
from nexo_clinic.models.patient import Patient
from nexo_clinic.services.diet_plan import DietDocument, NutrientGoals, add_food, new_weekly_plan
from nexo_clinic.services.diet_repository import (
    CachedDietPlanRepository, DietPlanCache, DietPlanConflict, DietPlanRepository, StoredDiet,
    get_repository,
)
from nexo_clinic.services.food_catalog import get_food


@pytest.fixture
def ctx(app):
    with app.app_context():
        t = Tenant(name="Clínica")
        p1, p2 = Patient(tenant=t, name="Uno"), Patient(tenant=t, name="Dos")
        db.session.add_all([t, p1, p2])
        db.session.commit()
        yield p1.id, p2.id


def _doc(kcal=2000):
    plan = new_weekly_plan()
    add_food(plan, "Lunes", "desayuno", get_food("avena"), grams=60)
    return DietDocument(weekly_diet=plan, user_goals=NutrientGoals(kcal=kcal))


def test_guardar_y_leer_es_identico(ctx):
    pid, _ = ctx
    repo = DietPlanRepository()
    doc = _doc()
    stored = repo.upsert(pid, doc)
    assert stored.version == 1

    loaded = repo.get(pid)
    assert loaded.document.to_dict() == doc.to_dict()
    assert loaded.version == 1


def test_sin_plan_devuelve_none(ctx):
    assert DietPlanRepository().get(ctx[0]) is None


def test_version_incrementa_y_detecta_conflicto(ctx):
    pid, _ = ctx
    repo = DietPlanRepository()
    repo.upsert(pid, _doc(2000))
    assert repo.upsert(pid, _doc(2100), expected_version=1).version == 2

    with pytest.raises(DietPlanConflict) as exc:
        repo.upsert(pid, _doc(2200), expected_version=1)
    assert exc.value.current == 2
    assert repo.get(pid).document.user_goals.kcal == 2100


def test_sin_version_es_sobrescritura(ctx):
    pid, _ = ctx
    repo = DietPlanRepository()
    repo.upsert(pid, _doc(2000))
    repo.upsert(pid, _doc(1900), expected_version=1)
    stored = repo.upsert(pid, _doc(1800))
    assert stored.version == 3
    assert stored.document.user_goals.kcal == 1800


def test_insert_con_version_esperada_es_conflicto(ctx):
    with pytest.raises(DietPlanConflict):
        DietPlanRepository().upsert(ctx[0], _doc(), expected_version=4)


class LateRepository(DietPlanRepository):
    """No ve la fila en la primera lectura, como si otro proceso la insertara después."""

    def __init__(self):
        super().__init__()
        self.reads = 0

    def _record(self, patient_id):
        self.reads += 1
        if self.reads == 1:
            return None
        return super()._record(patient_id)


def test_insert_concurrente_sin_version_sobrescribe(ctx):
    pid, _ = ctx
    DietPlanRepository().upsert(pid, _doc(2000))
    stored = LateRepository().upsert(pid, _doc(1700))
    assert stored.version == 2
    assert DietPlanRepository().get(pid).document.user_goals.kcal == 1700


def test_insert_concurrente_con_version_cero_es_conflicto(ctx):
    pid, _ = ctx
    DietPlanRepository().upsert(pid, _doc(2000))
    with pytest.raises(DietPlanConflict) as exc:
        LateRepository().upsert(pid, _doc(1700), expected_version=0)
    assert exc.value.current == 1
    assert DietPlanRepository().get(pid).version == 1


def test_delete(ctx):
    pid, _ = ctx
    repo = DietPlanRepository()
    repo.upsert(pid, _doc())
    assert repo.delete(pid) is True
    assert repo.get(pid) is None
    assert repo.delete(pid) is False


def test_cache_read_through(ctx):
    pid, _ = ctx
    backend = DietPlanRepository()
    backend.upsert(pid, _doc(2000))
    repo = CachedDietPlanRepository(backend, DietPlanCache(8))

    assert pid not in repo.cache
    assert repo.get(pid).version == 1
    assert pid in repo.cache

    # Escritura por fuera: la caché sigue sirviendo lo leído
    backend.upsert(pid, _doc(2500))
    assert repo.get(pid).document.user_goals.kcal == 2000
    repo.cache.invalidate(pid)
    assert repo.get(pid).document.user_goals.kcal == 2500


def test_cache_write_through_y_conflicto_invalida(ctx):
    pid, _ = ctx
    repo = CachedDietPlanRepository(DietPlanRepository(), DietPlanCache(8))
    repo.upsert(pid, _doc(2000))
    assert repo.cache.get(pid).version == 1

    with pytest.raises(DietPlanConflict):
        repo.upsert(pid, _doc(2100), expected_version=9)
    assert pid not in repo.cache


def test_cache_devuelve_copias(ctx):
    pid, _ = ctx
    repo = CachedDietPlanRepository(DietPlanRepository(), DietPlanCache(8))
    repo.upsert(pid, _doc())
    a = repo.get(pid)
    a.document.weekly_diet.day("Lunes").clear()
    assert repo.get(pid).document.weekly_diet.day("Lunes")


def test_cache_lru_acotada():
    cache = DietPlanCache(2)
    for pid in (1, 2, 3):
        cache.put(StoredDiet(patient_id=pid, document=DietDocument(), version=1))
    assert len(cache) == 2
    assert 1 not in cache and 2 in cache and 3 in cache

    cache.get(2)
    cache.put(StoredDiet(patient_id=4, document=DietDocument(), version=1))
    assert 3 not in cache and 2 in cache


def test_get_repository_usa_cache_de_la_app(app):
    with app.app_context():
        assert get_repository().cache is app.extensions["diet_plan_cache"]
