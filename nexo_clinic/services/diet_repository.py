# nexo_clinic/services/diet_repository.py
"""
Pasarela de persistencia de planes de dieta.

Un documento por paciente en la tabla `diets`, con `version` entera.
- `expected_version` dado y distinto del almacenado -> DietPlanConflict.
- Sin `expected_version`: sobrescritura explícita (última escritura gana).

`CachedDietPlanRepository` añade una caché acotada en proceso:
lectura read-through y escritura write-through.
"""
from __future__ import annotations

import copy
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from nexo_clinic import db
from nexo_clinic.models.diet import DietPlanRecord
from nexo_clinic.services.diet_plan import DietDocument

logger = logging.getLogger(__name__)


class DietPlanConflict(Exception):
    """La versión esperada no coincide con la almacenada."""

    def __init__(self, patient_id: int, expected: int, current: int):
        super().__init__(
            f"Conflicto de versión para paciente {patient_id}: esperada {expected}, actual {current}"
        )
        self.patient_id = patient_id
        self.expected = expected
        self.current = current


@dataclass
class StoredDiet:
    patient_id: int
    document: DietDocument
    version: int
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        d = self.document.to_dict()
        d.update({
            "patientId": self.patient_id,
            "version": self.version,
            "updatedAt": self.updated_at.isoformat() + "Z" if self.updated_at else None,
        })
        return d


def _stored(rec: DietPlanRecord) -> StoredDiet:
    return StoredDiet(
        patient_id=rec.patient_id,
        document=DietDocument.from_dict(rec.data),
        version=rec.version,
        updated_at=rec.updated_at,
    )


class DietPlanRepository:
    """Acceso SQLAlchemy a la tabla `diets`."""

    def __init__(self, session=None):
        self.session = session or db.session

    def _record(self, patient_id: int) -> Optional[DietPlanRecord]:
        return self.session.query(DietPlanRecord).filter_by(patient_id=patient_id).first()

    def get(self, patient_id: int) -> Optional[StoredDiet]:
        rec = self._record(patient_id)
        return _stored(rec) if rec else None

    def upsert(self, patient_id: int, document: DietDocument,
               expected_version: Optional[int] = None) -> StoredDiet:
        data = document.to_dict()
        rec = self._record(patient_id)

        if rec is None:
            if expected_version not in (None, 0):
                raise DietPlanConflict(patient_id, expected_version, 0)
            rec = DietPlanRecord(patient_id=patient_id, data=data, version=1)
            self.session.add(rec)
            try:
                self.session.commit()
                return _stored(rec)
            except IntegrityError:
                # Otro proceso insertó primero
                self.session.rollback()
                rec = self._record(patient_id)
                if expected_version is not None or rec is None:
                    raise DietPlanConflict(patient_id, expected_version or 0, rec.version if rec else 0)

        if expected_version is None:
            logger.info("[diets] sobrescritura sin versión para paciente %s (v%s)", patient_id, rec.version)
            expected_version = rec.version

        # Compare-and-swap sobre la versión
        updated = (
            self.session.query(DietPlanRecord)
            .filter_by(patient_id=patient_id, version=expected_version)
            .update(
                {"data": data, "version": expected_version + 1, "updated_at": datetime.utcnow()},
                synchronize_session=False,
            )
        )
        if not updated:
            self.session.rollback()
            current = self._record(patient_id)
            raise DietPlanConflict(patient_id, expected_version, current.version if current else 0)
        self.session.commit()
        self.session.expire(rec)
        return _stored(self._record(patient_id))

    def delete(self, patient_id: int) -> bool:
        rec = self._record(patient_id)
        if not rec:
            return False
        self.session.delete(rec)
        self.session.commit()
        return True


class DietPlanCache:
    """LRU acotada de StoredDiet por paciente. Devuelve copias."""

    def __init__(self, max_entries: int = 256):
        self.max_entries = max(1, int(max_entries))
        self._data: "OrderedDict[int, StoredDiet]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, patient_id: int) -> Optional[StoredDiet]:
        with self._lock:
            hit = self._data.get(patient_id)
            if hit is None:
                return None
            self._data.move_to_end(patient_id)
            return copy.deepcopy(hit)

    def put(self, stored: StoredDiet) -> None:
        with self._lock:
            self._data[stored.patient_id] = copy.deepcopy(stored)
            self._data.move_to_end(stored.patient_id)
            while len(self._data) > self.max_entries:
                self._data.popitem(last=False)

    def invalidate(self, patient_id: int) -> None:
        with self._lock:
            self._data.pop(patient_id, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, patient_id) -> bool:
        return patient_id in self._data


class CachedDietPlanRepository:
    def __init__(self, backend: DietPlanRepository, cache: DietPlanCache):
        self.backend = backend
        self.cache = cache

    def get(self, patient_id: int) -> Optional[StoredDiet]:
        hit = self.cache.get(patient_id)
        if hit is not None:
            return hit
        stored = self.backend.get(patient_id)
        if stored is not None:
            self.cache.put(stored)
        return stored

    def upsert(self, patient_id: int, document: DietDocument,
               expected_version: Optional[int] = None) -> StoredDiet:
        try:
            stored = self.backend.upsert(patient_id, document, expected_version)
        except DietPlanConflict:
            self.cache.invalidate(patient_id)
            raise
        self.cache.put(stored)
        return stored

    def delete(self, patient_id: int) -> bool:
        self.cache.invalidate(patient_id)
        return self.backend.delete(patient_id)


def get_repository() -> CachedDietPlanRepository:
    """Repositorio ligado a la sesión y la caché de la app actual."""
    return CachedDietPlanRepository(
        DietPlanRepository(),
        current_app.extensions["diet_plan_cache"],
    )
