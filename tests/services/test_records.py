"""
Tests for tenure_services.records -- raw directory records to domain
types and back.
"""

from datetime import date

import pytest

from tenure_engines.domain import AssignedConcept, Employee
from tenure_services.records import (
    assigned_concept_from_record,
    build_update_payload,
    catalog_entry_from_record,
    employee_from_record,
    merge_profile,
)


class TestEmployeeFromRecord:

    def test_full_record(self):
        employee = employee_from_record({
            "legajo": "42",
            "nombre": "Ana",
            "apellido": "García",
            "inicioActividad": "2010-03-01T00:00:00Z",
            "sexo": "F",
            "gremio": {"idGremio": 3, "nombre": "Luz y Fuerza"},
            "estado": "ACTIVO",
            "cuil": "27-12345678-3",
            "idCategoria": "7",
            "areas": [{"id": 1}, {"id": "2"}],
        })
        assert employee.legajo == 42
        assert employee.hire_date == date(2010, 3, 1)
        assert employee.gender == "F"
        assert employee.guild == "Luz y Fuerza"
        assert employee.guild_id == 3
        assert employee.active
        assert employee.category_id == 7
        assert employee.area_ids == (1, 2)
        assert employee.display_name == "Ana García"

    def test_status_alias_and_plain_guild(self):
        employee = employee_from_record({"legajo": 1, "status": "Activo", "gremio": "LUZ Y FUERZA"})
        assert employee.active
        assert employee.guild == "LUZ Y FUERZA"

    @pytest.mark.parametrize("status", ["INACTIVO", "baja", None])
    def test_non_active_status(self, status):
        assert not employee_from_record({"legajo": 1, "estado": status}).active

    def test_unparseable_hire_date_becomes_none(self, captured_logs):
        employee = employee_from_record({"legajo": 5, "inicioActividad": "31/12/2010"})
        assert employee.hire_date is None
        entry = next(r for r in captured_logs() if r["message"] == "employee_hire_date_unparseable")
        assert entry["raw_value"] == "31/12/2010"

    def test_missing_legajo_raises(self):
        with pytest.raises(ValueError, match="legajo"):
            employee_from_record({"nombre": "x"})

    def test_non_numeric_legajo_raises(self):
        with pytest.raises(ValueError, match="not an integer"):
            employee_from_record({"legajo": "abc"})


class TestMergeProfile:

    def test_profile_wins_and_blanks_fall_back(self):
        listed = Employee(legajo=1, nombre="Ana", guild="Luz y Fuerza", active=True, cuil="27-1-3")
        profile = Employee(legajo=1, nombre="Ana María", gender="F")
        merged = merge_profile(listed, profile)
        assert merged.nombre == "Ana María"
        assert merged.gender == "F"
        assert merged.guild == "Luz y Fuerza"
        assert merged.cuil == "27-1-3"


class TestAssignmentsAndCatalog:

    def test_assigned_concept(self):
        concept = assigned_concept_from_record({
            "idEmpleadoConcepto": 8, "tipoConcepto": "CONCEPTO_LYF",
            "idReferencia": "10", "unidades": "12",
        })
        assert concept == AssignedConcept("CONCEPTO_LYF", 10, 12, 8)

    def test_missing_unidades_defaults_to_one(self):
        concept = assigned_concept_from_record({"tipoConcepto": "CONCEPTO_LYF", "idReferencia": 10})
        assert concept.quantity == 1
        assert concept.assignment_id is None

    def test_missing_reference_raises(self):
        with pytest.raises(ValueError):
            assigned_concept_from_record({"tipoConcepto": "CONCEPTO_LYF"})

    def test_catalog_aliases(self):
        assert catalog_entry_from_record({"idBonificacion": 4, "nombre": "A"}).concept_id == 4
        entry = catalog_entry_from_record({"id": "5", "descripcion": "B"})
        assert entry.concept_id == 5
        assert entry.name == "B"


class TestBuildUpdatePayload:

    def test_payload_restates_identity_and_replaces_concepts(self):
        employee = Employee(
            legajo=42, nombre="Ana", apellido="García", hire_date=date(2010, 3, 1),
            gender="F", guild="Luz y Fuerza", active=True, cuil="27-1-3",
            category_id=7, area_ids=(1, 2), guild_id=3,
        )
        payload = build_update_payload(employee, [
            AssignedConcept("CONCEPTO_LYF", 10, 15, 8),
            AssignedConcept("CONCEPTO_LYF", 23, 1, None),
        ])
        assert payload["legajo"] == 42
        assert payload["inicioActividad"] == "2010-03-01"
        assert payload["estado"] == "ACTIVO"
        assert payload["idAreas"] == [1, 2]
        assert payload["idGremio"] == 3
        assert payload["sexo"] == "F"
        assert payload["conceptosAsignados"] == [
            {"idEmpleadoConcepto": 8, "legajo": 42, "tipoConcepto": "CONCEPTO_LYF",
             "idReferencia": 10, "unidades": 15},
            {"idEmpleadoConcepto": None, "legajo": 42, "tipoConcepto": "CONCEPTO_LYF",
             "idReferencia": 23, "unidades": 1},
        ]

    def test_missing_hire_date_is_null(self):
        payload = build_update_payload(Employee(legajo=1), [])
        assert payload["inicioActividad"] is None
        assert payload["conceptosAsignados"] == []
