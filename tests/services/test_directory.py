"""Tests for tenure_services.directory -- the in-memory directory."""

import json

import pytest

from tenure_services.directory import (
    AssignmentUpdater,
    EmployeeDirectory,
    InMemoryEmployeeDirectory,
)
from tests.conftest import CATALOG_RECORDS, make_assignment, make_employee_record


@pytest.fixture
def directory(make_directory):
    return make_directory(
        [make_employee_record(1), make_employee_record(2, sexo="F")],
        assigned={1: [make_assignment(10, unidades=3, assignment_id=5)]},
        profiles={2: make_employee_record(2, sexo="F", nombre="Perfil")},
    )


class TestInMemoryDirectory:

    def test_satisfies_protocols(self, directory):
        assert isinstance(directory, EmployeeDirectory)
        assert isinstance(directory, AssignmentUpdater)

    def test_reads(self, directory):
        assert [e.legajo for e in directory.list_employees()] == [1, 2]
        assert directory.get_employee_profile(2).nombre == "Perfil"
        assert directory.get_employee_profile(1).nombre == "Nombre1"
        assert directory.list_assigned_concepts(1)[0].quantity == 3
        assert directory.list_assigned_concepts(2) == ()
        assert len(directory.list_concept_catalog()) == len(CATALOG_RECORDS)

    def test_unknown_employee(self, directory):
        with pytest.raises(LookupError):
            directory.get_employee_profile(404)
        with pytest.raises(LookupError):
            directory.list_assigned_concepts(404)
        with pytest.raises(LookupError):
            directory.update_employee(404, {"conceptosAsignados": []})

    def test_update_replaces_and_assigns_new_ids(self, directory):
        directory.update_employee(1, {
            "conceptosAsignados": [
                make_assignment(10, unidades=4, assignment_id=5),
                make_assignment(21),
            ],
        })
        concepts = directory.list_assigned_concepts(1)
        assert [(c.reference_id, c.quantity, c.assignment_id) for c in concepts] == [
            (10, 4, 5),
            (21, 1, 6),
        ]
        assert [legajo for legajo, _ in directory.updates] == [1]

    def test_snapshot_round_trip(self, directory, tmp_path):
        path = tmp_path / "directory.json"
        directory.dump_snapshot(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert set(data) == {"employees", "catalog", "assigned_concepts", "profiles"}

        reloaded = InMemoryEmployeeDirectory.from_snapshot(path)
        assert reloaded.list_assigned_concepts(1) == directory.list_assigned_concepts(1)
        assert reloaded.get_employee_profile(2).nombre == "Perfil"
