"""
Directory record mapping (``tenure_services.records``).

Responsibility
--------------
The single boundary where raw directory records (loosely-typed dicts with
field aliases) become the explicit dataclasses of ``tenure_engines.domain``,
and where reconciled assignments become the update payload again.  No
other module reads a raw field name.

Field aliases resolved here
---------------------------
* employee status: ``estado`` ("ACTIVO") or ``status`` ("Activo")
* guild: ``gremio`` as ``{"nombre": ...}`` or as a plain string
* hire date: ``inicioActividad``
* catalog id: ``idBonificacion`` or ``id``
* catalog name: ``nombre`` or ``descripcion``

Failure modes
-------------
* Missing or non-numeric ``legajo`` / ``idReferencia`` / catalog id
  -> ``ValueError``.  Callers wrap it in ``FetchError`` or
  ``BatchFatalError`` depending on which input was being read.
* Unparseable hire date -> ``hire_date=None`` (tenure counts as 0).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import fields, replace
from typing import Any

from tenure_engines.domain import AssignedConcept, ConceptCatalogEntry, Employee
from tenure_engines.normalize import normalize_text
from tenure_engines.tenure import parse_hire_date
from tenure_kernel.exceptions import HireDateParseError
from tenure_kernel.logging_config import get_logger

logger = get_logger("services.records")

ACTIVE_STATUS = "activo"
UPDATED_STATUS = "ACTIVO"
DEFAULT_QUANTITY = 1


def _required_int(raw: Mapping[str, Any], *keys: str) -> int:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            try:
                return int(value)
            except (TypeError, ValueError):
                raise ValueError(f"Field '{key}' is not an integer: {value!r}") from None
    raise ValueError(f"Missing required field: {' / '.join(keys)}")


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _guild_name(value: Any) -> str:
    if isinstance(value, Mapping):
        return str(value.get("nombre") or "")
    return str(value or "")


def _area_ids(value: Any) -> tuple[int, ...] | None:
    if value is None:
        return None
    items = value if isinstance(value, (list, tuple)) else [value]
    ids: list[int] = []
    for item in items:
        raw_id = item.get("id") if isinstance(item, Mapping) else item
        area_id = _optional_int(raw_id)
        if area_id is not None:
            ids.append(area_id)
    return tuple(ids)


# =============================================================================
# Inbound
# =============================================================================


def employee_from_record(raw: Mapping[str, Any]) -> Employee:
    """Build an ``Employee`` from a directory employee or profile record."""
    legajo = _required_int(raw, "legajo")

    hire_date = None
    raw_hire_date = raw.get("inicioActividad")
    if raw_hire_date not in (None, ""):
        try:
            hire_date = parse_hire_date(raw_hire_date)
        except HireDateParseError as exc:
            logger.warning(
                "employee_hire_date_unparseable",
                extra={"legajo": legajo, "raw_value": exc.raw_value},
            )

    status = raw.get("estado") or raw.get("status")
    guild = raw.get("gremio")

    return Employee(
        legajo=legajo,
        nombre=str(raw.get("nombre") or ""),
        apellido=str(raw.get("apellido") or ""),
        hire_date=hire_date,
        gender=_optional_str(raw.get("sexo")),
        guild=_guild_name(guild),
        active=normalize_text(status) == ACTIVE_STATUS,
        cuil=_optional_str(raw.get("cuil")),
        domicilio=_optional_str(raw.get("domicilio")),
        banco=_optional_str(raw.get("banco")),
        cuenta=_optional_str(raw.get("cuenta")),
        category_id=_optional_int(raw.get("idCategoria")),
        area_ids=_area_ids(raw.get("areas", raw.get("idAreas"))),
        guild_id=_optional_int(
            raw.get("idGremio")
            if raw.get("idGremio") is not None
            else (guild.get("idGremio") if isinstance(guild, Mapping) else None)
        ),
        zone_id=_optional_int(raw.get("idZonaUocra")),
    )


def merge_profile(listed: Employee, profile: Employee) -> Employee:
    """Overlay a full profile on the list entry of the same employee.

    Profile values win; empty profile fields fall back to the listed ones.
    """
    fallback: dict[str, Any] = {}
    for f in fields(Employee):
        value = getattr(profile, f.name)
        if value is None or value == "":
            listed_value = getattr(listed, f.name)
            if listed_value is not None and listed_value != "":
                fallback[f.name] = listed_value
    return replace(profile, **fallback) if fallback else profile


def assigned_concept_from_record(raw: Mapping[str, Any]) -> AssignedConcept:
    """Build an ``AssignedConcept`` from a directory assignment record."""
    quantity = _optional_int(raw.get("unidades"))
    return AssignedConcept(
        concept_type=str(raw.get("tipoConcepto") or ""),
        reference_id=_required_int(raw, "idReferencia"),
        quantity=quantity if quantity is not None else DEFAULT_QUANTITY,
        assignment_id=_optional_int(raw.get("idEmpleadoConcepto")),
    )


def catalog_entry_from_record(raw: Mapping[str, Any]) -> ConceptCatalogEntry:
    """Build a ``ConceptCatalogEntry`` from a directory catalog record."""
    return ConceptCatalogEntry(
        concept_id=_required_int(raw, "idBonificacion", "id"),
        name=str(raw.get("nombre") or raw.get("descripcion") or ""),
    )


# =============================================================================
# Outbound
# =============================================================================


def assigned_concept_to_record(record: AssignedConcept, legajo: int) -> dict[str, Any]:
    return {
        "idEmpleadoConcepto": record.assignment_id,
        "legajo": legajo,
        "tipoConcepto": record.concept_type,
        "idReferencia": record.reference_id,
        "unidades": record.quantity,
    }


def build_update_payload(
    employee: Employee,
    records: Sequence[AssignedConcept],
) -> dict[str, Any]:
    """Full employee payload for the replacement update.

    Identity fields are restated unchanged; ``conceptosAsignados`` is the
    complete new assignment list.
    """
    return {
        "legajo": employee.legajo,
        "nombre": employee.nombre,
        "apellido": employee.apellido,
        "cuil": employee.cuil,
        "inicioActividad": employee.hire_date.isoformat() if employee.hire_date else None,
        "domicilio": employee.domicilio,
        "banco": employee.banco,
        "cuenta": employee.cuenta,
        "idCategoria": employee.category_id,
        "idAreas": list(employee.area_ids) if employee.area_ids is not None else None,
        "sexo": employee.gender,
        "idGremio": employee.guild_id,
        "idZonaUocra": employee.zone_id,
        "estado": UPDATED_STATUS,
        "conceptosAsignados": [
            assigned_concept_to_record(r, employee.legajo) for r in records
        ],
    }
