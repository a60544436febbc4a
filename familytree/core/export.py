"""Serializers turning an already filtered person set into download files."""
import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from familytree.errors import InvalidFormat
from familytree.models.person import Gender
from familytree.schemas.person import PersonDetail

CSV_HEADERS = [
    "ID",
    "First Name",
    "Middle Name",
    "Last Name",
    "Gender",
    "Birth Date",
    "Death Date",
    "Father ID",
    "Mother ID",
]

GEDCOM_HEADER = "0 HEAD\n1 SOUR FamilyTree\n1 GEDC\n2 VERS 5.5\n1 CHAR UTF-8\n"
GEDCOM_TRAILER = "0 TRLR\n"

GEDCOM_SEX = {Gender.MALE: "M", Gender.FEMALE: "F"}


@dataclass
class ExportResult:
    content: str
    media_type: str
    filename: str


def export_basename(tree_name: str) -> str:
    return re.sub(r"\s+", "_", tree_name)


def _iso(value) -> str:
    return value.isoformat() if value else ""


def _ref(value) -> str:
    return str(value) if value is not None else ""


def people_to_json(tree, people: List[PersonDetail], include_events=False, include_notes=False,
                   include_private=False, exported_at: Optional[datetime] = None) -> str:
    exported_at = exported_at or datetime.now(timezone.utc)
    exclude = {"events", "notes"}
    records = []
    for person in people:
        record = person.model_dump(mode="json", exclude=exclude)
        if include_events:
            record["events"] = [e.model_dump(mode="json") for e in person.events]
        if include_notes:
            record["notes"] = [
                n.model_dump(mode="json") for n in person.notes
                if include_private or not n.is_private
            ]
        records.append(record)

    payload = {
        "tree": {
            "id": tree.id,
            "name": tree.name,
            "description": tree.description,
            "exportedAt": exported_at.isoformat(),
            "people": records,
        }
    }
    return json.dumps(payload, indent=2)


def people_to_csv(people: List[PersonDetail]) -> str:
    # Values are joined as-is: commas or newlines inside names are not escaped
    rows = [",".join(CSV_HEADERS)]
    for person in people:
        rows.append(",".join([
            str(person.id),
            person.first_name,
            person.middle_name or "",
            person.last_name or "",
            person.gender.value,
            _iso(person.birth_date),
            _iso(person.death_date),
            _ref(person.father_id),
            _ref(person.mother_id),
        ]))
    return "\n".join(rows)


def people_to_gedcom(people: List[PersonDetail]) -> str:
    lines = [GEDCOM_HEADER]
    for person in people:
        lines.append(f"0 @{person.id}@ INDI\n")
        lines.append(f"1 NAME {person.first_name} /{person.last_name or ''}/\n")
        lines.append(f"1 SEX {GEDCOM_SEX.get(person.gender, 'U')}\n")
        if person.birth_date:
            lines.append(f"1 BIRT\n2 DATE {person.birth_date.isoformat()}\n")
        if person.death_date:
            lines.append(f"1 DEAT\n2 DATE {person.death_date.isoformat()}\n")
        if person.father_id is not None:
            lines.append(f"1 FAMC @{person.father_id}@\n")
        if person.mother_id is not None:
            lines.append(f"1 FAMC @{person.mother_id}@\n")
    lines.append(GEDCOM_TRAILER)
    return "".join(lines)


def _json_export(tree, people, options):
    return ExportResult(
        content=people_to_json(tree, people, **options),
        media_type="application/json",
        filename=f"{export_basename(tree.name)}_export.json",
    )


def _csv_export(tree, people, options):
    return ExportResult(
        content=people_to_csv(people),
        media_type="text/csv",
        filename=f"{export_basename(tree.name)}_export.csv",
    )


def _gedcom_export(tree, people, options):
    return ExportResult(
        content=people_to_gedcom(people),
        media_type="text/plain",
        filename=f"{export_basename(tree.name)}.ged",
    )


EXPORTERS: Dict[str, Callable] = {
    "json": _json_export,
    "csv": _csv_export,
    "gedcom": _gedcom_export,
}


def export_tree(tree, people: List[PersonDetail], fmt: str, include_events: bool = False,
                include_notes: bool = False, include_private: bool = False) -> ExportResult:
    exporter = EXPORTERS.get((fmt or "").lower())
    if exporter is None:
        raise InvalidFormat(f"Invalid format: {fmt}")
    options = {
        "include_events": include_events,
        "include_notes": include_notes,
        "include_private": include_private,
    }
    return exporter(tree, people, options)
