import json
from datetime import date
import pytest
from familytree.core.export import export_tree, people_to_csv, people_to_gedcom
from familytree.core.visibility import Viewer, filter_tree
from familytree.errors import InvalidFormat
from familytree.models.event import EventType
from familytree.models.person import Gender
from factories import make_event, make_note, make_person, make_tree

OWNER = Viewer(user_id=1, email="owner@example.com")

def owner_people(people):
    return filter_tree(make_tree(), people, [], [], OWNER).people

def three_people():
    return owner_people([
        make_person(1, first_name="Arthur", last_name="Hale", gender=Gender.MALE, birth_date=date(1920, 3, 2)),
        make_person(2, first_name="Edith", last_name="Hale", gender=Gender.FEMALE),
        make_person(3, first_name="Robert", father=1, gender=Gender.MALE, death_date=date(2001, 12, 24)),
    ])

def test_csv_has_header_and_one_row_per_person():
    lines = people_to_csv(three_people()).split("\n")
    assert len(lines) == 4
    assert lines[0] == "ID,First Name,Middle Name,Last Name,Gender,Birth Date,Death Date,Father ID,Mother ID"
    assert lines[1] == "1,Arthur,,Hale,MALE,1920-03-02,,,"
    assert lines[3].split(",")[7] == "1"
    assert lines[3].split(",")[6] == "2001-12-24"

def test_csv_does_not_escape_commas():
    people = owner_people([make_person(1, first_name="Smith, Jr")])
    row = people_to_csv(people).split("\n")[1]
    assert row.startswith("1,Smith, Jr,")

def test_empty_exports():
    tree = make_tree()
    assert export_tree(tree, [], "csv").content.count("\n") == 0
    assert json.loads(export_tree(tree, [], "json").content)["tree"]["people"] == []
    assert export_tree(tree, [], "gedcom").content == (
        "0 HEAD\n1 SOUR FamilyTree\n1 GEDC\n2 VERS 5.5\n1 CHAR UTF-8\n0 TRLR\n"
    )

def test_gedcom_record_order():
    text = people_to_gedcom(three_people())
    assert "0 @1@ INDI\n1 NAME Arthur /Hale/\n1 SEX M\n1 BIRT\n2 DATE 1920-03-02\n" in text
    assert "0 @2@ INDI\n1 NAME Edith /Hale/\n1 SEX F\n" in text
    assert "0 @3@ INDI\n1 NAME Robert //\n1 SEX M\n1 DEAT\n2 DATE 2001-12-24\n1 FAMC @1@\n" in text
    assert text.endswith("0 TRLR\n")

def test_unknown_gender_exports_as_u():
    text = people_to_gedcom(owner_people([make_person(1, gender=Gender.OTHER)]))
    assert "1 SEX U\n" in text

def test_json_gates_notes_and_private_notes():
    person = make_person(1)
    person.notes = [make_note(1, 1, "secret", is_private=True), make_note(2, 1, "shared")]
    tree = make_tree()
    people = owner_people([person])

    without = json.loads(export_tree(tree, people, "json").content)
    assert "notes" not in without["tree"]["people"][0]

    public_only = json.loads(export_tree(tree, people, "json", include_notes=True).content)
    assert [n["content"] for n in public_only["tree"]["people"][0]["notes"]] == ["shared"]

    everything = json.loads(export_tree(tree, people, "json", include_notes=True, include_private=True).content)
    assert len(everything["tree"]["people"][0]["notes"]) == 2

def test_json_gates_events():
    person = make_person(1)
    person.events = [make_event(1, 1, date=date(1920, 3, 2), location="Leeds", sources="parish register")]
    tree = make_tree()
    people = owner_people([person])

    without = json.loads(export_tree(tree, people, "json").content)
    assert "events" not in without["tree"]["people"][0]

    with_events = json.loads(export_tree(tree, people, "json", include_events=True).content)
    events = with_events["tree"]["people"][0]["events"]
    assert len(events) == 1
    assert events[0]["type"] == EventType.BIRTH.value
    assert events[0]["date"] == "1920-03-02"
    assert events[0]["sources"] == "parish register"

def test_filenames_replace_whitespace():
    tree = make_tree(name="The  Hale Family")
    assert export_tree(tree, [], "csv").filename == "The_Hale_Family_export.csv"
    assert export_tree(tree, [], "gedcom").filename == "The_Hale_Family.ged"
    assert export_tree(tree, [], "json").filename == "The_Hale_Family_export.json"

def test_unsupported_format():
    with pytest.raises(InvalidFormat):
        export_tree(make_tree(), [], "xml")
