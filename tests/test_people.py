import pytest
from httpx import AsyncClient
from conftest import OWNER, STRANGER, add_person, as_user

@pytest.mark.asyncio
async def test_create_person_owner_only(client: AsyncClient, tree):
    payload = {"firstName": "Arthur", "gender": "MALE"}
    response = await client.post(f"/trees/{tree['id']}/people", json=payload)
    assert response.status_code == 401
    response = await client.post(f"/trees/{tree['id']}/people", json=payload, headers=as_user(STRANGER))
    assert response.status_code == 403

@pytest.mark.asyncio
async def test_first_name_required(client: AsyncClient, tree):
    response = await client.post(f"/trees/{tree['id']}/people", json={"gender": "MALE"}, headers=as_user(OWNER))
    assert response.status_code == 400

@pytest.mark.asyncio
async def test_same_parent_twice_rejected(client: AsyncClient, tree):
    parent = await add_person(client, tree["id"], firstName="Parent")
    response = await client.post(
        f"/trees/{tree['id']}/people",
        json={"firstName": "Child", "fatherId": parent["id"], "motherId": parent["id"]},
        headers=as_user(OWNER),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Father and mother cannot be the same person"

@pytest.mark.asyncio
async def test_cross_tree_parent_rejected(client: AsyncClient, tree):
    other = await client.post("/trees", json={"name": "Other"}, headers=as_user(OWNER))
    outsider = await add_person(client, other.json()["data"]["id"], firstName="Outsider")
    response = await client.post(
        f"/trees/{tree['id']}/people",
        json={"firstName": "Child", "fatherId": outsider["id"]},
        headers=as_user(OWNER),
    )
    assert response.status_code == 400

@pytest.mark.asyncio
async def test_self_parent_rejected_and_record_unchanged(client: AsyncClient, tree):
    person = await add_person(client, tree["id"], firstName="Arthur")
    response = await client.patch(
        f"/people/{person['id']}",
        json={"firstName": "Changed", "fatherId": person["id"]},
        headers=as_user(OWNER),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "A person cannot be their own parent"

    response = await client.get(f"/people/{person['id']}", headers=as_user(OWNER))
    assert response.json()["data"]["first_name"] == "Arthur"
    assert response.json()["data"]["father_id"] is None

@pytest.mark.asyncio
async def test_descendant_cannot_become_parent(client: AsyncClient, tree):
    grandpa = await add_person(client, tree["id"], firstName="Grandpa")
    dad = await add_person(client, tree["id"], firstName="Dad", fatherId=grandpa["id"])
    kid = await add_person(client, tree["id"], firstName="Kid", fatherId=dad["id"])

    response = await client.patch(f"/people/{grandpa['id']}", json={"fatherId": kid["id"]}, headers=as_user(OWNER))
    assert response.status_code == 400

@pytest.mark.asyncio
async def test_update_person(client: AsyncClient, tree):
    mother = await add_person(client, tree["id"], firstName="Edith", gender="FEMALE")
    person = await add_person(client, tree["id"], firstName="Robert")
    response = await client.patch(
        f"/people/{person['id']}",
        json={"motherId": mother["id"], "birthDate": "1950-01-01", "isPublic": True},
        headers=as_user(OWNER),
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["mother_id"] == mother["id"]
    assert data["birth_date"] == "1950-01-01"
    assert data["is_public"] is True

    response = await client.patch(f"/people/{person['id']}", json={"motherId": None}, headers=as_user(OWNER))
    assert response.json()["data"]["mother_id"] is None

@pytest.mark.asyncio
async def test_delete_person_clears_child_references(client: AsyncClient, tree):
    father = await add_person(client, tree["id"], firstName="Arthur")
    mother = await add_person(client, tree["id"], firstName="Edith")
    child = await add_person(client, tree["id"], firstName="Robert", fatherId=father["id"], motherId=mother["id"])
    await client.post(f"/people/{father['id']}/spouses", json={"spouseId": mother["id"]}, headers=as_user(OWNER))
    await client.post(f"/people/{father['id']}/notes", json={"content": "War hero"}, headers=as_user(OWNER))

    response = await client.delete(f"/people/{father['id']}", headers=as_user(STRANGER))
    assert response.status_code == 403

    response = await client.delete(f"/people/{father['id']}", headers=as_user(OWNER))
    assert response.status_code == 200

    response = await client.get(f"/people/{child['id']}", headers=as_user(OWNER))
    assert response.json()["data"]["father_id"] is None
    assert response.json()["data"]["mother_id"] == mother["id"]

    response = await client.get(f"/people/{mother['id']}", headers=as_user(OWNER))
    assert response.json()["data"]["spouses"] == []

    response = await client.get(f"/people/{father['id']}", headers=as_user(OWNER))
    assert response.status_code == 404

@pytest.mark.asyncio
async def test_person_detail_visibility(client: AsyncClient, tree):
    hidden = await add_person(client, tree["id"], firstName="Hidden", isPublic=False)
    shown = await add_person(client, tree["id"], firstName="Shown", isPublic=True, isLiving=False, fatherId=hidden["id"])
    await client.patch(f"/trees/{tree['id']}/share", json={"isPublic": True}, headers=as_user(OWNER))

    response = await client.get(f"/people/{hidden['id']}")
    assert response.status_code == 403

    response = await client.get(f"/people/{shown['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["father_id"] is None

    response = await client.get("/people/9999")
    assert response.status_code == 404

@pytest.mark.asyncio
async def test_events_and_notes(client: AsyncClient, tree):
    person = await add_person(client, tree["id"], firstName="Arthur", isPublic=True, isLiving=False)
    pid = person["id"]

    response = await client.post(
        f"/people/{pid}/events",
        json={"type": "MILITARY", "date": "1942-01-01", "location": "Normandy"},
        headers=as_user(OWNER),
    )
    assert response.status_code == 201
    response = await client.post(f"/people/{pid}/events", json={"type": "PARTY"}, headers=as_user(OWNER))
    assert response.status_code == 400

    await client.post(f"/people/{pid}/notes", json={"content": "private by default"}, headers=as_user(OWNER))
    await client.post(f"/people/{pid}/notes", json={"content": "for everyone", "isPrivate": False}, headers=as_user(OWNER))
    response = await client.post(f"/people/{pid}/notes", json={"content": "sneaky"}, headers=as_user(STRANGER))
    assert response.status_code == 403

    response = await client.get(f"/people/{pid}/notes", headers=as_user(OWNER))
    assert len(response.json()["data"]) == 2

    await client.patch(f"/trees/{tree['id']}/share", json={"isPublic": True}, headers=as_user(OWNER))
    response = await client.get(f"/people/{pid}/notes")
    assert [n["content"] for n in response.json()["data"]] == ["for everyone"]

    response = await client.get(f"/people/{pid}/events")
    assert [e["location"] for e in response.json()["data"]] == ["Normandy"]

@pytest.mark.asyncio
async def test_spouse_links(client: AsyncClient, tree):
    a = await add_person(client, tree["id"], firstName="Arthur")
    b = await add_person(client, tree["id"], firstName="Edith")

    response = await client.post(f"/people/{a['id']}/spouses", json={"spouseId": a["id"]}, headers=as_user(OWNER))
    assert response.status_code == 400

    response = await client.post(
        f"/people/{a['id']}/spouses",
        json={"spouseId": b["id"], "marriageDate": "1946-05-04"},
        headers=as_user(OWNER),
    )
    assert response.status_code == 201

    response = await client.post(f"/people/{b['id']}/spouses", json={"spouseId": a["id"]}, headers=as_user(OWNER))
    assert response.status_code == 409

    response = await client.get(f"/people/{b['id']}", headers=as_user(OWNER))
    spouses = response.json()["data"]["spouses"]
    assert [s["spouse_id"] for s in spouses] == [a["id"]]
    assert spouses[0]["marriage_date"] == "1946-05-04"

    response = await client.delete(f"/people/{b['id']}/spouses/{a['id']}", headers=as_user(OWNER))
    assert response.status_code == 200
    response = await client.delete(f"/people/{b['id']}/spouses/{a['id']}", headers=as_user(OWNER))
    assert response.status_code == 404

@pytest.mark.asyncio
async def test_events_sorted_by_date_with_undated_last(client: AsyncClient, tree):
    person = await add_person(client, tree["id"], firstName="Arthur")
    url = f"/people/{person['id']}/events"
    await client.post(url, json={"type": "CUSTOM", "description": "undated"}, headers=as_user(OWNER))
    await client.post(url, json={"type": "MILITARY", "date": "1942-01-01"}, headers=as_user(OWNER))
    await client.post(url, json={"type": "BIRTH", "date": "1920-03-02"}, headers=as_user(OWNER))
    await client.post(url, json={"type": "CENSUS", "description": "also undated"}, headers=as_user(OWNER))

    response = await client.get(url, headers=as_user(OWNER))
    assert [e["type"] for e in response.json()["data"]] == ["BIRTH", "MILITARY", "CUSTOM", "CENSUS"]
