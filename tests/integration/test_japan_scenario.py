"""End-to-end walk through a trip from draft bucket to public share link."""

import pytest


@pytest.mark.asyncio
async def test_japan_2026(client, owner_headers, friend_headers):
    trip = (await client.post("/trips", json={"title": "Japan 2026"}, headers=owner_headers)).json()
    assert trip["status"] == "draft"

    trip_item_ids = []
    for title, city in (("Shibuya Sky", "Tokyo"), ("Arashiyama", "Kyoto")):
        item = (await client.post(
            "/items",
            json={"source": {"source_type": "manual"}, "title": title, "city": city, "category": "activity"},
            headers=owner_headers,
        )).json()
        attached = (await client.post(
            f"/trips/{trip['id']}/items", json={"item_id": item["id"]}, headers=owner_headers
        )).json()
        trip_item_ids.append(attached["trip_item"]["id"])
        assert attached["trip_item"]["day_index"] is None

    items = (await client.get(f"/trips/{trip['id']}/items", headers=owner_headers)).json()
    assert [ti["sort_order"] for ti in items] == [0, 1]

    scheduled = (await client.post(
        f"/trips/{trip['id']}/schedule",
        json={"start_date": "2026-04-01", "end_date": "2026-04-03"},
        headers=owner_headers,
    )).json()
    assert scheduled["status"] == "scheduled"
    assert scheduled["day_count"] == 3

    moved = await client.patch(
        f"/trips/{trip['id']}/items/{trip_item_ids[0]}/day", json={"day_index": 2}, headers=owner_headers
    )
    assert moved.json()["day_index"] == 2

    days = (await client.get(f"/trips/{trip['id']}/days", headers=owner_headers)).json()
    assert [d["date"] for d in days["days"]] == ["2026-04-01", "2026-04-02", "2026-04-03"]
    assert [ti["id"] for ti in days["days"][1]["items"]] == [trip_item_ids[0]]
    assert [ti["id"] for ti in days["unassigned"]["items"]] == [trip_item_ids[1]]

    link = (await client.post(
        f"/trips/{trip['id']}/share", json={"privacy": "city_dates"}, headers=owner_headers
    )).json()
    assert link["share_url"].endswith(link["share_token"])

    # no Authorization header: share links work for anyone
    shared = await client.get(f"/share/{link['share_token']}")
    assert shared.status_code == 200
    view = shared.json()
    assert view["title"] == "Japan 2026"
    assert (view["start_date"], view["end_date"]) == ("2026-04-01", "2026-04-03")
    assert view["cities"] == ["Tokyo", "Kyoto"]
    assert "Shibuya Sky" not in shared.text

    adopted = await client.post(f"/share/{link['share_token']}/adopt", headers=friend_headers)
    assert adopted.status_code == 201
    fork = (await client.get(f"/trips/{adopted.json()['trip_id']}", headers=friend_headers)).json()
    assert fork["forked_from_trip_id"] == trip["id"]
    assert fork["start_date"] == "2026-04-01"
