"""API tests for personal and event expenses."""
from decimal import Decimal


def money(value):
    return Decimal(str(value))


def event_payload(event_id, amount, shares, description="Groceries"):
    return {
        "event_id": event_id,
        "description": description,
        "amount": amount,
        "splits": [{"user_id": uid, "share": share} for uid, share in shares.items()],
    }


class TestPersonalExpenses:

    async def test_create_personal_expense(self, client, alice):
        resp = await client.post(
            "/api/v1/expenses/",
            json={"description": "Coffee", "amount": "4.50"},
            headers=alice["headers"],
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["event_id"] is None
        assert data["paid_by"] == alice["id"]
        assert money(data["amount"]) == Decimal("4.50")
        assert [(s["user_id"], money(s["share"])) for s in data["splits"]] == [
            (alice["id"], Decimal("4.50"))
        ]

    async def test_rejects_non_positive_amount(self, client, alice):
        resp = await client.post(
            "/api/v1/expenses/",
            json={"description": "Refund", "amount": "-1"},
            headers=alice["headers"],
        )
        assert resp.status_code == 422

    async def test_rejects_more_than_two_decimals(self, client, alice):
        resp = await client.post(
            "/api/v1/expenses/",
            json={"description": "Gas", "amount": "1.999"},
            headers=alice["headers"],
        )
        assert resp.status_code == 422

    async def test_update_personal_expense(self, client, alice):
        created = await client.post(
            "/api/v1/expenses/",
            json={"description": "Coffee", "amount": "4.50"},
            headers=alice["headers"],
        )
        expense_id = created.json()["id"]

        resp = await client.put(
            f"/api/v1/expenses/{expense_id}",
            json={"description": "Large coffee", "amount": "5.25"},
            headers=alice["headers"],
        )

        assert resp.status_code == 200
        assert resp.json()["description"] == "Large coffee"
        assert money(resp.json()["splits"][0]["share"]) == Decimal("5.25")

    async def test_other_user_cannot_touch_expense(self, client, alice, bob):
        created = await client.post(
            "/api/v1/expenses/",
            json={"description": "Coffee", "amount": "4.50"},
            headers=alice["headers"],
        )
        expense_id = created.json()["id"]

        assert (await client.get(f"/api/v1/expenses/{expense_id}", headers=bob["headers"])).status_code == 404
        assert (await client.put(
            f"/api/v1/expenses/{expense_id}",
            json={"description": "Mine now", "amount": "1.00"},
            headers=bob["headers"],
        )).status_code == 404
        assert (await client.delete(f"/api/v1/expenses/{expense_id}", headers=bob["headers"])).status_code == 403

    async def test_delete_personal_expense(self, client, alice):
        created = await client.post(
            "/api/v1/expenses/",
            json={"description": "Coffee", "amount": "4.50"},
            headers=alice["headers"],
        )
        expense_id = created.json()["id"]

        resp = await client.delete(f"/api/v1/expenses/{expense_id}", headers=alice["headers"])
        assert resp.status_code == 200

        listing = await client.get("/api/v1/expenses/", headers=alice["headers"])
        assert listing.json() == []

    async def test_summary(self, client, alice):
        for amount in ("10.00", "20.00", "30.01"):
            await client.post(
                "/api/v1/expenses/",
                json={"description": "Lunch", "amount": amount},
                headers=alice["headers"],
            )

        resp = await client.get("/api/v1/expenses/summary", headers=alice["headers"])
        assert resp.status_code == 200
        data = resp.json()
        assert data["total_expenses"] == 3
        assert money(data["total_amount"]) == Decimal("60.01")
        assert money(data["average_expense"]) == Decimal("20.00")
        assert sum(money(v) for v in data["expenses_by_month"].values()) == Decimal("60.01")

    async def test_summary_empty(self, client, alice):
        resp = await client.get("/api/v1/expenses/summary", headers=alice["headers"])
        data = resp.json()
        assert data["total_expenses"] == 0
        assert money(data["average_expense"]) == Decimal("0")
        assert data["expenses_by_month"] == {}

    async def test_recent_limit(self, client, alice):
        for i in range(4):
            await client.post(
                "/api/v1/expenses/",
                json={"description": f"Item {i}", "amount": "1.00"},
                headers=alice["headers"],
            )

        resp = await client.get("/api/v1/expenses/recent?limit=2", headers=alice["headers"])
        assert resp.status_code == 200
        assert [e["description"] for e in resp.json()] == ["Item 3", "Item 2"]


class TestEventExpenses:

    async def test_splits_must_add_up(self, client, alice, bob, trip):
        resp = await client.post(
            "/api/v1/expenses/event",
            json=event_payload(trip["id"], "30.00", {alice["id"]: "10.00", bob["id"]: "10.00"}),
            headers=alice["headers"],
        )
        assert resp.status_code == 400

    async def test_one_cent_rounding_is_accepted(self, client, alice, bob, carol, trip):
        resp = await client.post(
            "/api/v1/expenses/event",
            json=event_payload(
                trip["id"], "10.00",
                {alice["id"]: "3.33", bob["id"]: "3.33", carol["id"]: "3.33"},
            ),
            headers=alice["headers"],
        )
        assert resp.status_code == 200

    async def test_duplicate_split_users(self, client, alice, trip):
        payload = event_payload(trip["id"], "10.00", {alice["id"]: "5.00"})
        payload["splits"].append({"user_id": alice["id"], "share": "5.00"})

        resp = await client.post("/api/v1/expenses/event", json=payload, headers=alice["headers"])
        assert resp.status_code == 400

    async def test_split_user_must_participate(self, client, alice, outsider, trip):
        resp = await client.post(
            "/api/v1/expenses/event",
            json=event_payload(trip["id"], "10.00", {alice["id"]: "5.00", outsider["id"]: "5.00"}),
            headers=alice["headers"],
        )
        assert resp.status_code == 400

    async def test_outsider_cannot_add(self, client, outsider, trip):
        resp = await client.post(
            "/api/v1/expenses/event",
            json=event_payload(trip["id"], "10.00", {outsider["id"]: "10.00"}),
            headers=outsider["headers"],
        )
        assert resp.status_code == 403

    async def test_requires_a_split(self, client, alice, trip):
        resp = await client.post(
            "/api/v1/expenses/event",
            json=event_payload(trip["id"], "10.00", {}),
            headers=alice["headers"],
        )
        assert resp.status_code == 422

    async def test_update_replaces_splits(self, client, alice, bob, carol, trip):
        created = await client.post(
            "/api/v1/expenses/event",
            json=event_payload(trip["id"], "30.00", {alice["id"]: "15.00", bob["id"]: "15.00"}),
            headers=alice["headers"],
        )
        expense_id = created.json()["id"]

        payload = event_payload(trip["id"], "45.00", {bob["id"]: "20.00", carol["id"]: "25.00"})
        del payload["event_id"]
        resp = await client.put(f"/api/v1/expenses/event/{expense_id}", json=payload, headers=alice["headers"])

        assert resp.status_code == 200
        data = resp.json()
        assert money(data["amount"]) == Decimal("45.00")
        assert sorted((s["user_id"], money(s["share"])) for s in data["splits"]) == [
            (bob["id"], Decimal("20.00")),
            (carol["id"], Decimal("25.00")),
        ]

        balances = await client.get(f"/api/v1/events/{trip['id']}/balances", headers=alice["headers"])
        by_user = {b["user"]["id"]: money(b["net_balance"]) for b in balances.json()["balances"]}
        assert by_user == {
            alice["id"]: Decimal("45"),
            bob["id"]: Decimal("-20"),
            carol["id"]: Decimal("-25"),
        }

    async def test_only_payer_can_update(self, client, alice, bob, trip):
        created = await client.post(
            "/api/v1/expenses/event",
            json=event_payload(trip["id"], "30.00", {alice["id"]: "15.00", bob["id"]: "15.00"}),
            headers=alice["headers"],
        )
        payload = event_payload(trip["id"], "30.00", {bob["id"]: "30.00"})
        del payload["event_id"]

        resp = await client.put(
            f"/api/v1/expenses/event/{created.json()['id']}", json=payload, headers=bob["headers"]
        )
        assert resp.status_code == 404

    async def test_participant_can_view_event_expense(self, client, alice, carol, trip):
        created = await client.post(
            "/api/v1/expenses/event",
            json=event_payload(trip["id"], "8.00", {carol["id"]: "8.00"}),
            headers=alice["headers"],
        )

        resp = await client.get(f"/api/v1/expenses/{created.json()['id']}", headers=carol["headers"])
        assert resp.status_code == 200
        assert resp.json()["payer"]["id"] == alice["id"]

    async def test_all_expenses_mixes_personal_and_event(self, client, alice, bob, trip):
        await client.post(
            "/api/v1/expenses/",
            json={"description": "Personal", "amount": "3.00"},
            headers=bob["headers"],
        )
        await client.post(
            "/api/v1/expenses/event",
            json=event_payload(trip["id"], "8.00", {alice["id"]: "4.00", bob["id"]: "4.00"}),
            headers=alice["headers"],
        )

        bob_all = await client.get("/api/v1/expenses/all", headers=bob["headers"])
        alice_all = await client.get("/api/v1/expenses/all", headers=alice["headers"])

        assert sorted(e["description"] for e in bob_all.json()) == ["Groceries", "Personal"]
        assert [e["description"] for e in alice_all.json()] == ["Groceries"]
