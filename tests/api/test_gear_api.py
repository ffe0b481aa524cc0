"""Gear API: /gear/*"""

from fastapi.testclient import TestClient

OPERATOR = "char-drow-operator"
VEST = "container-tactical-vest"
PACK = "container-backpack"
BASE = f"/gear/characters/{OPERATOR}"


# ── catalog / snapshot ────────────────────────────────────────


class TestRead:
    def test_catalog(self, client: TestClient) -> None:
        resp = client.get("/gear/catalog")
        assert resp.status_code == 200
        by_id = {d["definition_id"]: d for d in resp.json()}
        assert len(by_id) == 10
        assert by_id["plate-carrier"]["locations"] == ["torso", "vitals"]
        assert by_id["rifle-m4"]["weapon"]["damage"]

    def test_character_snapshot(self, client: TestClient) -> None:
        resp = client.get(BASE)
        assert resp.status_code == 200
        data = resp.json()
        assert [c["container_id"] for c in data["containers"]] == [VEST, PACK]
        assert abs(data["containers"][0]["weight"] - 12.3) < 1e-9
        assert data["equipped"] == {}
        assert data["armor"]["torso"] == 0
        assert data["encumbrance"]["level"] == "None"

    def test_unknown_character(self, client: TestClient) -> None:
        assert client.get("/gear/characters/nobody").status_code == 404
        resp = client.post(
            "/gear/characters/nobody/move",
            json={"item_id": "x", "container_id": VEST, "x": 0, "y": 0},
        )
        assert resp.status_code == 404

    def test_encumbrance(self, client: TestClient) -> None:
        data = client.get(f"{BASE}/encumbrance").json()
        assert data["level"] == "None"
        assert data["effective_move"] == 12
        assert data["effective_dodge"] == 9
        assert abs(data["basic_lift"] - 28.8) < 1e-9

    def test_inspect(self, client: TestClient) -> None:
        data = client.get(f"{BASE}/items/item-helmet/inspect").json()
        assert data["definition"]["name"]
        assert data["can_equip"] is True
        assert data["equip_locations"] == ["skull"]

    def test_inspect_unknown_item(self, client: TestClient) -> None:
        assert client.get(f"{BASE}/items/nope/inspect").status_code == 404


# ── placement preview ─────────────────────────────────────────


class TestValidate:
    def test_collision(self, client: TestClient) -> None:
        resp = client.post(
            f"{BASE}/validate",
            json={"container_id": VEST, "x": 2, "y": 2, "item_id": "item-mag-1"},
        )
        data = resp.json()
        assert data["can_place"] is False
        assert data["reason"] == "collision"
        assert data["conflicts"] == [
            {"item_id": "item-rifle", "x": 2, "y": 2, "width": 3, "height": 1, "rotation": 0}
        ]

    def test_catalog_candidate(self, client: TestClient) -> None:
        data = client.post(
            f"{BASE}/validate",
            json={"container_id": VEST, "x": 6, "y": 4, "definition_id": "medkit"},
        ).json()
        assert data == {"can_place": True, "reason": None, "conflicts": []}

    def test_out_of_bounds(self, client: TestClient) -> None:
        data = client.post(
            f"{BASE}/validate",
            json={"container_id": VEST, "x": 7, "y": 0, "definition_id": "rifle-m4"},
        ).json()
        assert data["reason"] == "out_of_bounds"
        assert data["conflicts"] == []

    def test_no_candidate(self, client: TestClient) -> None:
        resp = client.post(f"{BASE}/validate", json={"container_id": VEST, "x": 0, "y": 0})
        assert resp.status_code == 400


# ── mutations ─────────────────────────────────────────────────


class TestMutations:
    def test_move(self, client: TestClient) -> None:
        resp = client.post(
            f"{BASE}/move",
            json={"item_id": "item-mag-1", "container_id": VEST, "x": 7, "y": 5},
        )
        assert resp.status_code == 200
        assert resp.json()["success"] is True
        items = client.get(BASE).json()["containers"][0]["items"]
        mag = next(i for i in items if i["instance_id"] == "item-mag-1")
        assert (mag["grid_x"], mag["grid_y"]) == (7, 5)

    def test_move_rejected(self, client: TestClient) -> None:
        data = client.post(
            f"{BASE}/move",
            json={"item_id": "item-mag-1", "container_id": VEST, "x": 2, "y": 2},
        ).json()
        assert data["success"] is False
        assert data["action"] == "move"
        assert [c["item_id"] for c in data["conflicts"]] == ["item-rifle"]

    def test_add_and_remove(self, client: TestClient) -> None:
        data = client.post(
            f"{BASE}/items",
            json={"definition_id": "field-radio", "container_id": PACK, "x": 0, "y": 2},
        ).json()
        assert data["success"] is True
        item_id = data["item_id"]
        assert client.get(f"{BASE}/items/{item_id}/inspect").status_code == 200

        removed = client.delete(f"{BASE}/items/{item_id}").json()
        assert removed["success"] is True
        assert client.get(f"{BASE}/items/{item_id}/inspect").status_code == 404

    def test_add_zero_quantity(self, client: TestClient) -> None:
        resp = client.post(
            f"{BASE}/items",
            json={
                "definition_id": "ration-pack",
                "container_id": PACK,
                "x": 0,
                "y": 2,
                "quantity": 0,
            },
        )
        assert resp.status_code == 422

    def test_rotate(self, client: TestClient) -> None:
        data = client.post(
            f"{BASE}/rotate", json={"item_id": "item-rifle", "rotation": 90}
        ).json()
        assert data["success"] is True

    def test_stow(self, client: TestClient) -> None:
        data = client.post(
            f"{BASE}/stow", json={"item_id": "item-mag-4", "host_id": "item-pouch"}
        ).json()
        assert data["success"] is True
        pack = client.get(BASE).json()["containers"][1]
        pouch = next(i for i in pack["items"] if i["instance_id"] == "item-pouch")
        assert [c["instance_id"] for c in pouch["contained_items"]] == ["item-mag-4"]

    def test_equip_and_unequip(self, client: TestClient) -> None:
        data = client.post(
            f"{BASE}/equip", json={"item_id": "item-plate-carrier", "location": "torso"}
        ).json()
        assert data["success"] is True
        snapshot = client.get(BASE).json()
        assert snapshot["equipped"] == {"torso": "item-plate-carrier"}
        assert snapshot["armor"]["torso"] == 25
        assert snapshot["armor"]["vitals"] == 25

        client.post(f"{BASE}/unequip", json={"location": "torso"})
        assert client.get(BASE).json()["equipped"] == {}

    def test_equip_wrong_location(self, client: TestClient) -> None:
        data = client.post(
            f"{BASE}/equip", json={"item_id": "item-mag-1", "location": "torso"}
        ).json()
        assert data["success"] is False
        assert data["reason"] == "invalid_equip_target"

    def test_equip_unknown_location(self, client: TestClient) -> None:
        resp = client.post(
            f"{BASE}/equip", json={"item_id": "item-helmet", "location": "tail"}
        )
        assert resp.status_code == 422

    def test_hotbar(self, client: TestClient) -> None:
        client.post(f"{BASE}/hotbar", json={"item_id": "item-rifle", "slot": 1})
        assert client.get(BASE).json()["hotbar"] == {"1": "item-rifle"}
        client.post(f"{BASE}/hotbar/clear", json={"slot": 1})
        assert client.get(BASE).json()["hotbar"] == {}

    def test_hotbar_bad_slot(self, client: TestClient) -> None:
        data = client.post(
            f"{BASE}/hotbar", json={"item_id": "item-rifle", "slot": 12}
        ).json()
        assert data["reason"] == "invalid_hotbar_slot"
