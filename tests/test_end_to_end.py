"""Plant, duplicate, storm, remove, and list against one house."""


def test_tree_lifecycle_at_house_three(client, fake_db):
    for _ in range(3):
        fake_db.seed_house()

    planted = client.post("/trees/3", json={"species": "oak", "x": 10, "y": 20})
    assert planted.status_code == 200
    tree = planted.get_json()
    assert tree["id"] is not None
    assert tree["species"] == "oak"
    assert (tree["x"], tree["y"]) == (10, 20)
    assert tree["fallen"] is False

    duplicate = client.post("/trees/3", json={"species": "oak", "x": 10, "y": 20})
    assert duplicate.status_code == 400

    storm = client.post("/storm/3")
    assert storm.status_code == 200
    assert storm.get_json() == [{**tree, "fallen": True}]

    removed = client.delete(f"/trees/{tree['id']}")
    assert removed.status_code == 200
    assert removed.data == b""

    remaining = client.get("/trees/3")
    assert remaining.status_code == 404
