ITEM = {
    "judul": "Villa Tropis",
    "lokasi": "Bali",
    "deskripsi": "Kolam renang pribadi",
    "gambar_url": "/media/galeri/1.jpg",
}


def test_gallery_crud(client, admin_headers):
    r = client.post("/api/galeri", json=ITEM, headers=admin_headers)
    assert r.status_code == 201
    item = r.json()["data"]
    assert item["lokasi"] == "Bali"

    assert client.get(f"/api/galeri/{item['id']}").json()["data"]["judul"] == "Villa Tropis"

    r = client.put(f"/api/galeri/{item['id']}", json=dict(ITEM, lokasi="Lombok"), headers=admin_headers)
    assert r.json()["data"]["lokasi"] == "Lombok"

    r = client.delete(f"/api/galeri/{item['id']}", headers=admin_headers)
    assert r.json() == {"message": "Data galeri berhasil dihapus"}

    r = client.get(f"/api/galeri/{item['id']}")
    assert r.status_code == 404
    assert r.json()["detail"] == "Data galeri tidak ditemukan"


def test_gallery_listing_is_public_and_limited(client, admin_headers):
    for i in range(3):
        client.post("/api/galeri", json=dict(ITEM, judul=f"Rumah {i}"), headers=admin_headers)

    data = client.get("/api/galeri").json()["data"]
    assert [g["judul"] for g in data] == ["Rumah 2", "Rumah 1", "Rumah 0"]
    assert len(client.get("/api/galeri", params={"limit": 2}).json()["data"]) == 2


def test_gallery_requires_image_and_admin(client, admin_headers):
    assert client.post("/api/galeri", json=ITEM).status_code == 401
    r = client.post("/api/galeri", json=dict(ITEM, gambar_url=""), headers=admin_headers)
    assert r.status_code == 422
