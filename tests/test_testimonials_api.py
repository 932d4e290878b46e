def submit(client, **overrides):
    payload = {"nama": "Budi", "peran": "Pembeli", "pesan": "Pelayanan cepat", "rating": 5}
    payload.update(overrides)
    return client.post("/api/testimonial", json=payload)


def test_public_submission_is_pending(client):
    r = submit(client, status="disetujui")
    assert r.status_code == 201
    assert r.json()["data"]["status"] == "menunggu"


def test_submission_validation(client):
    assert submit(client, rating=6).status_code == 422
    assert submit(client, rating=0).status_code == 422
    assert submit(client, nama="").status_code == 422
    assert submit(client, pesan="").status_code == 422

    r = submit(client, nama="   ", pesan="   ")
    assert r.status_code == 400
    assert r.json()["detail"] == "Nama dan pesan harus diisi"
    assert submit(client, pesan="  ").status_code == 400


def test_public_listing_only_sees_approved(client, admin_headers):
    pending = submit(client).json()["data"]
    approved = submit(client, nama="Sari").json()["data"]
    r = client.patch(
        f"/api/testimonial/{approved['id']}/status", json={"status": "disetujui"}, headers=admin_headers
    )
    assert r.status_code == 200

    public = client.get("/api/testimonial", params={"status": "disetujui"}).json()["data"]
    assert [t["id"] for t in public] == [approved["id"]]

    assert client.get("/api/testimonial").status_code == 401
    assert client.get("/api/testimonial", params={"status": "menunggu"}).status_code == 401

    everything = client.get("/api/testimonial", headers=admin_headers).json()["data"]
    assert {t["id"] for t in everything} == {pending["id"], approved["id"]}


def test_invalid_status_rejected(client, admin_headers):
    item = submit(client).json()["data"]
    r = client.patch(f"/api/testimonial/{item['id']}/status", json={"status": "arsip"}, headers=admin_headers)
    assert r.status_code == 422


def test_admin_edit_and_delete(client, admin_headers):
    item = submit(client).json()["data"]

    r = client.get(f"/api/testimonial/{item['id']}", headers=admin_headers)
    assert r.status_code == 200

    payload = {"nama": "Budi S.", "pesan": "Diperbarui", "rating": 4, "status": "ditolak"}
    blank = dict(payload, nama=" ")
    assert client.put(f"/api/testimonial/{item['id']}", json=blank, headers=admin_headers).status_code == 400

    r = client.put(f"/api/testimonial/{item['id']}", json=payload, headers=admin_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert (data["nama"], data["rating"], data["status"]) == ("Budi S.", 4, "ditolak")

    r = client.delete(f"/api/testimonial/{item['id']}", headers=admin_headers)
    assert r.json() == {"message": "Data testimoni berhasil dihapus"}

    r = client.get(f"/api/testimonial/{item['id']}", headers=admin_headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Data testimoni tidak ditemukan"


def test_moderation_requires_admin(client):
    item = submit(client).json()["data"]
    r = client.patch(f"/api/testimonial/{item['id']}/status", json={"status": "disetujui"})
    assert r.status_code == 401
