from datetime import datetime

from obrador.models import Timesheet

SHIFT = {"date": "2025-03-10", "startTime": "22:00", "endTime": "07:00", "client": "Acme", "task": "Guardia"}


def submit(http, headers, **overrides):
    response = http.post("/timesheets", json={**SHIFT, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_missing_token_is_401(client):
    response = client.get("/timesheets/mine")
    assert response.status_code == 401
    assert response.json() == {"error": "Token requerido"}


def test_unknown_token_is_401(client):
    response = client.get("/timesheets/mine", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
    assert response.json() == {"error": "Token invalido"}


def test_session_cookie_is_accepted(client, tokens):
    response = client.get("/timesheets/mine", headers={"Cookie": f"obrador_session={tokens['ana']}"})
    assert response.status_code == 200


def test_user_without_roles_is_403(client, as_user):
    response = client.get("/timesheets/mine", headers=as_user("nadie"))
    assert response.status_code == 403
    assert response.json() == {"error": "Sin rol"}


def test_operario_cannot_list_everyone(client, as_user):
    response = client.get("/timesheets", headers=as_user("ana"))
    assert response.status_code == 403
    assert response.json() == {"error": "Permiso denegado"}


def test_create_returns_public_entry(client, as_user):
    body = submit(client, as_user("ana"))
    
    assert body["username"] == "ana"
    assert body["userDisplayName"] == "Ana Diaz"
    assert body["durationMinutes"] == 540
    assert body["nightMinutes"] == 480
    assert body["holidayMinutes"] == 0
    assert body["createdByName"] == "Ana Diaz"
    assert "searchText" not in body
    assert "startMinutes" not in body


def test_create_with_bad_time(client, as_user):
    response = client.post("/timesheets", json={**SHIFT, "startTime": "7:00"}, headers=as_user("ana"))
    assert response.status_code == 400
    assert response.json() == {"error": "Horarios invalidos"}


def test_create_with_equal_times(client, as_user):
    response = client.post(
        "/timesheets", json={**SHIFT, "startTime": "08:00", "endTime": "08:00"}, headers=as_user("ana"),
    )
    assert response.status_code == 400
    assert response.json() == {"error": "La duracion debe ser mayor a 0"}


def test_create_without_date_is_400(client, as_user):
    payload = {key: value for key, value in SHIFT.items() if key != "date"}
    response = client.post("/timesheets", json=payload, headers=as_user("ana"))
    assert response.status_code == 400
    assert "error" in response.json()


def test_operario_user_id_is_ignored(client, as_user, users):
    body = submit(client, as_user("ana"), userId=users["beto"].user_id)
    assert body["username"] == "ana"


def test_supervisor_submits_for_others(client, as_user, users):
    body = submit(client, as_user("sara"), userId=users["beto"].user_id)
    assert body["username"] == "beto"
    assert body["createdByName"] == "Sara Paz"


def test_owner_patches_within_window(client, as_user):
    created = submit(client, as_user("ana"))
    
    response = client.patch(
        f"/timesheets/{created['id']}", json={"endTime": "06:00", "isHoliday": True},
        headers=as_user("ana"),
    )
    
    assert response.status_code == 200
    body = response.json()
    assert body["durationMinutes"] == 480
    assert body["nightMinutes"] == 480
    assert body["holidayMinutes"] == 480
    assert body["client"] == "Acme"


def test_patch_someone_elses_entry_is_403(client, as_user):
    created = submit(client, as_user("ana"))
    response = client.patch(f"/timesheets/{created['id']}", json={"task": "x"}, headers=as_user("beto"))
    assert response.status_code == 403
    assert response.json() == {"error": "No podes editar este registro"}


def test_patch_after_window_is_403(client, as_user, raw_session):
    created = submit(client, as_user("ana"))
    row = raw_session.get(Timesheet, created["id"])
    row.created_at = datetime(2020, 1, 1)
    raw_session.commit()
    
    response = client.patch(f"/timesheets/{created['id']}", json={"task": "x"}, headers=as_user("ana"))
    
    assert response.status_code == 403
    assert response.json() == {"error": "Solo podes editar durante las primeras 24 horas"}
    
    # Managers are not bound by the window
    response = client.patch(f"/timesheets/{created['id']}", json={"task": "x"}, headers=as_user("sara"))
    assert response.status_code == 200
    assert response.json()["updatedByName"] == "Sara Paz"


def test_patch_missing_entry_is_404(client, as_user):
    response = client.patch("/timesheets/999", json={"task": "x"}, headers=as_user("sara"))
    assert response.status_code == 404
    assert response.json() == {"error": "Registro no encontrado"}


def test_delete(client, as_user):
    created = submit(client, as_user("ana"))
    
    forbidden = client.delete(f"/timesheets/{created['id']}", headers=as_user("beto"))
    assert forbidden.status_code == 403
    assert forbidden.json() == {"error": "No podes eliminar este registro"}
    
    response = client.delete(f"/timesheets/{created['id']}", headers=as_user("ana"))
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    
    assert client.get(f"/timesheets/{created['id']}", headers=as_user("ana")).status_code == 404


def test_get_one(client, as_user):
    created = submit(client, as_user("ana"))
    url = f"/timesheets/{created['id']}"
    
    assert client.get(url, headers=as_user("ana")).json()["id"] == created["id"]
    assert client.get(url, headers=as_user("sara")).status_code == 200
    assert client.get(url, headers=as_user("beto")).status_code == 403


def test_list_filters(client, as_user, users):
    submit(client, as_user("ana"), date="2025-03-09", startTime="08:00", endTime="16:00", client="Delta")
    submit(client, as_user("ana"), date="2025-03-10")
    submit(client, as_user("sara"), userId=users["beto"].user_id, date="2025-05-01",
           startTime="08:00", endTime="12:00", isHoliday=True, client="Norte", workOrder="OT-9")
    headers = as_user("sara")
    
    everything = client.get("/timesheets", headers=headers).json()
    assert [e["date"] for e in everything] == ["2025-05-01", "2025-03-10", "2025-03-09"]
    
    oldest = client.get("/timesheets", params={"order": "asc", "limit": 1}, headers=headers).json()
    assert [e["date"] for e in oldest] == ["2025-03-09"]
    
    def dates(**params):
        return [e["date"] for e in client.get("/timesheets", params=params, headers=headers).json()]
    
    assert dates(client="acme") == ["2025-03-10"]
    assert dates(isHoliday="si") == ["2025-05-01"]
    assert dates(isHoliday="false") == ["2025-03-10", "2025-03-09"]
    assert dates(nightOnly="true") == ["2025-03-10"]
    assert dates(workOrder="ot-9") == ["2025-05-01"]
    assert dates(user="ruiz") == ["2025-05-01"]
    assert dates(q="delta") == ["2025-03-09"]
    assert dates(userId=users["ana"].user_id, **{"from": "2025-03-10"}) == ["2025-03-10"]
    assert dates(date="2025-03-09", **{"from": "2025-03-10"}) == ["2025-03-09"]


def test_list_rejects_bad_order(client, as_user):
    response = client.get("/timesheets", params={"order": "sideways"}, headers=as_user("sara"))
    assert response.status_code == 400


def test_mine(client, as_user, users):
    submit(client, as_user("ana"), date="2025-03-11")
    submit(client, as_user("ana"), date="2025-03-10")
    submit(client, as_user("sara"), userId=users["beto"].user_id)
    
    response = client.get("/timesheets/mine", headers=as_user("ana"))
    
    assert response.status_code == 200
    assert [(e["username"], e["date"]) for e in response.json()] == [
        ("ana", "2025-03-10"), ("ana", "2025-03-11"),
    ]


def test_summary(client, as_user, users):
    submit(client, as_user("ana"), startTime="20:00", endTime="04:00")
    submit(client, as_user("ana"), date="2025-05-01", startTime="08:00", endTime="16:00", isHoliday=True)
    submit(client, as_user("sara"), userId=users["beto"].user_id, startTime="08:00", endTime="16:00")
    headers = as_user("sara")
    
    rows = client.get("/timesheets/summary", headers=headers).json()
    assert [row["username"] for row in rows] == ["ana", "beto"]
    assert rows[0] == {
        "userId": users["ana"].user_id,
        "displayName": "Ana Diaz",
        "username": "ana",
        "normalMinutes": 60,
        "holidayMinutes": 480,
        "nightMinutes": 420,
        "totalMinutes": 960,
    }
    
    nights = client.get("/timesheets/summary", params={"nightOnly": "1"}, headers=headers).json()
    assert [(row["username"], row["totalMinutes"]) for row in nights] == [("ana", 420)]


def test_summary_requires_read(client, as_user):
    assert client.get("/timesheets/summary", headers=as_user("ana")).status_code == 403


def test_history(client, as_user):
    created = submit(client, as_user("ana"))
    client.patch(f"/timesheets/{created['id']}", json={"task": "Ronda"}, headers=as_user("ana"))
    
    response = client.get(f"/timesheets/{created['id']}/history", headers=as_user("sara"))
    
    assert response.status_code == 200
    movements = response.json()
    assert [m["type"] for m in movements] == ["create", "update"]
    assert movements[0]["by"] == "ana"
    assert movements[0]["entityId"] == str(created["id"])
    assert movements[1]["payload"]["task"] == "Ronda"
    assert movements[1]["summary"] == "Actualizacion de horas de Ana Diaz (2025-03-10)"


def test_view_all_holder_reads_single_entry(client, as_user):
    created = submit(client, as_user("ana"))
    headers = as_user("vera")
    
    assert client.get("/timesheets", headers=headers).status_code == 200
    response = client.get(f"/timesheets/{created['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["username"] == "ana"


def test_view_all_holder_cannot_submit(client, as_user):
    response = client.post("/timesheets", json=SHIFT, headers=as_user("vera"))
    assert response.status_code == 403
    assert response.json() == {"error": "Permiso denegado"}


def test_history_of_unknown_entry_is_404(client, as_user):
    response = client.get("/timesheets/9999/history", headers=as_user("sara"))
    assert response.status_code == 404
    assert response.json() == {"error": "Registro no encontrado"}


def test_history_survives_delete(client, as_user):
    created = submit(client, as_user("ana"))
    client.delete(f"/timesheets/{created['id']}", headers=as_user("ana"))
    
    response = client.get(f"/timesheets/{created['id']}/history", headers=as_user("sara"))
    
    assert response.status_code == 200
    assert [m["type"] for m in response.json()] == ["create", "delete"]
