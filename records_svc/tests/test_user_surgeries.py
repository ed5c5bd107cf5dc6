"""
Tests for user surgery endpoints.
"""
import uuid

import pytest


def surgery_payload(user_id, surgery="Apendicectomia", **hospitalization):
    data = {
        "entranceDate": "2024-03-10T08:00:00Z",
        "exitDate": "2024-03-12T14:30:00Z",
        "location": "Hospital Santa Casa",
        "reason": "Apendicite aguda",
    }
    data.update(hospitalization)
    return {
        "userId": user_id,
        "hospitalization": data,
        "surgery": surgery,
        "afterEffects": "Nenhuma",
    }


def create(client, user_id, **kwargs):
    response = client.post("/user-surgeries", json=surgery_payload(user_id, **kwargs))
    assert response.status_code == 201, response.text
    return response.json()


# =============================================================================
# SAVE
# =============================================================================

def test_save_user_surgery_success(client, user_a, hospitalization_repo, surgery_repo):
    data = create(client, user_a["id"])

    assert data["userId"] == user_a["id"]
    assert data["afterEffects"] == "Nenhuma"
    assert set(data) == {"id", "userId", "hospitalizationId", "surgeryId", "afterEffects"}

    hospitalization = hospitalization_repo.get_by_id(data["hospitalizationId"])
    assert hospitalization["entrance_date"] == "2024-03-10T08:00:00Z"
    assert hospitalization["exit_date"] == "2024-03-12T14:30:00Z"
    assert hospitalization["diseases"] == []
    assert surgery_repo.get_by_id(data["surgeryId"])["name"] == "Apendicectomia"


def test_save_normalizes_dates_to_utc(client, user_a, hospitalization_repo):
    data = create(client, user_a["id"], entranceDate="2024-03-10T05:00:00-03:00", exitDate=None)

    hospitalization = hospitalization_repo.get_by_id(data["hospitalizationId"])
    assert hospitalization["entrance_date"] == "2024-03-10T08:00:00Z"
    assert hospitalization["exit_date"] is None


def test_save_accepts_plain_dates(client, user_a, hospitalization_repo):
    data = create(client, user_a["id"], entranceDate="2024-03-10", exitDate="")

    hospitalization = hospitalization_repo.get_by_id(data["hospitalizationId"])
    assert hospitalization["entrance_date"] == "2024-03-10T00:00:00Z"
    assert hospitalization["exit_date"] is None


def test_save_twice_reuses_surgery_and_creates_two_hospitalizations(
    client, user_a, hospitalization_repo
):
    first = create(client, user_a["id"], surgery="Apendicectomia")
    second = create(client, user_a["id"], surgery="  APENDICECTOMIA ")

    assert first["surgeryId"] == second["surgeryId"]
    assert first["hospitalizationId"] != second["hospitalizationId"]
    assert first["id"] != second["id"]
    assert len(hospitalization_repo.list_by_user(user_a["id"])) == 2


def test_save_reports_every_invalid_field(client):
    response = client.post("/user-surgeries", json={
        "userId": "x",
        "hospitalization": {"entranceDate": "ontem", "location": " "},
    })

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Erro de validação"
    errors = {error["field"]: error["message"] for error in body["errors"]}
    assert errors == {
        "userId": "Id informado inválido",
        "hospitalization.entranceDate": "Data não é valida",
        "hospitalization.location": "Informe aonde aconteceu a internação",
        "hospitalization.reason": "Informe o motivo da internação",
        "surgery": "Informe a cirurgia realizada",
    }


def test_save_missing_hospitalization(client, user_a):
    payload = surgery_payload(user_a["id"])
    del payload["hospitalization"]

    response = client.post("/user-surgeries", json=payload)

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "hospitalization", "message": "Informe os dados da internação"}
    ]


def test_save_without_body(client):
    response = client.post("/user-surgeries")

    assert response.status_code == 400
    assert response.json()["message"] == "Erro de validação"


def test_save_malformed_json_is_400(client):
    response = client.post(
        "/user-surgeries",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Erro de validação"


def test_save_requires_token(anonymous_client, user_a):
    response = anonymous_client.post("/user-surgeries", json=surgery_payload(user_a["id"]))

    assert response.status_code == 401
    assert response.json() == {"message": "Token não informado"}


def test_save_on_fresh_deployment(app_client):
    """The full application records a surgery for a caller with no stored user row."""
    client, caller_id = app_client

    saved = create(client, caller_id)

    assert saved["userId"] == caller_id
    listed = client.get(f"/user-surgeries/user/{caller_id}")
    assert listed.status_code == 200
    assert [item["surgery"]["name"] for item in listed.json()] == ["Apendicectomia"]


# =============================================================================
# LIST
# =============================================================================

def test_list_user_surgeries_shape(client, user_a):
    saved = create(client, user_a["id"])

    response = client.get(f"/user-surgeries/user/{user_a['id']}")

    assert response.status_code == 200
    assert response.json() == [{
        "id": saved["id"],
        "afterEffects": "Nenhuma",
        "surgery": {"id": saved["surgeryId"], "name": "Apendicectomia"},
        "hospitalization": {
            "id": saved["hospitalizationId"],
            "entranceDate": "2024-03-10T08:00:00Z",
            "exitDate": "2024-03-12T14:30:00Z",
            "location": "Hospital Santa Casa",
            "reason": "Apendicite aguda",
        },
    }]


def test_list_user_surgeries_of_another_user(client, user_b):
    response = client.get(f"/user-surgeries/user/{user_b['id']}")

    assert response.status_code == 401
    assert response.json() == {"message": "você não possui acesso a essas informações"}


def test_list_user_surgeries_invalid_id(client):
    response = client.get("/user-surgeries/user/abc")

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "", "message": "Id informado inválido"}]


# =============================================================================
# GET BY ID
# =============================================================================

def test_get_user_surgery(client, user_a):
    saved = create(client, user_a["id"])

    response = client.get(f"/user-surgeries/{saved['id']}")

    assert response.status_code == 200
    assert response.json() == saved


def test_get_user_surgery_of_another_user(client, client_b, user_a):
    saved = create(client, user_a["id"])

    response = client_b.get(f"/user-surgeries/{saved['id']}")

    assert response.status_code == 401
    assert response.json() == {"message": "Você não possui acesso a essas informações"}


def test_get_missing_user_surgery_is_401(client):
    response = client.get(f"/user-surgeries/{uuid.uuid4()}")

    assert response.status_code == 401
    assert response.json() == {"message": "Você não possui acesso a essas informações"}


# =============================================================================
# UPDATE
# =============================================================================

def update_payload(saved, **overrides):
    payload = {
        "id": saved["id"],
        "userId": saved["userId"],
        "surgeryId": saved["surgeryId"],
        "afterEffects": "Dor leve",
        "hospitalization": {
            "entranceDate": "2024-05-01T10:00:00Z",
            "exitDate": "2024-05-03T10:00:00+00:00",
            "location": "Hospital Central",
            "reason": "Revisão",
        },
    }
    payload.update(overrides)
    return payload


def test_update_creates_new_hospitalization(client, user_a, hospitalization_repo):
    saved = create(client, user_a["id"])

    response = client.put("/user-surgeries", json=update_payload(saved))

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == saved["id"]
    assert data["afterEffects"] == "Dor leve"
    assert data["hospitalizationId"] != saved["hospitalizationId"]

    # The previous hospitalization is left in place
    assert hospitalization_repo.get_by_id(saved["hospitalizationId"]) is not None
    new = hospitalization_repo.get_by_id(data["hospitalizationId"])
    assert new["location"] == "Hospital Central"
    assert new["exit_date"] == "2024-05-03T10:00:00Z"


def test_update_switches_surgery(client, user_a, surgery_repo):
    saved = create(client, user_a["id"])
    other = surgery_repo.add("Colecistectomia")

    response = client.put("/user-surgeries", json=update_payload(saved, surgeryId=other["id"]))

    assert response.status_code == 200
    assert response.json()["surgeryId"] == other["id"]
    listing = client.get(f"/user-surgeries/user/{user_a['id']}").json()
    assert listing[0]["surgery"]["name"] == "Colecistectomia"


def test_update_diseases_are_validated_but_not_linked(client, user_a, hospitalization_repo, disease_repo):
    saved = create(client, user_a["id"])
    disease = disease_repo.add("Diabetes")
    payload = update_payload(saved)
    payload["hospitalization"]["diseases"] = [disease["id"]]

    response = client.put("/user-surgeries", json=payload)

    assert response.status_code == 200
    new = hospitalization_repo.get_by_id(response.json()["hospitalizationId"])
    assert new["diseases"] == []


def test_update_rejects_invalid_disease_ids(client, user_a):
    saved = create(client, user_a["id"])
    payload = update_payload(saved)
    payload["hospitalization"]["diseases"] = ["nope"]

    response = client.put("/user-surgeries", json=payload)

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "hospitalization.diseases.0", "message": "Id informado inválido"}
    ]


@pytest.mark.parametrize("entrance_date", [
    "2024-05-01",
    "2024-05-01T10:00:00",
    "01/05/2024 10:00",
])
def test_update_requires_strict_iso_dates(client, user_a, entrance_date):
    saved = create(client, user_a["id"])
    payload = update_payload(saved)
    payload["hospitalization"]["entranceDate"] = entrance_date

    response = client.put("/user-surgeries", json=payload)

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "hospitalization.entranceDate", "message": "Data não é valida"}
    ]


def test_update_missing_ids(client):
    response = client.put("/user-surgeries", json={
        "hospitalization": {
            "entranceDate": "2024-05-01T10:00:00Z",
            "location": "Hospital Central",
            "reason": "Revisão",
        },
    })

    assert response.status_code == 400
    errors = {error["field"]: error["message"] for error in response.json()["errors"]}
    assert errors == {"id": "Informe o id", "userId": "Informe o id", "surgeryId": "Informe o id"}


def test_update_of_another_users_record(client, client_b, user_a, user_b, user_surgery_repo):
    saved = create(client, user_a["id"])

    response = client_b.put("/user-surgeries", json=update_payload(saved, userId=user_b["id"]))

    assert response.status_code == 401
    assert response.json() == {"message": "Você não possui acesso a essas informações"}
    assert user_surgery_repo.get_by_id(saved["id"])["user_id"] == user_a["id"]


def test_update_with_unknown_id_creates_record(client, user_a, user_surgery_repo):
    saved = create(client, user_a["id"])
    new_id = str(uuid.uuid4())

    response = client.put("/user-surgeries", json=update_payload(saved, id=new_id))

    assert response.status_code == 200
    assert response.json()["id"] == new_id
    assert user_surgery_repo.get_by_id(new_id) is not None


def test_update_registers_unknown_owner(user_surgery_service, surgery_repo, user_repo):
    caller_id = str(uuid.uuid4())
    surgery = surgery_repo.add("Hernioplastia")
    record_id = str(uuid.uuid4())

    updated = user_surgery_service.update_user_surgery(
        update_payload({"id": record_id, "userId": caller_id, "surgeryId": surgery["id"]}),
        caller_id,
    )

    assert updated.id == record_id
    assert updated.user_id == caller_id
    assert user_repo.get_by_id(caller_id) is not None


def test_update_unknown_surgery_uses_default_message(client, user_a):
    saved = create(client, user_a["id"])

    response = client.put("/user-surgeries", json=update_payload(saved, surgeryId=str(uuid.uuid4())))

    assert response.status_code == 500
    assert response.json() == {"message": "Erro ao atualizar a cirurgia"}


# =============================================================================
# DELETE
# =============================================================================

def test_delete_mixed_ownership(client, client_b, user_a, user_b, user_surgery_repo):
    mine = create(client, user_a["id"], surgery="Apendicectomia")
    theirs = create(client_b, user_b["id"], surgery="Colecistectomia")
    missing = str(uuid.uuid4())

    response = client.request("DELETE", "/user-surgeries", json=[mine["id"], theirs["id"], missing])

    assert response.status_code == 200
    results = response.json()
    assert len(results) == 3
    assert {"Apendicectomia": "Cirurgia excluída com sucesso"} in results
    assert {"Colecistectomia": "Você não pode excluir esse item"} in results
    assert {missing: "Você não pode excluir esse item"} in results

    assert user_surgery_repo.get_by_id(mine["id"]) is None
    assert user_surgery_repo.get_by_id(theirs["id"]) is not None


def test_delete_many_owned(client, user_a, user_surgery_repo):
    ids = [create(client, user_a["id"], surgery=name)["id"]
           for name in ("Apendicectomia", "Colecistectomia", "Herniorrafia")]

    response = client.request("DELETE", "/user-surgeries", json=ids)

    assert response.status_code == 200
    assert len(response.json()) == 3
    assert all(user_surgery_repo.get_by_id(i) is None for i in ids)


@pytest.mark.parametrize("body, errors", [
    ([], [{"field": "", "message": "Informe uma lista com os ID's das cirurgias"}]),
    (None, [{"field": "", "message": "Informe uma lista com os ID's das cirurgias"}]),
    (["abc"], [{"field": "0", "message": "Id informado inválido"}]),
    ([""], [{"field": "0", "message": "Informe o id"}]),
])
def test_delete_invalid_body(client, body, errors):
    response = client.request("DELETE", "/user-surgeries", json=body)

    assert response.status_code == 400
    assert response.json() == {"message": "Erro de validação", "errors": errors}


def test_delete_database_failure_uses_default_message(client, user_surgery_repo, monkeypatch):
    def broken(user_surgery_id):
        raise RuntimeError("disk I/O error")

    monkeypatch.setattr(user_surgery_repo, "get_with_surgery", broken)

    response = client.request("DELETE", "/user-surgeries", json=[str(uuid.uuid4())])

    assert response.status_code == 500
    assert response.json() == {"message": "Erro ao excluir as internações do usuário"}
