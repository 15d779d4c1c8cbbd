"""
Tests for accounts, profiles, client/specialist links and food rules.

This test suite covers:
- User registration and identity resolution (X-User-Id)
- Specialist public profile and directory
- Client extended profile and choice of specialist
- Specialist view of linked clients
- Per-specialist food rules for a client
"""

import uuid

from test_fixtures import client, auth, register, link, linked_pair, unique_email


EXAMPLE_LINK_FLOW = """
Client / specialist flow
========================

1. POST /users {"email": "...", "full_name": "Olga Smirnova", "role": "specialist"}
2. POST /users {"email": "...", "full_name": "Sarah Martinez", "role": "client"}
3. Client picks a specialist:
   PUT /clients/me/specialist/{specialist_id}        (X-User-Id: client)
   -> link created, selected_specialist_id set
4. Specialist sees the client:
   GET /clients                                      (X-User-Id: specialist)
5. Specialist sets food rules:
   PUT /clients/{client_id}/food-rules
   {"allowed_products": ["buckwheat"], "banned_products": ["sugar"], "notes": "..."}
6. Client reads them:
   GET /clients/me/food-rules
"""


# =============================================================================
# USERS
# =============================================================================


def test_register_user():
    email = unique_email("Anna.Petrova")
    resp = client.post(
        "/users", json={"email": email, "full_name": "  Anna Petrova ", "role": "specialist"}
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == email.lower()
    assert body["full_name"] == "Anna Petrova"
    assert body["role"] == "specialist"
    uuid.UUID(body["user_id"])


def test_register_defaults_to_client_role():
    resp = client.post("/users", json={"email": unique_email()})
    assert resp.status_code == 201
    assert resp.json()["role"] == "client"
    assert resp.json()["full_name"] is None


def test_register_duplicate_email_is_conflict():
    email = unique_email("dup")
    assert client.post("/users", json={"email": email}).status_code == 201

    resp = client.post("/users", json={"email": email.upper()})
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "CONFLICT"


def test_register_invalid_email():
    resp = client.post("/users", json={"email": "not-an-email"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_get_me():
    user = register("client")
    resp = client.get("/users/me", headers=auth(user))
    assert resp.status_code == 200
    assert resp.json()["user_id"] == user["user_id"]


# =============================================================================
# SPECIALIST PROFILE
# =============================================================================


def test_specialist_profile_defaults_to_empty_card():
    specialist = register("specialist")
    resp = client.get("/specialists/me/profile", headers=auth(specialist))

    assert resp.status_code == 200
    body = resp.json()
    assert body["user_id"] == specialist["user_id"]
    assert body["full_name"] == "Olga Smirnova"
    assert body["headline"] is None
    assert body["badges"] == []


def test_update_specialist_profile_is_partial():
    specialist = register("specialist")
    headers = auth(specialist)

    resp = client.put(
        "/specialists/me/profile",
        json={
            "headline": "Sports nutritionist",
            "badges": "Sports, Weight loss;\nPregnancy",
            "about": "10 years of practice",
        },
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["badges"] == ["Sports", "Weight loss", "Pregnancy"]

    resp = client.put("/specialists/me/profile", json={"contacts": "@olga"}, headers=headers)
    body = resp.json()
    assert body["contacts"] == "@olga"
    assert body["headline"] == "Sports nutritionist"
    assert body["about"] == "10 years of practice"

    resp = client.put("/specialists/me/profile", json={"about": "   "}, headers=headers)
    assert resp.json()["about"] is None


def test_specialist_profile_requires_specialist_role():
    client_user = register("client")
    resp = client.get("/specialists/me/profile", headers=auth(client_user))
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "FORBIDDEN"


def test_public_specialist_card():
    specialist = register("specialist")
    client.put("/specialists/me/profile", json={"headline": "Dietitian"}, headers=auth(specialist))
    viewer = register("client")

    resp = client.get(f"/specialists/{specialist['user_id']}", headers=auth(viewer))
    assert resp.status_code == 200
    assert resp.json()["headline"] == "Dietitian"

    resp = client.get(f"/specialists/{viewer['user_id']}", headers=auth(viewer))
    assert resp.status_code == 404


# =============================================================================
# CLIENT PROFILE AND SPECIALIST CHOICE
# =============================================================================


def test_client_profile_roundtrip():
    client_user = register("client")
    headers = auth(client_user)

    resp = client.get("/clients/me/profile", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["main_goal"] is None

    client.put("/clients/me/profile", json={"main_goal": "Lose 5 kg"}, headers=headers)
    resp = client.put(
        "/clients/me/profile",
        json={"allergies": "peanuts", "monthly_budget": 300},
        headers=headers,
    )
    body = resp.json()
    assert body["main_goal"] == "Lose 5 kg"
    assert body["allergies"] == "peanuts"
    assert body["monthly_budget"] == 300.0


def test_client_profile_rejects_negative_budget():
    client_user = register("client")
    resp = client.put(
        "/clients/me/profile", json={"monthly_budget": -1}, headers=auth(client_user)
    )
    assert resp.status_code == 400


def test_select_specialist_links_and_flags_directory():
    chosen = register("specialist")
    other = register("specialist", profile_type="athlete")
    client_user = register("client")
    headers = auth(client_user)

    resp = client.put(f"/clients/me/specialist/{chosen['user_id']}", headers=headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["selected_specialist_id"] == chosen["user_id"]

    directory = {row["user_id"]: row for row in client.get("/specialists", headers=headers).json()}
    assert directory[chosen["user_id"]]["is_linked"] is True
    assert directory[chosen["user_id"]]["is_selected"] is True
    assert directory[other["user_id"]]["is_linked"] is False

    mine = client.get("/clients/me/specialists", headers=headers).json()
    assert [row["user_id"] for row in mine] == [chosen["user_id"]]


def test_select_unknown_specialist():
    client_user = register("client")
    another_client = register("client")
    resp = client.put(
        f"/clients/me/specialist/{another_client['user_id']}", headers=auth(client_user)
    )
    assert resp.status_code == 404


def test_specialist_directory_is_for_clients():
    specialist = register("specialist")
    resp = client.get("/specialists", headers=auth(specialist))
    assert resp.status_code == 403


# =============================================================================
# SPECIALIST VIEW OF CLIENTS
# =============================================================================


def test_link_and_list_clients():
    specialist = register("specialist")
    client_user = register("client")
    client.put("/clients/me/profile", json={"main_goal": "Gain muscle"}, headers=auth(client_user))

    link_body = link(specialist, client_user)
    assert link_body["status"] == "active"

    # linking twice keeps a single link
    link(specialist, client_user)

    rows = client.get("/clients", headers=auth(specialist)).json()
    assert len(rows) == 1
    assert rows[0]["user_id"] == client_user["user_id"]
    assert rows[0]["main_goal"] == "Gain muscle"
    assert rows[0]["link_status"] == "active"


def test_link_requires_client_account():
    specialist = register("specialist")
    colleague = register("specialist", profile_type="athlete")
    resp = client.post(f"/clients/{colleague['user_id']}/link", headers=auth(specialist))
    assert resp.status_code == 404


def test_client_detail_requires_link():
    specialist, client_user = linked_pair()
    stranger = register("specialist", profile_type="athlete")

    resp = client.get(f"/clients/{client_user['user_id']}", headers=auth(specialist))
    assert resp.status_code == 200
    body = resp.json()
    assert body["user"]["email"] == client_user["email"]
    assert body["link_status"] == "active"

    resp = client.get(f"/clients/{client_user['user_id']}", headers=auth(stranger))
    assert resp.status_code == 403
    assert resp.json()["error"]["message"] == "Client is not linked to this specialist"


# =============================================================================
# FOOD RULES
# =============================================================================


def test_food_rules_flow():
    specialist, client_user = linked_pair()
    path = f"/clients/{client_user['user_id']}/food-rules"

    assert client.get(path, headers=auth(specialist)).json() is None
    assert client.get("/clients/me/food-rules", headers=auth(client_user)).json() is None

    resp = client.put(
        path,
        json={
            "allowed_products": ["Buckwheat", " buckwheat ", "Chicken", ""],
            "banned_products": ["Sugar"],
            "notes": "Two litres of water a day",
        },
        headers=auth(specialist),
    )
    assert resp.status_code == 200, resp.text
    rules = resp.json()
    assert rules["allowed_products"] == ["Buckwheat", "Chicken"]
    assert rules["specialist_id"] == specialist["user_id"]

    # a second PUT replaces the rules instead of adding a row
    resp = client.put(path, json={"banned_products": ["Sugar", "Alcohol"]}, headers=auth(specialist))
    assert resp.json()["rules_id"] == rules["rules_id"]
    assert resp.json()["allowed_products"] == []

    mine = client.get("/clients/me/food-rules", headers=auth(client_user)).json()
    assert mine["banned_products"] == ["Sugar", "Alcohol"]


def test_food_rules_require_link():
    specialist = register("specialist")
    client_user = register("client")
    resp = client.put(
        f"/clients/{client_user['user_id']}/food-rules",
        json={"allowed_products": ["rice"]},
        headers=auth(specialist),
    )
    assert resp.status_code == 403
