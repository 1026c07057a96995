"""Tests for gym CRUD and gym profile mapping endpoints."""

from uuid import uuid4

import pytest

from models import ExerciseProfileDB, GymDB, GymProfileMappingDB

PRESS_ID = uuid4()


@pytest.fixture
def sample_gym(db_session, test_user):
    gym = GymDB(user_id=test_user.id, name="Downtown")
    db_session.add(gym)
    db_session.commit()
    db_session.refresh(gym)
    return gym


@pytest.fixture
def press_profiles(db_session, test_user):
    profiles = [
        ExerciseProfileDB(user_id=test_user.id, exercise_id=PRESS_ID, name=name)
        for name in ("Machine", "Smith")
    ]
    db_session.add_all(profiles)
    db_session.commit()
    for profile in profiles:
        db_session.refresh(profile)
    return profiles


def test_create_gym(client):
    response = client.post(
        "/api/v1/gyms", json={"name": "Home", "latitude": 40.7, "longitude": -74.0}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Home"
    assert data["latitude"] == 40.7
    assert data["longitude"] == -74.0
    assert "id" in data


def test_create_gym_minimal(client):
    response = client.post("/api/v1/gyms", json={"name": "Home"})
    assert response.status_code == 201
    assert response.json()["latitude"] is None


def test_create_gym_empty_name(client):
    response = client.post("/api/v1/gyms", json={"name": ""})
    assert response.status_code == 422


def test_list_gyms(client, db_session, test_user, other_user):
    for name in ("First", "Second"):
        db_session.add(GymDB(user_id=test_user.id, name=name))
        db_session.commit()
    db_session.add(GymDB(user_id=other_user.id, name="Theirs"))
    db_session.commit()

    response = client.get("/api/v1/gyms")
    assert response.status_code == 200
    assert sorted(g["name"] for g in response.json()) == ["First", "Second"]


def test_update_gym(client, sample_gym):
    response = client.put(f"/api/v1/gyms/{sample_gym.id}", json={"name": "Uptown"})
    assert response.status_code == 200
    assert response.json()["name"] == "Uptown"
    assert response.json()["id"] == str(sample_gym.id)


def test_update_gym_not_found(client):
    response = client.put(f"/api/v1/gyms/{uuid4()}", json={"name": "Uptown"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Gym not found"


def test_update_gym_of_other_user(client, db_session, other_user):
    gym = GymDB(user_id=other_user.id, name="Theirs")
    db_session.add(gym)
    db_session.commit()

    response = client.put(f"/api/v1/gyms/{gym.id}", json={"name": "Mine now"})
    assert response.status_code == 404


def test_delete_gym(client, sample_gym):
    response = client.delete(f"/api/v1/gyms/{sample_gym.id}")
    assert response.status_code == 204

    response = client.get("/api/v1/gyms")
    assert response.json() == []


def test_delete_gym_not_found(client):
    response = client.delete(f"/api/v1/gyms/{uuid4()}")
    assert response.status_code == 404


def test_profile_mappings_empty(client, sample_gym):
    response = client.get(f"/api/v1/gyms/{sample_gym.id}/profile-mappings")
    assert response.status_code == 200
    assert response.json() == []


def test_profile_mappings_unknown_gym(client):
    response = client.get(f"/api/v1/gyms/{uuid4()}/profile-mappings")
    assert response.status_code == 404


def test_set_profile_mapping(client, sample_gym, press_profiles):
    machine = press_profiles[0]
    response = client.put(
        f"/api/v1/gyms/{sample_gym.id}/profile-mappings",
        json={"exercise_id": str(PRESS_ID), "profile_id": str(machine.id)},
    )
    assert response.status_code == 200
    assert response.json() == {
        "exercise_id": str(PRESS_ID),
        "profile_id": str(machine.id),
    }

    response = client.get(f"/api/v1/gyms/{sample_gym.id}/profile-mappings")
    assert response.json() == [
        {"exercise_id": str(PRESS_ID), "profile_id": str(machine.id)}
    ]


def test_set_profile_mapping_replaces_existing(
    client, db_session, sample_gym, press_profiles
):
    machine, smith = press_profiles
    url = f"/api/v1/gyms/{sample_gym.id}/profile-mappings"
    client.put(url, json={"exercise_id": str(PRESS_ID), "profile_id": str(machine.id)})
    response = client.put(
        url, json={"exercise_id": str(PRESS_ID), "profile_id": str(smith.id)}
    )
    assert response.status_code == 200

    mappings = db_session.query(GymProfileMappingDB).all()
    assert len(mappings) == 1
    assert mappings[0].profile_id == smith.id


def test_set_profile_mapping_wrong_exercise(client, sample_gym, press_profiles):
    response = client.put(
        f"/api/v1/gyms/{sample_gym.id}/profile-mappings",
        json={"exercise_id": str(uuid4()), "profile_id": str(press_profiles[0].id)},
    )
    assert response.status_code == 400


def test_delete_gym_removes_mappings(client, db_session, sample_gym, press_profiles):
    client.put(
        f"/api/v1/gyms/{sample_gym.id}/profile-mappings",
        json={"exercise_id": str(PRESS_ID), "profile_id": str(press_profiles[0].id)},
    )

    response = client.delete(f"/api/v1/gyms/{sample_gym.id}")
    assert response.status_code == 204
    assert db_session.query(GymProfileMappingDB).count() == 0
