"""
API route tests - verifies endpoints and record file contents
"""
import pytest
from pathlib import Path
from fastapi.testclient import TestClient

from clinic.main import create_app
from clinic.database.store import RecordStore


@pytest.fixture
def client(store):
    """Test client over a store in a temporary data directory"""
    return TestClient(create_app(store))


def register(client, registered_id="N123", name="Alice"):
    return client.post("/api/v1/patients/register", json={
        "name": name,
        "registered_id_number": registered_id,
        "password": "password1",
        "confirm_password": "password1",
        "medical_history": "None",
    })


def test_root(client):
    """Test root endpoint"""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_register_patient(client, temp_data_dir):
    """Test registering a patient and verify the record file"""
    response = register(client)

    assert response.status_code == 200
    data = response.json()
    assert data["system_id"] == "pat101"
    assert data["registered_id_number"] == "N123"
    assert "hashed_password" not in data

    # Verify file contents
    patient_file = Path(temp_data_dir) / "patients.txt"
    content = patient_file.read_text(encoding="utf-8")
    assert content.startswith("pat101,N123,Alice,")
    assert "password1" not in content


def test_register_duplicate(client):
    register(client)
    response = register(client, name="Someone Else")
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


def test_register_validation(client):
    """Missing required field"""
    response = client.post("/api/v1/patients/register", json={"name": "Bob"})
    assert response.status_code == 422


def test_patient_login(client):
    register(client)

    response = client.post("/api/v1/patients/login", json={"username": "N123", "password": "password1"})
    assert response.status_code == 200
    assert response.json()["name"] == "Alice"

    response = client.post("/api/v1/patients/login", json={"username": "N123", "password": "bad"})
    assert response.status_code == 401


def test_get_and_update_patient(client):
    register(client)

    response = client.patch("/api/v1/patients/pat101", json={"medical_history": "Asthma, mild"})
    assert response.status_code == 200
    assert response.json()["medical_history"] == "Asthma, mild"
    assert response.json()["name"] == "Alice"

    response = client.get("/api/v1/patients/pat101")
    assert response.json()["medical_history"] == "Asthma, mild"


def test_get_patient_not_found(client):
    assert client.get("/api/v1/patients/pat999").status_code == 404
    assert client.patch("/api/v1/patients/pat999", json={"name": "X"}).status_code == 404


def test_list_doctors(client):
    response = client.get("/api/v1/doctors")
    assert response.status_code == 200
    doctors = response.json()
    assert len(doctors) == 5
    assert all("hashed_password" not in d for d in doctors)

    response = client.get("/api/v1/doctors", params={"specialization": "Nutritionist"})
    assert [d["name"] for d in response.json()] == ["Sarah", "Mariam"]

    response = client.get("/api/v1/doctors/specializations")
    assert response.json() == ["General Medicine", "Nutritionist", "Heart Doctor"]


def test_doctor_login_and_lookup(client):
    response = client.post("/api/v1/doctors/login", json={"username": "doc004", "password": "doctorpass"})
    assert response.status_code == 200
    assert response.json()["specialization"] == "Heart Doctor"

    assert client.post("/api/v1/doctors/login", json={"username": "doc004", "password": "x"}).status_code == 401
    assert client.get("/api/v1/doctors/doc999").status_code == 404


def test_add_doctor(client):
    response = client.post("/api/v1/doctors", json={
        "name": "Omar",
        "password": "omarpass1",
        "specialization": "Dentist",
    })
    assert response.status_code == 200
    assert response.json()["system_id"] == "doc006"

    response = client.post("/api/v1/doctors/login", json={"username": "doc006", "password": "omarpass1"})
    assert response.status_code == 200


def test_booking_flow(client):
    """Book, conflict, cancel, rebook"""
    register(client)
    register(client, registered_id="N456", name="Bob")
    booking = {"patient_system_id": "pat101", "doctor_system_id": "doc001", "date": "2030-07-01", "time": "10:00"}

    response = client.post("/api/v1/appointments", json=booking)
    assert response.status_code == 200
    appointment = response.json()
    assert appointment["appointment_id"] == "app1001"
    assert appointment["status"] == "Booked"

    # Same slot, different patient
    response = client.post("/api/v1/appointments", json={**booking, "patient_system_id": "pat102"})
    assert response.status_code == 409

    slots = client.get("/api/v1/doctors/doc001/available-slots", params={"date": "2030-07-01"}).json()
    assert "10:00" not in slots

    response = client.post("/api/v1/appointments/app1001/cancel", json={"patient_system_id": "pat101"})
    assert response.status_code == 200
    assert response.json()["status"] == "Cancelled by User"

    # Cancelled record is still listed in the schedule
    schedule = client.get("/api/v1/doctors/doc001/schedule", params={"date": "2030-07-01"}).json()
    assert [a["appointment_id"] for a in schedule] == ["app1001"]

    response = client.post("/api/v1/appointments", json={**booking, "patient_system_id": "pat102"})
    assert response.status_code == 200
    assert response.json()["appointment_id"] == "app1002"


def test_booking_validation(client):
    register(client)
    response = client.post("/api/v1/appointments", json={
        "patient_system_id": "pat101", "doctor_system_id": "doc001", "date": "07/01/2030", "time": "10:00",
    })
    assert response.status_code == 422

    response = client.post("/api/v1/appointments", json={
        "patient_system_id": "pat999", "doctor_system_id": "doc001", "date": "2030-07-01", "time": "10:00",
    })
    assert response.status_code == 404


def test_status_update_and_patient_appointments(client):
    register(client)
    client.post("/api/v1/appointments", json={
        "patient_system_id": "pat101", "doctor_system_id": "doc002", "date": "2030-07-01", "time": "09:00",
    })

    response = client.patch("/api/v1/appointments/app1001/status", json={"status": "Confirmed", "doctor_system_id": "doc002"})
    assert response.status_code == 200
    assert response.json()["status"] == "Confirmed"

    response = client.patch("/api/v1/appointments/app1001/status", json={"status": "Whatever"})
    assert response.status_code == 400

    appointments = client.get("/api/v1/patients/pat101/appointments").json()
    assert [a["status"] for a in appointments] == ["Confirmed"]

    assert client.get("/api/v1/appointments/app1001").json()["doctor_system_id"] == "doc002"
    assert client.get("/api/v1/appointments/app9999").status_code == 404


def test_walk_in_and_clinic_cancel(client):
    response = client.post("/api/v1/appointments/walk-in", json={
        "doctor_system_id": "doc003", "date": "2030-07-01", "time": "14:00", "patient_name": "Walker",
    })
    assert response.status_code == 200
    appointment = response.json()
    assert appointment["status"] == "Booked (Walk-in)"

    patient = client.get(f"/api/v1/patients/{appointment['patient_system_id']}").json()
    assert patient["registered_id_number"].startswith("WALKIN-")

    response = client.post(f"/api/v1/appointments/{appointment['appointment_id']}/cancel", json={
        "by_clinic": True, "reason": "Clinic closed",
    })
    assert response.status_code == 200
    assert response.json()["status"] == "Cancelled by Clinic"
    assert response.json()["notes"].endswith("Reason: Clinic closed")


def test_doctor_report(client):
    register(client)
    client.post("/api/v1/appointments", json={
        "patient_system_id": "pat101", "doctor_system_id": "doc001", "date": "2030-07-01", "time": "09:00",
    })

    response = client.get("/api/v1/doctors/doc001/report", params={"report_type": "monthly", "date": "2030-07-15"})
    assert response.status_code == 200
    assert "Total appointments in July 2030: 1" in response.json()["content"]

    response = client.get("/api/v1/doctors/doc001/report", params={"report_type": "weekly"})
    assert response.status_code == 400


def test_store_is_shared_with_app(store):
    """The app serves the store it was built with"""
    app = create_app(store)
    assert app.state.store is store
    assert isinstance(app.state.store, RecordStore)


def test_upcoming_appointments_endpoint(client):
    """History lists every row, the upcoming view drops cancelled ones"""
    register(client)
    for time in ("09:00", "09:30"):
        client.post("/api/v1/appointments", json={
            "patient_system_id": "pat101", "doctor_system_id": "doc001", "date": "2030-07-01", "time": time,
        })
    client.post("/api/v1/appointments/app1001/cancel", json={"patient_system_id": "pat101"})

    history = client.get("/api/v1/patients/pat101/appointments").json()
    assert [a["appointment_id"] for a in history] == ["app1001", "app1002"]

    upcoming = client.get("/api/v1/patients/pat101/appointments/upcoming").json()
    assert [a["appointment_id"] for a in upcoming] == ["app1002"]

    assert client.get("/api/v1/patients/pat999/appointments/upcoming").status_code == 404


def test_module_app_uses_session_data_dir(session_data_dir):
    """Importing clinic.main builds its store outside the working directory"""
    from clinic.main import app

    if session_data_dir is None:
        pytest.skip("CLINIC_DATA_DIR was set by the environment")
    assert str(app.state.store.data_dir) == session_data_dir
