"""Tests for the /courses/{id}/students endpoints."""

import pytest
from fastapi.testclient import TestClient

from course_service.config import Settings
from course_service.main import create_app

from .conftest import PASSWORD, USERNAME, basic_auth_header

NEW_STUDENT = {"firstName": "Ann", "lastName": "Lee"}
IMAGE = b"\xff\xd8\xff\xe0" + bytes(range(256))


@pytest.fixture
def small_image_client(data_service):
    app = create_app(data_service=data_service, settings=Settings(max_image_size=10))
    return TestClient(app, headers=basic_auth_header(USERNAME, PASSWORD))


class TestListStudents:
    """Tests for GET /courses/{id}/students."""

    def test_list(self, client):
        response = client.get("/courses/1/students")
        assert response.status_code == 200
        assert response.json() == [
            {"id": 1, "firstName": "John", "lastName": "Doe", "identificationImageFileName": None},
            {"id": 2, "firstName": "Jane", "lastName": "Doe", "identificationImageFileName": None},
        ]

    def test_default_take_is_five(self, client):
        for i in range(6):
            client.post("/courses/1/students", json={"firstName": f"S{i}", "lastName": "Lee"})
        assert len(client.get("/courses/1/students").json()) == 5

    def test_search_and_paging(self, client):
        assert [s["id"] for s in client.get("/courses/2/students", params={"search": "KAREN"}).json()] == [4]
        assert [s["id"] for s in client.get("/courses/2/students", params={"skip": 1, "take": 1}).json()] == [4]
        assert client.get("/courses/2/students", params={"search": "nobody"}).json() == []

    def test_missing_course(self, client):
        assert client.get("/courses/1000/students").status_code == 404


class TestGetStudent:
    """Tests for GET /courses/{id}/students/{id}."""

    def test_get_existing(self, client):
        response = client.get("/courses/2/students/3")
        assert response.status_code == 200
        assert response.json()["firstName"] == "Ray"

    def test_student_of_another_course(self, client):
        assert client.get("/courses/1/students/3").status_code == 404

    @pytest.mark.parametrize("path", [
        "/courses/abc/students",
        "/courses/1/students/abc",
        "/courses/1/students/abc/identificationimage",
    ])
    def test_non_integer_ids_do_not_match_a_route(self, client, path):
        response = client.get(path)
        assert response.status_code == 404
        assert "errors" not in response.json()

    def test_missing_course(self, client):
        response = client.get("/courses/1000/students/1")
        assert response.status_code == 404
        assert response.json()["message"] == "Course 1000 or Student 1 not found"


class TestAddStudent:
    """Tests for POST /courses/{id}/students."""

    def test_add_valid(self, client):
        response = client.post("/courses/2/students", json=NEW_STUDENT)
        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 7
        assert data["firstName"] == "Ann"
        assert response.headers["Location"] == "http://testserver/courses/2/students/7"
        assert client.get("/courses/2/students/7").json() == data

    def test_ids_are_unique_across_courses(self, client):
        first = client.post("/courses/1/students", json=NEW_STUDENT).json()["id"]
        second = client.post("/courses/3/students", json=NEW_STUDENT).json()["id"]
        assert (first, second) == (7, 8)

    def test_missing_course(self, client):
        assert client.post("/courses/1000/students", json=NEW_STUDENT).status_code == 404

    def test_names_are_required(self, client, data_service):
        response = client.post("/courses/1/students", json={"firstName": " "})
        assert response.status_code == 422
        assert response.json()["errors"] == {
            "FirstName": ["'FirstName' is required"],
            "LastName": ["'LastName' is required"],
        }
        assert data_service.get_student_count(1) == 2


class TestUpdateStudent:
    """Tests for PUT /courses/{id}/students/{id}."""

    def test_update_valid(self, client):
        response = client.put("/courses/1/students/2", json={"firstName": "Janet", "lastName": "Roe"})
        assert response.status_code == 204
        student = client.get("/courses/1/students/2").json()
        assert (student["firstName"], student["lastName"]) == ("Janet", "Roe")

    def test_update_missing(self, client):
        assert client.put("/courses/1/students/1000", json=NEW_STUDENT).status_code == 404

    def test_update_invalid(self, client):
        response = client.put("/courses/1/students/2", json={"firstName": "x" * 101, "lastName": "Roe"})
        assert response.status_code == 422
        assert response.json()["errors"] == {"FirstName": ["Max length of 'FirstName' is 100"]}


class TestDeleteStudent:
    """Tests for DELETE /courses/{id}/students/{id}."""

    def test_delete_then_delete_again(self, client):
        assert client.delete("/courses/1/students/2").status_code == 204
        assert client.get("/courses/1/students/2").status_code == 404
        assert client.delete("/courses/1/students/2").status_code == 404


class TestIdentificationImage:
    """Tests for /courses/{id}/students/{id}/identificationimage."""

    URL = "/courses/1/students/1/identificationimage"

    def test_set_then_get_round_trips(self, client):
        response = client.put(self.URL, files={"file": ("TestImage.jpg", IMAGE)})
        assert response.status_code == 204

        response = client.get(self.URL)
        assert response.status_code == 200
        assert response.content == IMAGE
        assert response.headers["content-disposition"] == 'attachment; filename="TestImage.jpg"'
        assert client.get("/courses/1/students/1").json()["identificationImageFileName"] == "TestImage.jpg"

    def test_set_replaces_existing_image(self, client):
        client.put(self.URL, files={"file": ("first.png", b"first")})
        client.put(self.URL, files={"file": ("second.png", b"second")})
        response = client.get(self.URL)
        assert response.content == b"second"
        assert "second.png" in response.headers["content-disposition"]

    def test_non_ascii_file_name(self, client):
        client.put(self.URL, files={"file": ("carné.jpg", IMAGE)})
        response = client.get(self.URL)
        assert response.headers["content-disposition"] == "attachment; filename*=utf-8''carn%C3%A9.jpg"

    def test_delete_clears_image(self, client, data_service):
        client.put(self.URL, files={"file": ("TestImage.jpg", IMAGE)})
        assert client.delete(self.URL).status_code == 204

        student = data_service.get_student_in_course(1, 1)
        assert student.identification_image is None
        assert student.identification_image_file_name is None
        assert client.get(self.URL).status_code == 404

    def test_delete_without_image_succeeds(self, client):
        assert client.delete(self.URL).status_code == 204

    def test_get_without_image(self, client):
        assert client.get(self.URL).status_code == 404

    @pytest.mark.parametrize("url", [
        "/courses/1000/students/1000/identificationimage",
        "/courses/2/students/1/identificationimage",
    ])
    def test_missing_course_or_student(self, client, url):
        assert client.put(url, files={"file": ("TestImage.jpg", IMAGE)}).status_code == 404
        assert client.delete(url).status_code == 404
        assert client.get(url).status_code == 404

    def test_missing_file(self, client):
        assert client.put(self.URL).status_code == 400

    def test_empty_file(self, client):
        assert client.put(self.URL, files={"file": ("empty.jpg", b"")}).status_code == 400

    def test_existence_checked_before_size(self, client):
        url = "/courses/1000/students/1/identificationimage"
        assert client.put(url, files={"file": ("empty.jpg", b"")}).status_code == 404

    def test_size_limit(self, small_image_client, data_service):
        assert small_image_client.put(self.URL, files={"file": ("big.jpg", b"x" * 11)}).status_code == 400
        assert data_service.get_student_in_course(1, 1).identification_image is None

        assert small_image_client.put(self.URL, files={"file": ("ok.jpg", b"x" * 10)}).status_code == 204
        assert data_service.get_student_in_course(1, 1).identification_image == b"x" * 10
