"""Tests for the topic API."""
from fastapi.testclient import TestClient


class TestTopicReads:

    def test_search_by_area(self, client: TestClient, area_hierarchy):
        response = client.get("/topic/", params={"areaId": area_hierarchy["algebra"].id})
        assert response.status_code == 200
        topics = response.json()["topics"]
        assert [t["topicName"] for t in topics] == ["Linear Equations", "Polynomials"]
        assert topics[0]["areaId"] == area_hierarchy["algebra"].id

    def test_search_by_name_prefix(self, client: TestClient, area_hierarchy):
        response = client.get("/topic/", params={"topicName": "poly"})
        assert [t["topicId"] for t in response.json()["topics"]] == [area_hierarchy["polynomials"].id]

    def test_get_topic_with_path(self, client: TestClient, area_hierarchy):
        linear = area_hierarchy["linear"]
        response = client.get(f"/topic/{linear.id}")
        assert response.status_code == 200
        assert response.json() == {
            "areaId": area_hierarchy["algebra"].id,
            "topicId": linear.id,
            "topicName": "Linear Equations",
            "path": ["Mathematics", "Algebra"],
        }

    def test_get_missing_topic(self, client: TestClient, area_hierarchy):
        response = client.get("/topic/9999")
        assert response.status_code == 404
        detail = response.json()["detail"]
        assert detail["error"] == "TopicNotFoundError"
        assert detail["details"] == {"field": "topicId", "bad_value": 9999}


class TestTopicWrites:

    def test_create_topic(self, client: TestClient, area_hierarchy):
        response = client.post(
            "/topic/",
            json={"areaId": area_hierarchy["geometry"].id, "topicName": "Triangles"}
        )
        assert response.status_code == 201
        topic_id = response.json()["topicId"]

        response = client.get(f"/topic/{topic_id}")
        assert response.json()["topicName"] == "Triangles"

    def test_create_topic_empty_name(self, client: TestClient, area_hierarchy):
        response = client.post("/topic/", json={"areaId": area_hierarchy["geometry"].id, "topicName": "   "})
        assert response.status_code == 422

    def test_create_topic_named_like_sibling_area(self, client: TestClient, area_hierarchy):
        response = client.post(
            "/topic/",
            json={"areaId": area_hierarchy["math"].id, "topicName": "Algebra"}
        )
        assert response.status_code == 409
        details = response.json()["detail"]["details"]
        assert details["field"] == "topicName"
        assert details["existing_child"] == {"type": "area", "id": area_hierarchy["algebra"].id}

    def test_create_duplicate_topic(self, client: TestClient, area_hierarchy):
        response = client.post(
            "/topic/",
            json={"areaId": area_hierarchy["algebra"].id, "topicName": "Polynomials"}
        )
        assert response.status_code == 409
        assert response.json()["detail"]["details"]["existing_child"]["type"] == "topic"

    def test_create_topic_in_missing_area(self, client: TestClient, area_hierarchy):
        response = client.post("/topic/", json={"areaId": 9999, "topicName": "Orphan"})
        assert response.status_code == 404
        assert response.json()["detail"]["details"]["field"] == "areaId"

    def test_update_topic(self, client: TestClient, area_hierarchy):
        topic_id = area_hierarchy["linear"].id
        response = client.put(
            f"/topic/{topic_id}",
            json={"areaId": area_hierarchy["geometry"].id, "topicName": "Lines"}
        )
        assert response.status_code == 200

        response = client.get(f"/topic/{topic_id}")
        assert response.json()["path"] == ["Mathematics", "Geometry"]

    def test_update_missing_topic(self, client: TestClient, area_hierarchy):
        response = client.put("/topic/9999", json={"areaId": area_hierarchy["algebra"].id, "topicName": "Lines"})
        assert response.status_code == 404

    def test_delete_topic(self, client: TestClient, area_hierarchy):
        topic_id = area_hierarchy["linear"].id
        response = client.delete(f"/topic/{topic_id}")
        assert response.status_code == 204

        response = client.get(f"/topic/{topic_id}")
        assert response.status_code == 404

    def test_delete_topics_then_area(self, client: TestClient, area_hierarchy):
        algebra_id = area_hierarchy["algebra"].id
        assert client.delete(f"/knowledgearea/{algebra_id}").status_code == 405

        client.delete(f"/topic/{area_hierarchy['linear'].id}")
        client.delete(f"/topic/{area_hierarchy['polynomials'].id}")
        assert client.delete(f"/knowledgearea/{algebra_id}").status_code == 204
