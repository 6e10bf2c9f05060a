"""
Tests for Curriculum API Endpoints
"""

from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from wattleos.api.dependencies import get_curriculum_service
from wattleos.core.models import CurriculumLevel
from wattleos.main import app


@pytest.fixture
async def client(curriculum_service):
    """Create test client with the service backed by in-memory repositories."""

    async def override_get_curriculum_service():
        return curriculum_service

    app.dependency_overrides[get_curriculum_service] = override_get_curriculum_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def headers(ctx):
    return {"X-Tenant-ID": str(ctx.tenant_id), "X-User-ID": str(ctx.acting_user_id)}


@pytest.fixture
def sample_tree(add_node):
    """Area > strand > two outcomes, plus one hidden outcome."""
    area = add_node("Mathematics", level=CurriculumLevel.AREA)
    strand = add_node("Numeration", level=CurriculumLevel.STRAND, parent=area)
    first = add_node("Number Rods", parent=strand, sequence_order=0)
    second = add_node("Spindle Boxes", parent=strand, sequence_order=1)
    hidden = add_node("Teen Boards", parent=strand, sequence_order=2, is_hidden=True)
    return {"area": area, "strand": strand, "first": first, "second": second, "hidden": hidden}


class TestInstanceEndpoints:
    """Tests for /api/v1/curriculum/instances."""

    async def test_list_instances(self, client, headers, instance):
        response = await client.get("/api/v1/curriculum/instances", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["id"] == str(instance.id)
        assert data[0]["name"] == "Montessori 3-6"

    async def test_list_instances_other_tenant(self, client, instance):
        headers = {"X-Tenant-ID": str(uuid4()), "X-User-ID": str(uuid4())}

        response = await client.get("/api/v1/curriculum/instances", headers=headers)

        assert response.status_code == 200
        assert response.json() == []

    async def test_create_instance(self, client, headers):
        response = await client.post(
            "/api/v1/curriculum/instances",
            headers=headers,
            json={"name": "Cosmic Education", "description": "6-12"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Cosmic Education"
        assert data["source_template_id"] is None
        assert data["is_active"] is True

    async def test_create_instance_blank_name(self, client, headers):
        response = await client.post(
            "/api/v1/curriculum/instances", headers=headers, json={"name": "   "}
        )

        assert response.status_code == 422

    async def test_delete_instance(self, client, headers, instance):
        response = await client.delete(
            f"/api/v1/curriculum/instances/{instance.id}", headers=headers
        )

        assert response.status_code == 204
        assert instance.is_deleted

    async def test_delete_missing_instance(self, client, headers):
        response = await client.delete(f"/api/v1/curriculum/instances/{uuid4()}", headers=headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Curriculum not found"

    async def test_missing_tenant_header(self, client):
        response = await client.get("/api/v1/curriculum/instances")

        assert response.status_code == 422

    async def test_backend_failure_is_500(self, client, headers, store):
        store.fail_reads = True

        response = await client.get("/api/v1/curriculum/instances", headers=headers)

        assert response.status_code == 500


class TestTemplateEndpoints:
    """Tests for /api/v1/curriculum/templates."""

    @pytest.fixture
    def template(self, add_template):
        template, _ = add_template(
            "Montessori 3-6",
            [
                ("area", None, CurriculumLevel.AREA, "Practical Life"),
                ("strand", "area", CurriculumLevel.STRAND, "Care of Self"),
                ("outcome", "strand", CurriculumLevel.OUTCOME, "Hand Washing"),
            ],
        )
        return template

    async def test_list_templates(self, client, template, add_template):
        add_template("Retired", [], is_active=False)

        response = await client.get("/api/v1/curriculum/templates")

        assert response.status_code == 200
        data = response.json()
        assert [t["name"] for t in data] == ["Montessori 3-6"]
        assert data[0]["framework"] == "montessori"
        assert data[0]["version"] == 1

    async def test_fork(self, client, headers, ctx, template):
        response = await client.post(
            f"/api/v1/curriculum/templates/{template.id}/fork",
            headers=headers,
            json={"name": "Room 3"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Room 3"
        assert data["source_template_id"] == str(template.id)

        tree = await client.get(
            f"/api/v1/curriculum/instances/{data['id']}/tree", headers=headers
        )
        roots = tree.json()
        assert roots[0]["title"] == "Practical Life"
        assert roots[0]["children"][0]["children"][0]["title"] == "Hand Washing"

    async def test_fork_unknown_template(self, client, headers):
        response = await client.post(
            f"/api/v1/curriculum/templates/{uuid4()}/fork",
            headers=headers,
            json={"name": "Room 3"},
        )

        assert response.status_code == 404

    async def test_fork_requires_name(self, client, headers, template):
        response = await client.post(
            f"/api/v1/curriculum/templates/{template.id}/fork", headers=headers, json={}
        )

        assert response.status_code == 422


class TestTreeEndpoint:
    """Tests for GET /api/v1/curriculum/instances/{id}/tree."""

    async def test_nested_tree(self, client, headers, instance, sample_tree):
        response = await client.get(
            f"/api/v1/curriculum/instances/{instance.id}/tree", headers=headers
        )

        assert response.status_code == 200
        roots = response.json()
        assert len(roots) == 1
        assert roots[0]["title"] == "Mathematics"
        assert roots[0]["level"] == "area"
        strand = roots[0]["children"][0]
        assert [c["title"] for c in strand["children"]] == ["Number Rods", "Spindle Boxes"]
        assert strand["children"][0]["children"] == []

    async def test_include_hidden(self, client, headers, instance, sample_tree):
        response = await client.get(
            f"/api/v1/curriculum/instances/{instance.id}/tree",
            headers=headers,
            params={"include_hidden": "true"},
        )

        strand = response.json()[0]["children"][0]
        titles = [c["title"] for c in strand["children"]]
        assert titles == ["Number Rods", "Spindle Boxes", "Teen Boards"]
        assert strand["children"][2]["is_hidden"] is True


class TestNodeEndpoints:
    async def test_create_node(self, client, headers, instance, sample_tree):
        response = await client.post(
            f"/api/v1/curriculum/instances/{instance.id}/nodes",
            headers=headers,
            json={
                "parent_id": str(sample_tree["strand"].id),
                "level": "outcome",
                "title": "Hundred Board",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["parent_id"] == str(sample_tree["strand"].id)
        assert data["sequence_order"] == 3

    async def test_create_node_invalid_level(self, client, headers, instance):
        response = await client.post(
            f"/api/v1/curriculum/instances/{instance.id}/nodes",
            headers=headers,
            json={"level": "chapter", "title": "Anything"},
        )

        assert response.status_code == 422

    async def test_create_node_unknown_parent(self, client, headers, instance):
        response = await client.post(
            f"/api/v1/curriculum/instances/{instance.id}/nodes",
            headers=headers,
            json={"parent_id": str(uuid4()), "level": "strand", "title": "Numbers"},
        )

        assert response.status_code == 404

    async def test_update_node(self, client, headers, sample_tree):
        node = sample_tree["first"]

        response = await client.patch(
            f"/api/v1/curriculum/nodes/{node.id}",
            headers=headers,
            json={"title": "Red Rods"},
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Red Rods"
        assert node.title == "Red Rods"

    async def test_toggle_visibility(self, client, headers, sample_tree):
        node = sample_tree["hidden"]

        response = await client.post(
            f"/api/v1/curriculum/nodes/{node.id}/toggle-visibility", headers=headers
        )

        assert response.status_code == 200
        assert response.json()["is_hidden"] is False

    async def test_reorder(self, client, headers, sample_tree):
        first, second = sample_tree["first"], sample_tree["second"]

        response = await client.post(
            f"/api/v1/curriculum/nodes/{first.id}/reorder",
            headers=headers,
            json={"direction": "down"},
        )

        assert response.status_code == 204
        assert first.sequence_order > second.sequence_order

    async def test_reorder_bad_direction(self, client, headers, sample_tree):
        response = await client.post(
            f"/api/v1/curriculum/nodes/{sample_tree['first'].id}/reorder",
            headers=headers,
            json={"direction": "left"},
        )

        assert response.status_code == 422

    async def test_delete_node_cascades(self, client, headers, instance, sample_tree):
        response = await client.delete(
            f"/api/v1/curriculum/nodes/{sample_tree['strand'].id}", headers=headers
        )

        assert response.status_code == 204
        assert sample_tree["first"].is_deleted
        assert not sample_tree["area"].is_deleted

        tree = await client.get(
            f"/api/v1/curriculum/instances/{instance.id}/tree", headers=headers
        )
        assert tree.json()[0]["children"] == []

    async def test_search(self, client, headers, instance, sample_tree):
        response = await client.get(
            f"/api/v1/curriculum/instances/{instance.id}/search",
            headers=headers,
            params={"q": "rods"},
        )

        assert response.status_code == 200
        assert [n["title"] for n in response.json()] == ["Number Rods"]

    async def test_search_requires_query(self, client, headers, instance):
        response = await client.get(
            f"/api/v1/curriculum/instances/{instance.id}/search", headers=headers
        )

        assert response.status_code == 422
