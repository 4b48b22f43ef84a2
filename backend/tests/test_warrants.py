"""Tests for the warrant endpoints."""
import uuid

import pytest
from httpx import AsyncClient

from cad_api.features import Feature
from cad_api.models.court import WarrantStatus
from cad_api.permissions import Permission

pytestmark = pytest.mark.asyncio


@pytest.fixture
async def judge(factory):
    return await factory.user(is_supervisor=True)


@pytest.fixture
async def suspect(factory):
    owner = await factory.user()
    return await factory.citizen(owner, name="Trevor", surname="Philips")


class TestManageWarrants:

    async def test_create_warrant(self, client: AsyncClient, factory, judge, suspect):
        response = await client.post(
            "/api/v1/warrants",
            json={"citizenId": str(suspect.id), "description": "Grand theft auto"},
            headers=factory.auth_headers(judge),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "ACTIVE"
        assert data["description"] == "Grand theft auto"
        assert data["citizen"]["surname"] == "Philips"
        assert data["officer"] is None

    async def test_create_with_officer(self, client: AsyncClient, factory, judge, suspect):
        officer_user = await factory.user(is_leo=True)
        officer = await factory.officer(officer_user, await factory.citizen(officer_user))

        response = await client.post(
            "/api/v1/warrants",
            json={
                "citizenId": str(suspect.id),
                "description": "Assault",
                "officerId": str(officer.id),
                "status": "INACTIVE",
            },
            headers=factory.auth_headers(judge),
        )
        assert response.status_code == 201
        assert response.json()["officer"]["id"] == str(officer.id)
        assert response.json()["status"] == "INACTIVE"

    async def test_script_is_stripped_from_description(self, client: AsyncClient, factory, judge, suspect):
        response = await client.post(
            "/api/v1/warrants",
            json={"citizenId": str(suspect.id), "description": "<b>Wanted</b><script>alert(1)</script>"},
            headers=factory.auth_headers(judge),
        )
        assert response.json()["description"] == "<b>Wanted</b>"

    async def test_unknown_citizen(self, client: AsyncClient, factory, judge):
        response = await client.post(
            "/api/v1/warrants",
            json={"citizenId": str(uuid.uuid4()), "description": "Fraud"},
            headers=factory.auth_headers(judge),
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "citizenNotFound"

    async def test_unknown_officer(self, client: AsyncClient, factory, judge, suspect):
        response = await client.post(
            "/api/v1/warrants",
            json={"citizenId": str(suspect.id), "description": "Fraud", "officerId": str(uuid.uuid4())},
            headers=factory.auth_headers(judge),
        )
        assert response.status_code == 400
        assert response.json()["errors"] == {"officerId": "officerNotFound"}

    async def test_plain_user_cannot_create(self, client: AsyncClient, factory, suspect):
        user = await factory.user()

        response = await client.post(
            "/api/v1/warrants",
            json={"citizenId": str(suspect.id), "description": "Fraud"},
            headers=factory.auth_headers(user),
        )
        assert response.status_code == 403

    async def test_courthouse_permission_allows_create(self, client: AsyncClient, factory, suspect):
        clerk = await factory.user(permissions=[Permission.MANAGE_COURTHOUSE_WARRANTS])

        response = await client.post(
            "/api/v1/warrants",
            json={"citizenId": str(suspect.id), "description": "Fraud"},
            headers=factory.auth_headers(clerk),
        )
        assert response.status_code == 201

    async def test_assigned_permissions_override_supervisor_flag(self, client: AsyncClient, factory, suspect):
        user = await factory.user(permissions=[Permission.LEO], is_supervisor=True)

        response = await client.post(
            "/api/v1/warrants",
            json={"citizenId": str(suspect.id), "description": "Fraud"},
            headers=factory.auth_headers(user),
        )
        assert response.status_code == 403

    async def test_update_warrant(self, client: AsyncClient, factory, judge, suspect):
        warrant = await factory.warrant(suspect)

        response = await client.put(
            f"/api/v1/warrants/{warrant.id}",
            json={"citizenId": str(suspect.id), "description": "Served", "status": "INACTIVE"},
            headers=factory.auth_headers(judge),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "INACTIVE"
        assert response.json()["description"] == "Served"

    async def test_update_missing_warrant(self, client: AsyncClient, factory, judge, suspect):
        response = await client.put(
            f"/api/v1/warrants/{uuid.uuid4()}",
            json={"citizenId": str(suspect.id), "description": "Served"},
            headers=factory.auth_headers(judge),
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "notFound"

    async def test_delete_warrant(self, client: AsyncClient, factory, judge, suspect):
        warrant = await factory.warrant(suspect)
        headers = factory.auth_headers(judge)

        response = await client.delete(f"/api/v1/warrants/{warrant.id}", headers=headers)
        assert response.status_code == 200
        assert response.json() is True

        response = await client.delete(f"/api/v1/warrants/{warrant.id}", headers=headers)
        assert response.status_code == 404


class TestListWarrants:

    async def test_list_all(self, client: AsyncClient, factory, suspect):
        user = await factory.user()
        await factory.warrant(suspect)
        await factory.warrant(suspect, status=WarrantStatus.INACTIVE)

        response = await client.get("/api/v1/warrants", headers=factory.auth_headers(user))
        assert response.status_code == 200
        assert len(response.json()) == 2

    async def test_active_for_leo(self, client: AsyncClient, factory, suspect):
        leo = await factory.user(is_leo=True)
        active = await factory.warrant(suspect)
        await factory.warrant(suspect, status=WarrantStatus.INACTIVE)

        response = await client.get("/api/v1/warrants/active", headers=factory.auth_headers(leo))
        assert response.status_code == 200
        assert [w["id"] for w in response.json()] == [str(active.id)]

    async def test_active_requires_leo(self, client: AsyncClient, factory):
        user = await factory.user()

        response = await client.get("/api/v1/warrants/active", headers=factory.auth_headers(user))
        assert response.status_code == 403

    async def test_active_requires_feature(self, client: AsyncClient, factory):
        await factory.cad(features={Feature.ACTIVE_WARRANTS: False})
        leo = await factory.user(is_leo=True)

        response = await client.get("/api/v1/warrants/active", headers=factory.auth_headers(leo))
        assert response.status_code == 403
        assert response.json()["detail"] == "featureNotEnabled"
