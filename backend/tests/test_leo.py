"""Tests for the LEO endpoints and the officer dashboard."""
import uuid

import pytest
from httpx import AsyncClient

from cad_api.features import Feature
from cad_api.models.court import WarrantStatus
from cad_api.models.value import ShouldDoType

pytestmark = pytest.mark.asyncio


@pytest.fixture
async def leo(factory):
    return await factory.user(is_leo=True)


@pytest.fixture
async def on_duty(factory):
    return await factory.status_value("10-8", ShouldDoType.SET_ON_DUTY)


@pytest.fixture
async def off_duty(factory):
    return await factory.status_value("10-7", ShouldDoType.SET_OFF_DUTY)


class TestOfficers:

    async def test_create_officer(self, client: AsyncClient, factory, leo):
        citizen = await factory.citizen(leo)

        response = await client.post(
            "/api/v1/leo",
            json={"citizenId": str(citizen.id), "callsign": "1A", "callsign2": "12", "badgeNumber": 4412},
            headers=factory.auth_headers(leo),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["callsign"] == "1A"
        assert data["badgeNumber"] == 4412
        assert data["status"] is None
        assert data["citizen"]["id"] == str(citizen.id)

    async def test_create_for_other_users_citizen(self, client: AsyncClient, factory, leo):
        other = await factory.user()
        citizen = await factory.citizen(other)

        response = await client.post(
            "/api/v1/leo",
            json={"citizenId": str(citizen.id), "callsign": "1A", "callsign2": "12"},
            headers=factory.auth_headers(leo),
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "citizenNotFound"

    async def test_list_my_officers(self, client: AsyncClient, factory, leo):
        citizen = await factory.citizen(leo)
        officer = await factory.officer(leo, citizen)
        other = await factory.user(is_leo=True)
        await factory.officer(other, await factory.citizen(other))

        response = await client.get("/api/v1/leo", headers=factory.auth_headers(leo))
        assert response.status_code == 200
        assert [o["id"] for o in response.json()["officers"]] == [str(officer.id)]

    async def test_non_leo_cannot_list(self, client: AsyncClient, factory):
        user = await factory.user()

        response = await client.get("/api/v1/leo", headers=factory.auth_headers(user))
        assert response.status_code == 403


class TestOfficerStatus:

    async def test_go_on_duty(self, client: AsyncClient, factory, leo, on_duty):
        officer = await factory.officer(leo, await factory.citizen(leo))

        response = await client.put(
            f"/api/v1/leo/{officer.id}/status",
            json={"statusId": str(on_duty.id)},
            headers=factory.auth_headers(leo),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"]["shouldDo"] == "SET_ON_DUTY"
        assert data["status"]["value"]["value"] == "10-8"
        assert data["lastStatusChangeTimestamp"] is not None

    async def test_unknown_status(self, client: AsyncClient, factory, leo):
        officer = await factory.officer(leo, await factory.citizen(leo))

        response = await client.put(
            f"/api/v1/leo/{officer.id}/status",
            json={"statusId": str(uuid.uuid4())},
            headers=factory.auth_headers(leo),
        )
        assert response.status_code == 400
        assert response.json()["errors"] == {"statusId": "invalidStatus"}

    async def test_other_users_officer(self, client: AsyncClient, factory, leo, on_duty):
        other = await factory.user(is_leo=True)
        officer = await factory.officer(other, await factory.citizen(other))

        response = await client.put(
            f"/api/v1/leo/{officer.id}/status",
            json={"statusId": str(on_duty.id)},
            headers=factory.auth_headers(leo),
        )
        assert response.status_code == 404


class TestActiveOfficerEndpoints:

    async def test_active_officer(self, client: AsyncClient, factory, leo, on_duty):
        officer = await factory.officer(leo, await factory.citizen(leo), on_duty, factory.minutes_ago(1))

        response = await client.get("/api/v1/leo/active-officer", headers=factory.auth_headers(leo))
        assert response.status_code == 200
        assert response.json()["id"] == str(officer.id)

    async def test_combined_unit_is_returned(self, client: AsyncClient, factory, leo, on_duty):
        officer = await factory.officer(leo, await factory.citizen(leo), on_duty, factory.minutes_ago(1))
        combined = await factory.combined_unit([officer])

        response = await client.get("/api/v1/leo/active-officer", headers=factory.auth_headers(leo))
        data = response.json()
        assert data["id"] == str(combined.id)
        assert [o["id"] for o in data["officers"]] == [str(officer.id)]

    async def test_no_active_officer(self, client: AsyncClient, factory, leo):
        response = await client.get("/api/v1/leo/active-officer", headers=factory.auth_headers(leo))
        assert response.status_code == 400
        assert response.json()["detail"] == "noActiveOfficer"

    async def test_dispatch_gets_null(self, client: AsyncClient, factory):
        dispatcher = await factory.user(is_dispatch=True)

        response = await client.get(
            "/api/v1/leo/active-officer",
            headers=factory.auth_headers(dispatcher, **{"is-from-dispatch": "true"}),
        )
        assert response.status_code == 200
        assert response.json() is None

    async def test_dispatch_header_requires_dispatch(self, client: AsyncClient, factory, leo):
        response = await client.get(
            "/api/v1/leo/active-officer",
            headers=factory.auth_headers(leo, **{"is-from-dispatch": "true"}),
        )
        assert response.status_code == 401

    async def test_active_officers_for_dispatch(self, client: AsyncClient, factory, leo, on_duty, off_duty):
        citizen = await factory.citizen(leo)
        await factory.officer(leo, citizen, on_duty, factory.minutes_ago(1))
        await factory.officer(leo, citizen, off_duty, factory.minutes_ago(1))
        dispatcher = await factory.user(is_dispatch=True)

        response = await client.get("/api/v1/leo/active-officers", headers=factory.auth_headers(dispatcher))
        assert response.status_code == 200
        assert response.json()["totalCount"] == 1

    async def test_active_officers_requires_leo_or_dispatch(self, client: AsyncClient, factory):
        user = await factory.user()

        response = await client.get("/api/v1/leo/active-officers", headers=factory.auth_headers(user))
        assert response.status_code == 403


class TestOfficerDashboard:

    async def test_dashboard(self, client: AsyncClient, factory, leo, on_duty):
        officer = await factory.officer(leo, await factory.citizen(leo), on_duty, factory.minutes_ago(1))
        suspect = await factory.citizen(await factory.user())
        warrant = await factory.warrant(suspect)
        await factory.warrant(suspect, status=WarrantStatus.INACTIVE)

        response = await client.get("/api/v1/leo/dashboard", headers=factory.auth_headers(leo))
        assert response.status_code == 200
        data = response.json()
        assert data["activeOfficer"]["id"] == str(officer.id)
        assert [o["id"] for o in data["userOfficers"]] == [str(officer.id)]
        assert data["activeOfficers"]["totalCount"] == 1
        assert [w["id"] for w in data["activeWarrants"]] == [str(warrant.id)]
        assert data["features"] == {"ACTIVE_WARRANTS": True, "LEO_TICKETS": True, "CALLS_911": True}

    async def test_dashboard_without_active_officer(self, client: AsyncClient, factory, leo):
        await factory.officer(leo, await factory.citizen(leo))

        response = await client.get("/api/v1/leo/dashboard", headers=factory.auth_headers(leo))
        assert response.status_code == 200
        data = response.json()
        assert data["activeOfficer"] is None
        assert len(data["userOfficers"]) == 1

    async def test_dashboard_hides_warrants_when_disabled(self, client: AsyncClient, factory, leo):
        await factory.cad(features={Feature.ACTIVE_WARRANTS: False})

        response = await client.get("/api/v1/leo/dashboard", headers=factory.auth_headers(leo))
        data = response.json()
        assert data["activeWarrants"] is None
        assert data["features"]["ACTIVE_WARRANTS"] is False

    async def test_dashboard_for_dispatch(self, client: AsyncClient, factory):
        dispatcher = await factory.user(is_leo=True, is_dispatch=True)

        response = await client.get(
            "/api/v1/leo/dashboard",
            headers=factory.auth_headers(dispatcher, **{"is-from-dispatch": "true"}),
        )
        assert response.status_code == 200
        assert response.json()["activeOfficer"] is None

    async def test_dashboard_rejects_dispatch_only_user(self, client: AsyncClient, factory):
        dispatcher = await factory.user(is_dispatch=True)

        response = await client.get(
            "/api/v1/leo/dashboard",
            headers=factory.auth_headers(dispatcher, **{"is-from-dispatch": "true"}),
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Invalid Permissions"

    async def test_dashboard_requires_leo(self, client: AsyncClient, factory):
        user = await factory.user()

        response = await client.get("/api/v1/leo/dashboard", headers=factory.auth_headers(user))
        assert response.status_code == 403
