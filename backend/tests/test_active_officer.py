"""
Tests for active officer resolution.

Covers the dispatch header, permission checks, combined unit precedence,
off-duty statuses and the unit inactivity timeout.
"""
import pytest
from fastapi import HTTPException

from cad_api.models.leo import CombinedLeoUnit
from cad_api.models.value import ShouldDoType
from cad_api.permissions import Permission
from cad_api.services.active_officer import (
    DISPATCH_HEADER,
    get_active_officer,
    get_active_officers,
    get_inactivity_filter,
)

pytestmark = pytest.mark.asyncio


@pytest.fixture
async def statuses(factory):
    return {
        "on_duty": await factory.status_value("10-8", ShouldDoType.SET_ON_DUTY),
        "busy": await factory.status_value("10-6", ShouldDoType.SET_STATUS),
        "off_duty": await factory.status_value("10-7", ShouldDoType.SET_OFF_DUTY),
    }


@pytest.fixture
async def leo(factory):
    return await factory.user(is_leo=True)


class TestDispatchHeader:

    async def test_dispatcher_gets_no_unit(self, session, factory):
        dispatcher = await factory.user(is_dispatch=True)
        cad = await factory.cad()

        unit = await get_active_officer({DISPATCH_HEADER: "true"}, dispatcher, session, cad)
        assert unit is None

    async def test_header_without_dispatch_permission(self, session, factory, leo):
        cad = await factory.cad()

        with pytest.raises(HTTPException) as exc_info:
            await get_active_officer({DISPATCH_HEADER: "true"}, leo, session, cad)
        assert exc_info.value.status_code == 401

    async def test_header_other_than_true_is_ignored(self, session, factory):
        dispatcher = await factory.user(is_dispatch=True)
        cad = await factory.cad()

        with pytest.raises(HTTPException) as exc_info:
            await get_active_officer({DISPATCH_HEADER: "false"}, dispatcher, session, cad)
        assert exc_info.value.status_code == 403


class TestOfficerResolution:

    async def test_requires_leo(self, session, factory):
        user = await factory.user()
        cad = await factory.cad()

        with pytest.raises(HTTPException) as exc_info:
            await get_active_officer({}, user, session, cad)
        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "Invalid Permissions"

    async def test_manage_warrants_counts_as_leo(self, session, factory, statuses):
        user = await factory.user(permissions=[Permission.MANAGE_WARRANTS])
        officer = await factory.officer(user, await factory.citizen(user), statuses["on_duty"], factory.minutes_ago(1))
        cad = await factory.cad()

        unit = await get_active_officer({}, user, session, cad)
        assert unit.id == officer.id

    async def test_on_duty_officer(self, session, factory, leo, statuses):
        officer = await factory.officer(leo, await factory.citizen(leo), statuses["busy"], factory.minutes_ago(1))
        cad = await factory.cad()

        unit = await get_active_officer({}, leo, session, cad)
        assert unit.id == officer.id

    async def test_off_duty_officer(self, session, factory, leo, statuses):
        await factory.officer(leo, await factory.citizen(leo), statuses["off_duty"], factory.minutes_ago(1))
        cad = await factory.cad()

        with pytest.raises(HTTPException) as exc_info:
            await get_active_officer({}, leo, session, cad)
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "noActiveOfficer"

    async def test_officer_without_status(self, session, factory, leo):
        await factory.officer(leo, await factory.citizen(leo))
        cad = await factory.cad()

        with pytest.raises(HTTPException) as exc_info:
            await get_active_officer({}, leo, session, cad)
        assert exc_info.value.detail == "noActiveOfficer"

    async def test_other_users_officer_is_not_used(self, session, factory, leo, statuses):
        other = await factory.user(is_leo=True)
        await factory.officer(other, await factory.citizen(other), statuses["on_duty"], factory.minutes_ago(1))
        cad = await factory.cad()

        with pytest.raises(HTTPException) as exc_info:
            await get_active_officer({}, leo, session, cad)
        assert exc_info.value.status_code == 400

    async def test_most_recent_status_change_wins(self, session, factory, leo, statuses):
        citizen = await factory.citizen(leo)
        await factory.officer(leo, citizen, statuses["on_duty"], factory.minutes_ago(20))
        recent = await factory.officer(leo, citizen, statuses["on_duty"], factory.minutes_ago(2))
        cad = await factory.cad()

        unit = await get_active_officer({}, leo, session, cad)
        assert unit.id == recent.id


class TestCombinedUnits:

    async def test_combined_unit_takes_precedence(self, session, factory, leo, statuses):
        officer = await factory.officer(leo, await factory.citizen(leo), statuses["on_duty"], factory.minutes_ago(1))
        combined = await factory.combined_unit([officer], statuses["busy"])
        cad = await factory.cad()

        unit = await get_active_officer({}, leo, session, cad)
        assert isinstance(unit, CombinedLeoUnit)
        assert unit.id == combined.id
        assert [o.id for o in unit.officers] == [officer.id]

    async def test_combined_unit_without_status_is_active(self, session, factory, leo):
        officer = await factory.officer(leo, await factory.citizen(leo))
        combined = await factory.combined_unit([officer])
        cad = await factory.cad()

        unit = await get_active_officer({}, leo, session, cad)
        assert unit.id == combined.id

    async def test_off_duty_combined_unit_falls_back_to_officer(self, session, factory, leo, statuses):
        officer = await factory.officer(leo, await factory.citizen(leo), statuses["on_duty"], factory.minutes_ago(1))
        await factory.combined_unit([officer], statuses["off_duty"])
        cad = await factory.cad()

        unit = await get_active_officer({}, leo, session, cad)
        assert unit.id == officer.id


class TestInactivityTimeout:

    async def test_no_timeout_configured(self, factory):
        cad = await factory.cad()
        assert get_inactivity_filter(cad) is None

    async def test_idle_officer_is_inactive(self, session, factory, leo, statuses):
        await factory.officer(leo, await factory.citizen(leo), statuses["on_duty"], factory.minutes_ago(30))
        cad = await factory.cad(unit_inactivity_timeout=10)

        with pytest.raises(HTTPException) as exc_info:
            await get_active_officer({}, leo, session, cad)
        assert exc_info.value.detail == "noActiveOfficer"

    async def test_recent_officer_is_active(self, session, factory, leo, statuses):
        officer = await factory.officer(leo, await factory.citizen(leo), statuses["on_duty"], factory.minutes_ago(5))
        cad = await factory.cad(unit_inactivity_timeout=10)

        unit = await get_active_officer({}, leo, session, cad)
        assert unit.id == officer.id

    async def test_officer_without_timestamp_is_inactive(self, session, factory, leo, statuses):
        await factory.officer(leo, await factory.citizen(leo), statuses["on_duty"])
        cad = await factory.cad(unit_inactivity_timeout=10)

        with pytest.raises(HTTPException) as exc_info:
            await get_active_officer({}, leo, session, cad)
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "noActiveOfficer"

    async def test_officer_without_timestamp_passes_without_timeout(self, session, factory, leo, statuses):
        officer = await factory.officer(leo, await factory.citizen(leo), statuses["on_duty"])
        cad = await factory.cad()

        unit = await get_active_officer({}, leo, session, cad)
        assert unit.id == officer.id


class TestActiveOfficersList:

    async def test_lists_on_duty_officers(self, session, factory, leo, statuses):
        citizen = await factory.citizen(leo)
        on_duty = await factory.officer(leo, citizen, statuses["on_duty"], factory.minutes_ago(1))
        await factory.officer(leo, citizen, statuses["off_duty"], factory.minutes_ago(1))
        await factory.officer(leo, citizen, statuses["on_duty"], factory.minutes_ago(60))
        await factory.officer(leo, citizen)
        cad = await factory.cad(unit_inactivity_timeout=30)

        total, officers = await get_active_officers(session, cad)
        assert total == 1
        assert [o.id for o in officers] == [on_duty.id]

    async def test_pagination(self, session, factory, leo, statuses):
        citizen = await factory.citizen(leo)
        for minutes in range(5):
            await factory.officer(leo, citizen, statuses["on_duty"], factory.minutes_ago(minutes + 1))
        cad = await factory.cad()

        total, officers = await get_active_officers(session, cad, skip=3, limit=35)
        assert total == 5
        assert len(officers) == 2
