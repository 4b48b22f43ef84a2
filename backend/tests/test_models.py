"""Tests for model relationship loading."""
import pytest
from sqlalchemy import select
from sqlalchemy.exc import InvalidRequestError

from cad_api.models.citizen import Citizen
from cad_api.models.leo import Officer
from cad_api.models.user import User

pytestmark = pytest.mark.asyncio


class TestBackReferences:

    async def test_unloaded_back_references_raise(self, session_maker, factory):
        user = await factory.user()
        await factory.citizen(user)

        async with session_maker() as db:
            loaded = (await db.execute(select(User).where(User.id == user.id))).scalar_one()
            with pytest.raises(InvalidRequestError):
                loaded.citizens
            with pytest.raises(InvalidRequestError):
                loaded.officers

    async def test_weapon_back_reference_raises(self, session_maker, factory):
        user = await factory.user()
        citizen = await factory.citizen(user)

        async with session_maker() as db:
            loaded = (await db.execute(select(Citizen).where(Citizen.id == citizen.id))).scalar_one()
            with pytest.raises(InvalidRequestError):
                loaded.weapons

    async def test_combined_unit_keeps_officers(self, session_maker, factory):
        user = await factory.user(is_leo=True)
        officer = await factory.officer(user, await factory.citizen(user))
        unit = await factory.combined_unit([officer])

        async with session_maker() as db:
            loaded = (await db.execute(select(Officer).where(Officer.id == officer.id))).scalar_one()
            with pytest.raises(InvalidRequestError):
                loaded.combined_units
        assert [o.id for o in unit.officers] == [officer.id]
