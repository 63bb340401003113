# tests/test_waitlist_service.py
"""Waitlist data access."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from logitrack.services import waitlist_service


class TestWaitlist:
    @pytest.mark.asyncio
    async def test_join_list_delete(self, store):
        first = await waitlist_service.join_waitlist(store, "early@fleet.co.th")
        second = await waitlist_service.join_waitlist(store, "late@fleet.co.th")

        entries = await waitlist_service.list_waitlist(store)
        assert [e.id for e in entries] == [second, first]
        assert entries[0].email == "late@fleet.co.th"
        assert entries[0].created_at is not None

        await waitlist_service.delete_waitlist_entry(store, first)
        assert [e.id for e in await waitlist_service.list_waitlist(store)] == [second]

    def test_watch_waitlist(self, store):
        pushes = []
        subscription = waitlist_service.watch_waitlist(store, pushes.append)
        store.create("waitlist", {"email": "live@fleet.co.th", "createdAt": store._now()})
        assert pushes[-1][0].email == "live@fleet.co.th"
        subscription.unsubscribe()
