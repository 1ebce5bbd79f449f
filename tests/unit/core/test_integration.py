"""Unit tests for the reconciliation cycle."""

import asyncio
import logging
from pathlib import Path

import pytest
from keysync.core.config import KeysyncConfig
from keysync.core.integration import KeyfileIntegration
from keysync.errors import CycleError, KeyStoreError, RemoteFetchError
from keysync.models.user import User
from keysync.storage.local import LocalKeyStore


def _integration(store, fetch_users, timeout: int = 60) -> KeyfileIntegration:
    config = KeysyncConfig(keydir=store.root, timeout_seconds=timeout)
    return KeyfileIntegration(config=config, store=store, fetch_users=fetch_users)


class TestScenarios:
    """End-to-end cycles against an in-memory store."""

    def test_changed_key_is_overwritten(self, memory_store, fetch_users_factory) -> None:
        """alice keyA on disk, keyB remote: one upsert."""
        store = memory_store(files={"alice": "keyA"})
        users = [User(org_username="alice", public_gpg_key="keyB")]

        result = asyncio.run(_integration(store, fetch_users_factory(users)).run_cycle())

        assert [r.action.name for r in result.results] == ["alice"]
        assert store.files == {"alice": "keyB"}

    def test_orphaned_key_is_deleted(self, memory_store, fetch_users_factory) -> None:
        """bob on disk, no users: one delete."""
        store = memory_store(files={"bob": "keyX"})

        result = asyncio.run(_integration(store, fetch_users_factory([])).run_cycle())

        assert [r.action.is_delete for r in result.results] == [True]
        assert store.files == {}

    def test_new_user_gets_key_file(self, memory_store, fetch_users_factory) -> None:
        """Empty directory, carol remote: one new file."""
        store = memory_store()
        users = [User(org_username="carol", public_gpg_key="keyC")]

        asyncio.run(_integration(store, fetch_users_factory(users)).run_cycle())

        assert store.files == {"carol": "keyC"}

    def test_second_cycle_is_idempotent(self, memory_store, fetch_users_factory) -> None:
        """A second cycle with unchanged users writes nothing."""
        store = memory_store(files={"alice": "keyA", "bob": "keyX"})
        users = [
            User(org_username="alice", public_gpg_key="keyB"),
            User(org_username="carol", public_gpg_key="keyC"),
        ]
        integration = _integration(store, fetch_users_factory(users))

        asyncio.run(integration.run_cycle())
        writes_after_first = list(store.writes)
        second = asyncio.run(integration.run_cycle())

        assert second.diff.is_in_sync is True
        assert second.results == ()
        assert store.writes == writes_after_first


class TestDryRun:
    """Tests for dry-run cycles."""

    def test_dry_run_touches_nothing(
        self, memory_store, fetch_users_factory, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A dry run only reports the diff."""
        store = memory_store(files={"bob": "keyX"})
        users = [User(org_username="carol", public_gpg_key="keyC")]

        with caplog.at_level(logging.INFO):
            result = asyncio.run(
                _integration(store, fetch_users_factory(users)).run_cycle(dry_run=True)
            )

        assert result.dry_run is True
        assert result.results == ()
        assert result.diff.delete_names == {"bob"}
        assert result.diff.upsert_names == {"carol"}
        assert store.files == {"bob": "keyX"}
        messages = {r.getMessage() for r in caplog.records}
        assert {"Deleting bob", "Updating carol"} <= messages

    def test_dry_run_matches_real_cycle(self, memory_store, fetch_users_factory) -> None:
        """The dry-run diff names exactly what the real cycle acts on."""
        files = {"alice": "keyA", "bob": "keyX", "dave": "keyD"}
        users = [
            User(org_username="alice", public_gpg_key="keyB"),
            User(org_username="carol", public_gpg_key="keyC"),
            User(org_username="dave", public_gpg_key="keyD"),
        ]

        dry = asyncio.run(
            _integration(memory_store(files=files), fetch_users_factory(users)).run_cycle(
                dry_run=True
            )
        )
        real = asyncio.run(
            _integration(memory_store(files=files), fetch_users_factory(users)).run_cycle()
        )

        assert dry.diff.upsert_names == {r.action.name for r in real.results if r.action.is_upsert}
        assert dry.diff.delete_names == {r.action.name for r in real.results if r.action.is_delete}


class TestFailures:
    """Tests for aborted cycles."""

    def test_current_state_failure(self, memory_store, fetch_users_factory) -> None:
        """An unreadable directory aborts in the current phase."""
        store = memory_store(exists=False)

        with pytest.raises(CycleError) as exc_info:
            asyncio.run(_integration(store, fetch_users_factory([])).run_cycle())

        assert exc_info.value.phase == "current"
        assert isinstance(exc_info.value.__cause__, KeyStoreError)

    def test_remote_failure_deletes_nothing(self, memory_store, failing_fetch) -> None:
        """A failed fetch aborts before any file is touched."""
        store = memory_store(files={"alice": "keyA"})

        with pytest.raises(CycleError) as exc_info:
            asyncio.run(_integration(store, failing_fetch).run_cycle())

        assert exc_info.value.phase == "desired"
        assert isinstance(exc_info.value.__cause__, RemoteFetchError)
        assert store.files == {"alice": "keyA"}

    def test_fetch_timeout(self, memory_store) -> None:
        """A fetch exceeding the timeout is cancelled and reported."""

        async def slow() -> list[User]:
            await asyncio.sleep(10)
            return []

        integration = _integration(memory_store(), slow, timeout=1)

        with pytest.raises(CycleError, match="Timed out") as exc_info:
            asyncio.run(integration.run_cycle())

        assert exc_info.value.phase == "desired"

    def test_reconcile_failure(self, memory_store, fetch_users_factory) -> None:
        """A failing write aborts in the reconcile phase."""
        store = memory_store(fail_on={"carol"})
        users = [User(org_username="carol", public_gpg_key="keyC")]

        with pytest.raises(CycleError) as exc_info:
            asyncio.run(_integration(store, fetch_users_factory(users)).run_cycle())

        assert exc_info.value.phase == "reconcile"


class TestRunForever:
    """Tests for run_forever."""

    def test_runs_requested_cycles(self, memory_store, fetch_users_factory) -> None:
        """Cycles run back to back up to max_cycles."""
        calls: list[int] = []
        fetch = fetch_users_factory([User(org_username="alice", public_gpg_key="keyA")])

        async def counting_fetch() -> list[User]:
            calls.append(1)
            return await fetch()

        store = memory_store()
        asyncio.run(_integration(store, counting_fetch).run_forever(0, max_cycles=3))

        assert len(calls) == 3
        assert store.writes == [("alice", "keyA")]

    def test_failed_cycle_does_not_stop_loop(self, memory_store, failing_fetch, caplog) -> None:
        """Failures are logged and the next cycle still runs."""
        integration = _integration(memory_store(), failing_fetch)

        with caplog.at_level(logging.ERROR):
            asyncio.run(integration.run_forever(0, max_cycles=2))

        failures = [r for r in caplog.records if "cycle failed" in r.getMessage()]
        assert len(failures) == 2


class TestSetup:
    """Tests for setup and real wiring."""

    def test_setup_creates_directory(self, tmp_path: Path) -> None:
        """setup creates the key directory and can be repeated."""
        keydir = tmp_path / "keys"
        integration = KeyfileIntegration.from_config(KeysyncConfig(keydir=keydir))

        integration.setup()
        integration.setup()

        assert keydir.is_dir()
        assert isinstance(integration.store, LocalKeyStore)

    def test_cycle_against_local_directory(self, tmp_path: Path, fetch_users_factory) -> None:
        """A full cycle on disk produces files named after users."""
        keydir = tmp_path / "keys"
        keydir.mkdir()
        (keydir / "bob").write_text("keyX")
        store = LocalKeyStore(keydir)
        users = [User(org_username="carol", public_gpg_key="keyC")]

        asyncio.run(_integration(store, fetch_users_factory(users)).run_cycle())

        assert sorted(p.name for p in keydir.iterdir()) == ["carol"]
        assert (keydir / "carol").read_text() == "keyC"

    def test_binary_orphan_is_deleted(self, tmp_path: Path, fetch_users_factory) -> None:
        """A file that is not valid UTF-8 is still observed and removed."""
        keydir = tmp_path / "keys"
        keydir.mkdir()
        (keydir / "stale").write_bytes(b"\xff\xfe binary")
        store = LocalKeyStore(keydir)

        result = asyncio.run(_integration(store, fetch_users_factory([])).run_cycle())

        assert [e.name for e in result.diff.delete] == ["stale"]
        assert not (keydir / "stale").exists()
