"""
Unit tests for persona stores.

Tests cover:
- InMemoryPersonaStore natural keys, upserts and thread safety
- Classify-once rule at the storage layer
- PostgresPersonaStore transaction handling against a mocked pool
"""

import pytest
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch
from uuid import uuid4

import psycopg2

from src.models.classification import Classification
from src.models.identity_profile import IdentityProfile
from src.models.person import Person
from src.models.persona_vector import PersonaVector
from src.models.playbook import Playbook
from src.models.post import Post
from src.storage.memory_store import InMemoryPersonaStore
from src.storage.postgres_store import PostgresPersonaStore, SCHEMA


NOW = datetime(2025, 6, 30, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def store():
    return InMemoryPersonaStore()


@pytest.fixture
def person(store):
    return store.upsert_person(Person(name="Ana Souza", company="Acme"))


def make_profile(person_id, network="linkedin", status="confirmed", confidence=1.0):
    return IdentityProfile(
        person_id=person_id,
        network=network,
        handle="anasouza",
        url=f"https://{network}.com/anasouza",
        confidence=confidence,
        status=status,
        evidence_count=2,
    )


def make_post(profile, n, days_ago=1):
    return Post(
        profile_id=profile.profile_id,
        network=profile.network,
        external_id=str(n),
        posted_at=NOW - timedelta(days=days_ago),
        text=f"post {n}",
        link=f"https://{profile.network}.com/p/{n}",
    )


ERP_CLASSIFICATION = Classification(("ERP",), "question", "positive", "direct", 0.7)


def make_playbook(person_id, vendor="TOTVS", opening="Ana, hello."):
    return Playbook(
        person_id=person_id, vendor=vendor, opening=opening, value_proposition="v",
        case_reference="https://olv.com.br/cases", call_to_action="a",
        product_fit=["p"], service_packages=["s"], last_refreshed_at=NOW,
    )


# =============================================================================
# In-Memory Store Tests
# =============================================================================

class TestInMemoryPersons:
    """Tests for person storage."""

    def test_get_person(self, store, person):
        assert store.get_person(person.person_id).name == "Ana Souza"

    def test_missing_person(self, store):
        assert store.get_person(uuid4()) is None

    def test_upsert_keeps_created_at(self, store, person):
        updated = person.model_copy(update={"company": "Acme Group", "created_at": NOW})
        saved = store.upsert_person(updated)

        assert saved.company == "Acme Group"
        assert saved.created_at == person.created_at

    def test_returned_copies_are_detached(self, store, person):
        fetched = store.get_person(person.person_id)
        fetched.name = "Changed"
        assert store.get_person(person.person_id).name == "Ana Souza"


class TestInMemoryProfiles:
    """Tests for identity profile storage."""

    def test_natural_key_upsert_keeps_profile_id(self, store, person):
        first = store.upsert_identity_profile(make_profile(person.person_id, status="pending", confidence=0.3))
        second = store.upsert_identity_profile(make_profile(person.person_id))

        assert second.profile_id == first.profile_id
        assert second.status == "confirmed"
        assert len(store.list_identity_profiles(person.person_id)) == 1

    def test_filter_by_status(self, store, person):
        store.upsert_identity_profile(make_profile(person.person_id))
        store.upsert_identity_profile(
            make_profile(person.person_id, network="twitter", status="pending", confidence=0.3)
        )

        confirmed = store.list_identity_profiles(person.person_id, status="confirmed")
        assert [p.network for p in confirmed] == ["linkedin"]

    def test_profiles_scoped_to_person(self, store, person):
        other = store.upsert_person(Person(name="Bruno Lima"))
        store.upsert_identity_profile(make_profile(other.person_id))

        assert store.list_identity_profiles(person.person_id) == []


class TestInMemoryPosts:
    """Tests for post storage and classification."""

    def test_upsert_is_idempotent(self, store, person):
        profile = store.upsert_identity_profile(make_profile(person.person_id))
        post = make_post(profile, 1)

        store.upsert_post(post)
        store.upsert_post(post)

        assert len(store.list_posts(person.person_id)) == 1

    def test_existing_post_not_overwritten(self, store, person):
        profile = store.upsert_identity_profile(make_profile(person.person_id))
        store.upsert_post(make_post(profile, 1))

        changed = make_post(profile, 1)
        changed.text = "edited"
        assert store.upsert_post(changed).text == "post 1"

    def test_list_posts_newest_first(self, store, person):
        profile = store.upsert_identity_profile(make_profile(person.person_id))
        for n, days_ago in ((1, 5), (2, 1), (3, 3)):
            store.upsert_post(make_post(profile, n, days_ago))

        assert [p.external_id for p in store.list_posts(person.person_id)] == ["2", "3", "1"]

    def test_classification_saved_once(self, store, person):
        profile = store.upsert_identity_profile(make_profile(person.person_id))
        post = store.upsert_post(make_post(profile, 1))

        first = store.save_post_classification(post.post_id, ERP_CLASSIFICATION)
        other = Classification(("Cloud",), "complaint", "negative", "formal", 0.5)
        second = store.save_post_classification(post.post_id, other)

        assert first.topics == ("ERP",)
        assert second.topics == ("ERP",)
        assert second.intent == "question"

    def test_classification_for_unknown_post(self, store):
        assert store.save_post_classification(uuid4(), ERP_CLASSIFICATION) is None

    def test_concurrent_upserts_from_threads(self, store, person):
        """Upserts and listings from worker threads keep one post per key."""
        profile = store.upsert_identity_profile(make_profile(person.person_id))
        posts = [make_post(profile, n % 50) for n in range(400)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            stored = list(pool.map(store.upsert_post, posts))
            listed = list(pool.map(lambda _: store.list_posts(person.person_id), range(20)))

        assert len(store.list_posts(person.person_id)) == 50
        assert len({p.post_id for p in stored}) == 50
        assert all(len(batch) <= 50 for batch in listed)


class TestInMemoryPersonaAndPlaybook:
    """Tests for persona and playbook storage."""

    def test_persona_replaced(self, store, person):
        store.save_persona(person.person_id, PersonaVector(topics=["ERP"]))
        store.save_persona(person.person_id, PersonaVector(topics=["Cloud"]))

        assert store.get_persona(person.person_id).topics == ["Cloud"]

    def test_missing_persona(self, store, person):
        assert store.get_persona(person.person_id) is None

    def test_playbook_per_vendor(self, store, person):
        store.save_playbook(make_playbook(person.person_id, "TOTVS"))
        store.save_playbook(make_playbook(person.person_id, "OLV"))
        store.save_playbook(make_playbook(person.person_id, "TOTVS", opening="Ana, again."))

        assert store.get_playbook(person.person_id, "TOTVS").opening == "Ana, again."
        assert store.get_playbook(person.person_id, "OLV").opening == "Ana, hello."
        assert store.get_playbook(person.person_id, "SAP") is None


# =============================================================================
# PostgreSQL Store Tests (mocked pool)
# =============================================================================

@pytest.fixture
def pg():
    """PostgresPersonaStore wired to a mocked connection pool."""
    store = PostgresPersonaStore("postgresql://test/test")
    conn = MagicMock()
    cursor = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    store._pool = MagicMock()
    store._pool.getconn.return_value = conn
    return store, conn, cursor


class TestPostgresStore:
    """Tests for PostgresPersonaStore transaction handling."""

    def test_init_schema(self, pg):
        store, conn, cursor = pg
        store.init_schema()

        cursor.execute.assert_called_once_with(SCHEMA)
        conn.commit.assert_called_once()
        store._pool.putconn.assert_called_once_with(conn)

    def test_get_person_missing(self, pg):
        store, conn, cursor = pg
        cursor.fetchone.return_value = None

        assert store.get_person(uuid4()) is None

    def test_error_rolls_back_and_raises(self, pg):
        store, conn, cursor = pg
        cursor.execute.side_effect = psycopg2.OperationalError("connection lost")

        with pytest.raises(psycopg2.OperationalError):
            store.get_person(uuid4())

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
        store._pool.putconn.assert_called_once_with(conn)

    def test_classification_update_guarded(self, pg):
        """Only unclassified rows are updated."""
        store, conn, cursor = pg
        cursor.fetchone.return_value = None
        post_id = uuid4()

        store.save_post_classification(post_id, ERP_CLASSIFICATION)

        sql, params = cursor.execute.call_args_list[0].args
        assert "intent IS NULL" in sql
        assert params == (["ERP"], "question", "positive", str(post_id))

    def test_persona_roundtrip_from_jsonb(self, pg):
        store, conn, cursor = pg
        persona = PersonaVector(topics=["ERP"], tone="optimistic")
        cursor.fetchone.return_value = (persona.to_dict(),)

        assert store.get_persona(uuid4()).topics == ["ERP"]

    def test_close(self, pg):
        store, conn, cursor = pg
        pool = store._pool
        store.close()
        pool.closeall.assert_called_once()

    def test_pool_is_thread_safe_and_created_once(self):
        store = PostgresPersonaStore("postgresql://test/test")

        with patch("src.storage.postgres_store.pool.ThreadedConnectionPool") as threaded:
            with ThreadPoolExecutor(max_workers=4) as executor:
                list(executor.map(lambda _: store._get_connection(), range(8)))

        threaded.assert_called_once_with(1, 10, "postgresql://test/test")
        assert threaded.return_value.getconn.call_count == 8
