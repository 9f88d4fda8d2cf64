"""
PostgresPersonaStore - PostgreSQL storage for the persona pipeline.

Uses psycopg2 for PostgreSQL connections with connection pooling.
Structured fields (profile metadata, post metrics, persona features) are
stored as JSONB; natural keys are enforced with unique constraints and
written with ON CONFLICT upserts.
"""

import json
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional
from uuid import UUID

import psycopg2
from psycopg2 import pool

from src.config import DATABASE_URL
from src.models.classification import Classification
from src.models.identity_profile import IdentityProfile
from src.models.person import Person
from src.models.persona_vector import PersonaVector
from src.models.playbook import Playbook
from src.models.post import Post, PostMetrics
from src.utils.date_parser import utc_now
from .base_store import PersonaStore


logger = logging.getLogger(__name__)


SCHEMA = """
    CREATE TABLE IF NOT EXISTS persons (
        person_id UUID PRIMARY KEY,
        name TEXT NOT NULL,
        company TEXT,
        role TEXT,
        email TEXT,
        phone TEXT,
        linkedin_url TEXT,
        created_at TIMESTAMPTZ NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL
    );

    CREATE TABLE IF NOT EXISTS identity_profiles (
        profile_id UUID PRIMARY KEY,
        person_id UUID NOT NULL REFERENCES persons(person_id) ON DELETE CASCADE,
        network TEXT NOT NULL,
        handle TEXT NOT NULL,
        url TEXT NOT NULL,
        confidence NUMERIC(5,4) NOT NULL,
        status TEXT NOT NULL,
        evidence_count INTEGER NOT NULL,
        metadata JSONB NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL,
        UNIQUE (person_id, network, url)
    );

    CREATE INDEX IF NOT EXISTS idx_identity_profiles_person_status
    ON identity_profiles(person_id, status);

    CREATE TABLE IF NOT EXISTS identity_posts (
        post_id UUID PRIMARY KEY,
        profile_id UUID NOT NULL REFERENCES identity_profiles(profile_id) ON DELETE CASCADE,
        network TEXT NOT NULL,
        external_id TEXT NOT NULL,
        posted_at TIMESTAMPTZ NOT NULL,
        text TEXT NOT NULL,
        link TEXT NOT NULL,
        language TEXT,
        metrics JSONB NOT NULL,
        topics TEXT[] NOT NULL DEFAULT '{}',
        intent TEXT,
        sentiment TEXT,
        UNIQUE (profile_id, link)
    );

    CREATE INDEX IF NOT EXISTS idx_identity_posts_posted
    ON identity_posts(posted_at DESC);

    CREATE TABLE IF NOT EXISTS persona_features (
        person_id UUID PRIMARY KEY REFERENCES persons(person_id) ON DELETE CASCADE,
        features JSONB NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL
    );

    CREATE TABLE IF NOT EXISTS playbooks (
        person_id UUID NOT NULL REFERENCES persons(person_id) ON DELETE CASCADE,
        vendor TEXT NOT NULL,
        opening TEXT NOT NULL,
        value_proposition TEXT NOT NULL,
        case_reference TEXT NOT NULL,
        call_to_action TEXT NOT NULL,
        product_fit TEXT[] NOT NULL,
        service_packages TEXT[] NOT NULL,
        last_refreshed_at TIMESTAMPTZ NOT NULL,
        PRIMARY KEY (person_id, vendor)
    );
"""

PERSON_COLUMNS = "person_id, name, company, role, email, phone, linkedin_url, created_at, updated_at"

PROFILE_COLUMNS = (
    "profile_id, person_id, network, handle, url, confidence, status, "
    "evidence_count, metadata, updated_at"
)

POST_COLUMNS = (
    "post_id, profile_id, network, external_id, posted_at, text, link, "
    "language, metrics, topics, intent, sentiment"
)


class PostgresPersonaStore(PersonaStore):
    """
    PostgreSQL storage for persons, profiles, posts, personas and playbooks.
    Why: Persist pipeline stages across sessions and API workers.
    """

    def __init__(self, connection_string: Optional[str] = None):
        """
        Initialize store with database connection.

        Args:
            connection_string: PostgreSQL connection string.
                             Defaults to DATABASE_URL env var.
        """
        self.connection_string = connection_string or DATABASE_URL
        self._pool: Optional[pool.ThreadedConnectionPool] = None
        self._pool_lock = threading.Lock()

    def _get_connection(self):
        """Get a connection from the pool."""
        # Store calls arrive from worker threads
        with self._pool_lock:
            if not self._pool:
                self._pool = pool.ThreadedConnectionPool(
                    1, 10,  # min 1, max 10 connections
                    self.connection_string
                )
        return self._pool.getconn()

    def _release_connection(self, conn):
        """Return connection to pool."""
        if self._pool:
            self._pool.putconn(conn)

    @contextmanager
    def _cursor(self) -> Iterator:
        """Cursor in its own transaction: commit on success, rollback on error."""
        conn = self._get_connection()
        try:
            with conn.cursor() as cur:
                yield cur
            conn.commit()
        except psycopg2.Error:
            conn.rollback()
            logger.exception("Database operation failed")
            raise
        finally:
            self._release_connection(conn)

    def init_schema(self) -> None:
        """Create the pipeline tables if they don't exist."""
        with self._cursor() as cur:
            cur.execute(SCHEMA)

    # Persons

    def upsert_person(self, person: Person) -> Person:
        with self._cursor() as cur:
            cur.execute(f"""
                INSERT INTO persons ({PERSON_COLUMNS})
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (person_id) DO UPDATE SET
                    name = EXCLUDED.name,
                    company = EXCLUDED.company,
                    role = EXCLUDED.role,
                    email = EXCLUDED.email,
                    phone = EXCLUDED.phone,
                    linkedin_url = EXCLUDED.linkedin_url,
                    updated_at = EXCLUDED.updated_at
                RETURNING {PERSON_COLUMNS}
            """, (
                str(person.person_id),
                person.name,
                person.company,
                person.role,
                person.email,
                person.phone,
                person.linkedin_url,
                person.created_at,
                person.updated_at,
            ))
            return _row_to_person(cur.fetchone())

    def get_person(self, person_id: UUID) -> Optional[Person]:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {PERSON_COLUMNS} FROM persons WHERE person_id = %s",
                (str(person_id),)
            )
            row = cur.fetchone()
            return _row_to_person(row) if row else None

    # Identity profiles

    def upsert_identity_profile(self, profile: IdentityProfile) -> IdentityProfile:
        with self._cursor() as cur:
            cur.execute(f"""
                INSERT INTO identity_profiles ({PROFILE_COLUMNS})
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (person_id, network, url) DO UPDATE SET
                    handle = EXCLUDED.handle,
                    confidence = EXCLUDED.confidence,
                    status = EXCLUDED.status,
                    evidence_count = EXCLUDED.evidence_count,
                    metadata = EXCLUDED.metadata,
                    updated_at = EXCLUDED.updated_at
                RETURNING {PROFILE_COLUMNS}
            """, (
                str(profile.profile_id),
                str(profile.person_id),
                profile.network,
                profile.handle,
                profile.url,
                profile.confidence,
                profile.status,
                profile.evidence_count,
                json.dumps(profile.metadata),
                profile.updated_at,
            ))
            return _row_to_profile(cur.fetchone())

    def list_identity_profiles(
        self, person_id: UUID, status: Optional[str] = None
    ) -> List[IdentityProfile]:
        query = f"SELECT {PROFILE_COLUMNS} FROM identity_profiles WHERE person_id = %s"
        params = [str(person_id)]
        if status is not None:
            query += " AND status = %s"
            params.append(status)
        query += " ORDER BY network, url"

        with self._cursor() as cur:
            cur.execute(query, params)
            return [_row_to_profile(row) for row in cur.fetchall()]

    # Posts

    def upsert_post(self, post: Post) -> Post:
        with self._cursor() as cur:
            cur.execute(f"""
                INSERT INTO identity_posts ({POST_COLUMNS})
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (profile_id, link) DO NOTHING
            """, (
                str(post.post_id),
                str(post.profile_id),
                post.network,
                post.external_id,
                post.posted_at,
                post.text,
                post.link,
                post.language,
                json.dumps(post.metrics.to_dict()),
                list(post.topics),
                post.intent,
                post.sentiment,
            ))
            cur.execute(
                f"SELECT {POST_COLUMNS} FROM identity_posts WHERE profile_id = %s AND link = %s",
                (str(post.profile_id), post.link)
            )
            return _row_to_post(cur.fetchone())

    def save_post_classification(
        self, post_id: UUID, classification: Classification
    ) -> Optional[Post]:
        with self._cursor() as cur:
            # intent IS NULL guards the populate-once rule
            cur.execute("""
                UPDATE identity_posts
                SET topics = %s, intent = %s, sentiment = %s
                WHERE post_id = %s AND intent IS NULL
            """, (
                list(classification.topics),
                classification.intent,
                classification.sentiment,
                str(post_id),
            ))
            cur.execute(
                f"SELECT {POST_COLUMNS} FROM identity_posts WHERE post_id = %s",
                (str(post_id),)
            )
            row = cur.fetchone()
            return _row_to_post(row) if row else None

    def list_posts(self, person_id: UUID) -> List[Post]:
        columns = ", ".join(f"p.{c.strip()}" for c in POST_COLUMNS.split(","))
        with self._cursor() as cur:
            cur.execute(f"""
                SELECT {columns}
                FROM identity_posts p
                JOIN identity_profiles ip ON ip.profile_id = p.profile_id
                WHERE ip.person_id = %s
                ORDER BY p.posted_at DESC
            """, (str(person_id),))
            return [_row_to_post(row) for row in cur.fetchall()]

    # Personas

    def save_persona(self, person_id: UUID, persona: PersonaVector) -> PersonaVector:
        with self._cursor() as cur:
            cur.execute("""
                INSERT INTO persona_features (person_id, features, updated_at)
                VALUES (%s, %s, %s)
                ON CONFLICT (person_id) DO UPDATE SET
                    features = EXCLUDED.features,
                    updated_at = EXCLUDED.updated_at
            """, (
                str(person_id),
                json.dumps(persona.to_dict()),
                utc_now(),
            ))
            return persona

    def get_persona(self, person_id: UUID) -> Optional[PersonaVector]:
        with self._cursor() as cur:
            cur.execute(
                "SELECT features FROM persona_features WHERE person_id = %s",
                (str(person_id),)
            )
            row = cur.fetchone()
            return PersonaVector.from_dict(row[0]) if row else None

    # Playbooks

    def save_playbook(self, playbook: Playbook) -> Playbook:
        with self._cursor() as cur:
            cur.execute("""
                INSERT INTO playbooks (
                    person_id, vendor, opening, value_proposition,
                    case_reference, call_to_action, product_fit,
                    service_packages, last_refreshed_at
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (person_id, vendor) DO UPDATE SET
                    opening = EXCLUDED.opening,
                    value_proposition = EXCLUDED.value_proposition,
                    case_reference = EXCLUDED.case_reference,
                    call_to_action = EXCLUDED.call_to_action,
                    product_fit = EXCLUDED.product_fit,
                    service_packages = EXCLUDED.service_packages,
                    last_refreshed_at = EXCLUDED.last_refreshed_at
            """, (
                str(playbook.person_id),
                playbook.vendor,
                playbook.opening,
                playbook.value_proposition,
                playbook.case_reference,
                playbook.call_to_action,
                list(playbook.product_fit),
                list(playbook.service_packages),
                playbook.last_refreshed_at,
            ))
            return playbook

    def get_playbook(self, person_id: UUID, vendor: str) -> Optional[Playbook]:
        with self._cursor() as cur:
            cur.execute("""
                SELECT person_id, vendor, opening, value_proposition,
                       case_reference, call_to_action, product_fit,
                       service_packages, last_refreshed_at
                FROM playbooks
                WHERE person_id = %s AND vendor = %s
            """, (str(person_id), vendor))

            row = cur.fetchone()
            if not row:
                return None

            return Playbook(
                person_id=UUID(str(row[0])),
                vendor=row[1],
                opening=row[2],
                value_proposition=row[3],
                case_reference=row[4],
                call_to_action=row[5],
                product_fit=list(row[6]),
                service_packages=list(row[7]),
                last_refreshed_at=row[8],
            )

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool:
            self._pool.closeall()
            self._pool = None


def _row_to_person(row) -> Person:
    return Person(
        person_id=UUID(str(row[0])),
        name=row[1],
        company=row[2],
        role=row[3],
        email=row[4],
        phone=row[5],
        linkedin_url=row[6],
        created_at=row[7],
        updated_at=row[8],
    )


def _row_to_profile(row) -> IdentityProfile:
    return IdentityProfile(
        profile_id=UUID(str(row[0])),
        person_id=UUID(str(row[1])),
        network=row[2],
        handle=row[3],
        url=row[4],
        confidence=float(row[5]),
        status=row[6],
        evidence_count=row[7],
        metadata=row[8] or {},
        updated_at=row[9],
    )


def _row_to_post(row) -> Post:
    return Post(
        post_id=UUID(str(row[0])),
        profile_id=UUID(str(row[1])),
        network=row[2],
        external_id=row[3],
        posted_at=row[4],
        text=row[5],
        link=row[6],
        language=row[7],
        metrics=PostMetrics.from_dict(row[8]),
        topics=tuple(row[9] or ()),
        intent=row[10],
        sentiment=row[11],
    )
