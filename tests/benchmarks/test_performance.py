"""
Performance benchmarks for the prospect persona pipeline.

Performance targets:
- Classification: <500ms for 1000 posts
- Persona extraction: <200ms for 1000 posts
- Playbook generation: <10ms
- Scan, classify and extract (fetcher-backed): <2s for 1000 posts
"""

import asyncio
import time
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from src.classifiers.text_classifier import TextClassifier
from src.config import ScannerSettings
from src.models.identity_profile import IdentityProfile
from src.models.post import Post
from src.scanners.network_scanner import NetworkScanner
from src.scoring.persona_extractor import PersonaExtractor
from src.scoring.playbook_generator import PlaybookGenerator


NOW = datetime(2025, 6, 30, 12, 0, tzinfo=timezone.utc)

SAMPLE_TEXTS = [
    "Today we announce our new ERP rollout with TOTVS Protheus. Great success!",
    "Our manual invoicing is slow and repetitive, a real problem.",
    "How do you measure ROI on supply chain automation?",
    "Looking for a quote on cloud migration. Any AWS partners?",
    "Migrated the database to a new server this weekend",
    "Dear colleagues, the fiscal compliance review is attached.",
]


def generate_sample_posts(count: int) -> list:
    """Generate sample posts spread across weekdays and hours."""
    profile_id = uuid4()
    networks = ["linkedin", "twitter", "github"]

    return [
        Post(
            profile_id=profile_id,
            network=networks[i % len(networks)],
            external_id=str(i),
            posted_at=NOW - timedelta(hours=i * 7),
            text=SAMPLE_TEXTS[i % len(SAMPLE_TEXTS)],
            link=f"https://example.com/posts/{i}",
        )
        for i in range(count)
    ]


def generate_records(count: int) -> list:
    return [
        {
            "id": str(i),
            "postedAt": (NOW - timedelta(hours=i)).isoformat(),
            "text": SAMPLE_TEXTS[i % len(SAMPLE_TEXTS)],
            "link": f"https://linkedin.com/posts/{i}",
        }
        for i in range(count)
    ]


class TestPerformanceBenchmarks:
    """Performance benchmark tests."""

    def test_classification_1000_posts(self, benchmark):
        """Classification: <500ms for 1000 posts."""
        posts = generate_sample_posts(1000)
        classifier = TextClassifier()

        def classify():
            return classifier.classify_batch(posts)

        result = benchmark(classify)
        assert len(result) == 1000

        stats = benchmark.stats
        assert stats.stats.mean < 0.5, f"Mean time {stats.stats.mean:.3f}s exceeds 500ms"

    def test_persona_extraction_1000_posts(self, benchmark):
        """Persona extraction: <200ms for 1000 posts."""
        posts = generate_sample_posts(1000)
        classifications = TextClassifier().classify_batch(posts)
        extractor = PersonaExtractor()

        def extract():
            return extractor.extract(posts, classifications, now=NOW)

        result = benchmark(extract)
        assert result.metadata.total_posts == 1000

        stats = benchmark.stats
        assert stats.stats.mean < 0.2, f"Mean time {stats.stats.mean:.3f}s exceeds 200ms"

    def test_playbook_generation_performance(self, benchmark):
        """Playbook generation: <10ms."""
        posts = generate_sample_posts(100)
        persona = PersonaExtractor().extract(posts, TextClassifier().classify_batch(posts), now=NOW)
        generator = PlaybookGenerator()
        person_id = uuid4()

        def generate():
            return generator.generate(person_id, persona, vendor="TOTVS", person_name="Ana Souza")

        result = benchmark(generate)
        assert result.product_fit

        stats = benchmark.stats
        assert stats.stats.mean < 0.01, f"Mean time {stats.stats.mean:.3f}s exceeds 10ms"


class TestPerformanceWithoutBenchmark:
    """Performance tests without pytest-benchmark (for CI compatibility)."""

    def test_classification_time(self):
        posts = generate_sample_posts(1000)

        start = time.time()
        result = TextClassifier().classify_batch(posts)
        elapsed = time.time() - start

        assert len(result) == 1000
        assert elapsed < 0.5, f"Classification took {elapsed:.3f}s, expected < 500ms"

    def test_scan_to_persona_time(self):
        """Fetcher-backed scan, classification and extraction time test."""
        records = generate_records(1000)

        async def fetch(url):
            return records

        profile = IdentityProfile(
            person_id=uuid4(), network="linkedin", handle="anasouza",
            url="https://linkedin.com/in/anasouza", confidence=1.0,
            status="confirmed", evidence_count=2,
        )
        scanner = NetworkScanner(
            settings=ScannerSettings(max_posts=1000, rate_limit_per_second=100),
            fetchers={"linkedin": fetch},
        )

        start = time.time()

        posts = asyncio.run(scanner.scan_profiles([profile], now=NOW)).posts
        classifications = TextClassifier().classify_batch(posts)
        persona = PersonaExtractor().extract(posts, classifications, now=NOW)

        elapsed = time.time() - start

        assert persona.metadata.total_posts == 1000
        assert elapsed < 2.0, f"Pipeline took {elapsed:.3f}s, expected < 2s"
