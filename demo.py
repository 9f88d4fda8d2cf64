#!/usr/bin/env python3
"""
Prospect Persona Intelligence Demo

Demonstrates the complete pipeline:
1. Resolve identity profiles
2. Scan confirmed profiles
3. Classify posts and extract the persona
4. Generate a vendor playbook

Network calls are replaced by fetchers reading a JSON fixture, so the demo
runs offline.

Usage:
    python demo.py [fixture_json] [vendor]
    python demo.py  # Uses the sample fixture and TOTVS
"""

import asyncio
import json
import sys
from pathlib import Path

from src.config import ScannerSettings
from src.pipeline.prospect_pipeline import ProspectPipeline
from src.scanners.network_scanner import NetworkScanner
from src.utils.date_parser import parse_timestamp


def fixture_fetchers(records_by_network):
    """Build one fetcher per network returning the fixture records."""
    def make_fetcher(records):
        async def fetch(url):
            return list(records)
        return fetch

    return {network: make_fetcher(records) for network, records in records_by_network.items()}


async def run(fixture_path: Path, vendor: str) -> int:
    """Run the demo pipeline."""
    print("=" * 50)
    print("Prospect Persona Intelligence Demo")
    print("=" * 50)
    print()

    if not fixture_path.exists():
        print(f"Error: File not found: {fixture_path}")
        return 1

    fixture = json.loads(fixture_path.read_text(encoding="utf-8"))
    now = parse_timestamp(fixture["reference_time"])
    print(f"Using fixture: {fixture_path.name} (reference time {now.isoformat()})")

    scanner = NetworkScanner(
        settings=ScannerSettings(),
        fetchers=fixture_fetchers(fixture["records"]),
    )
    pipeline = ProspectPipeline(scanner=scanner)

    # =========================================================================
    # Step 1: Resolve identity
    # =========================================================================
    print()
    print("[1] Resolving identity...")

    resolution = pipeline.resolve_identity(fixture["seed"])
    person = resolution.person
    print(f"    -> Person: {person.name} ({person.person_id})")
    for profile in resolution.profiles:
        print(f"    -> {profile.network:<10} {profile.status:<10} {profile.confidence:.2f}  {profile.url}")

    summary = resolution.summary
    print(f"    -> {summary.confirmed} confirmed, {summary.probable} probable, {summary.pending} pending")

    # =========================================================================
    # Step 2-3: Scan, classify, extract persona
    # =========================================================================
    print()
    print("[2] Scanning confirmed profiles and extracting persona...")

    result = await pipeline.analyze_persona(person.person_id, now=now)
    stats = result.stats
    print(f"    -> Posts collected: {stats.total_posts} from {stats.profiles_scanned} profiles")
    print(f"    -> Posts classified: {stats.classifications}")
    if stats.warnings:
        print(f"    -> Warnings: {len(stats.warnings)}")
    if stats.failed_profiles:
        print(f"    -> Failed profiles: {len(stats.failed_profiles)}")

    persona = result.persona
    print()
    print("[3] Persona:")
    print(f"    -> Topics: {', '.join(persona.topics) or '-'}")
    print(f"    -> Tone: {persona.tone}")
    print(f"    -> Style: {persona.style}")
    print(f"    -> Channels: {', '.join(persona.channel_preference) or '-'}")
    print(f"    -> Pain points: {', '.join(persona.pain_points) or '-'}")
    print(f"    -> Value triggers: {', '.join(persona.value_triggers) or '-'}")
    print(f"    -> Objections: {', '.join(persona.objections) or '-'}")
    for window in persona.activity_windows:
        print(f"    -> Active {window.day}: {', '.join(window.hours)}")

    # =========================================================================
    # Step 4: Generate playbook
    # =========================================================================
    print()
    print(f"[4] Generating {vendor} playbook...")

    playbook = pipeline.generate_playbook(person.person_id, vendor=vendor).playbook
    print(f"    -> Opening: {playbook.opening}")
    print(f"    -> Value: {playbook.value_proposition}")
    print(f"    -> Case: {playbook.case_reference}")
    print(f"    -> CTA: {playbook.call_to_action}")
    print(f"    -> Products: {', '.join(playbook.product_fit)}")
    print(f"    -> Packages: {', '.join(playbook.service_packages)}")

    # =========================================================================
    # Summary
    # =========================================================================
    print()
    print("=" * 50)
    print("Complete! Playbook ready for outreach")
    print("=" * 50)

    print()
    print("Playbook (JSON):")
    print("-" * 30)
    print(json.dumps(playbook.to_dict(), indent=2, ensure_ascii=False))

    return 0


def main(fixture_path: str = None, vendor: str = "TOTVS") -> int:
    if fixture_path is None:
        path = Path(__file__).parent / "tests" / "fixtures" / "sample_posts.json"
    else:
        path = Path(fixture_path)
    return asyncio.run(run(path, vendor))


if __name__ == "__main__":
    fixture_file = sys.argv[1] if len(sys.argv) > 1 else None
    vendor_name = sys.argv[2] if len(sys.argv) > 2 else "TOTVS"
    sys.exit(main(fixture_file, vendor_name))
