"""
Unit tests for persona extraction and playbook generation.

Tests cover:
- PersonaExtractor dimensions, tie-breaks and empty input
- Tone rules
- PlaybookGenerator decision tables and fallbacks
"""

import pytest
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from src.models.classification import Classification
from src.models.persona_vector import PersonaVector
from src.models.post import Post
from src.scoring.persona_extractor import PersonaExtractor, extract_persona
from src.scoring.playbook_generator import (
    PlaybookGenerator,
    first_name,
    generate_playbook,
    normalize_vendor,
)
from src.utils.errors import InputValidationError


NOW = datetime(2025, 6, 30, 12, 0, tzinfo=timezone.utc)
# 2025-06-02 is a Monday
MONDAY = datetime(2025, 6, 2, 9, 0, tzinfo=timezone.utc)

_counter = {"n": 0}


def make_post(text="", posted_at=MONDAY, network="linkedin"):
    _counter["n"] += 1
    n = _counter["n"]
    return Post(
        profile_id=uuid4(),
        network=network,
        external_id=str(n),
        posted_at=posted_at,
        text=text,
        link=f"https://example.com/{network}/{n}",
    )


def classification(topics=("General",), sentiment="neutral", style="direct",
                   confidence=0.5, intent="other"):
    return Classification(
        topics=tuple(topics), intent=intent, sentiment=sentiment, style=style, confidence=confidence
    )


def classified(pairs):
    """Build (posts, classifications) from (post, classification) pairs."""
    posts = [post for post, _ in pairs]
    return posts, {post.post_id: c for post, c in pairs}


@pytest.fixture
def extractor():
    return PersonaExtractor()


@pytest.fixture
def generator():
    return PlaybookGenerator()


# =============================================================================
# Persona Extractor Tests
# =============================================================================

class TestPersonaExtractor:
    """Tests for PersonaExtractor."""

    def test_empty_input(self, extractor):
        """No posts gives the all-default persona."""
        persona = extractor.extract([], {}, now=NOW)

        assert persona.topics == []
        assert persona.tone == "balanced"
        assert persona.style == "formal"
        assert persona.activity_windows == []
        assert persona.metadata.total_posts == 0
        assert persona.metadata.extracted_at == NOW

    def test_topics_ranked_by_frequency(self, extractor):
        posts, classifications = classified([
            (make_post(), classification(("Cloud",))),
            (make_post(), classification(("ERP", "Cloud"))),
            (make_post(), classification(("ERP",))),
            (make_post(), classification(("ERP",))),
        ])
        persona = extractor.extract(posts, classifications, now=NOW)

        assert persona.topics == ["ERP", "Cloud"]

    def test_topic_ties_keep_first_appearance(self, extractor):
        """Equal counts rank by first appearance in post order."""
        posts, classifications = classified([
            (make_post(), classification(("Tax",))),
            (make_post(), classification(("HR",))),
            (make_post(), classification(("CRM",))),
        ])
        persona = extractor.extract(posts, classifications, now=NOW)

        assert persona.topics == ["Tax", "HR", "CRM"]

    def test_topics_capped_at_five(self, extractor):
        topics = ("ERP", "Cloud", "Tax", "HR", "CRM", "Finance")
        posts, classifications = classified([(make_post(), classification(topics))])

        assert len(extractor.extract(posts, classifications, now=NOW).topics) == 5

    def test_keywords_from_raw_text(self, extractor):
        """Pain points, objections and value triggers come from post text."""
        posts = [
            make_post("Manual work is slow and the price is high"),
            make_post("We want ROI and productivity"),
        ]
        persona = extractor.extract(posts, {}, now=NOW)

        assert persona.pain_points == ["slow", "manual"]
        assert persona.objections == ["price", "slow"]
        assert persona.value_triggers == ["roi", "productivity"]

    def test_keywords_capped_at_five(self, extractor):
        posts = [make_post("problem slow manual repetitive failure integration legacy")]
        persona = extractor.extract(posts, {}, now=NOW)

        assert persona.pain_points == ["problem", "slow", "manual", "repetitive", "failure"]

    def test_activity_windows(self, extractor):
        """Days ranked by distinct hours, hours sorted."""
        tuesday = MONDAY + timedelta(days=1)
        posts = [
            make_post(posted_at=MONDAY.replace(hour=16)),
            make_post(posted_at=MONDAY.replace(hour=9)),
            make_post(posted_at=MONDAY.replace(hour=9, minute=45)),
            make_post(posted_at=tuesday.replace(hour=10)),
            make_post(posted_at=MONDAY.replace(hour=21) - timedelta(days=7)),
        ]
        persona = extractor.extract(posts, {}, now=NOW)

        assert [w.to_dict() for w in persona.activity_windows] == [
            {"day": "monday", "hours": ["09:00", "16:00", "21:00"]},
            {"day": "tuesday", "hours": ["10:00"]},
        ]

    def test_activity_windows_capped_at_three(self, extractor):
        posts = [make_post(posted_at=MONDAY + timedelta(days=d)) for d in range(5)]
        persona = extractor.extract(posts, {}, now=NOW)

        assert [w.day for w in persona.activity_windows] == ["monday", "tuesday", "wednesday"]

    def test_channel_preference(self, extractor):
        posts = [
            make_post(network="github"),
            make_post(network="linkedin"),
            make_post(network="linkedin"),
            make_post(network="twitter"),
            make_post(network="youtube"),
        ]
        persona = extractor.extract(posts, {}, now=NOW)

        assert persona.channel_preference == ["linkedin", "github", "twitter"]

    def test_style_is_mode(self, extractor):
        posts, classifications = classified([
            (make_post(), classification(style="technical")),
            (make_post(), classification(style="direct")),
            (make_post(), classification(style="technical")),
        ])
        assert extractor.extract(posts, classifications, now=NOW).style == "technical"

    def test_style_defaults_to_formal(self, extractor):
        """Posts without classifications give the formal default."""
        persona = extractor.extract([make_post("hello")], {}, now=NOW)

        assert persona.style == "formal"
        assert persona.topics == []
        assert persona.metadata.total_posts == 1
        assert persona.metadata.avg_confidence == 0.0

    def test_foreign_classifications_ignored(self, extractor):
        """Classifications for posts outside the input are not counted."""
        post = make_post()
        classifications = {
            post.post_id: classification(("ERP",), confidence=0.6),
            uuid4(): classification(("Cloud",), confidence=1.0),
        }
        persona = extractor.extract([post], classifications, now=NOW)

        assert persona.topics == ["ERP"]
        assert persona.metadata.avg_confidence == 0.6

    def test_deterministic(self, extractor):
        posts, classifications = classified([
            (make_post("slow manual process"), classification(("ERP",), "negative")),
            (make_post("great ROI", MONDAY.replace(hour=15)), classification(("Cloud",), "positive")),
        ])
        first = extractor.extract(posts, classifications, now=NOW)
        second = extractor.extract(posts, classifications, now=NOW)

        assert first == second

    def test_convenience_function(self):
        post = make_post("Manual invoicing")
        persona = extract_persona([post], {post.post_id: classification(("Finance",))})

        assert persona.topics == ["Finance"]
        assert persona.pain_points == ["manual"]


class TestToneRules:
    """Tests for tone determination."""

    @pytest.mark.parametrize("positive,negative,neutral,expected", [
        (5, 1, 0, "optimistic"),
        (1, 0, 0, "optimistic"),
        (2, 4, 0, "critical"),
        (1, 1, 3, "neutral"),
        (0, 0, 2, "neutral"),
        (3, 2, 0, "balanced"),
        (3, 2, 5, "balanced"),
    ])
    def test_tone(self, extractor, positive, negative, neutral, expected):
        sentiments = (
            ["positive"] * positive + ["negative"] * negative + ["neutral"] * neutral
        )
        pairs = [(make_post(), classification(sentiment=s)) for s in sentiments]
        posts, classifications = classified(pairs)

        assert extractor.extract(posts, classifications, now=NOW).tone == expected


# =============================================================================
# Playbook Generator Tests
# =============================================================================

class TestPlaybookGenerator:
    """Tests for PlaybookGenerator decision tables."""

    def test_erp_opening(self, generator):
        persona = PersonaVector(topics=["ERP", "Cloud"])
        opening = generator.build_opening(persona, "Ana Souza")

        assert opening == "Ana, I saw that you're interested in ERP and digital transformation."

    def test_supply_chain_opening(self, generator):
        opening = generator.build_opening(PersonaVector(topics=["Supply Chain"]), "Ana Souza")
        assert "supply chain" in opening

    def test_erp_rule_precedes_supply_chain(self, generator):
        persona = PersonaVector(topics=["Supply Chain", "ERP"])
        assert "ERP" in generator.build_opening(persona, "Ana")

    def test_default_opening_without_name(self, generator):
        opening = generator.build_opening(PersonaVector.empty())
        assert opening == "Hi, we spotted a few optimization opportunities in your operation."

    @pytest.mark.parametrize("pain_points,expected", [
        (["manual"], "We cut manual processes by up to 70% with intelligent automation."),
        (["repetitivo"], "We cut manual processes by up to 70% with intelligent automation."),
        (["legacy"], "We integrate legacy systems in days, not months."),
        (["integration", "manual"], "We cut manual processes by up to 70% with intelligent automation."),
        ([], "We raise productivity by 40% with proven solutions."),
    ])
    def test_value_proposition(self, generator, pain_points, expected):
        persona = PersonaVector(pain_points=pain_points)
        assert generator.build_value_proposition(persona) == expected

    @pytest.mark.parametrize("tone,expected", [
        ("optimistic", "Worth 15 minutes for me to walk you through a few success stories?"),
        ("critical", "Can I send you a free diagnostic of your operation?"),
        ("neutral", "How about a tailored demo, no strings attached?"),
        ("balanced", "How about a tailored demo, no strings attached?"),
    ])
    def test_call_to_action(self, generator, tone, expected):
        assert generator.build_call_to_action(PersonaVector(tone=tone)) == expected

    def test_case_reference_anchored_to_topic(self, generator):
        persona = PersonaVector(topics=["Finance", "Supply Chain", "ERP"])
        assert generator.build_case_reference(persona, "TOTVS") == "https://olv.com.br/cases#supply-chain"

    def test_case_reference_library_root(self, generator):
        persona = PersonaVector(topics=["Finance"])
        assert generator.build_case_reference(persona, "ACME") == "https://olv.com.br/cases"

    def test_product_fit_in_topic_order(self, generator):
        persona = PersonaVector(topics=["Supply Chain", "Cloud", "ERP"])
        assert generator.build_product_fit(persona, "TOTVS") == [
            "TOTVS WMS (Warehouse)",
            "TOTVS Protheus (Backoffice)",
        ]

    def test_product_fit_default_product(self, generator):
        persona = PersonaVector(topics=["Cloud"])
        assert generator.build_product_fit(persona, "TOTVS") == [
            "TOTVS Backoffice (Integrated Management)"
        ]

    def test_product_fit_unknown_vendor(self, generator):
        persona = PersonaVector(topics=["ERP"])
        assert generator.build_product_fit(persona, "ACME") == ["ACME Integrated Suite"]

    def test_service_packages(self, generator):
        persona = PersonaVector(topics=["Cloud"], pain_points=["integração"])
        assert generator.build_service_packages(persona) == [
            "360° Diagnostic + Implementation Roadmap",
            "Express Integration Consulting",
            "Assisted Cloud Migration",
        ]

    def test_base_package_always_present(self, generator):
        assert generator.build_service_packages(PersonaVector.empty()) == [
            "360° Diagnostic + Implementation Roadmap"
        ]

    def test_generate_complete_playbook(self, generator):
        """Empty persona still yields every part."""
        person_id = uuid4()
        playbook = generator.generate(person_id, PersonaVector.empty(), vendor=" olv ", now=NOW)

        assert playbook.person_id == person_id
        assert playbook.vendor == "OLV"
        assert playbook.product_fit == ["OLV Business Process Consulting"]
        assert playbook.last_refreshed_at == NOW
        for value in playbook.to_dict().values():
            assert value

    def test_generate_is_deterministic(self, generator):
        person_id = uuid4()
        persona = PersonaVector(topics=["ERP"], tone="critical", pain_points=["manual"])
        first = generator.generate(person_id, persona, "TOTVS", "Ana", now=NOW)
        second = generator.generate(person_id, persona, "TOTVS", "Ana", now=NOW)

        assert first == second

    def test_blank_vendor_rejected(self, generator):
        with pytest.raises(InputValidationError, match="Vendor is required"):
            generator.generate(uuid4(), PersonaVector.empty(), vendor="  ")

    def test_explanation(self, generator):
        persona = PersonaVector(topics=["ERP"], pain_points=["manual"], tone="optimistic")
        text = generator.get_playbook_explanation(persona, "totvs")

        assert text.startswith("TOTVS playbook:")
        assert "TOTVS Protheus (Backoffice)" in text
        assert "#erp" in text


class TestPlaybookHelpers:
    """Tests for module-level helpers."""

    def test_normalize_vendor(self):
        assert normalize_vendor(" totvs ") == "TOTVS"

    def test_normalize_vendor_none(self):
        with pytest.raises(InputValidationError):
            normalize_vendor(None)

    def test_first_name(self):
        assert first_name("Ana Souza") == "Ana"
        assert first_name("") is None
        assert first_name(None) is None

    def test_generate_playbook_function(self):
        playbook = generate_playbook(uuid4(), PersonaVector(topics=["ERP"]), person_name="Ana")
        assert playbook.vendor == "TOTVS"
        assert playbook.opening.startswith("Ana, ")
