"""
Keyword tables for post classification and persona extraction.

Tables are immutable, versioned configuration data. They are built once at
import time and handed to TextClassifier / PersonaExtractor explicitly, so a
test can construct its own tables without touching the defaults.

Keywords are matched as case-insensitive substrings of the post text, and
are bilingual (English / Portuguese) because the target market is Brazil.
No table may carry terms meant to infer protected attributes (health,
political affiliation, religion).
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from .constants import (
    INTENT_BUYING_SIGNAL,
    INTENT_COMPLAINT,
    INTENT_QUESTION,
    INTENT_ANNOUNCEMENT,
    STYLE_FORMAL,
    STYLE_TECHNICAL,
    STYLE_HUMOR,
    TOPIC_GENERAL,
)


TABLES_VERSION = "2025.1"


@dataclass(frozen=True)
class ClassifierTables:
    """
    Keyword and pattern tables used by the text classifier.

    Attributes:
        topics: Ordered mapping of topic label -> keywords
        intents: Ordered mapping of intent label -> keywords. Order is the
                 tie-break: the first intent with a match wins.
        positive: Positive-sentiment keywords
        negative: Negative-sentiment keywords
        style_patterns: Ordered (style, regex) checks, first match wins
        default_topic: Topic assigned when no topic keyword matches
        version: Table version tag
    """

    topics: Mapping[str, Tuple[str, ...]]
    intents: Mapping[str, Tuple[str, ...]]
    positive: Tuple[str, ...]
    negative: Tuple[str, ...]
    style_patterns: Tuple[Tuple[str, str], ...]
    default_topic: str = TOPIC_GENERAL
    version: str = TABLES_VERSION


@dataclass(frozen=True)
class PersonaTables:
    """
    Keyword tables scanned against raw post text by the persona extractor.

    Attributes:
        objections: Buying objections (price, complexity, time)
        pain_points: Operational pains mentioned by the person
        value_triggers: Outcomes the person responds to
        version: Table version tag
    """

    objections: Tuple[str, ...]
    pain_points: Tuple[str, ...]
    value_triggers: Tuple[str, ...]
    version: str = TABLES_VERSION


# =============================================================================
# CLASSIFIER TABLES
# =============================================================================

TOPIC_KEYWORDS = MappingProxyType({
    "ERP": ("erp", "sap", "oracle", "totvs", "protheus", "enterprise resource"),
    "Supply Chain": ("supply chain", "logistics", "inventory", "warehouse", "distribution"),
    "Automation": ("automation", "automaç", "rpa", "workflow", "process"),
    "Cloud": ("cloud", "aws", "azure", "gcp", "saas", "paas"),
    "BI/Analytics": ("analytics", "bi", "power bi", "tableau", "data", "insights"),
    "CRM": ("crm", "salesforce", "customer", "vendas", "sales"),
    "Manufacturing": ("manufacturing", "produção", "chão de fábrica", "mes", "aps"),
    "Tax": ("fiscal", "tax", "nf-e", "sped", "compliance"),
    "Finance": ("financial", "finanç", "accounting", "contabil", "budget"),
    "HR": ("hr", "rh", "folha", "payroll", "recruitment", "talent"),
})

# Evaluation order is the tie-break: buying signal > complaint > question > announcement
INTENT_KEYWORDS = MappingProxyType({
    INTENT_BUYING_SIGNAL: (
        "comprar", "buy", "contratar", "hire", "orçamento", "quote", "demo", "trial",
    ),
    INTENT_COMPLAINT: (
        "problema", "issue", "bug", "error", "não funciona", "not working", "ruim", "bad",
    ),
    INTENT_QUESTION: (
        "como", "how", "por que", "why", "alguém sabe", "anyone know", "?",
    ),
    INTENT_ANNOUNCEMENT: (
        "hoje", "today", "anuncio", "announce", "compartilhar", "share", "novo", "new",
    ),
})

POSITIVE_KEYWORDS = (
    "excelente", "excellent", "ótimo", "great", "adorei", "love",
    "sucesso", "success", "bom", "good",
)

NEGATIVE_KEYWORDS = (
    "ruim", "bad", "péssimo", "terrible", "problema", "problem",
    "erro", "error", "difícil", "difficult",
)

# Checked in order; the short-text "direct" rule is applied by the classifier
STYLE_PATTERNS = (
    (STYLE_FORMAL, r"\b(prezados|atenciosamente|cordialmente|dear|sincerely|kind regards)\b"),
    (STYLE_TECHNICAL, r"\b(api|database|sql|cloud|server|architecture|kubernetes|microservices?)\b"),
    (STYLE_HUMOR, "[\U0001F600-\U0001F64F\U0001F923\U0001F602]"),
)


# =============================================================================
# PERSONA TABLES
# =============================================================================

OBJECTION_KEYWORDS = (
    "caro", "expensive", "custo", "cost", "preço", "price",
    "difícil", "difficult", "complexo", "complex",
    "tempo", "time", "demora", "slow",
    "não funciona", "not working", "problema", "issue",
)

PAIN_POINT_KEYWORDS = (
    "problema", "problem", "dificuldade", "difficulty",
    "lento", "slow", "manual", "repetitivo", "repetitive",
    "erro", "error", "falha", "failure",
    "integração", "integration", "legado", "legacy",
)

VALUE_TRIGGER_KEYWORDS = (
    "roi", "retorno", "return", "produtividade", "productivity",
    "eficiência", "efficiency", "automatizar", "automate",
    "economizar", "save", "reduzir", "reduce",
    "crescimento", "growth", "escalabilidade", "scalability",
)


DEFAULT_CLASSIFIER_TABLES = ClassifierTables(
    topics=TOPIC_KEYWORDS,
    intents=INTENT_KEYWORDS,
    positive=POSITIVE_KEYWORDS,
    negative=NEGATIVE_KEYWORDS,
    style_patterns=STYLE_PATTERNS,
)

DEFAULT_PERSONA_TABLES = PersonaTables(
    objections=OBJECTION_KEYWORDS,
    pain_points=PAIN_POINT_KEYWORDS,
    value_triggers=VALUE_TRIGGER_KEYWORDS,
)
