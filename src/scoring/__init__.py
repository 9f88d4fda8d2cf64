"""Persona extraction and playbook generation."""

from .persona_extractor import PersonaExtractor, extract_persona
from .playbook_generator import PlaybookGenerator, generate_playbook

__all__ = [
    'PersonaExtractor',
    'extract_persona',
    'PlaybookGenerator',
    'generate_playbook',
]
