"""End-to-end prospect persona pipeline."""

from .prospect_pipeline import ProspectPipeline, create_pipeline, parse_person_id

__all__ = [
    'ProspectPipeline',
    'create_pipeline',
    'parse_person_id',
]
