"""Resolution module - turns a DataRequest into a normalized series."""

from .models import AttemptLog, DataRequest, DatasetFamily, ResolutionOutcome, ResolutionStatus
from .variants import generate_variants
from .resolver import Resolver, first_non_empty
from .envelope import ResolutionResult, build_envelope, envelope_status
from .service import SeriesPanel, SeriesService

__all__ = [
    'AttemptLog',
    'DataRequest',
    'DatasetFamily',
    'ResolutionOutcome',
    'ResolutionStatus',
    'generate_variants',
    'Resolver',
    'first_non_empty',
    'ResolutionResult',
    'build_envelope',
    'envelope_status',
    'SeriesPanel',
    'SeriesService',
]
