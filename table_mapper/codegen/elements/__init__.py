"""
Operation generators producing model fragments for each artifact.
"""

from typing import List

from ..core.config import ClientType, GeneratorConfig
from ..core.rules import CANONICAL_ORDER
from .base import OperationGenerator
from .client import PROVIDER_KINDS, build_mapper_unit, build_provider_unit, client_generators
from .model import build_model_unit, model_generators
from .statements import build_document, statement_generators

_POSITION = {kind: index for index, kind in enumerate(CANONICAL_ORDER)}


def build_generators(config: GeneratorConfig) -> List[OperationGenerator]:
    """
    All generators for a configuration, in the order fragments are attached.

    Model members come first. Operation generators follow in canonical
    operation order; for one operation the document statement precedes the
    mapper method, which precedes the provider method.
    """
    client_type = config.client
    excluded = PROVIDER_KINDS if client_type == ClientType.MIXED else ()
    operations = statement_generators(exclude=excluded) + client_generators(client_type)
    operations.sort(key=lambda generator: _POSITION[generator.kind])
    return model_generators() + operations


__all__ = [
    "OperationGenerator",
    "build_generators",
    "build_document",
    "build_mapper_unit",
    "build_model_unit",
    "build_provider_unit",
]
