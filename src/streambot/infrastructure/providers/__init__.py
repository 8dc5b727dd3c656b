from .builtin import BUILTIN_PROVIDERS
from .registry import (
    ProviderDefinition,
    ProviderRegistry,
    merge_providers,
    parse_extra_providers,
)

__all__ = [
    "BUILTIN_PROVIDERS",
    "ProviderDefinition",
    "ProviderRegistry",
    "merge_providers",
    "parse_extra_providers",
]
