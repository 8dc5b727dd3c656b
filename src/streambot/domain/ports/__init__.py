from .cache import CachePort
from .id_mapping import IdMappingPort
from .iframe_unwrapper import IframeUnwrapperPort
from .metadata import MetadataPort
from .provider_registry import ProviderRegistryPort

__all__ = [
    "CachePort",
    "IdMappingPort",
    "IframeUnwrapperPort",
    "MetadataPort",
    "ProviderRegistryPort",
]
