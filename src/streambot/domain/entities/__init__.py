from .streaming import (
    MEDIA_TYPES,
    ExternalIds,
    MediaType,
    Provider,
    ProviderMode,
    ResolvedUrl,
    StreamTarget,
    TitleInfo,
    WatchLink,
)

__all__ = [
    "MEDIA_TYPES",
    "ExternalIds",
    "MediaType",
    "Provider",
    "ProviderMode",
    "ResolvedUrl",
    "StreamTarget",
    "TitleInfo",
    "WatchLink",
]
