from .resolve_stream import ResolveStreamUseCase, is_direct_media_url

__all__ = ["ResolveStreamUseCase", "is_direct_media_url"]
