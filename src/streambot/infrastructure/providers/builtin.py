"""Built-in movie/TV embed providers.

Order matters: it is the button order shown to users, and the first entry
is the primary provider when a single link is needed.
"""

from __future__ import annotations

from streambot.domain.entities.streaming import Provider

BUILTIN_PROVIDERS: tuple[Provider, ...] = (
    # Domains that resolve from most hosts first
    Provider(
        name="VidSrc",
        slug="vidsrc",
        base_url="https://vidsrc.to/embed",
        emoji="🎬",
        mode="path-tmdb",
    ),
    Provider(
        name="VidSrc Me",
        slug="vidsrcme",
        base_url="https://vidsrc.me/embed",
        emoji="🎥",
        mode="path-tmdb",
    ),
    # Last: may bounce through embed.su, which fails on some hosts
    Provider(
        name="VidSrc Pro",
        slug="vidsrcpro",
        base_url="https://vidsrc.pro/embed",
        emoji="⭐",
        mode="path-tmdb",
    ),
)
