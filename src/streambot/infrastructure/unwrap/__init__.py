from .iframe import (
    BROWSER_USER_AGENT,
    MAX_IFRAME_DEPTH,
    IframeUnwrapper,
    find_iframe_src,
)

__all__ = [
    "BROWSER_USER_AGENT",
    "MAX_IFRAME_DEPTH",
    "IframeUnwrapper",
    "find_iframe_src",
]
