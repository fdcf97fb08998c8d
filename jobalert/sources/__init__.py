from typing import Callable

from .adzuna import AdzunaSource
from .base import JobSource
from .boards import (
    ArbeitnowSource,
    FindJobSource,
    FreshteamSource,
    JobicySource,
    RemoteOKSource,
    TheMuseSource,
    WellfoundSource,
)
from .jsearch import JSearchSource
from .reddit import RedditSource, classify_post
from .remotive import RemotiveSource

from jobalert.log import get_logger

log = get_logger(__name__)

__all__ = [
    "JobSource", "ArbeitnowSource", "RemoteOKSource", "JobicySource",
    "RedditSource", "RemotiveSource", "AdzunaSource", "JSearchSource",
    "TheMuseSource", "FindJobSource", "WellfoundSource", "FreshteamSource",
    "classify_post", "get_sources",
]


def get_sources(env_getter: Callable[[str], str]) -> list[JobSource]:
    """Every known source; keyed ones report ``is_configured() == False`` without keys."""
    sources: list[JobSource] = [
        ArbeitnowSource(),
        RemoteOKSource(),
        JobicySource(),
        RedditSource(),
        RemotiveSource(),
        AdzunaSource(env_getter),
        JSearchSource(env_getter),
        TheMuseSource(),
        FindJobSource(),
        WellfoundSource(),
        FreshteamSource(),
    ]
    for src in sources:
        if not src.is_configured():
            log.info("Source %s has no API key: skipped this run", src.name)
    return sources
