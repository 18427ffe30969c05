import logging
from typing import Generator

import requests
from pytest import fixture

from repo_notes import ContentClient, RepoConfig

from .fake_host import API_URL, OWNER, REPO, TOKEN, FakeHost

logging.basicConfig(level=logging.WARNING)


@fixture(autouse=True)
def newline(request):
    """
    Print a newline and underline test name.
    """
    print("\n" + "-" * len(request.node.nodeid))


@fixture
def host() -> FakeHost:
    """
    Create an empty fake host.
    """
    return FakeHost()


@fixture
def config() -> RepoConfig:
    return RepoConfig(token=TOKEN, owner=OWNER, repo=REPO, api_url=API_URL)


@fixture
def client(
    host: FakeHost, config: RepoConfig
) -> Generator[ContentClient, None, None]:
    """
    Create a client connected to the fake host.
    """
    with create_client(host, config) as client:
        yield client


def create_client(host: FakeHost, config: RepoConfig) -> ContentClient:
    return ContentClient(config, http=host.attach(requests.Session()))
