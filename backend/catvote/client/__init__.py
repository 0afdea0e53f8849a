"""
CatVote Client
==============

What:  The client data layer (CatsProvider) plus its collaborators and the two
       screen view-models. Everything here talks to the backend over HTTP only.

Typical wiring:
    api = ApiClient()                 # settings.api_url
    source = CatImageSource()         # settings.cat_api_url
    provider = CatsProvider(api, source)
    await provider.load()
    CatListScreen(provider).render()
"""

from catvote.client.api import ApiClient
from catvote.client.cat_source import CatImageSource
from catvote.client.provider import CatsProvider, CatsState, FetchStatus
from catvote.client.screens import CatListScreen, CatRow, WinnerScreen

__all__ = [
    "ApiClient",
    "CatImageSource",
    "CatsProvider",
    "CatsState",
    "FetchStatus",
    "CatListScreen",
    "CatRow",
    "WinnerScreen",
]
