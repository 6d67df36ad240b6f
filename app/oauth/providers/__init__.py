from app.oauth.providers.github import GitHubStrategy
from app.oauth.providers.microsoft import MicrosoftStrategy

__all__ = [
    "GitHubStrategy",
    "MicrosoftStrategy",
]
