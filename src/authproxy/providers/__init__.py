"""Identity provider descriptors and their configuration from options."""

from authproxy.providers.base import Provider, ProviderData, ProviderKind
from authproxy.providers.factory import (
    PROVIDERS,
    HttpClientFactory,
    build_provider_data,
    configure_provider,
    new_provider,
)
from authproxy.providers.oidc import (
    DiscoveryDocument,
    IDTokenVerifier,
    OIDCDiscoveryError,
    OIDCProvider,
    discover,
)
from authproxy.providers.variants import (
    AzureProvider,
    BitbucketProvider,
    GitHubProvider,
    GitLabProvider,
    GoogleProvider,
)

__all__ = [
    "PROVIDERS",
    "AzureProvider",
    "BitbucketProvider",
    "DiscoveryDocument",
    "GitHubProvider",
    "GitLabProvider",
    "GoogleProvider",
    "HttpClientFactory",
    "IDTokenVerifier",
    "OIDCDiscoveryError",
    "OIDCProvider",
    "Provider",
    "ProviderData",
    "ProviderKind",
    "build_provider_data",
    "configure_provider",
    "discover",
    "new_provider",
]
