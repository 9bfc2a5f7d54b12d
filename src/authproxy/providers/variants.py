"""Provider variants with their default endpoints and restriction setters."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import BinaryIO, ClassVar

from authproxy.providers.base import Provider, ProviderKind

_AZURE_HOST = "login.microsoftonline.com"


@dataclass
class AzureProvider(Provider):
    tenant: str = "common"

    kind: ClassVar[ProviderKind] = ProviderKind.AZURE
    display_name: ClassVar[str] = "Azure"

    def apply_defaults(self) -> None:
        self.data.set_default_url("profile_url", "https://graph.windows.net/me?api-version=1.6")
        self.data.set_default_url("protected_resource", "https://graph.windows.net")
        self.data.set_default_scope("openid")
        if self.data.validate_url is None:
            self.data.validate_url = self.data.profile_url

    def configure(self, tenant: str) -> None:
        """Point login and redeem endpoints at ``tenant`` (``common`` when blank)."""

        self.tenant = tenant or "common"
        self.data.set_default_url(
            "login_url", f"https://{_AZURE_HOST}/{self.tenant}/oauth2/authorize"
        )
        self.data.set_default_url(
            "redeem_url", f"https://{_AZURE_HOST}/{self.tenant}/oauth2/token"
        )


@dataclass
class BitbucketProvider(Provider):
    team: str = ""

    kind: ClassVar[ProviderKind] = ProviderKind.BITBUCKET
    display_name: ClassVar[str] = "Bitbucket"

    def apply_defaults(self) -> None:
        self.data.set_default_url("login_url", "https://bitbucket.org/site/oauth2/authorize")
        self.data.set_default_url("redeem_url", "https://bitbucket.org/site/oauth2/access_token")
        self.data.set_default_url("validate_url", "https://api.bitbucket.org/2.0/user/emails")
        self.data.set_default_scope("email")

    def set_team(self, team: str) -> None:
        self.team = team
        # Team membership lookups need the team scope.
        if team and "team" not in self.data.scope.split():
            self.data.scope = f"{self.data.scope} team".strip()


@dataclass
class GitHubProvider(Provider):
    org: str = ""
    teams: list[str] = field(default_factory=list)

    kind: ClassVar[ProviderKind] = ProviderKind.GITHUB
    display_name: ClassVar[str] = "GitHub"

    def apply_defaults(self) -> None:
        self.data.set_default_url("login_url", "https://github.com/login/oauth/authorize")
        self.data.set_default_url("redeem_url", "https://github.com/login/oauth/access_token")
        self.data.set_default_url("validate_url", "https://api.github.com/")
        self.data.set_default_scope("user:email")

    def set_org_team(self, org: str, teams: Sequence[str]) -> None:
        self.org = org
        self.teams = list(teams)


@dataclass
class GitLabProvider(Provider):
    groups: list[str] = field(default_factory=list)

    kind: ClassVar[ProviderKind] = ProviderKind.GITLAB
    display_name: ClassVar[str] = "GitLab"

    def apply_defaults(self) -> None:
        self.data.set_default_url("login_url", "https://gitlab.com/oauth/authorize")
        self.data.set_default_url("redeem_url", "https://gitlab.com/oauth/token")
        self.data.set_default_url("validate_url", "https://gitlab.com/api/v4/user")
        self.data.set_default_scope("read_user")

    def set_groups(self, groups: Sequence[str]) -> None:
        self.groups = list(groups)


@dataclass
class GoogleProvider(Provider):
    groups: list[str] = field(default_factory=list)
    admin_email: str = ""
    service_account_credentials: BinaryIO | None = field(default=None, repr=False)

    kind: ClassVar[ProviderKind] = ProviderKind.GOOGLE
    display_name: ClassVar[str] = "Google"

    def apply_defaults(self) -> None:
        self.data.set_default_url(
            "login_url", "https://accounts.google.com/o/oauth2/auth?access_type=offline"
        )
        self.data.set_default_url("redeem_url", "https://www.googleapis.com/oauth2/v3/token")
        self.data.set_default_url("validate_url", "https://www.googleapis.com/oauth2/v1/tokeninfo")
        self.data.set_default_scope("profile email")

    def set_group_restriction(
        self,
        groups: Sequence[str],
        admin_email: str,
        credentials: BinaryIO,
    ) -> None:
        """Keep the open service-account file; group lookups read it later."""

        self.groups = list(groups)
        self.admin_email = admin_email
        self.service_account_credentials = credentials


__all__ = [
    "AzureProvider",
    "BitbucketProvider",
    "GitHubProvider",
    "GitLabProvider",
    "GoogleProvider",
]
