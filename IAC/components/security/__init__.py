"""
Security components for IAM and WAF.

Components:
- IamRolesComponent: Lambda execution role
- GithubDeployRoleComponent: GitHub Actions OIDC deploy role
- WafComponent: IP allow-list web ACL for CloudFront
"""

from IAC.components.security.iam_roles import (
    GithubDeployRoleComponent,
    IamRoleOutputs,
    IamRolesComponent,
)
from IAC.components.security.waf import WafComponent, WafOutputs

__all__ = [
    "IamRolesComponent",
    "IamRoleOutputs",
    "GithubDeployRoleComponent",
    "WafComponent",
    "WafOutputs",
]
