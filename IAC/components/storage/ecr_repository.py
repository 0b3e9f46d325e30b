"""
ECR Repository Component for the dashboard container image.

Integration Flow:
  1. CI builds the upstream dashboard image and tags it with the commit hash
     (and "latest")
  2. CI assumes the GitHub deploy role and pushes to this repository
  3. Pulumi passes <repository_url>:<image_tag> to LambdaFunctionComponent

Key Features:
- scan_on_push=True: Every image is scanned for CVEs on upload.
- Lifecycle Policy: the four resolver-compiled rules ("latest" count,
  digit/hex commit tags by age, untagged count), applied by priority.
- Encryption: Images encrypted at rest (AES256).
- Tag mutability: MUTABLE (allows overwriting 'latest' tag on each push).

Outputs (Pass to LambdaFunctionComponent):
  - repository_url: <ACCOUNT>.dkr.ecr.<REGION>.amazonaws.com/<REPO>
  - repository_arn: arn:aws:ecr:<REGION>:<ACCOUNT>:repository/<REPO>
  - repository_name: <project>-<environment>
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from resolver.models.plan import ResourceDescriptor
from IAC.configs.constants import COMPONENT_TYPES
from IAC.utils.tags import create_tags


@dataclass
class EcrRepositoryOutputs:
    """Output values from ECR repository component."""
    repository_url: pulumi.Output[str]
    repository_arn: pulumi.Output[str]
    repository_name: pulumi.Output[str]


class EcrRepositoryComponent(pulumi.ComponentResource):
    """
    ECR repository for the dashboard image, with its lifecycle policy.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        registry: ResourceDescriptor,
        lifecycle_policy: ResourceDescriptor,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__(COMPONENT_TYPES["ecr"], name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        props = registry.properties

        self.repository = aws.ecr.Repository(
            f"{name}-repo",
            name=props["name"],
            image_scanning_configuration=aws.ecr.RepositoryImageScanningConfigurationArgs(
                scan_on_push=props["scan_on_push"],
            ),
            image_tag_mutability=props["image_tag_mutability"],
            encryption_configurations=[
                aws.ecr.RepositoryEncryptionConfigurationArgs(
                    encryption_type=props["encryption_type"],
                ),
            ],
            tags=create_tags(environment, props["name"], registry.id),
            opts=child_opts,
        )

        # Policy JSON comes pre-rendered with sorted keys so diffs stay stable
        self.lifecycle_policy = aws.ecr.LifecyclePolicy(
            f"{name}-lifecycle",
            repository=self.repository.name,
            policy=lifecycle_policy.properties["policy"],
            opts=child_opts,
        )

        self.register_outputs({
            "repository_url": self.repository.repository_url,
            "repository_arn": self.repository.arn,
            "repository_name": self.repository.name,
        })

    def get_outputs(self) -> EcrRepositoryOutputs:
        """Get ECR repository output values."""
        return EcrRepositoryOutputs(
            repository_url=self.repository.repository_url,
            repository_arn=self.repository.arn,
            repository_name=self.repository.name,
        )
