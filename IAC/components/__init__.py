"""
Pulumi component resources for the metrics dashboard deployment.

Each submodule provides ComponentResource classes built from resolved plan
descriptors:
- storage: ECR repository and lifecycle policy
- security: IAM roles, GitHub deploy role, WAF
- compute: Lambda function and function URL
- edge: CloudFront distribution
"""
