"""
Pulumi infrastructure-as-code for the metrics dashboard.

This package applies a resolved deploy plan to AWS:
- ECR repository with image lifecycle rules
- Lambda function (container image) behind a function URL
- Optional CloudFront distribution, WAF IP allow list and GitHub deploy role
"""
