"""
Edge components for CDN delivery.

Components:
- CloudFrontComponent: Distribution in front of the Lambda function URL
"""

from IAC.components.edge.cloudfront import CloudFrontComponent, CloudFrontOutputs

__all__ = [
    "CloudFrontComponent",
    "CloudFrontOutputs",
]
