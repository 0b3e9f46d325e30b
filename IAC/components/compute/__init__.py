"""
Compute components.

Components:
- LambdaFunctionComponent: Dashboard Lambda function and its function URL
"""

from IAC.components.compute.lambda_function import LambdaFunctionComponent, LambdaOutputs

__all__ = [
    "LambdaFunctionComponent",
    "LambdaOutputs",
]
