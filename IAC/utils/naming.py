"""
Resource naming conventions for Pulumi logical names.

Follows pattern: {base_name}-{descriptor id with dashes}
"""

from dataclasses import dataclass


@dataclass
class ResourceNamer:
    """
    Generates consistent Pulumi logical names for plan descriptors.

    Attributes:
        base_name: Intent base name ({project}-{environment})
    """
    base_name: str

    def name(self, resource: str) -> str:
        """
        Generate a logical resource name.

        Args:
            resource: Resource or descriptor identifier (e.g., 'compute_function')

        Returns:
            Formatted resource name
        """
        return f"{self.base_name}-{resource.replace('_', '-')}"
