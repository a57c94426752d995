"""Domain-Oriented Observability for Security Groups infrastructure.

Probes for repository operations following Domain-Oriented Observability patterns.
"""

from security_groups.infrastructure.observability.repository_probe import (
    AccessRepositoryProbe,
    DefaultAccessRepositoryProbe,
    DefaultSecurityGroupRepositoryProbe,
    SecurityGroupRepositoryProbe,
)

__all__ = [
    "AccessRepositoryProbe",
    "DefaultAccessRepositoryProbe",
    "SecurityGroupRepositoryProbe",
    "DefaultSecurityGroupRepositoryProbe",
]
