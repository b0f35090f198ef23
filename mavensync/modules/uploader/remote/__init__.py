from .nexus_client import NexusClient

__all__ = ["NexusClient"]
