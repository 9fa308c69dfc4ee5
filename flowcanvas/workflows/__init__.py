"""
Workflow documents and the command line interface.
"""
from .serialization import WorkflowSerializer, FORMAT_VERSION

__all__ = [
    'WorkflowSerializer',
    'FORMAT_VERSION',
]
