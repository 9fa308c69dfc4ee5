"""
Clients for services the workflow nodes talk to.
"""
from .agent_query import query_agent, AgentQueryError

__all__ = [
    'query_agent',
    'AgentQueryError',
]
