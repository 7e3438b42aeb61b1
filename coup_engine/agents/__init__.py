"""
Agent implementations for Coup players.
"""

from .base_agent import BaseAgent, AgentContext
from .bot_agent import BotAgent, DIFFICULTIES
from .scripted_agent import ScriptedAgent

__all__ = ['BaseAgent', 'AgentContext', 'BotAgent', 'DIFFICULTIES', 'ScriptedAgent']
