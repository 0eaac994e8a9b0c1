from monodeal.agents.base import Agent
from monodeal.agents.random import RandomAgent
from monodeal.agents.greedy import GreedyAgent
from monodeal.agents.llm import LLMAgent

__all__ = [
    "Agent",
    "RandomAgent",
    "GreedyAgent",
    "LLMAgent",
]
