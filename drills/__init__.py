"""
Directional Drills: deterministic session engine for a target-collection practice game.
"""
from .session import Session
from .session_config import SessionConfig, TargetCounts, Feedback
from .replay_code import encode, decode, parse, InvalidReplayCode
