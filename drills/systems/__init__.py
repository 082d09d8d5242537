"""
Session systems package.
"""
from .placement import TargetPlacementEngine
from .collision import CollisionEngine, contact_distance, is_touching
from .motion import TargetMotionSystem
from .movement import MovementSystem, KEY_DIRECTIONS, joystick_vector
from .timing import SessionTimer, format_time
