from src.instance.cost_model import CostModel, User, N_TYPES
from src.instance.loader import InstanceFormatError, load_instance, parse_instance
from src.instance.generator import generate_instance

__all__ = [
    "CostModel",
    "User",
    "N_TYPES",
    "InstanceFormatError",
    "load_instance",
    "parse_instance",
    "generate_instance",
]
