"""Single-session gradebook: marks in, derived records and rosters out."""
from .service import Gradebook

__version__ = "1.0.0"

__all__ = ["Gradebook", "__version__"]
