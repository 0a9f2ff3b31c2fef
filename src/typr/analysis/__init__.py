from .errors import confusion_matrix
from .fingers import Finger, finger_for_key
from .report import analyze, validated
from .sequences import digraph_latency, rhythm_series, shift_cost
from .summary import summarize
from .timing import dwell_by_finger, dwell_by_key, flight_by_finger, flight_by_key

__all__ = [
    "Finger",
    "analyze",
    "confusion_matrix",
    "digraph_latency",
    "dwell_by_finger",
    "dwell_by_key",
    "finger_for_key",
    "flight_by_finger",
    "flight_by_key",
    "rhythm_series",
    "shift_cost",
    "summarize",
    "validated",
]
