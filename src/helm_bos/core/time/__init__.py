from helm_bos.core.time.abc import Time
from helm_bos.core.time.fake import FakeTime
from helm_bos.core.time.real import RealTime

__all__ = [
    "FakeTime",
    "RealTime",
    "Time",
]
