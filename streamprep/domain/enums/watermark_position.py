from __future__ import annotations
from enum import StrEnum

class WatermarkPosition(StrEnum):
    TL = "TL"
    TR = "TR"
    BL = "BL"
    BR = "BR"
    C = "C"
